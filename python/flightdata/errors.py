"""Exceptions raised while loading configurations and decoding streams."""

from __future__ import annotations


class FlightDataError(Exception):
    pass


class ConfigError(FlightDataError, ValueError):
    """The configuration document is malformed."""


class DuplicateSensorId(ConfigError):

    def __init__(self, sensor_id: int, first: str, second: str):
        super().__init__(f"Multiple sensors with ID: {sensor_id} "
                         f"({first!r} and {second!r})")
        self.sensor_id = sensor_id
        self.names = (first, second)


class PacketError(FlightDataError):
    """A packet could not be decoded or placed in a row."""


class InvalidId(PacketError):

    def __init__(self, sensor_id: int):
        super().__init__(f"Invalid packet id: {sensor_id}")
        self.sensor_id = sensor_id


class InvalidValueCount(PacketError):

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Invalid value count: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class TruncatedRead(PacketError):
    """The stream ended in the middle of a packet."""

    def __init__(self, sensor_id: int, value_name: str, expected: int, actual: int):
        super().__init__(
            f"Truncated packet for sensor {sensor_id}: value {value_name!r} "
            f"needs {expected} bytes, only {actual} left")
        self.sensor_id = sensor_id
        self.value_name = value_name
        self.expected = expected
        self.actual = actual
