"""Packet decoder for flight computer dumps.

The stream is a flat concatenation of packets:
  [sensor_id: uint8][value 0][value 1]...[value N-1]

The number, kind and width of the values come from the sensor's entry in the
rocket configuration.  Every multi-byte value uses the configuration's byte
order.  There is no length field, checksum or other framing.
"""

from __future__ import annotations

import io
import logging
import struct
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Sequence

import numpy as np

from .config import Endianness, RocketConfig, ValueKind
from .errors import InvalidId, InvalidValueCount, TruncatedRead

logger = logging.getLogger(__name__)


@dataclass
class Packet:
    """One sensor reading: the sensor ID and its values in configured order."""
    id: int
    values: list[int | float | np.float32] = field(default_factory=list)


def _to_native(raw: bytes, endianness: Endianness) -> bytes:
    if (endianness is Endianness.LITTLE) != (sys.byteorder == "little"):
        return raw[::-1]
    return raw


def decode_value(data: bytes, kind: ValueKind, endianness: Endianness,
                 offset: int = 0) -> int | float | np.float32:
    """Decode one scalar of ``kind`` starting at ``offset``.

    float32 is returned as np.float32 so NaN payload bits survive.
    """
    if kind == ValueKind.FLOAT32:
        raw = _to_native(bytes(data[offset:offset + 4]), endianness)
        return np.frombuffer(raw, dtype=np.float32)[0]
    return struct.unpack_from(endianness.prefix + kind.fmt, data, offset)[0]


def encode_value(value: int | float | np.float32, kind: ValueKind,
                 endianness: Endianness) -> bytes:
    if kind == ValueKind.FLOAT32 and isinstance(value, np.float32):
        return _to_native(value.tobytes(), endianness)
    return struct.pack(endianness.prefix + kind.fmt, value)


def encode_packet(config: RocketConfig, sensor_id: int,
                  values: Sequence[int | float]) -> bytes:
    """Build the wire bytes of one packet (inverse of PacketParser)."""
    sensor = config.get_sensor_by_id(sensor_id)
    if sensor is None:
        raise InvalidId(sensor_id)
    if len(values) != len(sensor.values):
        raise InvalidValueCount(len(sensor.values), len(values))
    parts = [bytes([sensor_id])]
    for vc, value in zip(sensor.values, values):
        parts.append(encode_value(value, vc.data_type, config.endianess))
    return b"".join(parts)


class PacketParser:
    """Iterator over the packets in a binary stream.

    Iteration stops cleanly when the stream ends on a packet boundary.
    Decode failures are raised from next() as PacketError subclasses; the
    parser stays usable afterwards and resumes at the byte following the
    failed read.  ``packet_offset`` is where the last packet (good or bad)
    started.  Nothing is done to resynchronise: after InvalidId the next
    byte is simply taken as the next sensor ID.
    """

    def __init__(self, source: BinaryIO, config: RocketConfig):
        self._f = source
        self.config = config
        self.offset = 0
        self.packet_offset = 0
        self._owns_source = False

    @classmethod
    def from_path(cls, path: str | Path, config: RocketConfig) -> PacketParser:
        parser = cls(open(path, "rb"), config)
        parser._owns_source = True
        return parser

    @classmethod
    def from_bytes(cls, data: bytes, config: RocketConfig) -> PacketParser:
        return cls(io.BytesIO(data), config)

    def __iter__(self) -> PacketParser:
        return self

    def __next__(self) -> Packet:
        start = self.packet_offset = self.offset
        raw_id = self._read(1)
        if not raw_id:
            raise StopIteration

        sensor_id = raw_id[0]
        sensor = self.config.get_sensor_by_id(sensor_id)
        if sensor is None:
            raise InvalidId(sensor_id)

        endianness = self.config.endianess
        values: list[int | float | np.float32] = []
        for vc in sensor.values:
            width = vc.data_type.width
            data = self._read(width)
            if len(data) < width:
                raise TruncatedRead(sensor_id, vc.name, width, len(data))
            values.append(decode_value(data, vc.data_type, endianness))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("@%d %s: %s", start, sensor.name, ", ".join(
                f"{vc.name}={v}" for vc, v in zip(sensor.values, values)))
        return Packet(sensor_id, values)

    def _read(self, n: int) -> bytes:
        """Read up to n bytes, retrying short reads until EOF."""
        buf = bytearray()
        while len(buf) < n:
            chunk = self._f.read(n - len(buf))
            if not chunk:
                break
            buf.extend(chunk)
        self.offset += len(buf)
        return bytes(buf)

    def close(self) -> None:
        if self._owns_source:
            self._f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
