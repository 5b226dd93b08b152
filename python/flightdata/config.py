"""Rocket configuration: sensors, value layouts and byte order."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

import numpy as np

from .errors import ConfigError, DuplicateSensorId

ID_MAX = 255


class ValueKind(IntEnum):
    INT8 = 0
    INT16 = 1
    INT32 = 2
    INT64 = 3
    UINT8 = 4
    UINT16 = 5
    UINT32 = 6
    UINT64 = 7
    FLOAT32 = 8
    FLOAT64 = 9

    @property
    def width(self) -> int:
        return _KIND_WIDTH[self]

    @property
    def fmt(self) -> str:
        """struct format char, without a byte order prefix."""
        return _KIND_FMT[self]

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_KIND_DTYPE[self])

    @property
    def tag(self) -> str:
        """Tag used for this kind in configuration files."""
        return _KIND_TAG[self]

    @property
    def is_float(self) -> bool:
        return self in (ValueKind.FLOAT32, ValueKind.FLOAT64)

    @classmethod
    def from_tag(cls, tag: str) -> ValueKind:
        kind = _TAG_KIND.get(tag)
        if kind is None:
            raise ConfigError(f"Unknown data type: {tag!r}")
        return kind


_KIND_WIDTH = {
    ValueKind.INT8: 1,
    ValueKind.INT16: 2,
    ValueKind.INT32: 4,
    ValueKind.INT64: 8,
    ValueKind.UINT8: 1,
    ValueKind.UINT16: 2,
    ValueKind.UINT32: 4,
    ValueKind.UINT64: 8,
    ValueKind.FLOAT32: 4,
    ValueKind.FLOAT64: 8,
}

_KIND_FMT = {
    ValueKind.INT8: "b",
    ValueKind.INT16: "h",
    ValueKind.INT32: "i",
    ValueKind.INT64: "q",
    ValueKind.UINT8: "B",
    ValueKind.UINT16: "H",
    ValueKind.UINT32: "I",
    ValueKind.UINT64: "Q",
    ValueKind.FLOAT32: "f",
    ValueKind.FLOAT64: "d",
}

_KIND_DTYPE = {
    ValueKind.INT8: "int8",
    ValueKind.INT16: "int16",
    ValueKind.INT32: "int32",
    ValueKind.INT64: "int64",
    ValueKind.UINT8: "uint8",
    ValueKind.UINT16: "uint16",
    ValueKind.UINT32: "uint32",
    ValueKind.UINT64: "uint64",
    ValueKind.FLOAT32: "float32",
    ValueKind.FLOAT64: "float64",
}

_KIND_TAG = {
    ValueKind.INT8: "int_8",
    ValueKind.INT16: "int_16",
    ValueKind.INT32: "int_32",
    ValueKind.INT64: "int_64",
    ValueKind.UINT8: "uint_8",
    ValueKind.UINT16: "uint_16",
    ValueKind.UINT32: "uint_32",
    ValueKind.UINT64: "uint_64",
    ValueKind.FLOAT32: "float_32",
    ValueKind.FLOAT64: "float_64",
}

# "int_8" is what the flight software writes; "int8" is accepted as well
_TAG_KIND = {tag: kind for kind, tag in _KIND_TAG.items()}
_TAG_KIND.update({tag.replace("_", ""): kind for kind, tag in _KIND_TAG.items()})


class Endianness(Enum):
    LITTLE = "Little"
    BIG = "Big"

    @property
    def prefix(self) -> str:
        """struct byte order prefix."""
        return "<" if self is Endianness.LITTLE else ">"

    @property
    def is_big(self) -> bool:
        return self is Endianness.BIG


@dataclass(frozen=True)
class ValueConfig:
    name: str
    data_type: ValueKind


@dataclass
class SensorConfig:
    """A named group of values that are read at the same time."""
    name: str
    id: int
    values: list[ValueConfig] = field(default_factory=list)

    @property
    def payload_size(self) -> int:
        """Bytes following the ID byte in one packet of this sensor."""
        return sum(v.data_type.width for v in self.values)


@dataclass
class RocketConfig:
    name: str
    sensors: list[SensorConfig] = field(default_factory=list)
    endianess: Endianness = Endianness.BIG
    display_name: str | None = None
    description: str | None = None

    def validate(self) -> None:
        """Raise DuplicateSensorId if two sensors share an ID."""
        seen: dict[int, SensorConfig] = {}
        for sensor in self.sensors:
            other = seen.get(sensor.id)
            if other is not None:
                raise DuplicateSensorId(sensor.id, other.name, sensor.name)
            seen[sensor.id] = sensor

    def get_sensor_by_id(self, sensor_id: int) -> SensorConfig | None:
        for sensor in self.sensors:
            if sensor.id == sensor_id:
                return sensor
        return None

    @property
    def title(self) -> str:
        """Display name, falling back to the plain name."""
        return self.display_name or self.name

    # ------------------------------------------------------------------
    # JSON documents
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, doc: dict[str, Any]) -> RocketConfig:
        """Build a configuration from a parsed JSON document.

        Does not call validate(); load_config() does.
        """
        try:
            sensors = [_sensor_from_dict(s) for s in doc["sensors"]]
            endian_tag = doc.get("endianess", Endianness.BIG.value)
            try:
                endianess = Endianness(endian_tag)
            except ValueError:
                raise ConfigError(f"Unknown endianess: {endian_tag!r}") from None
            return cls(
                name=str(doc["name"]),
                sensors=sensors,
                endianess=endianess,
                display_name=doc.get("display_name"),
                description=doc.get("description"),
            )
        except KeyError as e:
            raise ConfigError(f"Missing key in configuration: {e.args[0]!r}") from None
        except TypeError as e:
            raise ConfigError(f"Malformed configuration: {e}") from None

    @classmethod
    def from_json(cls, text: str) -> RocketConfig:
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}") from None
        if not isinstance(doc, dict):
            raise ConfigError("Configuration must be a JSON object")
        return cls.from_dict(doc)

    def to_dict(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "name": self.name,
            "sensors": [
                {
                    "name": s.name,
                    "id": s.id,
                    "values": [{"name": v.name, "data_type": v.data_type.tag}
                               for v in s.values],
                }
                for s in self.sensors
            ],
            "endianess": self.endianess.value,
        }
        if self.display_name is not None:
            doc["display_name"] = self.display_name
        if self.description is not None:
            doc["description"] = self.description
        return doc


def _sensor_from_dict(doc: dict[str, Any]) -> SensorConfig:
    sensor_id = doc["id"]
    if not isinstance(sensor_id, int) or isinstance(sensor_id, bool) \
            or not 0 <= sensor_id <= ID_MAX:
        raise ConfigError(f"Sensor {doc.get('name')!r}: id must be 0-{ID_MAX}, "
                          f"got {sensor_id!r}")
    values = [ValueConfig(str(v["name"]), ValueKind.from_tag(v["data_type"]))
              for v in doc["values"]]
    return SensorConfig(str(doc["name"]), sensor_id, values)


def load_config(path: str | Path) -> RocketConfig:
    """Read and validate a rocket configuration file."""
    config = RocketConfig.from_json(Path(path).read_text(encoding="utf-8"))
    config.validate()
    return config
