"""flightdata - Flight computer telemetry decoder and tooling."""

from .config import (
    ValueKind, ValueConfig, SensorConfig, Endianness, RocketConfig, load_config,
)
from .errors import (
    FlightDataError, ConfigError, DuplicateSensorId,
    PacketError, InvalidId, InvalidValueCount, TruncatedRead,
)
from .values import TypedValue
from .decoder import Packet, PacketParser, decode_value, encode_value, encode_packet
from .table import ErrorPolicy, Lookahead, TableGenerator, column_name, column_names
from .csv_writer import csv_lines, write_csv
from .report import Report, ValueStats, column_stats
from .capture import Capture

__all__ = [
    "ValueKind", "ValueConfig", "SensorConfig", "Endianness", "RocketConfig",
    "load_config",
    "FlightDataError", "ConfigError", "DuplicateSensorId",
    "PacketError", "InvalidId", "InvalidValueCount", "TruncatedRead",
    "TypedValue",
    "Packet", "PacketParser", "decode_value", "encode_value", "encode_packet",
    "ErrorPolicy", "Lookahead", "TableGenerator", "column_name", "column_names",
    "csv_lines", "write_csv",
    "Report", "ValueStats", "column_stats",
    "Capture",
]
