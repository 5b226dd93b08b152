"""Assemble decoded packets into fixed-layout table rows.

Every configured (sensor, value) pair is one column, ordered by sensor then by
value as declared in the configuration.  Packets are merged into the row being
built until a packet arrives whose columns are already filled; that packet is
parked in a one-slot lookahead buffer and starts the next row.  Sensors that
did not report during a row leave empty (None) slots.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional

from .config import RocketConfig, SensorConfig, ValueConfig
from .decoder import Packet
from .errors import InvalidId, InvalidValueCount, PacketError
from .values import TypedValue

logger = logging.getLogger(__name__)

Row = list[Optional[TypedValue]]


class ErrorPolicy(Enum):
    ABORT = "abort"
    CONTINUE = "continue"


def column_name(sensor: SensorConfig, value: ValueConfig) -> str:
    return f"{sensor.name}_{value.name}"


def column_names(config: RocketConfig) -> list[str]:
    return [column_name(s, v) for s in config.sensors for v in s.values]


class Lookahead:
    """FIFO with room for exactly one packet."""

    __slots__ = ("_packet",)

    def __init__(self) -> None:
        self._packet: Packet | None = None

    def __len__(self) -> int:
        return 0 if self._packet is None else 1

    def push(self, packet: Packet) -> None:
        if self._packet is not None:
            raise OverflowError("lookahead buffer already holds a packet")
        self._packet = packet

    def pop(self) -> Packet:
        if self._packet is None:
            raise IndexError("pop from empty lookahead buffer")
        packet, self._packet = self._packet, None
        return packet


class TableGenerator:
    """Iterator of rows built from a packet iterator.

    ``packets`` is usually a PacketParser over the same configuration.

    PacketErrors (from upstream or raised here) come out of next().  With
    ErrorPolicy.ABORT the generator is finished after the first error.  With
    ErrorPolicy.CONTINUE the offending packet is dropped and the next call
    carries on with the row that was in progress.
    """

    def __init__(self, packets: Iterable[Packet], config: RocketConfig,
                 on_error: ErrorPolicy = ErrorPolicy.ABORT):
        self._iter = iter(packets)
        self.config = config
        self.on_error = on_error
        self.errors = 0

        self._all_columns = tuple(column_names(config))
        self._columns = list(self._all_columns)
        self._sensor_columns: dict[int, list[str]] = {}
        for sensor in config.sensors:
            self._sensor_columns.setdefault(
                sensor.id, [column_name(sensor, v) for v in sensor.values])

        self._row: dict[str, TypedValue] = {}
        self._lookahead = Lookahead()
        self._done = False

    def column_names(self) -> list[str]:
        """Names of the columns produced, in row order."""
        return list(self._columns)

    def allow_columns(self, names: Iterable[str]) -> None:
        """Only emit the given columns (kept in configuration order).

        Row boundaries are still decided on all columns, so restricting the
        output never changes how packets are grouped.
        """
        allowed = set(names)
        unknown = allowed.difference(self._all_columns)
        if unknown:
            raise KeyError(f"Unknown columns: {', '.join(sorted(unknown))}")
        self._columns = [c for c in self._all_columns if c in allowed]

    def __iter__(self) -> TableGenerator:
        return self

    def __next__(self) -> Row:
        if self._done:
            raise StopIteration
        try:
            row = self._assemble()
        except PacketError:
            if self.on_error is ErrorPolicy.ABORT:
                self._done = True
                self._row = {}
            raise
        if row is None:
            self._done = True
            raise StopIteration
        return row

    def rows(self) -> Iterator[Row]:
        """Iterate rows, logging and skipping bad packets under CONTINUE.

        Under ABORT the first PacketError propagates to the caller.
        """
        while True:
            try:
                row = next(self)
            except StopIteration:
                return
            except PacketError as e:
                self.errors += 1
                if self.on_error is ErrorPolicy.ABORT:
                    raise
                logger.warning("skipping packet: %s", e)
                continue
            yield row

    def _next_packet(self) -> Packet | None:
        if self._lookahead:
            return self._lookahead.pop()
        return next(self._iter, None)

    def _assemble(self) -> Row | None:
        while True:
            packet = self._next_packet()
            if packet is None:
                break

            sensor = self.config.get_sensor_by_id(packet.id)
            if sensor is None:
                raise InvalidId(packet.id)
            if len(packet.values) != len(sensor.values):
                raise InvalidValueCount(len(sensor.values), len(packet.values))

            names = self._sensor_columns[sensor.id]
            if any(name in self._row for name in names):
                self._lookahead.push(packet)
                break

            for name, vc, value in zip(names, sensor.values, packet.values):
                self._row[name] = TypedValue(vc.data_type, value)

        if not self._row:
            return None
        row = [self._row.get(c) for c in self._columns]
        self._row = {}
        return row
