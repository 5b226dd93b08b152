"""Per-column statistics and the LaTeX flight report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, TextIO

from .config import RocketConfig
from .latex import Element, Environment, Raw, escape, section, subsection
from .table import Row, TableGenerator, column_name
from .values import TypedValue

HEADER_CONTENT = "\\documentclass{article}\n\n"


@dataclass
class ValueStats:
    min: TypedValue
    max: TypedValue
    count: int = 1

    def add(self, value: TypedValue) -> None:
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value
        self.count += 1


def column_stats(columns: list[str], rows: Iterable[Row]) -> dict[str, ValueStats]:
    """Fold rows into min/max/count per column.  Empty slots are ignored."""
    stats: dict[str, ValueStats] = {}
    for row in rows:
        for name, value in zip(columns, row):
            if value is None:
                continue
            s = stats.get(name)
            if s is None:
                stats[name] = ValueStats(value, value)
            else:
                s.add(value)
    return stats


@dataclass
class SensorReport:
    value_stats: dict[str, ValueStats] = field(default_factory=dict)


class Report:
    """Statistics about every sensor of one flight."""

    def __init__(self, config: RocketConfig,
                 sensor_reports: dict[int, SensorReport]):
        self.config = config
        self.sensor_reports = sensor_reports

    @classmethod
    def from_table(cls, config: RocketConfig, table: TableGenerator) -> Report:
        stats = column_stats(table.column_names(), table.rows())

        sensor_reports: dict[int, SensorReport] = {}
        for sensor in config.sensors:
            report = SensorReport()
            for value in sensor.values:
                s = stats.get(column_name(sensor, value))
                if s is not None:
                    report.value_stats[value.name] = s
            sensor_reports[sensor.id] = report
        return cls(config, sensor_reports)

    def elements(self) -> list[Element]:
        elements: list[Element] = [
            section("Sensor Data"),
            Raw(self._sensor_introduction()),
        ]

        for sensor in self.config.sensors:
            elements.append(subsection(escape(sensor.name)))
            value_list = ", ".join(escape(v.name) for v in sensor.values)
            elements.append(Raw(
                f"The {escape(sensor.name)} sensor has {len(sensor.values)} "
                f"values: {value_list}. "))

            report = self.sensor_reports.get(sensor.id)
            if report is None or not report.value_stats:
                elements.append(Raw("No data was recorded for this sensor. "))
                continue

            for name, stats in report.value_stats.items():
                elements.append(Raw(
                    f"The {escape(name)} value has {stats.count} samples. "))
                elements.append(Raw(f"The minimum value is {stats.min}. "))
                elements.append(Raw(f"The maximum value is {stats.max}. "))

        return elements

    def write(self, out: TextIO) -> None:
        out.write(HEADER_CONTENT)
        Environment("document", self.elements()).write(out)

    def _sensor_introduction(self) -> str:
        sensor_list = ", ".join(escape(s.name) for s in self.config.sensors)
        return (f"The {escape(self.config.title)} rocket has "
                f"{len(self.config.sensors)} sensors: {sensor_list}.")
