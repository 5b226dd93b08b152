"""numpy extraction of decoded flight data.

Capture drains a TableGenerator once and keeps every column as a pair of
arrays: the indices of the rows that carry a value, and the values themselves
in the column's native dtype.  Row indices play the part of timestamps; the
stream has no clock of its own.
"""

from __future__ import annotations

import numpy as np

from .config import RocketConfig, SensorConfig
from .table import TableGenerator, column_name


class Capture:

    def __init__(self, config: RocketConfig, table: TableGenerator):
        self.config = config
        columns = table.column_names()
        indices: dict[str, list[int]] = {c: [] for c in columns}
        values: dict[str, list[int | float]] = {c: [] for c in columns}

        rows = 0
        for i, row in enumerate(table.rows()):
            rows = i + 1
            for name, tv in zip(columns, row):
                if tv is not None:
                    indices[name].append(i)
                    values[name].append(tv.value)

        self.row_count = rows
        self._series: dict[str, tuple[np.ndarray, np.ndarray]] = {}
        for sensor in config.sensors:
            for vc in sensor.values:
                name = column_name(sensor, vc)
                if name not in indices:
                    continue
                self._series[name] = (
                    np.asarray(indices[name], dtype=np.uint64),
                    np.asarray(values[name], dtype=vc.data_type.dtype),
                )

    def _sensor(self, sensor_name: str) -> SensorConfig:
        for sensor in self.config.sensors:
            if sensor.name == sensor_name:
                return sensor
        raise KeyError(f"Unknown sensor: {sensor_name!r}")

    def series(self, sensor_name: str, value_name: str,
               r0: int | None = None, r1: int | None = None,
               ) -> tuple[np.ndarray, np.ndarray]:
        """Return (row_indices, values) for one column.

        r0/r1 restrict the result to rows in [r0, r1].
        """
        name = f"{sensor_name}_{value_name}"
        if name not in self._series:
            raise KeyError(f"Unknown column: {name!r}")
        idx, vals = self._series[name]
        if r0 is None and r1 is None:
            return idx, vals
        mask = np.ones(len(idx), dtype=bool)
        if r0 is not None:
            mask &= idx >= r0
        if r1 is not None:
            mask &= idx <= r1
        return idx[mask], vals[mask]

    def table(self, sensor_name: str) -> dict[str, np.ndarray]:
        """All values of one sensor plus a ``_row`` index array.

        A sensor's values arrive together, so they share one index array.
        """
        sensor = self._sensor(sensor_name)
        if any(vc.name == "_row" for vc in sensor.values):
            raise ValueError(f"Sensor {sensor_name!r} has a value named '_row', "
                             "use series() instead")
        result: dict[str, np.ndarray] = {}
        for vc in sensor.values:
            name = column_name(sensor, vc)
            if name not in self._series:
                continue
            idx, vals = self._series[name]
            result.setdefault("_row", idx)
            result[vc.name] = vals
        return result

    def dense(self, sensor_name: str, value_name: str) -> np.ndarray:
        """One float64 slot per row, NaN where the column is empty."""
        idx, vals = self.series(sensor_name, value_name)
        out = np.full(self.row_count, np.nan, dtype=np.float64)
        out[idx.astype(np.intp)] = vals
        return out
