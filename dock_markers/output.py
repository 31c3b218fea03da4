from __future__ import annotations

import csv
import json
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Optional

import yaml

from .errors import InvalidArgument
from .markers import MarkerWorldCorners


class OutputSink(ABC):
    @abstractmethod
    def open(self, dock: dict[str, Any]) -> None: ...

    @abstractmethod
    def write_marker(self, record: MarkerWorldCorners) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class NullOutput(OutputSink):
    def open(self, dock: dict[str, Any]) -> None:
        return None

    def write_marker(self, record: MarkerWorldCorners) -> None:
        return None

    def close(self) -> None:
        return None


def _fmt(value: float, precision: int) -> str:
    # +0.0 folds -0.0 into 0.0 after rounding
    return f"{round(float(value), precision) + 0.0:.{precision}f}"


class _StreamOutput(OutputSink):
    """Writes to `path` when given, else to stdout."""

    def __init__(self, path: Optional[str] = None, precision: int = 4):
        if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
            raise InvalidArgument(f"precision must be a non-negative integer (got {precision!r})")
        self.path = path
        self.precision = precision
        self._fh: Optional[IO[str]] = None
        self._owns_fh = False

    def open(self, dock: dict[str, Any]) -> None:
        if self.path is not None:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.path, "w", newline="", encoding="utf-8")
            self._owns_fh = True
        else:
            self._fh = sys.stdout
            self._owns_fh = False
        self._begin(dock)

    def _begin(self, dock: dict[str, Any]) -> None:
        return None

    def _end(self) -> None:
        return None

    def _vec3(self, vec) -> str:
        return ", ".join(_fmt(v, self.precision) for v in vec)

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._end()
            self._fh.flush()
        finally:
            if self._owns_fh:
                self._fh.close()
            self._fh = None


class TextOutput(_StreamOutput):
    def _begin(self, dock: dict[str, Any]) -> None:
        unit = dock["unit"] if dock["unit"] is not None else "?"
        if dock["unit_defaulted"]:
            unit += " (defaulted to meters)"
        self._fh.write(
            f"# {dock['name']}: unit={unit} scale={dock['scale_factor']} "
            f"roll={_fmt(dock['roll'], self.precision)} yaw={_fmt(dock['yaw'], self.precision)} "
            f"position=({self._vec3(dock['position'])})\n"
        )

    def write_marker(self, record: MarkerWorldCorners) -> None:
        c = record.corners
        self._fh.write(
            f"marker {record.id}\n"
            f"  top_left:    ({self._vec3(c.top_left)})\n"
            f"  top_right:   ({self._vec3(c.top_right)})\n"
            f"  bottom_left: ({self._vec3(c.bottom_left)})\n"
        )


class _DocumentOutput(_StreamOutput):
    """Collects every record and dumps one document on close."""

    def _begin(self, dock: dict[str, Any]) -> None:
        self._doc: dict[str, Any] = {"dock": dock, "markers": []}

    def write_marker(self, record: MarkerWorldCorners) -> None:
        self._doc["markers"].append(record.as_dict())

    def _end(self) -> None:
        self._dump(self._doc)

    @abstractmethod
    def _dump(self, doc: dict[str, Any]) -> None: ...


class JsonOutput(_DocumentOutput):
    def _dump(self, doc: dict[str, Any]) -> None:
        json.dump(doc, self._fh, indent=2)
        self._fh.write("\n")


class YamlOutput(_DocumentOutput):
    def _dump(self, doc: dict[str, Any]) -> None:
        yaml.safe_dump(doc, self._fh, default_flow_style=None, sort_keys=False)


class CsvOutput(_StreamOutput):
    HEADER = [
        "marker_id",
        "tl_x", "tl_y", "tl_z",
        "tr_x", "tr_y", "tr_z",
        "bl_x", "bl_y", "bl_z",
    ]

    def _begin(self, dock: dict[str, Any]) -> None:
        # stdout is not opened with newline=""
        if self._owns_fh:
            self._w = csv.writer(self._fh)
        else:
            self._w = csv.writer(self._fh, lineterminator="\n")
        self._w.writerow(self.HEADER)

    def write_marker(self, record: MarkerWorldCorners) -> None:
        c = record.corners
        self._w.writerow([
            record.id,
            *c.top_left.tolist(),
            *c.top_right.tolist(),
            *c.bottom_left.tolist(),
        ])


class LuaOutput(_StreamOutput):
    """Lua table of marker corners for the localization marker config."""

    def __init__(self, path: Optional[str] = None, precision: int = 4, table_name: str = "markers_world"):
        super().__init__(path, precision)
        self.table_name = table_name

    def _begin(self, dock: dict[str, Any]) -> None:
        self._fh.write(f"-- {dock['name']} marker corners, world frame, meters\n")
        self._fh.write(f"{self.table_name} = {{\n")

    def write_marker(self, record: MarkerWorldCorners) -> None:
        c = record.corners
        self._fh.write(
            f"  {{id={record.id}, "
            f"top_left={{{self._vec3(c.top_left)}}}, "
            f"top_right={{{self._vec3(c.top_right)}}}, "
            f"bottom_left={{{self._vec3(c.bottom_left)}}}}},\n"
        )

    def _end(self) -> None:
        self._fh.write("}\n")


OUTPUT_FORMATS = {
    "text": TextOutput,
    "json": JsonOutput,
    "yaml": YamlOutput,
    "csv": CsvOutput,
    "lua": LuaOutput,
}


def build_output(fmt: str, path: Optional[str] = None, precision: int = 4) -> OutputSink:
    key = (fmt or "").strip().lower()
    if key not in OUTPUT_FORMATS:
        raise InvalidArgument(
            f"output format must be one of {', '.join(OUTPUT_FORMATS)} (got {fmt!r})"
        )
    return OUTPUT_FORMATS[key](path, precision=precision)
