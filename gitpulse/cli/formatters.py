"""Renderers turning command rows into terminal tables or JSON Lines."""

from __future__ import annotations

import json
from dataclasses import dataclass
from numbers import Number
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE_HEAD
from rich.console import Console
from rich.table import Table

Row = Mapping[str, object]


def resolve_columns(rows: Sequence[Row], columns: Sequence[str] | None) -> list[str]:
    """Explicit columns win; otherwise the keys of the first row."""

    if columns:
        return list(columns)
    return list(rows[0].keys()) if rows else []


class OutputFormatter:
    """Base class for row renderers selected with ``--format``."""

    name: str

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        row_styles: Sequence[str | None] | None = None,
        title: str | None = None,
    ) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Rich table; numeric columns are right aligned and rows may carry a style."""

    name: str = "table"
    no_color: bool = False
    placeholder: str = "-"
    width: int = 160

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        row_styles: Sequence[str | None] | None = None,
        title: str | None = None,
    ) -> None:
        console = Console(
            file=stream,
            color_system=None if self.no_color else "auto",
            no_color=self.no_color,
            width=self.width,
        )
        resolved = resolve_columns(rows, columns)
        table = Table(box=SIMPLE_HEAD, title=title, header_style="" if self.no_color else "bold")
        for column in resolved:
            numeric = any(isinstance(row.get(column), Number) for row in rows)
            table.add_column(column, justify="right" if numeric else "left")

        for index, row in enumerate(rows):
            style = row_styles[index] if row_styles and index < len(row_styles) and not self.no_color else None
            table.add_row(*(self._cell(row.get(column)) for column in resolved), style=style)

        if resolved:
            console.print(table)
        if not rows:
            console.print("No data available.")

    def _cell(self, value: object) -> str:
        if value is None:
            return self.placeholder
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, int):
            return f"{value:,}"
        return str(value)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """One JSON object per row, restricted to the requested columns."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        row_styles: Sequence[str | None] | None = None,
        title: str | None = None,
    ) -> None:
        resolved = resolve_columns(rows, columns)
        for row in rows:
            stream.write(json.dumps({column: row.get(column) for column in resolved}, ensure_ascii=False, default=str))
            stream.write("\n")
        stream.flush()


FORMATTERS: dict[str, type[OutputFormatter]] = {"table": TableFormatter, "jsonl": JSONLFormatter}


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized not in FORMATTERS:
        msg = f"Unsupported format '{name}'. Available formats: {', '.join(FORMATTERS)}."
        raise ValueError(msg)
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    return FORMATTERS[normalized]()


__all__ = ["FORMATTERS", "JSONLFormatter", "OutputFormatter", "TableFormatter", "create_formatter", "resolve_columns"]
