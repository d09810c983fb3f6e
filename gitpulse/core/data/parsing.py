"""Comma separated table parsing.

The collector writes plain ``field,field`` lines without quoting, so the parser
splits on every comma and knows nothing about field semantics.
"""

from __future__ import annotations

from gitpulse.core.models.records import RawRecord

DELIMITER = ","
BOM = "\ufeff"


def parse_table(text: str | None) -> list[RawRecord]:
    """Parse header + data lines into field-keyed records.

    Missing trailing values become ``""`` and surplus values are ignored. A
    leading byte order mark is dropped. Text without at least one data line
    yields an empty list.
    """

    if not text:
        return []

    lines = text.lstrip(BOM).strip().splitlines()
    if len(lines) < 2:
        return []

    headers = [name.strip() for name in lines[0].split(DELIMITER)]
    records: list[RawRecord] = []
    for line in lines[1:]:
        values = line.split(DELIMITER)
        record: RawRecord = {}
        for index, header in enumerate(headers):
            record[header] = values[index].strip() if index < len(values) else ""
        records.append(record)
    return records


__all__ = ["DELIMITER", "parse_table"]
