"""Human readable magnitudes and date labels for renderers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

_KIB = 1024
_MIB = _KIB**2
_GIB = _KIB**3


@dataclass(frozen=True, slots=True)
class FormatPolicy:
    """How missing values and magnitudes are rendered."""

    placeholder: str = "—"
    decimals: int = 1


DEFAULT_POLICY = FormatPolicy()


def format_number(value: int | None, policy: FormatPolicy = DEFAULT_POLICY) -> str:
    """Format a count with ``K``/``M`` suffixes (``1234`` -> ``"1.2K"``)."""

    if value is None:
        return policy.placeholder
    if value >= 1_000_000:
        return f"{value / 1_000_000:.{policy.decimals}f}M"
    if value >= 1_000:
        return f"{value / 1_000:.{policy.decimals}f}K"
    return f"{value:,}"


def format_bytes(value: int | None, policy: FormatPolicy = DEFAULT_POLICY) -> str:
    """Format a byte size using binary units (``1536`` -> ``"1.5 KB"``)."""

    if not value:
        return policy.placeholder
    if value >= _GIB:
        return f"{value / _GIB:.{policy.decimals}f} GB"
    if value >= _MIB:
        return f"{value / _MIB:.{policy.decimals}f} MB"
    if value >= _KIB:
        return f"{value / _KIB:.{policy.decimals}f} KB"
    return f"{value} B"


def format_date_label(day: date) -> str:
    """Short axis label such as ``"Jan 5"``."""

    return f"{day:%b} {day.day}"


def format_delta(delta: int) -> str:
    """``+N`` for growth, empty otherwise."""

    return f"+{delta:,}" if delta > 0 else ""


__all__ = [
    "DEFAULT_POLICY",
    "FormatPolicy",
    "format_bytes",
    "format_date_label",
    "format_delta",
    "format_number",
]
