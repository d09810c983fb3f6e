from datetime import date

import pytest

from gitpulse.core.formatting import FormatPolicy, format_bytes, format_date_label, format_delta, format_number


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, "—"), (0, "0"), (999, "999"), (1000, "1.0K"), (1234, "1.2K"), (999_999, "1000.0K"), (1_500_000, "1.5M")],
)
def test_format_number(value: int | None, expected: str) -> None:
    assert format_number(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, "—"), (0, "—"), (512, "512 B"), (1536, "1.5 KB"), (5 * 1024**2, "5.0 MB"), (3 * 1024**3, "3.0 GB")],
)
def test_format_bytes(value: int | None, expected: str) -> None:
    assert format_bytes(value) == expected


def test_policy_is_injectable() -> None:
    policy = FormatPolicy(placeholder="-", decimals=2)

    assert format_number(None, policy) == "-"
    assert format_number(1234, policy) == "1.23K"
    assert format_bytes(1536, policy) == "1.50 KB"


def test_format_date_label() -> None:
    assert format_date_label(date(2024, 1, 5)) == "Jan 5"
    assert format_date_label(date(2024, 12, 25)) == "Dec 25"


def test_format_delta() -> None:
    assert format_delta(12) == "+12"
    assert format_delta(0) == ""
