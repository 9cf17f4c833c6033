"""
Forecast Horizon Module

Month arithmetic for the forecast window:
- Parse the user-supplied YYYY-MM start month
- Generate consecutive (year, month) pairs, rolling the year after December
- Format 'MonthName Year' labels
"""

import re
from typing import List, Tuple, Union

from .errors import InvalidStartDate


MONTH_NAMES = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
]

START_PATTERN = re.compile(r'^\s*([0-9]{4})-([0-9]{1,2})\s*$')

YearMonth = Tuple[int, int]


def parse_start_year_month(value: Union[str, YearMonth]) -> YearMonth:
    """
    Parse a start month given as 'YYYY-MM' (or an already split tuple)

    Args:
        value: 'YYYY-MM' text or (year, month)

    Returns:
        (year, month)

    Raises:
        InvalidStartDate: if the value cannot be parsed or the month is not 1-12
    """
    if isinstance(value, tuple):
        if len(value) != 2 or not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
            raise InvalidStartDate(value, "expected (year, month) integers")
        year, month = value
    elif isinstance(value, str):
        match = START_PATTERN.match(value)
        if match is None:
            raise InvalidStartDate(value)
        year, month = int(match.group(1)), int(match.group(2))
    else:
        raise InvalidStartDate(value)

    if not 1 <= month <= 12:
        raise InvalidStartDate(value, "month must be between 1 and 12")

    return year, month


def generate_horizon(year: int, month: int, horizon: int = 6) -> List[YearMonth]:
    """
    Generate consecutive months starting at (year, month)

    Args:
        year: Start year
        month: Start calendar month (1-12)
        horizon: Number of months

    Returns:
        List of (year, month), ascending, no gaps
    """
    if horizon < 1:
        raise ValueError(f"horizon must be positive, got {horizon}")
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")

    months = []
    for i in range(horizon):
        next_month = (month + i - 1) % 12 + 1
        next_year = year + (month + i - 1) // 12
        months.append((next_year, next_month))

    return months


def month_label(year: int, month: int) -> str:
    """'<MonthName> <Year>', e.g. 'April 2023'"""
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_year_month(year: int, month: int) -> str:
    """(2023, 4) -> '2023-04'"""
    return f"{year}-{month:02d}"
