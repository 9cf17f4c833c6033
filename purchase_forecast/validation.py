"""
Record Validation Module

Filters raw sales rows into clean, typed records:
- Drops rows with no sales date or a non-numeric / negative quantity
- Parses M/D/YYYY (optionally followed by a time) into month and year
- Keeps the original row order

Bad rows are reported and skipped; they never fail the batch.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .errors import MalformedRecord


MONTH_PATTERN = re.compile(r'^[0-9]{1,2}$')
YEAR_PATTERN = re.compile(r'^[0-9]{4}$')


@dataclass(frozen=True)
class SalesRecord:
    """One validated sales row"""
    month: int
    year: int
    product_description: str
    quantity_sold: float

    @property
    def month_index(self) -> int:
        """Absolute month counter (year * 12 + calendar month)"""
        return self.year * 12 + self.month


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_sales_date(sales_date: str) -> Tuple[int, int]:
    """
    Parse the month and year out of an M/D/YYYY date string

    Anything after the first whitespace (a time component) is ignored.

    Args:
        sales_date: Raw date text, e.g. '3/15/2023 10:30'

    Returns:
        (month, year)
    """
    date_part = sales_date.strip().split()[0]
    fields = date_part.split('/')
    if len(fields) < 3:
        raise MalformedRecord(f"unparsable sales_date {sales_date!r}")

    month_text, year_text = fields[0].strip(), fields[2].strip()
    if not MONTH_PATTERN.match(month_text) or not YEAR_PATTERN.match(year_text):
        raise MalformedRecord(f"unparsable sales_date {sales_date!r}")

    month = int(month_text)
    if not 1 <= month <= 12:
        raise MalformedRecord(f"month out of range in {sales_date!r}")

    return month, int(year_text)


def coerce_quantity(value: Any) -> float:
    """
    Turn a raw quantity into a finite, non-negative float

    Numbers pass through, numeric strings are coerced, everything else
    (booleans, text, NaN, infinities, negatives) is rejected.
    """
    if isinstance(value, bool) or _is_missing(value):
        raise MalformedRecord(f"quantity_sold is not a number: {value!r}")

    if isinstance(value, (Real, Decimal, str)):
        try:
            quantity = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            raise MalformedRecord(f"quantity_sold is not a number: {value!r}") from None
    else:
        raise MalformedRecord(f"quantity_sold is not a number: {value!r}")

    if not math.isfinite(quantity):
        raise MalformedRecord(f"quantity_sold is not finite: {value!r}")
    if quantity < 0:
        raise MalformedRecord(f"quantity_sold is negative: {value!r}")

    return quantity


class RecordValidator:
    """Validate raw sales rows, skipping (and reporting) malformed ones"""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.rejected: List[MalformedRecord] = []

    def parse_record(self, raw: Mapping[str, Any], index: Optional[int] = None) -> SalesRecord:
        """
        Validate one raw record

        Args:
            raw: Mapping with sales_date, product_description, quantity_sold
            index: Position in the input (for reporting)

        Returns:
            SalesRecord

        Raises:
            MalformedRecord: if the row cannot be used
        """
        try:
            sales_date = raw.get('sales_date')
            if _is_missing(sales_date):
                raise MalformedRecord("missing sales_date")
            quantity = coerce_quantity(raw.get('quantity_sold'))

            product = raw.get('product_description')
            if _is_missing(product):
                raise MalformedRecord("missing product_description")

            month, year = parse_sales_date(str(sales_date))
        except MalformedRecord as e:
            raise MalformedRecord(e.reason, index=index, record=raw) from None

        return SalesRecord(
            month=month,
            year=year,
            product_description=str(product),
            quantity_sold=quantity
        )

    def validate(self, raw_records: Iterable[Mapping[str, Any]]) -> List[SalesRecord]:
        """
        Validate a batch of raw records

        Args:
            raw_records: Ordered raw records

        Returns:
            Valid records in input order (possibly empty)
        """
        self.rejected = []
        records = []

        for index, raw in enumerate(raw_records):
            try:
                records.append(self.parse_record(raw, index=index))
            except MalformedRecord as e:
                self.rejected.append(e)
                if self.verbose:
                    print(f"  ⚠ Skipping record {index}: {e.reason}")

        if self.verbose:
            print(f"  Valid records: {len(records)}, skipped: {len(self.rejected)}")

        return records


def validate_records(raw_records: Iterable[Mapping[str, Any]],
                     verbose: bool = True) -> List[SalesRecord]:
    """
    Convenience function to validate a batch of raw records

    Args:
        raw_records: Ordered raw records
        verbose: Print skipped rows

    Returns:
        Valid records in input order
    """
    return RecordValidator(verbose=verbose).validate(raw_records)
