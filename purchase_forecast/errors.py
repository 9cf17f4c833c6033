"""
Error Kinds

All forecasting errors derive from ValueError so callers that already guard
against bad input keep working.
"""

from typing import Optional, Sequence


class ForecastError(ValueError):
    """Base class for forecasting failures"""


class MalformedRecord(ForecastError):
    """A single raw record could not be used (skipped, never fatal)"""

    def __init__(self, reason: str, index: Optional[int] = None, record=None):
        self.reason = reason
        self.index = index
        self.record = record
        where = f"record {index}" if index is not None else "record"
        super().__init__(f"Malformed {where}: {reason}")


class EmptyTrainingSet(ForecastError):
    """Nothing left to train on after validation"""

    def __init__(self, message: str = "no training data"):
        super().__init__(message)


class UnknownProduct(ForecastError):
    """Selected product is not in the catalog built for this run"""

    def __init__(self, product, available: Sequence[str] = ()):
        self.product = product
        self.available = tuple(available)
        super().__init__(f"unknown product: {product!r}")


class InvalidStartDate(ForecastError):
    """Start month is not a valid YYYY-MM value"""

    def __init__(self, value, reason: str = "expected YYYY-MM"):
        self.value = value
        self.reason = reason
        super().__init__(f"invalid start date {value!r}: {reason}")
