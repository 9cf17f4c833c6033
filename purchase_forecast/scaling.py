"""
Quantity Scaling Module

Min-max scaling of the sales target into [0, 1] and back. Parameters are
fitted once per training run and reused for every call within that run.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

import numpy as np

from .errors import EmptyTrainingSet


ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class ScaleParams:
    """Min/max of the training quantities"""
    min_quantity: float
    max_quantity: float

    @property
    def range(self) -> float:
        # A single-valued dataset would otherwise divide by zero
        spread = self.max_quantity - self.min_quantity
        return spread if spread != 0 else 1.0


class QuantityScaler:
    """Min-max scaler for quantity sold"""

    def __init__(self):
        self.params: Optional[ScaleParams] = None

    def fit(self, values: Iterable[float]) -> 'QuantityScaler':
        """
        Compute min/max over all training quantities

        Args:
            values: Quantities sold

        Returns:
            self
        """
        arr = np.asarray(list(values), dtype=float)
        if arr.size == 0:
            raise EmptyTrainingSet()

        self.params = ScaleParams(
            min_quantity=float(arr.min()),
            max_quantity=float(arr.max())
        )
        return self

    def _require_params(self) -> ScaleParams:
        if self.params is None:
            raise ValueError("Scaler is not fitted. Call fit() first.")
        return self.params

    def normalize(self, value: ArrayLike) -> ArrayLike:
        """(v - min) / range"""
        params = self._require_params()
        return (value - params.min_quantity) / params.range

    def denormalize(self, value: ArrayLike) -> ArrayLike:
        """n * range + min"""
        params = self._require_params()
        return value * params.range + params.min_quantity
