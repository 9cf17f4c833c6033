"""
Feature Engineering Module

Builds the 3-wide model input for each (month, product) pair:
- month_sin / month_cos: annual cycle, so December sits next to January
- product_code: integer code from the product catalog

Training rows and forecast rows derive the month phase differently:
- training:  phase = month_index % 12   (month_index = year * 12 + month)
- forecast:  phase = calendar_month - 1
Both derivations are kept as-is; the fitted model has only ever seen
training phases, and forecasts are built with the forecast phase.
"""

from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .encoding import CleanRecord
from .scaling import QuantityScaler


FEATURE_COLUMNS = ['month_sin', 'month_cos', 'product_code']
TARGET_COLUMN = 'target'


def cyclical_month(phase):
    """
    Sine/cosine encoding of a 0-11 month phase

    Args:
        phase: Scalar or array of phases

    Returns:
        (sin, cos)
    """
    angle = 2 * np.pi * np.asarray(phase, dtype=float) / 12
    return np.sin(angle), np.cos(angle)


def training_phase(month_index):
    return np.asarray(month_index) % 12


def forecast_phase(calendar_month):
    return np.asarray(calendar_month) - 1


def feature_vector(phase: int, product_code: int) -> List[float]:
    """[sin, cos, product_code] for a single phase"""
    month_sin, month_cos = cyclical_month(phase)
    return [float(month_sin), float(month_cos), float(product_code)]


def training_feature_vector(month_index: int, product_code: int) -> List[float]:
    return feature_vector(int(training_phase(month_index)), product_code)


def forecast_feature_vector(calendar_month: int, product_code: int) -> List[float]:
    return feature_vector(int(forecast_phase(calendar_month)), product_code)


class FeatureBuilder:
    """Feature matrices for model training and forecasting"""

    def __init__(self, scaler: QuantityScaler):
        """
        Initialize feature builder

        Args:
            scaler: Scaler fitted on this run's training quantities
        """
        self.scaler = scaler

    def create_training_features(self, records: Iterable[CleanRecord]) -> pd.DataFrame:
        """
        One training row per clean record

        Args:
            records: Encoded records

        Returns:
            DataFrame with month_index, quantity_sold, FEATURE_COLUMNS and target
        """
        df = pd.DataFrame(
            [(r.month_index, r.product_code, r.quantity_sold) for r in records],
            columns=['month_index', 'product_code', 'quantity_sold']
        )

        df['month_phase'] = training_phase(df['month_index'].to_numpy())
        df['month_sin'], df['month_cos'] = cyclical_month(df['month_phase'].to_numpy())
        df[TARGET_COLUMN] = self.scaler.normalize(df['quantity_sold'].to_numpy(dtype=float))

        return df

    @staticmethod
    def create_forecast_features(months: Sequence[Tuple[int, int]],
                                 product_code: int) -> pd.DataFrame:
        """
        One feature row per horizon month for a single product

        Args:
            months: (year, month) pairs
            product_code: Encoded product

        Returns:
            DataFrame with year, month and FEATURE_COLUMNS
        """
        df = pd.DataFrame(list(months), columns=['year', 'month'])
        df['month_phase'] = forecast_phase(df['month'].to_numpy())
        df['month_sin'], df['month_cos'] = cyclical_month(df['month_phase'].to_numpy())
        df['product_code'] = product_code

        return df
