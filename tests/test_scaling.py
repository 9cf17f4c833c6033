"""
Tests for min-max quantity scaling.
"""
import math

import numpy as np
import pytest

from purchase_forecast.errors import EmptyTrainingSet
from purchase_forecast.scaling import QuantityScaler, ScaleParams


class TestQuantityScaler:
    """fit / normalize / denormalize."""

    def test_fit_params(self):
        scaler = QuantityScaler().fit([10, 20, 15])

        assert scaler.params == ScaleParams(min_quantity=10.0, max_quantity=20.0)
        assert scaler.params.range == 10.0

    def test_normalize_bounds(self):
        scaler = QuantityScaler().fit([10, 20, 15])

        assert scaler.normalize(10) == 0.0
        assert scaler.normalize(20) == 1.0
        assert scaler.normalize(15) == pytest.approx(0.5)

    def test_round_trip(self):
        """denormalize(normalize(q)) == q for every training quantity."""
        quantities = [3.5, 12.0, 0.0, 47.25, 19.0]
        scaler = QuantityScaler().fit(quantities)

        for q in quantities:
            assert scaler.denormalize(scaler.normalize(q)) == pytest.approx(q)

    def test_degenerate_range(self):
        """All-equal quantities use range 1 and stay finite."""
        scaler = QuantityScaler().fit([5, 5, 5])

        assert scaler.params.range == 1.0
        assert math.isfinite(scaler.normalize(5))
        assert scaler.normalize(5) == 0.0
        assert scaler.denormalize(0.0) == 5.0

    def test_small_range_kept(self):
        """Only a zero spread is replaced by 1."""
        scaler = QuantityScaler().fit([0.2, 0.5])
        assert scaler.params.range == pytest.approx(0.3)

    def test_arrays(self):
        scaler = QuantityScaler().fit([0, 100])
        result = scaler.denormalize(np.array([0.0, 0.5, 1.2]))

        np.testing.assert_allclose(result, [0.0, 50.0, 120.0])

    def test_unfitted_scaler(self):
        with pytest.raises(ValueError, match="not fitted"):
            QuantityScaler().normalize(1.0)

    def test_fit_empty(self):
        with pytest.raises(EmptyTrainingSet):
            QuantityScaler().fit([])
