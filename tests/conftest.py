"""
Pytest fixtures for purchase forecasting tests.
"""
import pytest

from purchase_forecast.encoding import ProductCatalog, encode_records
from purchase_forecast.feature_engineering import FeatureBuilder
from purchase_forecast.pipeline import ForecastPipeline
from purchase_forecast.scaling import QuantityScaler
from purchase_forecast.validation import validate_records


def make_raw_records(rows):
    """Build raw record dicts from (sales_date, product, quantity) tuples."""
    return [
        {'sales_date': date, 'product_description': product, 'quantity_sold': qty}
        for date, product, qty in rows
    ]


def make_training_frame(raw_records):
    """Validate, encode, scale and featurize raw records."""
    records = validate_records(raw_records, verbose=False)
    clean = encode_records(records, ProductCatalog())
    scaler = QuantityScaler().fit(r.quantity_sold for r in clean)
    return FeatureBuilder(scaler).create_training_features(clean)


@pytest.fixture
def widget_records():
    """Three months of Widget sales."""
    return make_raw_records([
        ("1/1/2023", "Widget", 10),
        ("2/1/2023", "Widget", 20),
        ("3/1/2023", "Widget", 15),
    ])


@pytest.fixture
def two_year_records():
    """Two years of seasonal sales for two products, with a December peak for Widget."""
    rows = []
    for year in (2021, 2022):
        for month in range(1, 13):
            widget = 40 + (30 if month in (11, 12, 1) else 0) + month
            gadget = 100 - 3 * month
            rows.append((f"{month}/15/{year}", "Widget", widget))
            rows.append((f"{month}/15/{year}", "Gadget", gadget))
    return make_raw_records(rows)


@pytest.fixture
def fast_model_params():
    """Short training run for tests that do not care about fit quality."""
    return {
        'hidden_units': 10,
        'epochs': 5,
        'learning_rate': 0.001,
        'batch_size': 32,
        'shuffle': True,
        'seed': 7
    }


@pytest.fixture
def quiet_pipeline():
    """Pipeline with default model settings and no printing."""
    return ForecastPipeline(verbose=False)
