"""
Forecast Pipeline Module

End-to-end run for one product:
1. Validate raw records
2. Encode product descriptions
3. Fit quantity scaler
4. Build training features
5. Fit neural network
6. Resolve selected product
7. Generate forecast horizon
8. Predict and denormalize

Each run builds its own catalog, scaler and model. They are published on
the pipeline object only once the run has succeeded, so a failed or
abandoned run leaves the previous results in place.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from config import FORECAST_CONFIG, MODEL_CONFIG
from .encoding import CleanRecord, ProductCatalog, encode_records
from .errors import EmptyTrainingSet, UnknownProduct
from .feature_engineering import FeatureBuilder
from .horizon import (YearMonth, format_year_month, generate_horizon, month_label,
                      parse_start_year_month)
from .nn_model import ForecastModel
from .scaling import QuantityScaler, ScaleParams
from .validation import RecordValidator, SalesRecord


RawRecords = Iterable[Mapping[str, Any]]


@dataclass(frozen=True)
class ForecastPoint:
    """One forecast month for the selected product"""
    label: str
    product_description: str
    quantity_sold: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class _PreparedRun:
    catalog: ProductCatalog
    scaler: QuantityScaler
    train_df: pd.DataFrame
    product_code: int
    months: List[YearMonth]


class ForecastPipeline:
    """Train-and-project pipeline (defaults from config.py)"""

    def __init__(self,
                 model_params: Optional[Dict] = None,
                 horizon: int = FORECAST_CONFIG['forecast_horizon'],
                 log_every: int = MODEL_CONFIG['log_every'],
                 verbose: bool = True):
        """
        Initialize pipeline

        Args:
            model_params: ForecastModel keyword arguments (default: MODEL_CONFIG)
            horizon: Number of months to forecast
            log_every: Print the training loss every N epochs
            verbose: Print progress
        """
        if model_params is None:
            model_params = {k: v for k, v in MODEL_CONFIG.items() if k != 'log_every'}

        self.model_params = dict(model_params)
        self.horizon = horizon
        self.log_every = log_every
        self.verbose = verbose

        # Artifacts of the last successful run
        self.catalog: Optional[ProductCatalog] = None
        self.scale_params: Optional[ScaleParams] = None
        self.model: Optional[ForecastModel] = None
        self.predictions: List[ForecastPoint] = []

    def _log(self, message: str = "") -> None:
        if self.verbose:
            print(message)

    def _banner(self, title: str) -> None:
        self._log("\n" + "="*60)
        self._log(title)
        self._log("="*60)

    # ========================================================================
    # STEPS
    # ========================================================================

    def step_1_validate(self, raw_records: RawRecords) -> List[SalesRecord]:
        """Step 1: Drop malformed records"""
        self._banner("STEP 1: RECORD VALIDATION")
        return RecordValidator(verbose=self.verbose).validate(raw_records)

    def step_2_encode(self, records: Sequence[SalesRecord]) -> Tuple[ProductCatalog, List[CleanRecord]]:
        """Step 2: Assign product codes in first-seen order"""
        self._banner("STEP 2: PRODUCT ENCODING")
        catalog = ProductCatalog()
        clean_records = encode_records(records, catalog)
        self._log(f"  Products: {len(catalog)} ({', '.join(catalog.descriptions)})")
        return catalog, clean_records

    def step_3_fit_scaler(self, clean_records: Sequence[CleanRecord]) -> QuantityScaler:
        """Step 3: Fit min/max scaling of quantity sold"""
        self._banner("STEP 3: QUANTITY SCALING")
        if not clean_records:
            raise EmptyTrainingSet()
        scaler = QuantityScaler().fit(r.quantity_sold for r in clean_records)
        self._log(f"  Min: {scaler.params.min_quantity:.2f}, "
                  f"Max: {scaler.params.max_quantity:.2f}, Range: {scaler.params.range:.2f}")
        return scaler

    def step_4_build_training_set(self,
                                  clean_records: Sequence[CleanRecord],
                                  scaler: QuantityScaler) -> pd.DataFrame:
        """Step 4: Build one training example per record"""
        self._banner("STEP 4: FEATURE ENGINEERING")
        train_df = FeatureBuilder(scaler).create_training_features(clean_records)
        self._log(f"  Training examples: {len(train_df)}")
        return train_df

    def _epoch_logger(self, epoch: int, loss: float) -> None:
        if (epoch + 1) % self.log_every == 0:
            print(f"    Epoch {epoch + 1}: Loss = {loss:.6f}")

    def _epoch_observer(self):
        return self._epoch_logger if self.verbose and self.log_every else None

    def step_5_fit_model(self, train_df: pd.DataFrame) -> ForecastModel:
        """Step 5: Train the neural network"""
        self._banner("STEP 5: MODEL TRAINING")
        model = ForecastModel(**self.model_params)
        model.fit(train_df, on_epoch_end=self._epoch_observer())
        self._log(f"  ✓ Trained for {model.epochs} epochs, final loss: {model.history[-1]:.6f}")
        return model

    async def step_5_fit_model_async(self, train_df: pd.DataFrame) -> ForecastModel:
        """Step 5 (async): Train the neural network in a worker thread"""
        self._banner("STEP 5: MODEL TRAINING")
        model = ForecastModel(**self.model_params)
        await model.fit_async(train_df, on_epoch_end=self._epoch_observer())
        self._log(f"  ✓ Trained for {model.epochs} epochs, final loss: {model.history[-1]:.6f}")
        return model

    def step_6_resolve_product(self, catalog: ProductCatalog, selected_product) -> int:
        """Step 6: Look up the selected product code"""
        if not isinstance(selected_product, str) or selected_product not in catalog:
            raise UnknownProduct(selected_product, available=catalog.descriptions)
        return catalog.code_for(selected_product)

    def step_7_generate_horizon(self, start_year_month) -> List[YearMonth]:
        """Step 7: Months to forecast"""
        year, month = parse_start_year_month(start_year_month)
        return generate_horizon(year, month, self.horizon)

    def step_8_predict(self,
                       model: ForecastModel,
                       scaler: QuantityScaler,
                       selected_product: str,
                       product_code: int,
                       months: Sequence[YearMonth]) -> List[ForecastPoint]:
        """Step 8: Predict, denormalize and label each horizon month"""
        self._banner("STEP 8: FORECAST GENERATION")
        future_df = FeatureBuilder.create_forecast_features(months, product_code)
        quantities = scaler.denormalize(model.predict(future_df))

        points = [
            ForecastPoint(
                label=month_label(year, month),
                product_description=selected_product,
                quantity_sold=float(quantity)
            )
            for (year, month), quantity in zip(months, quantities)
        ]

        for point in points:
            self._log(f"  {point.label}: {point.quantity_sold:.2f}")

        return points

    # ========================================================================
    # RUN
    # ========================================================================

    def _prepare(self, raw_records: RawRecords, selected_product, start_year_month) -> _PreparedRun:
        records = self.step_1_validate(raw_records)
        catalog, clean_records = self.step_2_encode(records)
        if not clean_records:
            raise EmptyTrainingSet()

        # Fail on bad selections before spending time on training
        product_code = self.step_6_resolve_product(catalog, selected_product)
        months = self.step_7_generate_horizon(start_year_month)

        scaler = self.step_3_fit_scaler(clean_records)
        train_df = self.step_4_build_training_set(clean_records, scaler)

        return _PreparedRun(
            catalog=catalog,
            scaler=scaler,
            train_df=train_df,
            product_code=product_code,
            months=months
        )

    def _finish(self, prepared: _PreparedRun, model: ForecastModel,
                selected_product: str) -> List[ForecastPoint]:
        points = self.step_8_predict(model, prepared.scaler, selected_product,
                                     prepared.product_code, prepared.months)

        self.catalog = prepared.catalog
        self.scale_params = prepared.scaler.params
        self.model = model
        self.predictions = points

        self._log("\n✓ Forecast complete")
        return points

    def run(self,
            raw_records: RawRecords,
            selected_product: str,
            start_year_month: Union[str, YearMonth]) -> List[ForecastPoint]:
        """
        Train on the raw history and forecast the selected product

        Args:
            raw_records: Ordered raw records (sales_date, product_description,
                quantity_sold)
            selected_product: Product description to forecast
            start_year_month: First forecast month, 'YYYY-MM'

        Returns:
            ForecastPoints in ascending month order

        Raises:
            EmptyTrainingSet: no valid records
            UnknownProduct: product not present in the valid records
            InvalidStartDate: start month cannot be parsed
        """
        raw_records = list(raw_records)
        prepared = self._prepare(raw_records, selected_product, start_year_month)
        model = self.step_5_fit_model(prepared.train_df)
        return self._finish(prepared, model, selected_product)

    async def run_async(self,
                        raw_records: RawRecords,
                        selected_product: str,
                        start_year_month: Union[str, YearMonth]) -> List[ForecastPoint]:
        """Same as run(), awaiting model training in a worker thread"""
        raw_records = list(raw_records)
        prepared = self._prepare(raw_records, selected_product, start_year_month)
        model = await self.step_5_fit_model_async(prepared.train_df)
        return self._finish(prepared, model, selected_product)

    def build_catalog(self, raw_records: RawRecords) -> ProductCatalog:
        """
        Product catalog for a dataset without training anything

        Args:
            raw_records: Ordered raw records

        Returns:
            Fresh ProductCatalog
        """
        records = RecordValidator(verbose=False).validate(raw_records)
        catalog = ProductCatalog()
        encode_records(records, catalog)
        return catalog


def earliest_start_month(raw_records: RawRecords, product: str) -> Optional[str]:
    """
    Earliest month with sales of a product, as 'YYYY-MM'

    Args:
        raw_records: Ordered raw records
        product: Product description

    Returns:
        'YYYY-MM', or None if the product has no valid records
    """
    records = RecordValidator(verbose=False).validate(raw_records)
    months = [(r.year, r.month) for r in records if r.product_description == product]
    if not months:
        return None
    return format_year_month(*min(months))


def forecast_to_frame(points: Sequence[ForecastPoint]) -> pd.DataFrame:
    """ForecastPoints as a DataFrame (label, product_description, quantity_sold)"""
    return pd.DataFrame(
        [p.to_dict() for p in points],
        columns=['label', 'product_description', 'quantity_sold']
    )
