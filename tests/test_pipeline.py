"""
Tests for the end-to-end forecast pipeline.
"""
import asyncio
import copy
import math

import pytest

from purchase_forecast.errors import EmptyTrainingSet, InvalidStartDate, UnknownProduct
from purchase_forecast.pipeline import (ForecastPipeline, ForecastPoint, earliest_start_month,
                                        forecast_to_frame)

from conftest import make_raw_records


class TestEndToEnd:
    """Full runs."""

    def test_widget_scenario(self, quiet_pipeline, widget_records):
        """Three months of Widget history give six labelled, finite forecasts."""
        points = quiet_pipeline.run(widget_records, "Widget", "2023-04")

        assert [p.label for p in points] == [
            "April 2023", "May 2023", "June 2023",
            "July 2023", "August 2023", "September 2023",
        ]
        assert all(p.product_description == "Widget" for p in points)
        assert all(math.isfinite(p.quantity_sold) for p in points)

    def test_rolls_into_next_year(self, quiet_pipeline, two_year_records):
        points = quiet_pipeline.run(two_year_records, "Gadget", "2022-11")

        assert [p.label for p in points] == [
            "November 2022", "December 2022", "January 2023",
            "February 2023", "March 2023", "April 2023",
        ]

    def test_deterministic(self, widget_records, fast_model_params):
        first = ForecastPipeline(model_params=fast_model_params, verbose=False)
        second = ForecastPipeline(model_params=fast_model_params, verbose=False)

        assert first.run(widget_records, "Widget", "2023-04") == second.run(widget_records, "Widget", "2023-04")

    def test_inputs_not_mutated(self, quiet_pipeline, widget_records):
        before = copy.deepcopy(widget_records)
        quiet_pipeline.run(widget_records, "Widget", "2023-04")

        assert widget_records == before

    def test_accepts_generator_input(self, fast_model_params, widget_records):
        pipeline = ForecastPipeline(model_params=fast_model_params, verbose=False)
        points = pipeline.run((r for r in widget_records), "Widget", (2023, 4))

        assert len(points) == 6

    def test_malformed_rows_skipped(self, fast_model_params, widget_records):
        raw = widget_records + make_raw_records([(None, "Widget", 5), ("4/1/2023", "Gadget", "?")])
        pipeline = ForecastPipeline(model_params=fast_model_params, verbose=False)
        pipeline.run(raw, "Widget", "2023-04")

        assert pipeline.catalog.descriptions == ("Widget",)

    def test_artifacts_published(self, fast_model_params, two_year_records):
        pipeline = ForecastPipeline(model_params=fast_model_params, verbose=False)
        points = pipeline.run(two_year_records, "Gadget", "2023-01")

        assert pipeline.catalog.descriptions == ("Widget", "Gadget")
        assert pipeline.scale_params.min_quantity == 42.0
        assert pipeline.scale_params.max_quantity == 97.0
        assert pipeline.model.is_fitted
        assert pipeline.predictions == points

    def test_custom_horizon(self, fast_model_params, widget_records):
        pipeline = ForecastPipeline(model_params=fast_model_params, horizon=3, verbose=False)
        assert len(pipeline.run(widget_records, "Widget", "2023-04")) == 3

    def test_progress_output(self, widget_records, fast_model_params, capsys):
        pipeline = ForecastPipeline(model_params=fast_model_params, log_every=1)
        pipeline.run(widget_records, "Widget", "2023-04")

        out = capsys.readouterr().out
        assert "STEP 1: RECORD VALIDATION" in out
        assert "Epoch 5: Loss =" in out
        assert "April 2023:" in out
        assert "✓ Forecast complete" in out


class TestFailures:
    """All-or-nothing failures."""

    def test_unknown_product(self, quiet_pipeline, widget_records):
        with pytest.raises(UnknownProduct) as exc_info:
            quiet_pipeline.run(widget_records, "Sprocket", "2023-04")

        assert exc_info.value.available == ("Widget",)
        assert quiet_pipeline.catalog is None
        assert quiet_pipeline.predictions == []

    @pytest.mark.parametrize("product", [None, "", ["Widget"], 7])
    def test_missing_product(self, quiet_pipeline, widget_records, product):
        with pytest.raises(UnknownProduct):
            quiet_pipeline.run(widget_records, product, "2023-04")

    def test_empty_training_set(self, quiet_pipeline):
        raw = make_raw_records([(None, "Widget", 1), ("1/1/2023", "Widget", "n/a")])

        with pytest.raises(EmptyTrainingSet):
            quiet_pipeline.run(raw, "Widget", "2023-04")

    def test_no_records(self, quiet_pipeline):
        with pytest.raises(EmptyTrainingSet):
            quiet_pipeline.run([], "Widget", "2023-04")

    def test_invalid_start_date(self, quiet_pipeline, widget_records):
        with pytest.raises(InvalidStartDate):
            quiet_pipeline.run(widget_records, "Widget", "April 2023")

    def test_failed_run_keeps_previous_results(self, fast_model_params, widget_records):
        pipeline = ForecastPipeline(model_params=fast_model_params, verbose=False)
        points = pipeline.run(widget_records, "Widget", "2023-04")
        catalog, model = pipeline.catalog, pipeline.model

        other = make_raw_records([("1/1/2023", "Gadget", 4)])
        with pytest.raises(UnknownProduct):
            pipeline.run(other, "Widget", "2023-04")

        assert pipeline.catalog is catalog
        assert pipeline.model is model
        assert pipeline.predictions == points


class TestAsyncRun:
    """run_async mirrors run()."""

    def test_same_result_as_run(self, fast_model_params, widget_records):
        sync_points = ForecastPipeline(model_params=fast_model_params, verbose=False).run(
            widget_records, "Widget", "2023-04")
        async_points = asyncio.run(ForecastPipeline(model_params=fast_model_params, verbose=False).run_async(
            widget_records, "Widget", "2023-04"))

        assert async_points == sync_points

    def test_cancelled_run_leaves_state(self, fast_model_params, widget_records):
        """Abandoning a pending run does not publish anything."""
        pipeline = ForecastPipeline(model_params=fast_model_params, verbose=False)
        pipeline.run(widget_records, "Widget", "2023-04")
        catalog = pipeline.catalog

        replacement = make_raw_records([("1/1/2023", "Gadget", 4), ("2/1/2023", "Widget", 9)])

        async def abandon():
            task = asyncio.ensure_future(pipeline.run_async(replacement, "Gadget", "2023-04"))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(abandon())

        assert pipeline.catalog is catalog

    def test_async_failure(self, quiet_pipeline, widget_records):
        with pytest.raises(UnknownProduct):
            asyncio.run(quiet_pipeline.run_async(widget_records, "Sprocket", "2023-04"))


class TestHelpers:
    """Catalog, default start month and output frame."""

    def test_build_catalog(self, quiet_pipeline, two_year_records):
        catalog = quiet_pipeline.build_catalog(two_year_records)

        assert catalog.descriptions == ("Widget", "Gadget")
        assert quiet_pipeline.catalog is None

    def test_earliest_start_month(self):
        raw = make_raw_records([
            ("5/3/2023", "Widget", 1),
            ("11/20/2022", "Widget", 1),
            ("1/1/2021", "Gadget", 1),
            (None, "Widget", 1),
        ])

        assert earliest_start_month(raw, "Widget") == "2022-11"
        assert earliest_start_month(raw, "Gadget") == "2021-01"
        assert earliest_start_month(raw, "Sprocket") is None

    def test_forecast_to_frame(self):
        points = [ForecastPoint("April 2023", "Widget", 12.5), ForecastPoint("May 2023", "Widget", 13.0)]
        df = forecast_to_frame(points)

        assert list(df.columns) == ['label', 'product_description', 'quantity_sold']
        assert df['quantity_sold'].tolist() == [12.5, 13.0]

    def test_empty_forecast_frame(self):
        assert list(forecast_to_frame([]).columns) == ['label', 'product_description', 'quantity_sold']
