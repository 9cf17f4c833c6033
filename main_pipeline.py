"""
Main Forecasting Pipeline

End-to-end run of the purchase forecast:
1. Generate/Load sales history
2. Build product catalog, pick product and start month
3. Validate, encode, scale, train and forecast
4. Save forecast and visualizations
"""

import os
from datetime import datetime
from typing import Dict

import pandas as pd

# Import configuration
from config import DATA_CONFIG, FORECAST_CONFIG, OUTPUT_CONFIG

# Import custom modules
from purchase_forecast.data_generator import generate_and_save_data
from purchase_forecast.ingestion import load_sales_csv, records_from_frame
from purchase_forecast.pipeline import ForecastPipeline, earliest_start_month, forecast_to_frame
from purchase_forecast.visualization import create_all_visualizations


def load_raw_records():
    """Generate synthetic data or load the configured CSV"""
    print("\n" + "="*80)
    print("DATA LOADING/GENERATION")
    print("="*80)

    if DATA_CONFIG['generate_new_data']:
        df = generate_and_save_data(
            output_path=f"{OUTPUT_CONFIG['data_dir']}/sales_history.csv",
            start_date=DATA_CONFIG['start_date'],
            n_months=DATA_CONFIG['n_months'],
            products=DATA_CONFIG['products'],
            malformed_fraction=DATA_CONFIG['malformed_fraction'],
            seed=DATA_CONFIG['seed']
        )
        return records_from_frame(df)

    return load_sales_csv(DATA_CONFIG['data_path'])


def main() -> Dict:
    """Main entry point - all configuration is in config.py"""
    output_dir = OUTPUT_CONFIG['output_dir']
    os.makedirs(f"{output_dir}/forecasts", exist_ok=True)
    os.makedirs(f"{output_dir}/plots", exist_ok=True)

    print("\n" + "="*80)
    print("PRODUCT-LEVEL MONTHLY PURCHASE FORECAST")
    print("="*80)
    print(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    raw_records = load_raw_records()

    pipeline = ForecastPipeline()
    catalog = pipeline.build_catalog(raw_records)
    if len(catalog) == 0:
        raise SystemExit("No valid sales records found - nothing to forecast")

    selected_product = FORECAST_CONFIG['selected_product'] or catalog.descriptions[0]
    start_year_month = (FORECAST_CONFIG['start_year_month']
                        or earliest_start_month(raw_records, selected_product))

    print(f"\nProducts available: {', '.join(catalog.descriptions)}")
    print(f"Forecasting '{selected_product}' from {start_year_month}")

    points = pipeline.run(raw_records, selected_product, start_year_month)

    forecast_df: pd.DataFrame = forecast_to_frame(points)
    forecast_path = f"{output_dir}/forecasts/forecast_results.csv"
    forecast_df.to_csv(forecast_path, index=False)
    print(f"\n  Forecast saved to: {forecast_path}")

    create_all_visualizations(points, pipeline.model.history, output_dir=f"{output_dir}/plots")

    print("\n" + "="*80)
    print("SUCCESS! Forecast pipeline executed.")
    print("="*80)
    print(forecast_df.to_string(index=False))
    print(f"\nEnd time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("="*80 + "\n")

    return {
        'forecast': forecast_df,
        'catalog': catalog,
        'model': pipeline.model,
        'scale_params': pipeline.scale_params
    }


if __name__ == "__main__":
    main()
