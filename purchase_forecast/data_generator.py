"""
Synthetic Data Generator

Generates a monthly product sales history in the upload format:
- sales_date (M/D/YYYY), product_description, quantity_sold
- Annual seasonality per product plus noise
- Optional malformed rows to exercise validation
"""

import os
from typing import List

import numpy as np
import pandas as pd


class SyntheticSalesGenerator:
    """Generate synthetic monthly sales per product"""

    def __init__(self,
                 start_date: str = "2021-01-01",
                 n_months: int = 36,
                 products: List[str] = None,
                 malformed_fraction: float = 0.0,
                 seed: int = 42):
        """
        Initialize data generator

        Args:
            start_date: First month of history
            n_months: Number of months to generate
            products: Product descriptions
            malformed_fraction: Share of rows to corrupt (0-1)
            seed: Random seed for reproducibility
        """
        self.start_date = pd.to_datetime(start_date)
        self.n_months = n_months
        self.products = products or ["Widget", "Gadget", "Gizmo"]
        self.malformed_fraction = malformed_fraction
        self.seed = seed

        self.rng = np.random.RandomState(seed)
        self.months = pd.date_range(start=self.start_date, periods=n_months, freq='MS')

    def _product_profile(self, index: int) -> dict:
        """Base level, seasonal amplitude and peak month for a product"""
        return {
            'base_level': self.rng.uniform(50, 200),
            'amplitude': self.rng.uniform(0.1, 0.5),
            'peak_month': (index * 4) % 12 + 1
        }

    def generate(self) -> pd.DataFrame:
        """
        Generate the sales history

        Returns:
            DataFrame with sales_date, product_description, quantity_sold
        """
        print(f"  Generating {self.n_months} months for {len(self.products)} products...")

        records = []
        for index, product in enumerate(self.products):
            profile = self._product_profile(index)

            for month_start in self.months:
                angle = 2 * np.pi * (month_start.month - profile['peak_month']) / 12
                seasonal = 1 + profile['amplitude'] * np.cos(angle)
                noise = self.rng.normal(1.0, 0.08)
                quantity = max(0, int(round(profile['base_level'] * seasonal * noise)))

                day = self.rng.randint(1, 29)
                records.append({
                    'sales_date': f"{month_start.month}/{day}/{month_start.year}",
                    'product_description': product,
                    'quantity_sold': quantity
                })

        df = pd.DataFrame(records)

        if self.malformed_fraction > 0:
            df = self._inject_malformed(df)

        print(f"  Generated {len(df):,} sales records")
        print(f"  Date range: {self.months[0].strftime('%Y-%m')} to {self.months[-1].strftime('%Y-%m')}")

        return df

    def _inject_malformed(self, df: pd.DataFrame) -> pd.DataFrame:
        """Blank out dates or quantities on a random subset of rows"""
        df = df.astype({'quantity_sold': object})
        n_bad = int(round(len(df) * self.malformed_fraction))
        bad_rows = self.rng.choice(len(df), size=n_bad, replace=False)

        for i, row in enumerate(sorted(bad_rows)):
            if i % 2 == 0:
                df.loc[row, 'sales_date'] = None
            else:
                df.loc[row, 'quantity_sold'] = 'n/a'

        print(f"  Injected {n_bad} malformed rows")
        return df


def generate_and_save_data(output_path: str = "data/sales_history.csv",
                           **kwargs) -> pd.DataFrame:
    """
    Generate synthetic sales history and save to CSV

    Args:
        output_path: CSV path
        **kwargs: Arguments for SyntheticSalesGenerator

    Returns:
        Generated DataFrame
    """
    print("="*60)
    print("GENERATING SYNTHETIC DATA")
    print("="*60)

    generator = SyntheticSalesGenerator(**kwargs)
    df = generator.generate()

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    df.to_csv(output_path, index=False)

    print(f"\n  Sales data saved to: {output_path}")

    return df
