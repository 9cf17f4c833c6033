"""
CSV Ingestion Module

Reads a header-row sales CSV into raw records:
- sales_date / product_description kept as text
- quantity_sold typed by pandas (numbers stay numbers, junk stays text)
- unreadable lines and blank lines skipped instead of aborting the load
"""

from typing import Any, Dict, List

import pandas as pd


REQUIRED_COLUMNS = ['sales_date', 'product_description', 'quantity_sold']


def records_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert a sales DataFrame to raw record dicts

    Args:
        df: DataFrame with REQUIRED_COLUMNS

    Returns:
        One dict per row, in row order; missing cells become None
    """
    missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Sales data is missing required columns: {missing_cols}")

    subset = df[REQUIRED_COLUMNS].astype(object)
    subset = subset.where(pd.notna(subset), None)

    return subset.to_dict(orient='records')


def load_sales_csv(path: str, verbose: bool = True) -> List[Dict[str, Any]]:
    """
    Load raw sales records from CSV

    Args:
        path: CSV file with a header row
        verbose: Print a load summary

    Returns:
        Raw records in file order
    """
    df = pd.read_csv(
        path,
        dtype={'sales_date': str, 'product_description': str},
        skip_blank_lines=True,
        on_bad_lines='skip'
    )
    records = records_from_frame(df)

    if verbose:
        print(f"Loaded {len(records):,} sales records from: {path}")

    return records
