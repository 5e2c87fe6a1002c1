"""
Shared helpers for reading planning spreadsheets.
"""

from pathlib import Path
from typing import Optional

import pandas as pd


def read_table(filepath: str, sheet_name=0) -> pd.DataFrame:
    """
    Read an Excel or CSV file into a DataFrame.

    Column names are stripped so 'Cards ' and 'Cards' match.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix == '.csv':
        df = pd.read_csv(filepath)
    else:
        df = pd.read_excel(filepath, sheet_name=sheet_name)
    df.columns = [str(c).strip() for c in df.columns]
    return df


def clean_id(value) -> Optional[str]:
    """Normalize an identifier cell (drops the .0 suffix from float conversion)."""
    if value is None or pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or None


def clean_int(value) -> Optional[int]:
    """Integer cell value, or None when blank or not numeric."""
    if value is None or pd.isna(value):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def first_present(row, *columns):
    """Value of the first column present and non-blank in the row."""
    for column in columns:
        if column in row and pd.notna(row[column]):
            return row[column]
    return None
