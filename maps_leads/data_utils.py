"""
Utilities for exporting and summarising place results.
"""
import io
import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Tuple, Union

import pandas as pd

from .config import EXPORT_SHEET_NAME

EXPORT_COLUMNS = ['Name', 'Address', 'Phone', 'Website', 'Rating', 'Total Reviews']

FILENAME_UNSAFE_PATTERN = re.compile(r'[^A-Za-z0-9_-]')


def results_to_rows(results: list) -> list:
    """
    Map place results to the fixed export schema.

    Missing text fields and ratings become "N/A", a missing review count
    becomes "0".

    Args:
        results: List of place dictionaries (detail records or summaries)

    Returns:
        List of row dictionaries keyed by EXPORT_COLUMNS
    """
    return [
        {
            'Name': place.get('name') or 'N/A',
            'Address': place.get('formatted_address') or 'N/A',
            'Phone': place.get('formatted_phone_number') or 'N/A',
            'Website': place.get('website') or 'N/A',
            'Rating': place.get('rating') or 'N/A',
            'Total Reviews': place.get('user_ratings_total') or '0',
        }
        for place in results
    ]


def results_to_dataframe(results: list) -> pd.DataFrame:
    """Convert place results to a DataFrame with the export columns."""
    return pd.DataFrame(results_to_rows(results), columns=EXPORT_COLUMNS)


def export_to_excel(
    df: pd.DataFrame,
    filepath: Union[str, Path] = None,
    sheet_name: str = EXPORT_SHEET_NAME
) -> Optional[bytes]:
    """
    Export DataFrame to an Excel workbook.

    Args:
        df: DataFrame to export
        filepath: Output file path. When omitted the workbook is returned as bytes.
        sheet_name: Name of the single worksheet

    Returns:
        Workbook bytes if no filepath was given, otherwise None
    """
    target = filepath if filepath is not None else io.BytesIO()

    with pd.ExcelWriter(target, engine='xlsxwriter') as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)

        # Auto-adjust column widths
        worksheet = writer.sheets[sheet_name]
        for idx, col in enumerate(df.columns):
            values_len = df[col].astype(str).map(len).max() if not df.empty else 0
            max_len = max(values_len, len(col)) + 2
            worksheet.set_column(idx, idx, min(max_len, 50))

    if filepath is None:
        return target.getvalue()
    return None


def sanitize_query(query: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""
    return FILENAME_UNSAFE_PATTERN.sub('_', query or '')


def build_export_filename(query: str, today: Optional[date] = None) -> str:
    """
    Derive the download filename for a query.

    Args:
        query: The search text
        today: Date to stamp (defaults to the current UTC date)

    Returns:
        Filename like ``leads_Restaurant_in_Karachi_2024-05-01.xlsx``
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    return f"leads_{sanitize_query(query)}_{today.isoformat()}.xlsx"


def export_results(results: list, query: str) -> Tuple[bytes, str]:
    """
    Serialize results to an Excel workbook.

    Returns:
        Tuple of (workbook bytes, filename)
    """
    df = results_to_dataframe(results)
    return export_to_excel(df), build_export_filename(query)


def get_summary_stats(results: list) -> dict:
    """
    Get summary statistics for a list of place results.

    Args:
        results: List of place dictionaries

    Returns:
        Dictionary of summary statistics
    """
    if not results:
        return {
            'total_places': 0,
            'with_phone': 0,
            'with_website': 0,
            'avg_rating': 'N/A'
        }

    ratings = pd.to_numeric(
        pd.Series([place.get('rating') for place in results], dtype=object),
        errors='coerce'
    )

    return {
        'total_places': len(results),
        'with_phone': sum(1 for place in results if place.get('formatted_phone_number')),
        'with_website': sum(1 for place in results if place.get('website')),
        'avg_rating': round(ratings.mean(), 2) if not ratings.isna().all() else 'N/A'
    }
