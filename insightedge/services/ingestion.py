"""
File Ingestion Service

Turns uploaded CSV and Excel files into a TabularDataset for the analysis
engine.

Cell rules:
- CSV cells are read as text, verbatim ("$1,250.00" stays a string; the
  row cleaner normalizes it later)
- Blank cells and NaN become Empty (None)
- Excel numbers become Python int/float, timestamps ISO-8601 strings
- Anything else is stringified

Duplicate header names are de-duplicated by pandas ("amount", "amount.1").
"""

from datetime import date, datetime
from typing import Any, BinaryIO, Dict, List, Union
import io
import logging
import os
import zipfile

import numpy as np
import pandas as pd

from insightedge.core.config import get_settings
from insightedge.core.exceptions import IngestionError
from insightedge.models import CellValue, TabularDataset

# Configure module logger
logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

CSV_EXTENSIONS = ('.csv', '.txt')
EXCEL_EXTENSIONS = ('.xlsx', '.xlsm')

FileInput = Union[bytes, str, BinaryIO]


# =============================================================================
# CELL CONVERSION
# =============================================================================

def to_cell_value(value: Any) -> CellValue:
    """
    Convert a pandas/numpy cell into the closed CellValue set.

    Example:
        >>> to_cell_value(np.int64(3))
        3
        >>> to_cell_value(float('nan')) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value))
    if isinstance(value, (pd.Timestamp, datetime)):
        return None if pd.isna(value) else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return None if np.isnan(value) else float(value)
    if pd.isna(value):
        return None
    return str(value)


def dataframe_to_dataset(df: pd.DataFrame) -> TabularDataset:
    """
    Convert a DataFrame into a TabularDataset.

    Every row carries every header; blank cells are None.

    Raises:
        IngestionError: If the headers are not unique once stripped
    """
    headers = [str(column).strip() for column in df.columns]
    rows: List[Dict[str, CellValue]] = [
        {header: to_cell_value(value) for header, value in zip(headers, record)}
        for record in df.itertuples(index=False, name=None)
    ]
    try:
        return TabularDataset(headers=headers, rows=rows)
    except ValueError as e:
        raise IngestionError("File headers must be unique") from e


def _as_buffer(file: FileInput) -> io.BytesIO:
    if hasattr(file, 'read'):
        content = file.read()
    else:
        content = file
    if isinstance(content, str):
        content = content.encode('utf-8')
    return io.BytesIO(content)


def _check_size(df: pd.DataFrame, source: str) -> None:
    if df.empty:
        raise IngestionError(f"{source} file is empty or contains no data rows")

    limit = get_settings().max_upload_rows
    if len(df) > limit:
        raise IngestionError(
            f"{source} file has {len(df):,} rows; the limit is {limit:,}"
        )


# =============================================================================
# INGESTION FUNCTIONS
# =============================================================================

def ingest_csv(file: FileInput) -> TabularDataset:
    """
    Parse a CSV upload into a TabularDataset.

    Args:
        file: Raw bytes, text, or a binary file object

    Returns:
        TabularDataset with verbatim text cells

    Raises:
        IngestionError: If the file cannot be parsed, is empty, or exceeds
            max_upload_rows
    """
    try:
        df = pd.read_csv(
            _as_buffer(file),
            dtype=str,
            keep_default_na=False,
            na_values=[''],
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Failed to parse CSV file: {e}")
        raise IngestionError("Failed to parse CSV file") from e

    _check_size(df, 'CSV')
    logger.info(f"Parsed CSV with {len(df)} rows and {len(df.columns)} columns")
    return dataframe_to_dataset(df)


def ingest_excel(file: FileInput) -> TabularDataset:
    """
    Parse the first sheet of an Excel workbook into a TabularDataset.

    Raises:
        IngestionError: If the workbook cannot be read, is empty, or exceeds
            max_upload_rows
    """
    try:
        df = pd.read_excel(_as_buffer(file), sheet_name=0, dtype=object)
    except (ValueError, OSError, KeyError, zipfile.BadZipFile) as e:
        logger.warning(f"Failed to parse Excel file: {e}")
        raise IngestionError("Failed to parse Excel file") from e

    _check_size(df, 'Excel')
    logger.info(f"Parsed Excel sheet with {len(df)} rows and {len(df.columns)} columns")
    return dataframe_to_dataset(df)


def ingest_file(filename: str, content: FileInput) -> TabularDataset:
    """
    Dispatch an upload to the CSV or Excel reader by file extension.

    Raises:
        IngestionError: For unsupported extensions or unreadable content
    """
    extension = os.path.splitext(filename or '')[1].lower()
    if extension in CSV_EXTENSIONS:
        return ingest_csv(content)
    if extension in EXCEL_EXTENSIONS:
        return ingest_excel(content)
    raise IngestionError(
        f"Unsupported file type '{extension or filename}'. Upload a CSV or Excel file."
    )
