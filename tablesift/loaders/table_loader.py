"""Table loader: reads CSV and Excel files into a Dataset via pandas."""

import csv
import logging
import re
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from tablesift.core.constants import FILE_EXTENSION_MAP, MAX_DATA_FILE_SIZE, SUPPORTED_FILE_FORMATS
from tablesift.core.dataset import Dataset, is_blank
from tablesift.core.exceptions import DataLoadError, UnsupportedFormatError

logger = logging.getLogger(__name__)

ENCODINGS = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

# pandas names columns with an empty header cell "Unnamed: <position>"
PLACEHOLDER_HEADER = re.compile(r"^Unnamed: \d+$")


def detect_delimiter(file_path: Union[str, Path], sample_size: int = 8192) -> str:
    """
    Auto-detect the delimiter used in a CSV file.

    Args:
        file_path: Path to the CSV file
        sample_size: Number of bytes to sample for detection

    Returns:
        Detected delimiter character, defaults to ',' if detection fails
    """
    for encoding in ENCODINGS:
        try:
            with open(file_path, 'r', newline='', encoding=encoding) as f:
                sample = f.read(sample_size)
            dialect = csv.Sniffer().sniff(sample, delimiters=',\t|;')
            return dialect.delimiter
        except UnicodeDecodeError:
            continue
        except csv.Error:
            break

    return ','


def detect_encoding(file_path: Union[str, Path]) -> str:
    """
    Detect the encoding of a file by trying common encodings.

    Returns:
        Detected encoding name, defaults to 'utf-8'
    """
    for encoding in ENCODINGS:
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'


def detect_format(file_path: Union[str, Path]) -> str:
    """
    Map a file extension to a loader format.

    Raises:
        UnsupportedFormatError: Extension is not one of FILE_EXTENSION_MAP
    """
    suffix = Path(file_path).suffix.lower()
    file_format = FILE_EXTENSION_MAP.get(suffix)
    if file_format is None:
        raise UnsupportedFormatError(
            file_path=str(file_path),
            format=suffix or "<none>",
            supported_formats=SUPPORTED_FILE_FORMATS
        )
    return file_format


def _read_csv(path: Path, delimiter: Optional[str], encoding: Optional[str]) -> pd.DataFrame:
    delimiter = delimiter or detect_delimiter(path)
    if delimiter != ',':
        logger.info(f"Auto-detected delimiter: {repr(delimiter)}")
    encoding = encoding or detect_encoding(path)
    if encoding != 'utf-8':
        logger.info(f"Auto-detected encoding: {encoding}")

    try:
        return pd.read_csv(
            path,
            delimiter=delimiter,
            encoding=encoding,
            low_memory=False,
            on_bad_lines='warn',
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Empty CSV file: {path}")
        return pd.DataFrame()
    except pd.errors.ParserError as e:
        error_msg = str(e)
        if "Expected" in error_msg and "fields" in error_msg:
            raise DataLoadError(
                f"Row has inconsistent number of columns (delimiter {repr(delimiter)}). "
                f"Check the file for unquoted delimiters in data fields",
                file_path=str(path),
                original_exception=e
            ) from e
        raise DataLoadError(f"CSV parsing error: {error_msg}", file_path=str(path), original_exception=e) from e
    except UnicodeDecodeError as e:
        raise DataLoadError(
            f"Cannot decode file with {encoding} encoding",
            file_path=str(path),
            original_exception=e
        ) from e


def _read_excel(path: Path, sheet_name) -> pd.DataFrame:
    try:
        return pd.read_excel(path, sheet_name=sheet_name)
    except ValueError as e:
        raise DataLoadError(f"Excel parsing error: {e}", file_path=str(path), original_exception=e) from e


def _drop_blank_headers(df: pd.DataFrame) -> pd.DataFrame:
    keep = [
        c for c in df.columns
        if str(c).strip() and not PLACEHOLDER_HEADER.match(str(c))
    ]
    dropped = len(df.columns) - len(keep)
    if dropped:
        logger.info(f"Dropped {dropped} column(s) without a header")
    return df[keep]


def _drop_empty_rows(dataset: Dataset) -> Dataset:
    rows = [
        row for row in dataset.rows
        if not all(is_blank(row.get(h)) for h in dataset.headers)
    ]
    if len(rows) < dataset.row_count:
        logger.info(f"Dropped {dataset.row_count - len(rows)} empty row(s)")
        return dataset.with_rows(rows)
    return dataset


def load_dataset(
    file_path: Union[str, Path],
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
    sheet_name: Union[int, str] = 0,
    max_file_size: int = MAX_DATA_FILE_SIZE
) -> Dataset:
    """
    Load a CSV or Excel file into a Dataset.

    The first row is the header. Columns with a blank header and rows whose
    cells are all blank are dropped. Empty cells become None and the file
    name becomes the dataset name.

    Args:
        file_path: Path to a .csv, .txt, .xlsx or .xls file
        delimiter: CSV delimiter (auto-detected when None)
        encoding: CSV encoding (auto-detected when None)
        sheet_name: Excel sheet index or name
        max_file_size: Largest accepted file size in bytes

    Returns:
        Dataset

    Raises:
        UnsupportedFormatError: Unknown file extension
        DataLoadError: File missing, too large or unreadable
    """
    path = Path(file_path)
    file_format = detect_format(path)

    if not path.is_file():
        raise DataLoadError("File not found", file_path=str(path))

    file_size = path.stat().st_size
    if file_size > max_file_size:
        raise DataLoadError(
            f"File too large: {file_size / 1024 / 1024:.1f}MB exceeds the "
            f"{max_file_size / 1024 / 1024:.0f}MB limit",
            file_path=str(path)
        )

    logger.debug(f"Loading {file_format} file: {path}")
    try:
        if file_format == "csv":
            df = _read_csv(path, delimiter, encoding)
        else:
            df = _read_excel(path, sheet_name)
    except OSError as e:
        raise DataLoadError(f"Cannot read file: {e}", file_path=str(path), original_exception=e) from e

    dataset = _drop_empty_rows(Dataset.from_dataframe(_drop_blank_headers(df), name=path.name))
    logger.info(f"Loaded {dataset.row_count} rows x {dataset.column_count} columns from {path.name}")
    return dataset
