"""
Dataset model and cell coercion helpers.

A Dataset is an ordered sequence of rows (column name -> scalar) plus an
ordered, unique header list. Cells are dynamically typed: strings, numbers,
booleans, dates or nulls. The helpers in this module give every other
component a single, consistent view of those cells:

    is_missing   - None, NaN/NaT or the empty string
    is_blank     - is_missing, or a whitespace-only string (null counting)
    is_truthy    - loose truthiness (0, False and missing cells are falsy)
    to_number    - numeric coercion, None when the value is not numeric
    to_text      - canonical text form of a cell
    parse_date   - lenient date parsing, None when the value is not a date

Datasets are never mutated by the engine; every transform builds a new one.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from dateutil import parser as date_parser

from tablesift.core.exceptions import DatasetShapeError, ColumnNotFoundError

logger = logging.getLogger(__name__)

_NUMERIC_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
_HEX_PATTERN = re.compile(r'^0[xX][0-9a-fA-F]+$')

# Shapes that are worth handing to the lenient date parser
_DATE_SHAPE_PATTERN = re.compile(r'^\d{1,4}[/.\-]\d{1,2}[/.\-]\d{1,4}')
_MONTH_NAME_PATTERN = re.compile(
    r'\b(jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\b',
    re.IGNORECASE
)


def convert_numpy_types(obj):
    """
    Recursively convert numpy/pandas scalars to Python native types.

    Args:
        obj: Any object that might contain numpy types

    Returns:
        Object with numpy types converted to Python types
    """
    if isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        value = float(obj)
        return None if math.isnan(value) else value
    elif obj is pd.NaT or obj is pd.NA:
        return None
    elif isinstance(obj, pd.Timestamp):
        return obj.to_pydatetime()
    elif isinstance(obj, float) and math.isnan(obj):
        return None
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(convert_numpy_types(item) for item in obj)
    else:
        return obj


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and the empty string."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_blank(value: Any) -> bool:
    """True for missing cells and whitespace-only strings."""
    if isinstance(value, str):
        return value.strip() == ""
    return is_missing(value)


def is_truthy(value: Any) -> bool:
    """
    Loose truthiness used by the cross-field and custom-rule checks.

    Missing cells, False and numeric zero are falsy; every non-empty
    string (including "0" and " ") is truthy.
    """
    if is_missing(value):
        return False
    if isinstance(value, str):
        return True
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return value != 0
    return True


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a cell to a float.

    Booleans count as 1/0, numeric strings are parsed after trimming,
    hexadecimal and Infinity literals are accepted. Returns None for
    anything that is not numeric (including missing cells and dates).
    """
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        return None if math.isnan(number) else number
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if _NUMERIC_PATTERN.match(text):
            return float(text)
        if _HEX_PATTERN.match(text):
            return float(int(text, 16))
        if text in ("Infinity", "+Infinity"):
            return math.inf
        if text == "-Infinity":
            return -math.inf
    return None


def normalize_number(number: float) -> Any:
    """Return an int for integral finite floats, the float otherwise."""
    if isinstance(number, float) and math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def to_text(value: Any) -> str:
    """
    Canonical text form of a cell.

    Missing cells become "", booleans "true"/"false", integral floats drop
    their fractional part ("30" rather than "30.0") and dates use ISO format.
    """
    if is_missing(value):
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)):
        return str(normalize_number(float(value)))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Leniently parse a cell as a date.

    Accepts datetime/date objects, epoch milliseconds for plain numbers and
    strings that dateutil can read. Timezone-aware values are converted to
    naive UTC. Returns None when the value cannot be read as a date.
    """
    if is_missing(value) or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, datetime):
        return _to_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float, np.integer, np.floating)):
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None
    if not (_DATE_SHAPE_PATTERN.match(text) or _MONTH_NAME_PATTERN.search(text) or 'T' in text[:11]):
        return None
    try:
        return _to_naive(date_parser.parse(text))
    except (ValueError, OverflowError, TypeError):
        return None


def _to_naive(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


@dataclass(frozen=True)
class Dataset:
    """
    Immutable tabular dataset.

    Attributes:
        headers: Ordered, unique column names
        rows: Ordered rows; each row maps every header to a scalar
        name: Optional display name (file name)

    Example:
        >>> ds = Dataset.from_records([{"age": 30}, {"age": None}])
        >>> ds.headers
        ('age',)
        >>> ds.column("age")
        [30, None]
    """
    headers: Tuple[str, ...]
    rows: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    name: Optional[str] = None

    def __post_init__(self):
        headers = tuple(str(h) for h in self.headers)
        if len(set(headers)) != len(headers):
            duplicates = sorted({h for h in headers if headers.count(h) > 1})
            raise DatasetShapeError(
                f"Column names must be unique, duplicated: {', '.join(duplicates)}",
                reason="duplicate_headers"
            )
        rows = tuple({h: row.get(h) for h in headers} for row in self.rows)
        object.__setattr__(self, 'headers', headers)
        object.__setattr__(self, 'rows', rows)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Dict[str, Any]],
        headers: Optional[Sequence[str]] = None,
        name: Optional[str] = None
    ) -> "Dataset":
        """
        Build a dataset from row dictionaries.

        Args:
            records: Row dictionaries
            headers: Column order; defaults to first-seen key order across rows
            name: Optional dataset name

        Returns:
            Dataset instance
        """
        records = [convert_numpy_types(dict(r)) for r in records]
        if headers is None:
            seen: Dict[str, None] = {}
            for record in records:
                for key in record:
                    seen.setdefault(key, None)
            headers = list(seen)
        return cls(headers=tuple(headers), rows=tuple(records), name=name)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, name: Optional[str] = None) -> "Dataset":
        """
        Build a dataset from a pandas DataFrame.

        NaN/NaT cells become None and numpy scalars become Python natives.
        """
        headers = [str(c) for c in df.columns]
        frame = df.copy()
        frame.columns = headers
        records = frame.astype(object).to_dict(orient="records")
        return cls.from_records(records, headers=headers, name=name)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame (object columns keep the cell values as-is)."""
        return pd.DataFrame(list(self.rows), columns=list(self.headers))

    def to_records(self) -> List[Dict[str, Any]]:
        """Return a list of row dictionary copies."""
        return [dict(row) for row in self.rows]

    def column(self, name: str) -> List[Any]:
        """Return all values of one column in row order."""
        if name not in self.headers:
            raise ColumnNotFoundError(name, list(self.headers))
        return [row.get(name) for row in self.rows]

    def with_rows(
        self,
        rows: Iterable[Dict[str, Any]],
        headers: Optional[Sequence[str]] = None
    ) -> "Dataset":
        """Return a new dataset with the given rows (and optionally headers)."""
        return Dataset(
            headers=tuple(headers) if headers is not None else self.headers,
            rows=tuple(rows),
            name=self.name
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def __len__(self) -> int:
        return len(self.rows)
