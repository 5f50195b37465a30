"""
Exact-row duplicate detection.

Every row is reduced to a canonical JSON string of its values in header
order; rows with equal strings are duplicates. Only byte-exact duplicates
are found, near-duplicates are not.
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List

from tablesift.core.dataset import Dataset, convert_numpy_types, normalize_number

logger = logging.getLogger(__name__)


def _canonical_value(value: Any) -> Any:
    value = convert_numpy_types(value)
    if isinstance(value, float):
        return normalize_number(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def canonical_row(row: Dict[str, Any], headers) -> str:
    """Canonical string form of a row (values in header order)."""
    return json.dumps(
        [_canonical_value(row.get(h)) for h in headers],
        ensure_ascii=False,
        default=str
    )


class DuplicateDetector:
    """
    Example:
        >>> ds = Dataset.from_records([{"e": "a@b.com"}, {"e": "a@b.com"}])
        >>> DuplicateDetector().count_duplicates(ds)
        1
    """

    def count_duplicates(self, dataset: Dataset) -> int:
        """Row count minus the number of distinct canonical rows."""
        distinct = {canonical_row(row, dataset.headers) for row in dataset.rows}
        return dataset.row_count - len(distinct)

    def duplicate_indices(self, dataset: Dataset) -> List[int]:
        """Indices of every repeat occurrence (the first occurrence is not included)."""
        seen = set()
        indices = []
        for index, row in enumerate(dataset.rows):
            key = canonical_row(row, dataset.headers)
            if key in seen:
                indices.append(index)
            else:
                seen.add(key)
        return indices

    def deduplicate(self, dataset: Dataset) -> Dataset:
        """Stable de-duplication keeping the first occurrence of each row."""
        repeats = set(self.duplicate_indices(dataset))
        if not repeats:
            return dataset
        logger.debug(f"Removing {len(repeats)} duplicate row(s)")
        return dataset.with_rows(
            row for index, row in enumerate(dataset.rows) if index not in repeats
        )
