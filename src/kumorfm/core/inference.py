"""Column semantic type inference.

Classifies the raw values of a single column as numerical, categorical,
temporal or text and computes the null/uniqueness statistics the table
layer uses for primary-key detection.

Checks run in a fixed order and the first match wins:

1. temporal   - every present value is a date/time or a parseable date string
2. numerical  - every present value is a number or a finite numeric string
3. categorical - distinct/present ratio is strictly below 0.5
4. text       - everything else, including columns with no present values
"""

from __future__ import annotations

import datetime
import math
import numbers
import warnings
from typing import Any, List, Sequence

import numpy as np
import pandas as pd

from kumorfm.core.types import CATEGORICAL, NUMERICAL, TEMPORAL, TEXT, ColumnMetadata
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORICAL_RATIO_THRESHOLD = 0.5


def is_null(value: Any) -> bool:
    """Return True for None, NaN, NaT and pandas.NA."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Non-scalar values (lists, dicts) are never null
        return False


def present_values(values: Sequence[Any]) -> List[Any]:
    """Drop nulls from a column's values, keeping row order."""
    return [v for v in values if not is_null(v)]


def count_unique(values: Sequence[Any]) -> int:
    """Count distinct values, falling back to repr() for unhashable ones.

    Booleans are kept apart from the equal integers 1 and 0.
    """
    try:
        return len({(isinstance(v, (bool, np.bool_)), v) for v in values})
    except TypeError:
        return len({repr(v) for v in values})


def _parse_number(text: str) -> bool:
    stripped = text.strip()
    if not stripped:
        return False
    try:
        return math.isfinite(float(stripped))
    except ValueError:
        return False


def is_numeric_value(value: Any) -> bool:
    """Numbers (not booleans) and strings that parse to a finite number."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, numbers.Real):
        return True
    if isinstance(value, str):
        return _parse_number(value)
    return False


def is_temporal_value(value: Any) -> bool:
    """Date/time instances and date-like strings.

    Numeric strings are excluded so that ``"1"`` or ``"2024"`` never count
    as dates, and strings without any digit (``"now"``, ``"today"``) are
    rejected even though pandas would accept them.
    """
    if isinstance(value, (datetime.date, pd.Timestamp, np.datetime64)):
        return True
    if not isinstance(value, str):
        return False

    stripped = value.strip()
    if not stripped or _parse_number(stripped):
        return False
    if not any(ch.isdigit() for ch in stripped):
        return False

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            parsed = pd.to_datetime(stripped)
    except (ValueError, TypeError, OverflowError):
        return False
    return not pd.isna(parsed)


def infer_column_type(values: Sequence[Any]) -> str:
    """Infer the semantic type of a column.

    Args:
        values: All values of one column in row order; nulls allowed

    Returns:
        One of "temporal", "numerical", "categorical", "text"
    """
    present = present_values(values)
    if not present:
        return TEXT

    if all(is_temporal_value(v) for v in present):
        return TEMPORAL

    if all(is_numeric_value(v) for v in present):
        return NUMERICAL

    if count_unique(present) / len(present) < CATEGORICAL_RATIO_THRESHOLD:
        return CATEGORICAL

    return TEXT


def analyze_column(values: Sequence[Any], name: str) -> ColumnMetadata:
    """Compute semantic type and null/uniqueness statistics for a column.

    ``is_primary_key_candidate`` is always False here; the owning table
    decides that once it knows its row count.

    Args:
        values: All values of the column in row order
        name: Column name

    Returns:
        ColumnMetadata for the column
    """
    present = present_values(values)
    null_count = len(values) - len(present)

    meta = ColumnMetadata(
        name=name,
        semantic_type=infer_column_type(values),
        nullable=null_count > 0,
        is_primary_key_candidate=False,
        unique_value_count=count_unique(present),
        null_count=null_count,
    )

    logger.debug(
        f"Column {name}: type={meta.semantic_type}, "
        f"unique={meta.unique_value_count}, nulls={meta.null_count}"
    )
    return meta
