"""Group and aggregate table rows in memory.

Used to summarise local rows (for example to sanity-check a prediction
target before sending a query) without a round trip to the service.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from kumorfm.core.errors import ValidationError
from kumorfm.core.inference import is_null
from kumorfm.core.table import Row

# Either a function over a group's rows, or (column, pandas aggregation)
Aggregation = Union[Callable[[List[Row]], Any], Tuple[str, Union[str, Callable]]]


def group_rows(rows: Sequence[Row], key: str) -> Dict[Any, List[Row]]:
    """Group rows by the value of one column.

    Groups keep first-seen order and rows keep their order within a group.
    Rows where ``key`` is missing or null fall into the ``None`` group.

    Example:
        >>> group_rows([{"u": 1}, {"u": 2}, {"u": 1}], "u")
        {1: [{'u': 1}, {'u': 1}], 2: [{'u': 2}]}
    """
    groups: Dict[Any, List[Row]] = {}
    for row in rows:
        value = row.get(key)
        group_key = None if is_null(value) else value
        groups.setdefault(group_key, []).append(row)
    return groups


def _scalar(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def aggregate_rows(
    rows: Sequence[Row],
    group_by: str,
    aggregations: Mapping[str, Aggregation],
) -> List[Dict[str, Any]]:
    """Compute one output row per group.

    Each aggregation is either a callable receiving the group's rows, or a
    ``(column, func)`` pair where ``func`` is anything
    ``pandas.Series.agg`` accepts (``"sum"``, ``"mean"``, ``"nunique"``, ...).

    Args:
        rows: Input rows
        group_by: Column to group on; it is copied into every output row
        aggregations: Output column name -> aggregation

    Returns:
        Output rows in first-seen group order

    Raises:
        ValidationError: If a ``(column, func)`` aggregation names a column
            absent from a group's rows

    Example:
        >>> aggregate_rows(orders, "user_id", {"total": ("amount", "sum"), "n": len})
        [{'user_id': 1, 'total': 30.0, 'n': 2}, ...]
    """
    results = []
    for group_key, items in group_rows(rows, group_by).items():
        output: Dict[str, Any] = {group_by: group_key}
        frame = None
        for name, aggregation in aggregations.items():
            if callable(aggregation):
                output[name] = aggregation(items)
                continue

            column, func = aggregation
            if frame is None:
                frame = pd.DataFrame.from_records([dict(r) for r in items])
            if column not in frame.columns:
                raise ValidationError(
                    f"Column {column} not found in rows grouped by {group_by}",
                    {"column": column, "group": group_key},
                )
            output[name] = _scalar(frame[column].agg(func))
        results.append(output)
    return results
