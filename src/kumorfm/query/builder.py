"""Fluent builder for predictive query language (PQL) strings."""

from __future__ import annotations

import re
from typing import List, Optional

from kumorfm.core.errors import ValidationError

# Case-insensitive clause markers
PREDICT_MARKER = re.compile(r"PREDICT ", re.IGNORECASE)
FOR_MARKER = re.compile(r" FOR ", re.IGNORECASE)


class PQLBuilder:
    """Accumulate query fragments and render them in fixed clause order.

    ``for_`` and ``where`` append across calls; ``group_by`` and
    ``order_by`` replace whatever was set before. Fragments are inserted
    verbatim, without quoting or escaping.

    Example:
        >>> PQLBuilder().predict("COUNT(orders.order_id)").for_("user_id").build()
        'PREDICT COUNT(orders.order_id) FOR user_id'
    """

    def __init__(self):
        self.predict_target: Optional[str] = None
        self.for_entities: List[str] = []
        self.where_clauses: List[str] = []
        self.group_by_fields: List[str] = []
        self.order_by_fields: List[str] = []
        self.limit_count: Optional[int] = None

    def predict(self, target: str) -> PQLBuilder:
        self.predict_target = target
        return self

    def for_(self, *entities: str) -> PQLBuilder:
        self.for_entities.extend(entities)
        return self

    def where(self, condition: str) -> PQLBuilder:
        self.where_clauses.append(condition)
        return self

    def group_by(self, *fields: str) -> PQLBuilder:
        self.group_by_fields = list(fields)
        return self

    def order_by(self, *fields: str) -> PQLBuilder:
        self.order_by_fields = list(fields)
        return self

    def limit(self, n: int) -> PQLBuilder:
        self.limit_count = n
        return self

    def build(self) -> str:
        """Render the query string.

        Raises:
            ValidationError: If no PREDICT target was set
        """
        if not self.predict_target:
            raise ValidationError("PREDICT target is required")

        query = f"PREDICT {self.predict_target}"
        if self.for_entities:
            query += f" FOR {', '.join(self.for_entities)}"
        if self.where_clauses:
            query += f" WHERE {' AND '.join(self.where_clauses)}"
        if self.group_by_fields:
            query += f" GROUP BY {', '.join(self.group_by_fields)}"
        if self.order_by_fields:
            query += f" ORDER BY {', '.join(self.order_by_fields)}"
        if self.limit_count is not None:
            query += f" LIMIT {self.limit_count}"
        return query

    @classmethod
    def parse(cls, query: str) -> PQLBuilder:
        """Recover the PREDICT target from a query string.

        Only the target is recovered; FOR, WHERE, GROUP BY, ORDER BY and
        LIMIT are dropped. Without a ``PREDICT`` marker the returned
        builder has no target.
        """
        builder = cls()
        predict_match = PREDICT_MARKER.search(query)
        if predict_match is None:
            return builder

        after_predict = query[predict_match.end():].strip()
        for_match = FOR_MARKER.search(after_predict)
        target = after_predict[: for_match.start()] if for_match else after_predict
        return builder.predict(target.strip())
