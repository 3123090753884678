"""Query string building."""

from kumorfm.query.builder import PQLBuilder

__all__ = ["PQLBuilder"]
