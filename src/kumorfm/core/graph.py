"""Local graph: named tables linked by foreign keys."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, TextIO

from kumorfm.core.errors import DuplicateLinkError, ValidationError
from kumorfm.core.table import LocalTable, Row
from kumorfm.core.types import (
    CIRCULAR_REFERENCE,
    INVALID_LINK,
    NULLABLE_FOREIGN_KEY,
    TableLink,
    ValidationIssue,
    ValidationResult,
)
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

# Case-sensitive foreign-key suffixes: user_id, userId
FK_SUFFIX_PATTERN = re.compile(r"(_id|Id)$")


class LocalGraph:
    """A set of uniquely named tables plus directed foreign-key links.

    Validity is cached: :meth:`validate` sets it, :meth:`link` and
    :meth:`unlink` reset it. Changes made directly to a member table's
    metadata do not reset it.

    Example:
        >>> graph = LocalGraph([users, orders])
        >>> graph.link("orders", "user_id", "users")
        >>> graph.validate().valid
        True
    """

    def __init__(self, tables: Iterable[LocalTable]):
        """Initialize graph.

        Args:
            tables: Tables to include; on duplicate names the last one wins
        """
        self._tables: Dict[str, LocalTable] = {}
        for table in tables:
            if table.name in self._tables:
                logger.warning(
                    f"Duplicate table name '{table.name}', replacing earlier table"
                )
            self._tables[table.name] = table
        self._links: List[TableLink] = []
        self._validated = False

    @property
    def tables(self) -> List[LocalTable]:
        return list(self._tables.values())

    @property
    def table_names(self) -> List[str]:
        return list(self._tables.keys())

    @property
    def links(self) -> List[TableLink]:
        return list(self._links)

    @property
    def is_validated(self) -> bool:
        """True only after a validate() pass with no errors and no later link changes."""
        return self._validated

    def get_table(self, name: str) -> Optional[LocalTable]:
        return self._tables.get(name)

    def has_link(self, src_table: str, fkey: str, dst_table: str) -> bool:
        return TableLink(src_table, fkey, dst_table) in self._links

    def link(self, src_table: str, fkey: str, dst_table: str) -> TableLink:
        """Add a foreign-key link ``src_table.fkey -> dst_table``.

        Args:
            src_table: Table holding the foreign key
            fkey: Foreign-key column in ``src_table``
            dst_table: Referenced table

        Returns:
            The new link

        Raises:
            ValidationError: If a table or the column is unknown
            DuplicateLinkError: If the identical link already exists
        """
        if src_table not in self._tables:
            raise ValidationError(
                f"Source table {src_table} not found in graph", {"table": src_table}
            )
        if dst_table not in self._tables:
            raise ValidationError(
                f"Destination table {dst_table} not found in graph",
                {"table": dst_table},
            )
        if fkey not in self._tables[src_table].columns:
            raise ValidationError(
                f"Foreign key {fkey} not found in table {src_table}",
                {"table": src_table, "column": fkey},
            )

        new_link = TableLink(src_table, fkey, dst_table)
        if new_link in self._links:
            raise DuplicateLinkError(f"Link already exists: {new_link}")

        self._links.append(new_link)
        self._validated = False
        logger.debug(f"Linked {new_link}")
        return new_link

    def unlink(self, src_table: str, fkey: str, dst_table: str) -> None:
        """Remove an existing link.

        Raises:
            ValidationError: If no such link exists
        """
        target = TableLink(src_table, fkey, dst_table)
        if target not in self._links:
            raise ValidationError(f"Link not found: {target}")
        self._links.remove(target)
        self._validated = False
        logger.debug(f"Unlinked {target}")

    def infer_links(self) -> List[TableLink]:
        """Link tables by foreign-key naming convention.

        A column ending in ``_id`` or ``Id`` is linked to every other table
        whose name matches the stripped column name (case-insensitive,
        exact or with a trailing ``s`` on either side), provided that table
        has a primary key. Links that already exist are skipped.

        Returns:
            Links created by this call
        """
        created = []
        for src_name, src_table in self._tables.items():
            for column_name in src_table.columns:
                if not FK_SUFFIX_PATTERN.search(column_name):
                    continue
                base_name = FK_SUFFIX_PATTERN.sub("", column_name).lower()

                for dst_name, dst_table in self._tables.items():
                    if dst_name == src_name:
                        continue
                    table_base = dst_name.lower()
                    if not (
                        table_base == base_name
                        or table_base == base_name + "s"
                        or table_base + "s" == base_name
                    ):
                        continue
                    if not dst_table.primary_key:
                        logger.debug(
                            f"Skipping {src_name}.{column_name} -> {dst_name}: "
                            "destination has no primary key"
                        )
                        continue
                    try:
                        created.append(self.link(src_name, column_name, dst_name))
                    except DuplicateLinkError:
                        logger.debug(
                            f"Link {src_name}.{column_name} -> {dst_name} already exists"
                        )

        logger.info(f"Inferred {len(created)} links across {len(self._tables)} tables")
        return created

    def validate(self) -> ValidationResult:
        """Validate every table, every link and the absence of cycles."""
        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []

        for table in self._tables.values():
            table_result = table.validate()
            errors.extend(table_result.errors)
            warnings.extend(table_result.warnings)

        for link in self._links:
            src = self._tables[link.src_table]
            dst = self._tables[link.dst_table]

            if not dst.primary_key:
                errors.append(
                    ValidationIssue(
                        type=INVALID_LINK,
                        message=f"Destination table {link.dst_table} has no primary key",
                        table=link.dst_table,
                    )
                )

            if src.schema is not None:
                fk_column = next(
                    (c for c in src.schema.columns if c.name == link.fkey), None
                )
                if fk_column is not None and fk_column.nullable:
                    warnings.append(
                        ValidationIssue(
                            type=NULLABLE_FOREIGN_KEY,
                            message=(
                                f"Foreign key {link.fkey} in table "
                                f"{link.src_table} is nullable"
                            ),
                            field=link.fkey,
                            table=link.src_table,
                        )
                    )

        if self._has_circular_reference():
            errors.append(
                ValidationIssue(
                    type=CIRCULAR_REFERENCE,
                    message="Graph contains circular references",
                )
            )

        self._validated = not errors
        logger.info(
            f"Graph validation: valid={self._validated}, "
            f"{len(errors)} errors, {len(warnings)} warnings"
        )
        return ValidationResult(valid=self._validated, errors=errors, warnings=warnings)

    def _has_circular_reference(self) -> bool:
        """Depth-first search for a back edge, using an explicit stack."""
        adjacency: Dict[str, List[str]] = {}
        for link in self._links:
            adjacency.setdefault(link.src_table, []).append(link.dst_table)

        visited = set()
        on_stack = set()

        for start in self._tables:
            if start in visited:
                continue
            visited.add(start)
            on_stack.add(start)
            stack = [(start, iter(adjacency.get(start, [])))]

            while stack:
                node, children = stack[-1]
                for child in children:
                    if child in on_stack:
                        return True
                    if child not in visited:
                        visited.add(child)
                        on_stack.add(child)
                        stack.append((child, iter(adjacency.get(child, []))))
                        break
                else:
                    on_stack.discard(node)
                    stack.pop()

        return False

    def format_metadata(self) -> str:
        lines = ["", "=== Graph Metadata ==="]
        for table in self._tables.values():
            lines.extend(
                [
                    "",
                    f"Table: {table.name}",
                    f"  Primary Key: {table.primary_key or 'None'}",
                    f"  Time Column: {table.time_column or 'None'}",
                    f"  Row Count: {table.row_count}",
                    f"  Columns: {', '.join(table.columns)}",
                ]
            )
        return "\n".join(lines)

    def format_links(self) -> str:
        lines = ["", "=== Graph Links ==="]
        if not self._links:
            lines.append("No links defined")
        lines.extend(str(link) for link in self._links)
        return "\n".join(lines)

    def print_metadata(self, file: Optional[TextIO] = None) -> None:
        print(self.format_metadata(), file=file)

    def print_links(self, file: Optional[TextIO] = None) -> None:
        print(self.format_links(), file=file)

    def visualize(self) -> str:
        """Render the graph as indented text, one block per table."""
        viz = "\n=== Graph Visualization ===\n\n"
        for table in self._tables.values():
            viz += f"[{table.name}]\n"
            for link in self._links:
                if link.src_table == table.name:
                    viz += f"  └─({link.fkey})──> [{link.dst_table}]\n"
            viz += "\n"
        return viz

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [table.to_dict() for table in self._tables.values()],
            "links": [link.to_dict() for link in self._links],
        }

    @classmethod
    def from_data(
        cls, data: Mapping[str, Iterable[Row]], infer_metadata: bool = True
    ) -> LocalGraph:
        """Build a graph from rows keyed by table name.

        With ``infer_metadata`` each table is inferred and links are then
        inferred by naming convention; without it the graph has no links.

        Args:
            data: Mapping of table name -> rows
            infer_metadata: Whether to run metadata and link inference

        Returns:
            LocalGraph instance
        """
        tables = []
        for name, rows in data.items():
            table = LocalTable(rows, name)
            if infer_metadata:
                table.infer_metadata()
            tables.append(table)

        graph = cls(tables)
        if infer_metadata:
            graph.infer_links()

        logger.info(
            f"Built graph with {len(graph._tables)} tables and {len(graph._links)} links"
        )
        return graph

    def __repr__(self) -> str:
        return f"LocalGraph(tables={len(self._tables)}, links={len(self._links)})"
