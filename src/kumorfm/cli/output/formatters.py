"""Output formatting utilities for CLI."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import click

from kumorfm.core.types import TableLink, ValidationIssue, ValidationResult


class OutputFormatter:
    """Format graph, link and validation output for the terminal.

    Status lines go to stdout, errors to stderr. Every helper is a plain
    echo so commands stay pipe-friendly.

    Example:
        >>> out = OutputFormatter()
        >>> out.success("Loaded 2 tables")
        >>> out.links(graph.links)
        >>> out.validation_report(graph.validate())
    """

    @staticmethod
    def success(message: str) -> None:
        """Display success message with checkmark.

        Args:
            message: Success message to display
        """
        click.echo(f"✓ {message}")

    @staticmethod
    def error(message: str, abort: bool = False) -> None:
        """Display error message on stderr.

        Args:
            message: Error message to display
            abort: Whether to abort command execution after displaying error
        """
        click.echo(f"❌ {message}", err=True)
        if abort:
            raise click.Abort()

    @staticmethod
    def hint(message: str) -> None:
        """Display a follow-up suggestion under an error, on stderr."""
        click.echo(f"   {message}", err=True)

    @staticmethod
    def info(message: str) -> None:
        click.echo(f"ℹ️  {message}")

    @staticmethod
    def section(title: str) -> None:
        click.echo(f"\n{title}")

    @staticmethod
    def stats(stats_dict: Dict[str, Any], indent: str = "   ") -> None:
        """Display statistics dictionary in key: value format.

        Args:
            stats_dict: Dictionary of statistics to display
            indent: Indentation string for each line
        """
        for key, value in stats_dict.items():
            click.echo(f"{indent}{key}: {value}")

    @staticmethod
    def table_summary(
        table_name: str,
        row_count: int,
        col_count: int,
        primary_key: Optional[str] = None,
        time_column: Optional[str] = None,
        indent: str = "   ",
    ) -> None:
        """Display one table as a single status line.

        Args:
            table_name: Name of the table
            row_count: Number of rows
            col_count: Number of columns
            primary_key: Primary key column, omitted when unset
            time_column: Time column, omitted when unset
            indent: Indentation string
        """
        extras = ""
        if primary_key:
            extras += f", PK={primary_key}"
        if time_column:
            extras += f", time={time_column}"
        click.echo(f"{indent}✓ {table_name}: {row_count} rows, {col_count} columns{extras}")

    @staticmethod
    def links(links: Iterable[TableLink], indent: str = "   ") -> None:
        """Display foreign-key links as ``src.fkey -> dst``, or a note if none."""
        links = list(links)
        if not links:
            click.echo("ℹ️  No links inferred")
            return
        click.echo(f"\n{indent}Links:")
        for link in links:
            click.echo(f"{indent}  - {link}")

    @staticmethod
    def progress_start(message: str) -> None:
        click.echo(f"\n🔍 {message}")

    @staticmethod
    def _issue_lines(issues: List[ValidationIssue]) -> List[str]:
        return [f"   - [{issue.type}] {issue.message}" for issue in issues]

    @classmethod
    def validation_report(cls, result: ValidationResult) -> None:
        """Display validation errors and warnings, then an overall verdict.

        Warnings never change the verdict; only errors make a graph invalid.

        Args:
            result: Outcome of ``LocalGraph.validate()`` or a service validation
        """
        if result.errors:
            cls.section(f"❌ Errors ({len(result.errors)}):")
            click.echo("\n".join(cls._issue_lines(result.errors)))
        if result.warnings:
            cls.section(f"⚠️  Warnings ({len(result.warnings)}):")
            click.echo("\n".join(cls._issue_lines(result.warnings)))

        cls.section("✓ Graph is valid" if result.valid else "❌ Graph is invalid")
