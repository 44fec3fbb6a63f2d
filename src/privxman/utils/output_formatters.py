"""Output formatters for privxman command results."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    TABLE = "table"


def _cell(value: Any) -> str:
    """Render a value as table cell text, escaped so it is never read as markup."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return escape(json.dumps(value, default=str))
    return escape(str(value))


def _collect_columns(rows: List[Dict[str, Any]]) -> List[str]:
    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def build_table(value: Any, title: Optional[str] = None) -> Table:
    """
    Build a rich table for a result value.

    A list of objects becomes one row per object with the union of their keys
    as columns. A single object becomes a field/value table. Anything else is
    shown as a single-column list.

    Args:
        value: Result value to render (not modified)
        title: Optional table title

    Returns:
        Rich table
    """
    if isinstance(value, dict):
        table = Table(title=title, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for key, item in value.items():
            table.add_row(_cell(key), _cell(item))
        return table

    items = value if isinstance(value, list) else [value]
    if items and all(isinstance(item, dict) for item in items):
        table = Table(title=title)
        columns = _collect_columns(items)
        for column in columns:
            table.add_column(escape(column), style="cyan" if column == "id" else None)
        for item in items:
            table.add_row(*(_cell(item.get(column)) for column in columns))
        return table

    table = Table(title=title)
    table.add_column("Value")
    for item in items:
        table.add_row(_cell(item))
    return table


def emit_result(
    value: Any,
    output_format: str = OutputFormat.JSON.value,
    out: Optional[Console] = None,
) -> None:
    """
    Print a handler result.

    ``None`` means the command produced no display payload and nothing is printed.

    Args:
        value: Structured result to print
        output_format: "json" or "table"
        out: Console to print to (defaults to the module console)

    Raises:
        ValueError: If the output format is not supported
    """
    out = out or console
    fmt = OutputFormat(output_format)

    if value is None:
        return

    if fmt == OutputFormat.JSON:
        out.print_json(json.dumps(value, default=str), indent=2)
    else:
        out.print(build_table(value))
