"""
CLI-specific formatting functions for human-readable output.

This module handles presentation formatting for the CLI, including:
- JSON and YAML serialisation
- Rich tables rendered to plain text
- List formatting for detailed views
"""
import io
import json
from typing import Any, Dict, List

import yaml
from rich.console import Console
from rich.table import Table


def format_output(data: Any, format_type: str) -> str:
    """Format data according to the specified format type."""
    if format_type == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip("\n")
    elif format_type == "table":
        return format_table_output(data)
    elif format_type == "list":
        return format_list_output(data)
    else:
        # Default to JSON
        return json.dumps(data, indent=2, default=str)


def _rows_of(data: Any) -> List[Dict[str, Any]]:
    """Find the list of records inside ``data``, if there is exactly one."""
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    if isinstance(data, dict) and len(data) == 1:
        (value,) = data.values()
        if isinstance(value, list) and all(isinstance(item, dict) for item in value):
            return value
    return []


def _cell(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def _render(table: Table) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None, force_terminal=False)
    console.print(table)
    return buffer.getvalue().rstrip("\n")


def format_table_output(data: Any) -> str:
    """Format data as a table."""
    rows = _rows_of(data)
    if rows:
        columns: List[str] = []
        for row in rows:
            columns.extend(key for key in row if key not in columns)
        table = Table(show_header=True, header_style="bold magenta")
        for column in columns:
            table.add_column(column.replace("_", " ").title())
        for row in rows:
            table.add_row(*(_cell(row.get(column, "")) for column in columns))
        return _render(table)

    if isinstance(data, dict):
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(str(key), _cell(value))
        return _render(table)

    # Fallback to JSON for unknown data structures
    return json.dumps(data, indent=2, default=str)


def format_list_output(data: Any) -> str:
    """Format data as a detailed list."""
    rows = _rows_of(data)
    if rows:
        blocks = []
        for row in rows:
            blocks.append("\n".join(f"{key}: {_cell(value)}" for key, value in row.items()))
        return "\n\n".join(blocks)

    if isinstance(data, dict):
        return "\n".join(f"{key}: {_cell(value)}" for key, value in data.items())

    if isinstance(data, list):
        return "\n".join(_cell(item) for item in data)

    return str(data)
