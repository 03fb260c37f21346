"""Terminal rendering of query results."""

import json
from decimal import Decimal
from typing import Any, Dict, List

import click

from ..client import QueryResult


class ResultFormatter:
    """Formats query results as bordered tables and status lines."""

    def __init__(self, color: bool = True):
        self.color = color

    def style(self, text: str, **styles: Any) -> str:
        if not self.color:
            return text
        return click.style(text, **styles)

    def format_result(self, result: QueryResult) -> str:
        """Render a result, giving ``error`` precedence over everything else."""
        if result.error:
            return self.format_error(result.error)
        if result.rows is not None:
            return self.format_table(result.rows)
        if result.affected_rows is not None:
            row_word = "row" if result.affected_rows == 1 else "rows"
            return self.format_success(f"{result.affected_rows} {row_word} affected")
        return self.style("Query executed successfully", fg="bright_black")

    def format_table(self, rows: List[Dict[str, Any]]) -> str:
        if not rows:
            return self.style("(0 rows)", fg="yellow")

        headers = [str(key) for key in rows[0].keys()]
        keys = list(rows[0].keys())
        body = [[self._plain_value(row.get(key)) for key in keys] for row in rows]
        raw = [[row.get(key) for key in keys] for row in rows]
        widths = self._compute_widths(headers, body)
        border = self.style(self._build_border(widths), fg="bright_black")

        lines: List[str] = [border]
        header_cells = [self.style(h.ljust(widths[i]), fg="cyan") for i, h in enumerate(headers)]
        lines.append(self._format_row(header_cells))
        lines.append(border)
        for plain_row, raw_row in zip(body, raw):
            cells = []
            for index, text in enumerate(plain_row):
                padded = text.ljust(widths[index])
                cells.append(self._style_value(raw_row[index], padded))
            lines.append(self._format_row(cells))
        lines.append(border)

        row_word = "row" if len(rows) == 1 else "rows"
        lines.append(self.style(f"({len(rows)} {row_word})", fg="bright_black"))
        return "\n".join(lines)

    def format_value(self, value: Any) -> str:
        """Render a single cell value."""
        return self._style_value(value, self._plain_value(value))

    def format_error(self, message: str) -> str:
        return self.style("✗ Error: ", fg="red") + message

    def format_success(self, message: str) -> str:
        return self.style("✓ ", fg="green") + message

    def format_query_time(self, ms: float) -> str:
        seconds = f"{ms / 1000:.3f}"
        return self.style(f"⏱  {seconds}s", fg="bright_black")

    def _plain_value(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, (dict, list)):
            return json.dumps(value, default=str)
        return str(value)

    def _style_value(self, value: Any, text: str) -> str:
        if value is None:
            return self.style(text, fg="bright_black")
        if isinstance(value, bool):
            return self.style(text, fg="green" if value else "red")
        if isinstance(value, (int, float, Decimal)):
            return self.style(text, fg="yellow")
        return text

    def _compute_widths(self, headers: List[str], rows: List[List[str]]) -> List[int]:
        widths = [len(header) for header in headers]
        for row in rows:
            for index, text in enumerate(row):
                if len(text) > widths[index]:
                    widths[index] = len(text)
        return widths

    def _build_border(self, widths: List[int]) -> str:
        parts: List[str] = ["+"]
        for width in widths:
            parts.append("-" * (width + 2))
            parts.append("+")
        return "".join(parts)

    def _format_row(self, cells: List[str]) -> str:
        parts: List[str] = ["|"]
        for cell in cells:
            parts.append(f" {cell} ")
            parts.append("|")
        return "".join(parts)
