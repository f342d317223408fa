from __future__ import annotations

from typing import Callable

from doc2md.services.context import ConversionContext
from doc2md.services.document import Table, TableCell, TableRow

CellRenderer = Callable[[TableCell, ConversionContext], None]

SEPARATOR_CELL = "---"


def separator_row(columns: int) -> str:
    return "| " + " | ".join([SEPARATOR_CELL] * columns) + " |"


def _render_row(row: TableRow, context: ConversionContext, render_cell: CellRenderer) -> None:
    context.append("| ")
    for index, cell in enumerate(row.cells):
        if index:
            context.append(" | ")
        context.table_cell_depth += 1
        try:
            context.skip_next_newline()
            render_cell(cell, context)
        finally:
            context.table_cell_depth -= 1
    context.append(" |")


def render_table(table: Table, context: ConversionContext, render_cell: CellRenderer) -> None:
    """Append ``table`` as a pipe table: header, separator, then body rows.

    The separator width follows the header row; body rows are not padded or
    truncated to match it.
    """
    if not table.rows:
        return
    header, *body = table.rows
    context.append("\n\n")
    _render_row(header, context, render_cell)
    context.append("\n" + separator_row(len(header.cells)))
    for row in body:
        context.append("\n")
        _render_row(row, context, render_cell)
    context.append("\n\n")


__all__ = ["CellRenderer", "render_table", "separator_row"]
