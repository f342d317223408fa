from __future__ import annotations

from doc2md.services.context import ConversionContext
from doc2md.services.document import BULLET_GLYPHS, ListItem

BULLET_MARKER = "* "


def list_padding(nesting_level: int, indent_width: int) -> str:
    return " " * (max(nesting_level, 0) * indent_width)


def prefix_for(item: ListItem, context: ConversionContext) -> str:
    """Return the marker for ``item``, advancing its ordinal counter if ordered.

    Counters are keyed by ``(list_id, nesting_level)``, so two lists with
    different ids restart at 1 even when they sit next to each other.
    """
    padding = list_padding(item.nesting_level, context.config.list_indent_width)
    if item.glyph_type in BULLET_GLYPHS:
        return f"{padding}{BULLET_MARKER}"
    ordinal = context.next_ordinal(item.list_id, item.nesting_level)
    return f"{padding}{ordinal}. "


__all__ = ["BULLET_MARKER", "list_padding", "prefix_for"]
