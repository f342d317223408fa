from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable


class ElementType(str, Enum):
    BODY_SECTION = "BODY_SECTION"
    PARAGRAPH = "PARAGRAPH"
    LIST_ITEM = "LIST_ITEM"
    TABLE = "TABLE"
    TABLE_ROW = "TABLE_ROW"
    TABLE_CELL = "TABLE_CELL"
    TEXT = "TEXT"
    INLINE_IMAGE = "INLINE_IMAGE"
    INLINE_DRAWING = "INLINE_DRAWING"
    FOOTNOTE = "FOOTNOTE"
    FOOTNOTE_SECTION = "FOOTNOTE_SECTION"
    HORIZONTAL_RULE = "HORIZONTAL_RULE"
    TABLE_OF_CONTENTS = "TABLE_OF_CONTENTS"
    PAGE_BREAK = "PAGE_BREAK"
    UNSUPPORTED = "UNSUPPORTED"
    # Kinds a host can report that have no Markdown rendering.
    EQUATION = "EQUATION"
    COLUMN_BREAK = "COLUMN_BREAK"
    PERSON = "PERSON"
    RICH_LINK = "RICH_LINK"
    AUTO_TEXT = "AUTO_TEXT"
    DATE = "DATE"


class ParagraphHeading(str, Enum):
    NORMAL = "NORMAL"
    TITLE = "TITLE"
    SUBTITLE = "SUBTITLE"
    HEADING1 = "HEADING1"
    HEADING2 = "HEADING2"
    HEADING3 = "HEADING3"
    HEADING4 = "HEADING4"
    HEADING5 = "HEADING5"
    HEADING6 = "HEADING6"


class GlyphType(str, Enum):
    BULLET = "BULLET"
    HOLLOW_BULLET = "HOLLOW_BULLET"
    SQUARE_BULLET = "SQUARE_BULLET"
    NUMBER = "NUMBER"
    LATIN_UPPER = "LATIN_UPPER"
    LATIN_LOWER = "LATIN_LOWER"
    ROMAN_UPPER = "ROMAN_UPPER"
    ROMAN_LOWER = "ROMAN_LOWER"


BULLET_GLYPHS = frozenset(
    {GlyphType.BULLET, GlyphType.HOLLOW_BULLET, GlyphType.SQUARE_BULLET}
)


class Element:
    type: ClassVar[ElementType | str]

    @property
    def type_name(self) -> str:
        kind = self.type
        return kind.value if isinstance(kind, ElementType) else str(kind)


@dataclass
class CompositeElement(Element):
    children: list[Element] = field(default_factory=list)

    def __iter__(self):
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)


@dataclass(frozen=True)
class TextStyle:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    font_family: str | None = None
    link_url: str | None = None


_PLAIN = TextStyle()


@dataclass
class TextRun(Element):
    """A run of text with style change points.

    ``spans`` holds ``(offset, style)`` pairs; each style is in effect from its
    offset up to the next one. Offset 0 is implicit and falls back to a plain
    style when no span starts there.
    """

    type: ClassVar[ElementType] = ElementType.TEXT

    text: str = ""
    spans: list[tuple[int, TextStyle]] = field(default_factory=list)

    def __post_init__(self) -> None:
        cleaned: dict[int, TextStyle] = {}
        for offset, style in self.spans:
            if 0 <= offset < max(len(self.text), 1):
                cleaned[offset] = style
        self.spans = sorted(cleaned.items())
        self._offsets = [offset for offset, _ in self.spans]

    @classmethod
    def from_segments(cls, segments: Iterable[tuple[str, TextStyle]]) -> "TextRun":
        text_parts: list[str] = []
        spans: list[tuple[int, TextStyle]] = []
        position = 0
        for content, style in segments:
            if not content:
                continue
            spans.append((position, style))
            text_parts.append(content)
            position += len(content)
        return cls(text="".join(text_parts), spans=spans)

    def attribute_indices(self) -> list[int]:
        if not self.text:
            return []
        if self._offsets and self._offsets[0] == 0:
            return list(self._offsets)
        return [0, *self._offsets]

    def style_at(self, offset: int) -> TextStyle:
        position = bisect_right(self._offsets, offset) - 1
        if position < 0:
            return _PLAIN
        return self.spans[position][1]

    def link_url(self, offset: int) -> str | None:
        return self.style_at(offset).link_url

    def font_family(self, offset: int) -> str | None:
        return self.style_at(offset).font_family


@dataclass
class BodySection(CompositeElement):
    type: ClassVar[ElementType] = ElementType.BODY_SECTION


@dataclass
class Paragraph(CompositeElement):
    type: ClassVar[ElementType] = ElementType.PARAGRAPH

    heading: ParagraphHeading = ParagraphHeading.NORMAL


@dataclass
class ListItem(CompositeElement):
    type: ClassVar[ElementType] = ElementType.LIST_ITEM

    list_id: str = ""
    nesting_level: int = 0
    glyph_type: GlyphType = GlyphType.BULLET


@dataclass
class TableCell(CompositeElement):
    type: ClassVar[ElementType] = ElementType.TABLE_CELL


@dataclass
class TableRow(Element):
    type: ClassVar[ElementType] = ElementType.TABLE_ROW

    cells: list[TableCell] = field(default_factory=list)


@dataclass
class Table(Element):
    type: ClassVar[ElementType] = ElementType.TABLE

    rows: list[TableRow] = field(default_factory=list)


@dataclass
class Footnote(Element):
    type: ClassVar[ElementType] = ElementType.FOOTNOTE

    body: CompositeElement = field(default_factory=lambda: FootnoteSection())


@dataclass
class FootnoteSection(CompositeElement):
    type: ClassVar[ElementType] = ElementType.FOOTNOTE_SECTION


@dataclass
class InlineImage(Element):
    type: ClassVar[ElementType] = ElementType.INLINE_IMAGE

    alt_title: str | None = None
    alt_description: str | None = None
    link_url: str | None = None


@dataclass
class InlineDrawing(Element):
    type: ClassVar[ElementType] = ElementType.INLINE_DRAWING


@dataclass
class HorizontalRule(Element):
    type: ClassVar[ElementType] = ElementType.HORIZONTAL_RULE


@dataclass
class TableOfContents(Element):
    type: ClassVar[ElementType] = ElementType.TABLE_OF_CONTENTS


@dataclass
class PageBreak(Element):
    type: ClassVar[ElementType] = ElementType.PAGE_BREAK


@dataclass
class Unsupported(Element):
    type: ClassVar[ElementType] = ElementType.UNSUPPORTED


@dataclass
class UnknownElement(Element):
    kind: str = "UNKNOWN"

    @property
    def type(self) -> str:  # type: ignore[override]
        return self.kind


@dataclass
class Document:
    body: BodySection = field(default_factory=BodySection)
    title: str | None = None


__all__ = [
    "BULLET_GLYPHS",
    "BodySection",
    "CompositeElement",
    "Document",
    "Element",
    "ElementType",
    "Footnote",
    "FootnoteSection",
    "GlyphType",
    "HorizontalRule",
    "InlineDrawing",
    "InlineImage",
    "ListItem",
    "PageBreak",
    "Paragraph",
    "ParagraphHeading",
    "Table",
    "TableCell",
    "TableOfContents",
    "TableRow",
    "TextRun",
    "TextStyle",
    "UnknownElement",
    "Unsupported",
]
