from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from doc2md.services.document import (
    BodySection,
    Document,
    Element,
    ElementType,
    Footnote,
    FootnoteSection,
    GlyphType,
    HorizontalRule,
    InlineDrawing,
    InlineImage,
    ListItem,
    PageBreak,
    Paragraph,
    ParagraphHeading,
    Table,
    TableCell,
    TableOfContents,
    TableRow,
    TextRun,
    TextStyle,
    UnknownElement,
)


class DocumentFormatError(ValueError):
    pass


_NAMED_STYLES = {
    "TITLE": ParagraphHeading.TITLE,
    "SUBTITLE": ParagraphHeading.SUBTITLE,
    "HEADING_1": ParagraphHeading.HEADING1,
    "HEADING_2": ParagraphHeading.HEADING2,
    "HEADING_3": ParagraphHeading.HEADING3,
    "HEADING_4": ParagraphHeading.HEADING4,
    "HEADING_5": ParagraphHeading.HEADING5,
    "HEADING_6": ParagraphHeading.HEADING6,
}

_GLYPH_TYPES = {
    "DECIMAL": GlyphType.NUMBER,
    "ZERO_DECIMAL": GlyphType.NUMBER,
    "ALPHA": GlyphType.LATIN_LOWER,
    "UPPER_ALPHA": GlyphType.LATIN_UPPER,
    "ROMAN": GlyphType.ROMAN_LOWER,
    "UPPER_ROMAN": GlyphType.ROMAN_UPPER,
}

_GLYPH_SYMBOLS = {
    "○": GlyphType.HOLLOW_BULLET,
    "■": GlyphType.SQUARE_BULLET,
}

# Paragraph element keys that have no Markdown rendering.
_UNKNOWN_ELEMENTS = {
    "equation": ElementType.EQUATION,
    "columnBreak": ElementType.COLUMN_BREAK,
    "person": ElementType.PERSON,
    "richLink": ElementType.RICH_LINK,
    "autoText": ElementType.AUTO_TEXT,
    "dateElement": ElementType.DATE,
}


def _text_style(raw: object) -> TextStyle:
    if not isinstance(raw, dict):
        return TextStyle()
    font = raw.get("weightedFontFamily") or {}
    link = raw.get("link") or {}
    return TextStyle(
        bold=bool(raw.get("bold")),
        italic=bool(raw.get("italic")),
        underline=bool(raw.get("underline")),
        strikethrough=bool(raw.get("strikethrough")),
        font_family=font.get("fontFamily") if isinstance(font, dict) else None,
        link_url=link.get("url") if isinstance(link, dict) else None,
    )


class DocsApiParser:
    """Builds an element tree from a Docs API ``documents.get`` payload."""

    def __init__(self, payload: dict[str, Any]) -> None:
        if not isinstance(payload, dict):
            raise DocumentFormatError("Document payload must be a JSON object")
        self._title = payload.get("title")
        source = self._resolve_source(payload)
        self._lists: dict[str, Any] = source.get("lists") or {}
        self._footnotes: dict[str, Any] = source.get("footnotes") or {}
        self._inline_objects: dict[str, Any] = source.get("inlineObjects") or {}
        body = source.get("body")
        content = body.get("content") if isinstance(body, dict) else None
        if not isinstance(content, list):
            raise DocumentFormatError("Document payload has no body content")
        self._content = content

    @staticmethod
    def _resolve_source(payload: dict[str, Any]) -> dict[str, Any]:
        if "body" in payload:
            return payload
        for tab in payload.get("tabs") or []:
            document_tab = tab.get("documentTab") if isinstance(tab, dict) else None
            if isinstance(document_tab, dict) and "body" in document_tab:
                return document_tab
        return payload

    def parse(self) -> Document:
        body = BodySection(children=self.parse_content(self._content))
        logger.debug(
            "Parsed document {!r}: {} top-level elements", self._title, len(body.children)
        )
        return Document(body=body, title=self._title)

    def parse_content(self, content: list[Any]) -> list[Element]:
        elements: list[Element] = []
        for structural in content:
            if not isinstance(structural, dict):
                continue
            if "paragraph" in structural:
                elements.append(self._parse_paragraph(structural["paragraph"]))
            elif "table" in structural:
                elements.append(self._parse_table(structural["table"]))
            elif "tableOfContents" in structural:
                elements.append(TableOfContents())
            elif "sectionBreak" in structural:
                continue
            else:
                kind = next((key for key in structural if key not in ("startIndex", "endIndex")), None)
                if kind:
                    elements.append(UnknownElement(kind=kind))
        return elements

    def _parse_paragraph(self, paragraph: dict[str, Any]) -> Paragraph | ListItem:
        children = self._parse_inline(paragraph.get("elements") or [])
        bullet = paragraph.get("bullet")
        if isinstance(bullet, dict):
            list_id = str(bullet.get("listId") or "")
            level = int(bullet.get("nestingLevel") or 0)
            return ListItem(
                children=children,
                list_id=list_id,
                nesting_level=level,
                glyph_type=self._glyph_type(list_id, level),
            )
        style = paragraph.get("paragraphStyle") or {}
        heading = _NAMED_STYLES.get(style.get("namedStyleType"), ParagraphHeading.NORMAL)
        return Paragraph(children=children, heading=heading)

    def _parse_inline(self, raw_elements: list[Any]) -> list[Element]:
        children: list[Element] = []
        segments: list[tuple[str, TextStyle]] = []

        def flush_text() -> None:
            if segments:
                children.append(TextRun.from_segments(segments))
                segments.clear()

        for raw in raw_elements:
            if not isinstance(raw, dict):
                continue
            text_run = raw.get("textRun")
            if isinstance(text_run, dict):
                segments.append((text_run.get("content") or "", _text_style(text_run.get("textStyle"))))
                continue
            flush_text()
            element = self._parse_inline_element(raw)
            if element is not None:
                children.append(element)
        flush_text()

        if children and isinstance(children[-1], TextRun):
            last = children[-1]
            if last.text.endswith("\n"):
                children[-1] = TextRun(text=last.text[:-1], spans=last.spans)
        return children

    def _parse_inline_element(self, raw: dict[str, Any]) -> Element | None:
        if "inlineObjectElement" in raw:
            return self._parse_inline_object(raw["inlineObjectElement"])
        if "footnoteReference" in raw:
            footnote_id = (raw["footnoteReference"] or {}).get("footnoteId")
            footnote = self._footnotes.get(footnote_id) or {}
            content = footnote.get("content") or []
            return Footnote(body=FootnoteSection(children=self.parse_content(content)))
        if "horizontalRule" in raw:
            return HorizontalRule()
        if "pageBreak" in raw:
            return PageBreak()
        for key, kind in _UNKNOWN_ELEMENTS.items():
            if key in raw:
                return UnknownElement(kind=kind.value)
        kind = next((key for key in raw if key not in ("startIndex", "endIndex")), None)
        return UnknownElement(kind=kind) if kind else None

    def _parse_inline_object(self, raw: dict[str, Any]) -> Element:
        inline_object = self._inline_objects.get(raw.get("inlineObjectId")) or {}
        properties = inline_object.get("inlineObjectProperties") or {}
        embedded = properties.get("embeddedObject") or {}
        if "embeddedDrawingProperties" in embedded:
            return InlineDrawing()
        link_url = _text_style(raw.get("textStyle")).link_url
        return InlineImage(
            alt_title=embedded.get("title") or None,
            alt_description=embedded.get("description") or None,
            link_url=link_url,
        )

    def _parse_table(self, table: dict[str, Any]) -> Table:
        rows: list[TableRow] = []
        for raw_row in table.get("tableRows") or []:
            cells = [
                TableCell(children=self.parse_content(raw_cell.get("content") or []))
                for raw_cell in raw_row.get("tableCells") or []
            ]
            rows.append(TableRow(cells=cells))
        return Table(rows=rows)

    def _glyph_type(self, list_id: str, level: int) -> GlyphType:
        definition = self._lists.get(list_id) or {}
        levels = (definition.get("listProperties") or {}).get("nestingLevels") or []
        if level >= len(levels):
            return GlyphType.BULLET
        nesting = levels[level] or {}
        symbol = nesting.get("glyphSymbol")
        if symbol:
            return _GLYPH_SYMBOLS.get(symbol, GlyphType.BULLET)
        return _GLYPH_TYPES.get(nesting.get("glyphType"), GlyphType.BULLET)


def load_document(payload: dict[str, Any]) -> Document:
    return DocsApiParser(payload).parse()


def load_document_file(path: Path) -> Document:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DocumentFormatError(f"Invalid JSON in {path}: {exc}") from exc
    return load_document(payload)


__all__ = [
    "DocsApiParser",
    "DocumentFormatError",
    "load_document",
    "load_document_file",
]
