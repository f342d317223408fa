from __future__ import annotations

import re
from typing import Callable, Iterable

from loguru import logger

from doc2md.core.config import ConverterConfig, TocMode
from doc2md.services.context import ConversionContext, ConversionResult
from doc2md.services.document import (
    BodySection,
    Document,
    Element,
    ElementType,
    Footnote,
    FootnoteSection,
    HorizontalRule,
    InlineImage,
    ListItem,
    Paragraph,
    ParagraphHeading,
    Table,
    TableCell,
    TableOfContents,
    TextRun,
)
from doc2md.services.list_numbering import prefix_for
from doc2md.services.table_renderer import render_table
from doc2md.services.text_formatter import format_text_run

UNRECOGNIZED_TOKEN = "(WARN_UNRECOGNIZED_ELEMENT: {kind})"
TOC_PLACEHOLDER = "[[TOC]]"
IMAGE_WARNING = "Image to replace"
CELL_LINE_BREAK = "<br>"

_HEADING_PREFIXES = {
    ParagraphHeading.TITLE: "# ",
    ParagraphHeading.SUBTITLE: "# ",
    ParagraphHeading.HEADING1: "# ",
    ParagraphHeading.HEADING2: "## ",
    ParagraphHeading.HEADING3: "### ",
    ParagraphHeading.HEADING4: "#### ",
    ParagraphHeading.HEADING5: "##### ",
    ParagraphHeading.HEADING6: "###### ",
}

_SILENT_TYPES = frozenset(
    {
        ElementType.INLINE_DRAWING.value,
        ElementType.UNSUPPORTED.value,
        ElementType.PAGE_BREAK.value,
    }
)

# Kinds that open their own line (or blank line) when rendered.
_BLOCK_TYPES = (Paragraph, ListItem, Table, HorizontalRule, TableOfContents)

_CELL_NEWLINES_RE = re.compile(r"\n+")


def _escape_cell_text(text: str) -> str:
    return _CELL_NEWLINES_RE.sub(CELL_LINE_BREAK, text.replace("|", "\\|"))


class Doc2MdConverter:
    def __init__(self, config: ConverterConfig | None = None) -> None:
        self._config = config or ConverterConfig()
        self._handlers: dict[type, Callable[[Element, ConversionContext], None]] = {
            BodySection: self._render_container,
            FootnoteSection: self._render_container,
            TableCell: self._render_container,
            Paragraph: self._render_paragraph,
            ListItem: self._render_list_item,
            Table: self._render_table,
            TextRun: self._render_text,
            InlineImage: self._render_image,
            Footnote: self._render_footnote,
            HorizontalRule: self._render_horizontal_rule,
            TableOfContents: self._render_table_of_contents,
        }

    @property
    def config(self) -> ConverterConfig:
        return self._config

    def convert_document(self, document: Document | BodySection) -> ConversionResult:
        if isinstance(document, Document):
            body, title = document.body, document.title
        else:
            body, title = document, None
        logger.debug(
            "Converting document {!r} ({} top-level elements)", title, len(body.children)
        )
        context = ConversionContext(self._config)
        self.render(body, context)
        return self._finish(context, title)

    def convert_elements(self, elements: Iterable[Element]) -> ConversionResult:
        selected = list(elements)
        logger.debug("Converting selection of {} elements", len(selected))
        context = ConversionContext(self._config)
        self._render_children(selected, context)
        return self._finish(context, None)

    def render(self, element: Element, context: ConversionContext) -> None:
        if self._is_omitted(element):
            return
        handler = self._handlers.get(type(element))
        if handler is None:
            self._render_unrecognized(element, context)
            return
        handler(element, context)

    def _finish(self, context: ConversionContext, title: str | None) -> ConversionResult:
        result = context.finish(title)
        logger.info(
            "Conversion finished: {} characters, {} warnings, {} footnotes",
            len(result.markdown),
            len(result.warnings),
            len(context.footnotes),
        )
        return result

    def _is_omitted(self, element: Element) -> bool:
        kind = element.type_name
        if kind in _SILENT_TYPES:
            return True
        return (
            kind == ElementType.TABLE_OF_CONTENTS.value
            and self._config.toc_mode is TocMode.omit
        )

    def _render_children(self, children: Iterable[Element], context: ConversionContext) -> None:
        for child in children:
            if self._is_omitted(child):
                continue
            if not isinstance(child, _BLOCK_TYPES):
                context.ensure_newline()
            checkpoint = context.checkpoint()
            self.render(child, context)
            if context.changed_since(checkpoint):
                context.list_open = isinstance(child, ListItem)

    def _render_inline(self, children: Iterable[Element], context: ConversionContext) -> None:
        """Render paragraph content, trimming whitespace only at its edges."""
        content_start = len(context.markdown)
        for child in children:
            if not isinstance(child, TextRun):
                self.render(child, context)
                continue
            text = format_text_run(child, self._config, strip=False)
            if len(context.markdown) == content_start or context.markdown[-1:].isspace():
                text = text.lstrip()
            self._append_text(text, context)
        context.trim_trailing(content_start)

    def _render_container(self, element: Element, context: ConversionContext) -> None:
        self._render_children(element.children, context)

    def _render_paragraph(self, paragraph: Paragraph, context: ConversionContext) -> None:
        checkpoint = context.checkpoint()
        context.append("\n\n" + _HEADING_PREFIXES.get(paragraph.heading, ""))
        content_start = context.checkpoint()
        self._render_inline(paragraph.children, context)
        if not context.changed_since(content_start):
            context.rollback(checkpoint)
            context.append("\n\n")

    def _render_list_item(self, item: ListItem, context: ConversionContext) -> None:
        checkpoint = context.checkpoint()
        if context.list_open or context.in_table_cell:
            context.ensure_newline()
        else:
            context.append("\n\n")
        content_start = context.checkpoint()
        self._render_inline(item.children, context)
        if not context.changed_since(content_start):
            context.rollback(checkpoint)
            return
        context.insert(len(content_start.markdown), prefix_for(item, context))

    def _render_table(self, table: Table, context: ConversionContext) -> None:
        if context.in_table_cell:
            self._render_unrecognized(table, context)
            return
        render_table(table, context, self._render_cell)

    def _render_cell(self, cell: TableCell, context: ConversionContext) -> None:
        rendered_any = False
        for child in cell.children:
            if self._is_omitted(child):
                continue
            checkpoint = context.checkpoint()
            context.skip_next_newline()
            self.render(child, context)
            if not context.changed_since(checkpoint):
                continue
            if rendered_any:
                context.insert(len(checkpoint.markdown), CELL_LINE_BREAK)
            rendered_any = True

    def _render_text(self, run: TextRun, context: ConversionContext) -> None:
        self._append_text(format_text_run(run, self._config), context)

    def _append_text(self, text: str, context: ConversionContext) -> None:
        if context.in_table_cell:
            text = _escape_cell_text(text)
        context.append(text)

    def _render_image(self, image: InlineImage, context: ConversionContext) -> None:
        alt = image.alt_title or image.alt_description or ""
        markup = f"![{alt}]({self._config.image_placeholder})"
        if image.link_url:
            markup = f"[{markup}]({image.link_url})"
        context.warn(IMAGE_WARNING)
        context.append(markup)

    def _render_footnote(self, footnote: Footnote, context: ConversionContext) -> None:
        body_context = context.nested()
        self.render(footnote.body, body_context)
        context.append(context.footnotes.add(body_context.markdown))

    def _render_horizontal_rule(self, rule: HorizontalRule, context: ConversionContext) -> None:
        self._append_block(self._config.horizontal_rule, context)

    def _render_table_of_contents(self, toc: TableOfContents, context: ConversionContext) -> None:
        self._append_block(TOC_PLACEHOLDER, context)

    def _render_unrecognized(self, element: Element, context: ConversionContext) -> None:
        kind = element.type_name
        context.warn(f"Unrecognized element: {kind}")
        context.append(UNRECOGNIZED_TOKEN.format(kind=kind))

    @staticmethod
    def _append_block(text: str, context: ConversionContext) -> None:
        if context.in_table_cell:
            context.append(text)
            return
        context.append(f"\n\n{text}\n\n")


def convert_document(
    document: Document | BodySection, config: ConverterConfig | None = None
) -> ConversionResult:
    return Doc2MdConverter(config).convert_document(document)


def convert_elements(
    elements: Iterable[Element], config: ConverterConfig | None = None
) -> ConversionResult:
    return Doc2MdConverter(config).convert_elements(elements)


__all__ = [
    "CELL_LINE_BREAK",
    "IMAGE_WARNING",
    "TOC_PLACEHOLDER",
    "UNRECOGNIZED_TOKEN",
    "Doc2MdConverter",
    "convert_document",
    "convert_elements",
]
