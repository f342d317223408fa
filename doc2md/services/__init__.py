from .context import ConversionContext, ConversionResult, ConversionWarning
from .converter import Doc2MdConverter, convert_document, convert_elements
from .docs_api import DocsApiParser, DocumentFormatError, load_document, load_document_file
from .footnotes import FootnoteCollector
from .list_numbering import prefix_for
from .table_renderer import render_table
from .text_formatter import format_text_run

__all__ = [
    "ConversionContext",
    "ConversionResult",
    "ConversionWarning",
    "Doc2MdConverter",
    "convert_document",
    "convert_elements",
    "DocsApiParser",
    "DocumentFormatError",
    "load_document",
    "load_document_file",
    "FootnoteCollector",
    "prefix_for",
    "render_table",
    "format_text_run",
]
