from doc2md.core.config import ConverterConfig, TocMode
from doc2md.services.context import ConversionWarning
from doc2md.services.converter import Doc2MdConverter, convert_document, convert_elements
from doc2md.services.document import (
    BodySection,
    Document,
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
    Unsupported,
)


def _text(value: str, **style: object) -> TextRun:
    return TextRun.from_segments([(value, TextStyle(**style))])


def _para(value: str = "", heading: ParagraphHeading = ParagraphHeading.NORMAL) -> Paragraph:
    children = [_text(value)] if value else []
    return Paragraph(children=children, heading=heading)


def _bullet(value: str, level: int = 0) -> ListItem:
    return ListItem(children=[_text(value)], nesting_level=level, glyph_type=GlyphType.BULLET)


def _numbered(value: str, list_id: str = "list-1", level: int = 0) -> ListItem:
    return ListItem(
        children=[_text(value)] if value else [],
        list_id=list_id,
        nesting_level=level,
        glyph_type=GlyphType.NUMBER,
    )


def _row(*values: str) -> TableRow:
    return TableRow(cells=[TableCell(children=[_para(value)]) for value in values])


def _convert(*children, config: ConverterConfig | None = None):
    return convert_document(Document(body=BodySection(children=list(children))), config)


def test_heading_with_bold_text() -> None:
    paragraph = Paragraph(children=[_text("Hi", bold=True)], heading=ParagraphHeading.HEADING2)
    assert _convert(paragraph).markdown == "## **Hi**"


def test_heading_levels() -> None:
    result = _convert(
        _para("Title", ParagraphHeading.TITLE),
        _para("Subtitle", ParagraphHeading.SUBTITLE),
        _para("Three", ParagraphHeading.HEADING3),
        _para("Six", ParagraphHeading.HEADING6),
    )
    assert result.markdown == "# Title\n\n# Subtitle\n\n### Three\n\n###### Six"


def test_nested_unordered_list() -> None:
    assert _convert(_bullet("A"), _bullet("B", level=1)).markdown == "* A\n * B"


def test_empty_paragraph_between_headings_is_one_blank_line() -> None:
    result = _convert(
        _para("A", ParagraphHeading.HEADING1),
        _para(""),
        _para("B", ParagraphHeading.HEADING2),
    )
    assert result.markdown == "# A\n\n## B"


def test_plain_paragraphs_are_separated_by_blank_line() -> None:
    assert _convert(_para("First"), _para("Second")).markdown == "First\n\nSecond"


def test_whitespace_is_normalized() -> None:
    result = _convert(_para(), _para(), _para("Only"), _para(), _para(), _para())

    assert result.markdown == "Only"
    assert "\n\n\n" not in result.markdown


def test_ordered_list_numbering_follows_list_identity() -> None:
    result = _convert(
        _numbered("one"),
        _numbered("two"),
        _para("Middle"),
        _numbered("three"),
        _numbered("fresh", list_id="list-2"),
    )
    assert result.markdown == "1. one\n2. two\n\nMiddle\n\n3. three\n1. fresh"


def test_empty_list_item_takes_no_number() -> None:
    result = _convert(_numbered("a"), _numbered(""), _numbered("b"))
    assert result.markdown == "1. a\n2. b"


def test_mixed_nested_list() -> None:
    result = _convert(
        _numbered("Step"),
        _bullet("detail", level=1),
        _numbered("sub", level=1),
        _numbered("Next"),
    )
    assert result.markdown == "1. Step\n * detail\n 1. sub\n2. Next"


def test_table_between_paragraphs() -> None:
    table = Table(rows=[_row("h1", "h2"), _row("a", "b"), _row("c", "d")])
    result = _convert(_para("Intro"), table, _para("Outro"))

    assert result.markdown == (
        "Intro\n\n| h1 | h2 |\n| --- | --- |\n| a | b |\n| c | d |\n\nOutro"
    )


def test_three_row_table_is_four_lines() -> None:
    table = Table(rows=[_row("h1", "h2"), _row("a", "b"), _row("c", "d")])
    lines = _convert(table).markdown.split("\n")

    assert len(lines) == 4
    assert lines[1] == "| --- | --- |"


def test_table_cell_with_several_paragraphs_stays_on_one_line() -> None:
    cell = TableCell(children=[_para("one"), _para(""), _para("two", ParagraphHeading.HEADING3)])
    table = Table(rows=[TableRow(cells=[TableCell(children=[_para("a|b")]), cell])])

    assert _convert(table).markdown == "| a\\|b | one<br>### two |\n| --- | --- |"


def test_table_cell_text_line_breaks() -> None:
    table = Table(rows=[TableRow(cells=[TableCell(children=[_para("x\ny")])])])
    assert _convert(table).markdown == "| x<br>y |\n| --- |"


def test_empty_cells() -> None:
    table = Table(rows=[TableRow(cells=[TableCell(), TableCell(children=[_para("")])])])
    assert _convert(table).markdown == "|  |  |\n| --- | --- |"


def test_nested_table_is_reported() -> None:
    inner = Table(rows=[_row("x")])
    table = Table(rows=[TableRow(cells=[TableCell(children=[inner])])])
    result = _convert(table)

    assert result.markdown == "| (WARN_UNRECOGNIZED_ELEMENT: TABLE) |\n| --- |"
    assert result.warnings == [ConversionWarning("Unrecognized element: TABLE", 1)]


def test_image_placeholder_and_warning() -> None:
    result = _convert(_para("Intro"), Paragraph(children=[InlineImage()]))

    assert result.markdown == "Intro\n\n![](WARN_REPLACE_IMG)"
    assert result.warnings == [ConversionWarning("Image to replace", 3)]


def test_image_alt_title_and_link() -> None:
    image = InlineImage(alt_title="Logo", link_url="https://example.com")
    result = _convert(Paragraph(children=[image]))

    assert result.markdown == "[![Logo](WARN_REPLACE_IMG)](https://example.com)"
    assert len(result.warnings) == 1


def test_custom_image_placeholder() -> None:
    config = ConverterConfig(image_placeholder="TODO_IMAGE")
    image = InlineImage(alt_description="A chart")
    assert _convert(Paragraph(children=[image]), config=config).markdown == "![A chart](TODO_IMAGE)"


def test_unrecognized_inline_element() -> None:
    paragraph = Paragraph(children=[_text("x"), UnknownElement(kind="EQUATION")])
    result = _convert(paragraph)

    assert result.markdown == "x(WARN_UNRECOGNIZED_ELEMENT: EQUATION)"
    assert result.warnings == [ConversionWarning("Unrecognized element: EQUATION", 1)]


def test_unrecognized_block_element_starts_a_new_line() -> None:
    result = _convert(_para("Top"), UnknownElement(kind="CHART"))

    assert result.markdown == "Top\n(WARN_UNRECOGNIZED_ELEMENT: CHART)"
    assert result.warnings == [ConversionWarning("Unrecognized element: CHART", 2)]


def test_warnings_match_sentinel_tokens() -> None:
    result = _convert(
        Paragraph(children=[InlineImage(), UnknownElement(kind="PERSON")]),
        _para("text"),
        Paragraph(children=[InlineImage()]),
    )
    tokens = result.markdown.count("WARN_REPLACE_IMG") + result.markdown.count(
        "WARN_UNRECOGNIZED_ELEMENT"
    )

    assert tokens == len(result.warnings) == 3
    assert [warning.line for warning in result.warnings] == [1, 1, 5]


def test_silent_elements_are_skipped() -> None:
    result = _convert(
        _para("a"),
        TableOfContents(),
        Paragraph(children=[_text("b"), PageBreak(), InlineDrawing()]),
        Unsupported(),
    )

    assert result.markdown == "a\n\nb"
    assert result.warnings == []


def test_table_of_contents_placeholder_option() -> None:
    config = ConverterConfig(toc_mode=TocMode.placeholder)
    result = _convert(TableOfContents(), _para("Body"), config=config)

    assert result.markdown == "[[TOC]]\n\nBody"


def test_horizontal_rule() -> None:
    assert _convert(_para("a"), HorizontalRule(), _para("b")).markdown == "a\n\n---\n\nb"


def test_footnotes_are_collected_at_the_end() -> None:
    first = Footnote(body=FootnoteSection(children=[_para(" Source A")]))
    second = Footnote(body=FootnoteSection(children=[_para("Source B")]))
    result = _convert(
        Paragraph(children=[_text("Claim"), first, _text(" continues.")]),
        Paragraph(children=[_text("More"), second]),
    )

    assert result.markdown == (
        "Claim[^1] continues.\n\nMore[^2]\n\n[^1]: Source A\n[^2]: Source B"
    )


def test_warning_inside_footnote_reports_anchor_line() -> None:
    note = Footnote(body=FootnoteSection(children=[Paragraph(children=[InlineImage()])]))
    result = _convert(_para("Intro"), Paragraph(children=[_text("Text"), note]))

    assert result.warnings == [ConversionWarning("Image to replace", 3)]
    assert result.markdown.endswith("[^1]: ![](WARN_REPLACE_IMG)")


def test_selection_mode() -> None:
    result = convert_elements(
        [
            _para("Title", ParagraphHeading.HEADING1),
            _text("loose text"),
            _bullet("item"),
        ]
    )
    assert result.markdown == "# Title\nloose text\n\n* item"
    assert result.title is None


def test_each_call_starts_fresh() -> None:
    converter = Doc2MdConverter()
    document = Document(body=BodySection(children=[_numbered("a"), _numbered("b")]))

    first = converter.convert_document(document)
    second = converter.convert_document(document)

    assert first.markdown == second.markdown == "1. a\n2. b"


def test_document_title_is_passed_through() -> None:
    result = convert_document(Document(body=BodySection(children=[_para("x")]), title="Notes"))
    assert result.title == "Notes"


def test_body_section_can_be_converted_directly() -> None:
    assert convert_document(BodySection(children=[_para("x")])).markdown == "x"


def test_list_indent_width_option() -> None:
    config = ConverterConfig(list_indent_width=4)
    result = _convert(_bullet("A"), _bullet("B", level=1), config=config)
    assert result.markdown == "* A\n    * B"


def test_empty_paragraph_between_list_items_is_a_blank_line() -> None:
    assert _convert(_bullet("a"), _para(), _bullet("b")).markdown == "* a\n\n* b"


def test_empty_paragraph_between_paragraph_and_list() -> None:
    assert _convert(_para("A"), _para(), _bullet("b")).markdown == "A\n\n* b"


def test_list_after_paragraph_starts_after_blank_line() -> None:
    result = _convert(_para("Steps:"), _numbered("one"), _numbered("two"))
    assert result.markdown == "Steps:\n\n1. one\n2. two"


def test_text_around_inline_image_keeps_spaces() -> None:
    paragraph = Paragraph(children=[_text("See "), InlineImage(), _text(" here")])
    assert _convert(paragraph).markdown == "See ![](WARN_REPLACE_IMG) here"


def test_text_around_chip_keeps_spaces() -> None:
    paragraph = Paragraph(
        children=[_text("Ask "), UnknownElement(kind="PERSON"), _text(" today ")]
    )
    result = _convert(paragraph, _para("Next"))

    assert result.markdown == "Ask (WARN_UNRECOGNIZED_ELEMENT: PERSON) today\n\nNext"


def test_list_item_text_is_trimmed_at_its_edges() -> None:
    item = ListItem(
        children=[_text("  call "), UnknownElement(kind="DATE"), _text(" ")],
        glyph_type=GlyphType.BULLET,
    )
    assert _convert(item).markdown == "* call (WARN_UNRECOGNIZED_ELEMENT: DATE)"


def test_text_around_image_in_table_cell() -> None:
    cell = TableCell(children=[Paragraph(children=[_text("a "), InlineImage(), _text(" b")])])
    table = Table(rows=[TableRow(cells=[cell])])

    assert _convert(table).markdown == "| a ![](WARN_REPLACE_IMG) b |\n| --- |"
