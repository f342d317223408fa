from __future__ import annotations

from doc2md.core.config import ConverterConfig
from doc2md.services.document import TextRun, TextStyle

_QUOTES = str.maketrans({"\u201c": "\"", "\u201d": "\"", "\u2018": "'", "\u2019": "'"})
_LINE_BREAKS = str.maketrans({"\r": "\n", "\u000b": "\n", "\u2028": "\n", "\u2029": "\n"})


def _wrap(value: str, marker: str) -> str:
    core = value.strip()
    start = len(value) - len(value.lstrip())
    return f"{value[:start]}{marker}{core}{marker}{value[start + len(core):]}"


def _apply_emphasis(value: str, style: TextStyle, *, is_link: bool) -> str:
    if style.strikethrough:
        value = _wrap(value, "~~")
    if style.underline and not is_link:
        value = _wrap(value, "__")
    if style.italic:
        value = _wrap(value, "*")
    if style.bold:
        value = _wrap(value, "**")
    return value


def format_text_run(
    run: TextRun, config: ConverterConfig | None = None, *, strip: bool = True
) -> str:
    """Rebuild inline Markdown for ``run`` from its style change offsets.

    Spans are processed right to left so splicing never shifts an offset that
    is still to be visited. A link or monospace span absorbs the spans before
    it that carry the same URL or font, since editors split such spans
    arbitrarily.

    With ``strip=False`` the surrounding whitespace is kept so a caller can
    join the run with inline siblings (images, chips) and trim only at the
    paragraph edges.
    """
    config = config or ConverterConfig()
    text = run.text.translate(_LINE_BREAKS)
    if config.normalize_quotes:
        text = text.translate(_QUOTES)

    indices = run.attribute_indices()
    result = text
    last_offset = len(text)
    i = len(indices) - 1
    while i >= 0:
        offset = indices[i]
        style = run.style_at(offset)
        url = style.link_url
        if url:
            # Consecutive change offsets always bound adjacent spans, so only
            # the URL (or font below) needs comparing.
            while i >= 1 and run.link_url(indices[i - 1]) == url:
                i -= 1
                offset = indices[i]
            value = f"[{text[offset:last_offset]}]({url})"
        elif config.is_monospace(style.font_family):
            font = style.font_family
            while i >= 1 and run.font_family(indices[i - 1]) == font:
                i -= 1
                offset = indices[i]
            value = f"`{text[offset:last_offset]}`"
        else:
            value = text[offset:last_offset]

        if text[offset:last_offset].strip():
            value = _apply_emphasis(value, run.style_at(offset), is_link=bool(url))

        result = result[:offset] + value + result[last_offset:]
        last_offset = offset
        i -= 1
    return result.strip() if strip else result


__all__ = ["format_text_run"]
