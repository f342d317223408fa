from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

from doc2md.core.config import ConverterConfig
from doc2md.services.footnotes import FootnoteCollector

_BLANK_RUN_RE = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class ConversionWarning:
    message: str
    line: int = 1


@dataclass
class ConversionResult:
    markdown: str
    warnings: list[ConversionWarning] = field(default_factory=list)
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "markdown": self.markdown,
            "warnings": [asdict(warning) for warning in self.warnings],
        }


@dataclass(frozen=True)
class Checkpoint:
    markdown: str
    skip_next_newline: bool


class ConversionContext:
    """Mutable state shared by every step of one conversion call.

    Appended text never keeps more than two consecutive newlines and never
    starts with a newline, so ``line_number`` always matches the final output.
    A nested context (footnote bodies) owns its own text but shares list
    counters, footnotes and warnings with its parent.
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        *,
        parent: "ConversionContext | None" = None,
    ) -> None:
        self._parent = parent
        self._markdown = ""
        self._skip_next_newline = False
        self.table_cell_depth = 0
        # True while the last rendered block was a list item.
        self.list_open = False
        if parent is not None:
            self.config = parent.config
            self.footnotes = parent.footnotes
            self.warnings = parent.warnings
            self.list_counters = parent.list_counters
        else:
            self.config = config or ConverterConfig()
            self.footnotes = FootnoteCollector()
            self.warnings: list[ConversionWarning] = []
            self.list_counters: dict[tuple[str, int], int] = {}

    @property
    def markdown(self) -> str:
        return self._markdown

    @property
    def in_table_cell(self) -> bool:
        return self.table_cell_depth > 0

    def nested(self) -> "ConversionContext":
        return ConversionContext(parent=self)

    def append(self, text: str) -> None:
        if self._skip_next_newline:
            text = text.lstrip("\n")
            self._skip_next_newline = False
        if not self._markdown:
            text = text.lstrip("\n")
        if not text:
            return
        text = _BLANK_RUN_RE.sub("\n\n", text)
        trailing = len(self._markdown) - len(self._markdown.rstrip("\n"))
        leading = len(text) - len(text.lstrip("\n"))
        excess = trailing + leading - 2
        if excess > 0:
            text = text[min(excess, leading):]
        self._markdown += text

    def ensure_newline(self) -> None:
        if self.in_table_cell:
            return
        if self._markdown and not self._markdown.endswith("\n"):
            self._markdown += "\n"

    def skip_next_newline(self) -> None:
        self._skip_next_newline = True

    def checkpoint(self) -> Checkpoint:
        return Checkpoint(self._markdown, self._skip_next_newline)

    def rollback(self, checkpoint: Checkpoint) -> None:
        self._markdown = checkpoint.markdown
        self._skip_next_newline = checkpoint.skip_next_newline

    def changed_since(self, checkpoint: Checkpoint) -> bool:
        return self._markdown != checkpoint.markdown

    def insert(self, position: int, text: str) -> None:
        self._markdown = self._markdown[:position] + text + self._markdown[position:]

    def trim_trailing(self, position: int) -> None:
        """Drop trailing whitespace appended after ``position``."""
        head, tail = self._markdown[:position], self._markdown[position:]
        self._markdown = head + tail.rstrip()

    def line_number(self) -> int:
        if self._parent is not None:
            return self._parent.line_number()
        return self._markdown.count("\n") + 1

    def warn(self, message: str) -> None:
        line = self.line_number()
        self.warnings.append(ConversionWarning(message=message, line=line))
        logger.debug("Conversion warning at line {}: {}", line, message)

    def next_ordinal(self, list_id: str, nesting_level: int) -> int:
        key = (list_id, nesting_level)
        value = self.list_counters.get(key, 0) + 1
        self.list_counters[key] = value
        return value

    def finish(self, title: str | None = None) -> ConversionResult:
        markdown = self._markdown.strip("\n").rstrip()
        if len(self.footnotes):
            markdown = f"{markdown}\n\n{self.footnotes.render()}" if markdown else self.footnotes.render()
        return ConversionResult(markdown=markdown, warnings=list(self.warnings), title=title)


__all__ = [
    "Checkpoint",
    "ConversionContext",
    "ConversionResult",
    "ConversionWarning",
]
