from __future__ import annotations

_CONTINUATION_INDENT = "    "


class FootnoteCollector:
    """Numbers footnotes in reference order and keeps their definitions."""

    def __init__(self) -> None:
        self._definitions: list[str] = []

    def __len__(self) -> int:
        return len(self._definitions)

    def add(self, body_markdown: str) -> str:
        index = len(self._definitions) + 1
        lines = body_markdown.strip().split("\n")
        body = "\n".join(
            [lines[0], *(f"{_CONTINUATION_INDENT}{line}" if line else "" for line in lines[1:])]
        )
        self._definitions.append(f"[^{index}]: {body}".rstrip())
        return f"[^{index}] "

    @property
    def definitions(self) -> list[str]:
        return list(self._definitions)

    def render(self) -> str:
        return "\n".join(self._definitions)


__all__ = ["FootnoteCollector"]
