from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import ClassVar, Optional

from pydantic import BaseModel, Field, ValidationError

from doc2md.core.paths import default_config_path


class ConfigError(RuntimeError):
    pass


class TocMode(str, Enum):
    omit = "omit"
    placeholder = "placeholder"


def _default_monospace_fonts() -> list[str]:
    return [
        "Courier New",
        "Consolas",
        "Roboto Mono",
        "Source Code Pro",
        "Inconsolata",
        "Ubuntu Mono",
    ]


class ConverterConfig(BaseModel):
    toc_mode: TocMode = TocMode.omit
    list_indent_width: int = Field(default=1, ge=0)
    monospace_fonts: list[str] = Field(default_factory=_default_monospace_fonts)
    image_placeholder: str = "WARN_REPLACE_IMG"
    horizontal_rule: str = "---"
    normalize_quotes: bool = False

    def is_monospace(self, font_family: str | None) -> bool:
        if not font_family:
            return False
        wanted = font_family.strip().lower()
        return any(font.strip().lower() == wanted for font in self.monospace_fonts)


_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigManager:
    _instance: ClassVar[Optional["ConfigManager"]] = None

    def __init__(self, config_path: Optional[Path] = None) -> None:
        env_path = os.getenv("DOC2MD_CONFIG")
        if config_path is None and env_path:
            config_path = Path(env_path)
        self._config_path = (config_path or default_config_path()).expanduser()
        self._config = self._load_config()

    @property
    def config(self) -> ConverterConfig:
        return self._config

    @property
    def config_path(self) -> Path:
        return self._config_path

    def reload(self) -> ConverterConfig:
        self._config = self._load_config()
        return self._config

    def _load_config(self) -> ConverterConfig:
        data: dict[str, object] = {}
        if self._config_path.exists():
            try:
                data = json.loads(self._config_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Invalid config file {self._config_path}: {exc}") from exc
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {self._config_path} must contain a JSON object")

        env_toc = os.getenv("DOC2MD_TOC_MODE")
        if env_toc:
            data["toc_mode"] = env_toc.strip().lower()

        env_indent = os.getenv("DOC2MD_LIST_INDENT")
        if env_indent:
            data["list_indent_width"] = env_indent.strip()

        env_fonts = os.getenv("DOC2MD_MONOSPACE_FONTS")
        if env_fonts:
            data["monospace_fonts"] = [
                font.strip() for font in env_fonts.split(",") if font.strip()
            ]

        env_placeholder = os.getenv("DOC2MD_IMAGE_PLACEHOLDER")
        if env_placeholder:
            data["image_placeholder"] = env_placeholder

        env_quotes = os.getenv("DOC2MD_NORMALIZE_QUOTES")
        if env_quotes:
            data["normalize_quotes"] = env_quotes.strip().lower() in _TRUE_VALUES

        try:
            return ConverterConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def get(cls) -> "ConfigManager":
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


__all__ = ["ConfigError", "ConfigManager", "ConverterConfig", "TocMode"]
