"""Convert a Google Docs API document export into Markdown."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from doc2md.core.config import ConfigError, ConfigManager, TocMode
from doc2md.core.logging import init_logging
from doc2md.services.converter import Doc2MdConverter
from doc2md.services.docs_api import DocumentFormatError, load_document, load_document_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="doc2md",
        description="Convert a Google Docs API JSON document into Markdown.",
    )
    parser.add_argument("input", help="Docs API JSON file, or '-' to read stdin.")
    parser.add_argument("-o", "--output", help="Write Markdown here instead of stdout.")
    parser.add_argument("--config", help="Path to a JSON config file.")
    parser.add_argument(
        "--toc",
        choices=[mode.value for mode in TocMode],
        help="How to render a table of contents.",
    )
    parser.add_argument(
        "--list-indent",
        type=int,
        help="Spaces of padding per list nesting level.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result (markdown + warnings) as JSON.",
    )
    parser.add_argument("--log-dir", help="Directory for the log file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    manager = ConfigManager(Path(args.config) if args.config else None)
    overrides: dict[str, object] = {}
    if args.toc:
        overrides["toc_mode"] = TocMode(args.toc)
    if args.list_indent is not None:
        overrides["list_indent_width"] = args.list_indent
    config = manager.config.model_copy(update=overrides)

    if args.input == "-":
        document = load_document(json.loads(sys.stdin.read()))
    else:
        document = load_document_file(Path(args.input))

    result = Doc2MdConverter(config).convert_document(document)

    if args.json:
        output = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    else:
        output = result.markdown
        for warning in result.warnings:
            print(f"line {warning.line}: {warning.message}", file=sys.stderr)

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info("Markdown written to {}", args.output)
    else:
        print(output)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    init_logging(
        Path(args.log_dir) if args.log_dir else None,
        level="DEBUG" if args.verbose else "WARNING",
    )
    try:
        return run(args)
    except (DocumentFormatError, ConfigError) as exc:
        print(f"doc2md: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"doc2md: invalid JSON on stdin: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"doc2md: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
