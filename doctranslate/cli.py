"""Command line entry points for converting and translating documents."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from doctranslate.config import settings
from doctranslate.conversion import extract_markup, markup_to_docx
from doctranslate.errors import DocTranslateError
from doctranslate.llm.translator import MarkupTranslator
from doctranslate.services.translation_service import download_filename, resolve_file_type

logger = logging.getLogger(__name__)


def _read_markup(path: Path) -> str:
    file_type = resolve_file_type(path.name, None)
    return extract_markup(path.read_bytes(), file_type).markup


def cmd_markup(args: argparse.Namespace) -> None:
    markup = _read_markup(Path(args.input))
    if args.output:
        Path(args.output).write_text(markup, encoding="utf-8")
        logger.info("Wrote markup to %s", args.output)
    else:
        sys.stdout.write(markup)


def cmd_docx(args: argparse.Namespace) -> None:
    source = Path(args.input)
    output = Path(args.output) if args.output else source.with_suffix(".docx")
    output.write_bytes(markup_to_docx(source.read_text(encoding="utf-8"), title=source.stem))
    logger.info("Wrote %s", output)


def cmd_translate(args: argparse.Namespace) -> None:
    source = Path(args.input)
    markup = _read_markup(source)
    translated = MarkupTranslator().translate(
        markup,
        args.source,
        args.target,
        preserve_formatting=not args.no_formatting,
        custom_prompt=args.prompt,
    )
    output = Path(args.output) if args.output else source.with_name(download_filename(source.name, args.target))
    output.write_bytes(markup_to_docx(translated, title=output.stem))
    logger.info("Wrote %s", output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="doctranslate", description="Document translation tools")
    sub = parser.add_subparsers(dest="command", required=True)

    markup = sub.add_parser("markup", help="Print the normalized markup of a PDF or .docx file")
    markup.add_argument("input")
    markup.add_argument("-o", "--output", help="Write markup to this file instead of stdout")
    markup.set_defaults(func=cmd_markup)

    docx = sub.add_parser("docx", help="Pack a markup file into a .docx document")
    docx.add_argument("input")
    docx.add_argument("-o", "--output")
    docx.set_defaults(func=cmd_docx)

    translate = sub.add_parser("translate", help="Translate a PDF or .docx file into a .docx document")
    translate.add_argument("input")
    translate.add_argument("--target", required=True, help="Target language code, e.g. es")
    translate.add_argument("--source", default="en", help="Source language code (default: en)")
    translate.add_argument("--prompt", help="Additional instructions for the translator")
    translate.add_argument("--no-formatting", action="store_true", help="Do not ask the model to keep markup")
    translate.add_argument("-o", "--output")
    translate.set_defaults(func=cmd_translate)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level)
    try:
        args.func(args)
    except DocTranslateError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
