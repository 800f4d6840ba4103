from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from importlib import metadata
from pathlib import Path

import tomllib
from rich.console import Console
from rich.table import Table

from .core import annotate
from .logging_utils import configure_logging
from .markup import convert_html, convert_plain
from .options import DEFAULT_OPTIONS, MatchOptions, load_options

CONFIG_ENV = "FURIGANA_PLUS_CONFIG"
HTML_EXTS = (".html", ".htm", ".xhtml")

logger = logging.getLogger(__name__)


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover - defensive
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("furigana-plus")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"furigana {__version__}",
    )


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    _add_version_flag(parser)
    parser.add_argument(
        "--config",
        help=f"TOML file with match options (default: ${CONFIG_ENV} if set).",
    )
    parser.add_argument(
        "--separators",
        default="",
        help="Extra separator characters, e.g. '_-'.",
    )
    parser.add_argument(
        "--combinators",
        default="",
        help="Extra combinator characters.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="furigana",
        description=(
            "Split {body^reading} annotations into ruby pairs. "
            "Use `furigana match` for a single annotation and `furigana render` for files."
        ),
    )
    _add_version_flag(ap)
    return ap


def build_match_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="furigana match",
        description="Show how a reading is distributed over a body.",
    )
    _add_common_flags(ap)
    ap.add_argument("body", help="Base text, e.g. 可愛い犬")
    ap.add_argument("reading", help="Reading, e.g. か・わい・い・いぬ")
    ap.add_argument(
        "--json",
        action="store_true",
        help="Print the pairs as a JSON array instead of a table.",
    )
    return ap


def build_render_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="furigana render",
        description="Replace {body^reading} spans in a text or HTML file.",
    )
    _add_common_flags(ap)
    ap.add_argument("input_path", help="Input file, or '-' for stdin.")
    ap.add_argument("-o", "--output", help="Write here instead of stdout.")
    ap.add_argument(
        "--html",
        action="store_true",
        help="Treat input as HTML (implied by .html/.htm/.xhtml).",
    )
    ap.add_argument(
        "--fallback",
        action="store_true",
        help="HTML only: wrap readings in <rp> parentheses for readers without ruby support.",
    )
    return ap


def _resolve_options(args: argparse.Namespace) -> MatchOptions:
    config = args.config or os.environ.get(CONFIG_ENV)
    options = DEFAULT_OPTIONS
    if config:
        try:
            options = load_options(Path(config).expanduser())
        except FileNotFoundError as exc:
            raise SystemExit(f"Config file not found: {config}") from exc
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
    if args.separators or args.combinators:
        options = dataclasses.replace(
            options,
            extra_separators=options.extra_separators | frozenset(args.separators),
            extra_combinators=options.extra_combinators | frozenset(args.combinators),
        )
    return options


def _run_match(args: argparse.Namespace) -> int:
    options = _resolve_options(args)
    pairs = annotate(args.body, args.reading, options)
    if args.json:
        print(json.dumps([list(pair) for pair in pairs], ensure_ascii=False))
        return 0
    table = Table("base", "reading")
    for base, reading in pairs:
        table.add_row(base, reading)
    Console().print(table)
    return 0


def _run_render(args: argparse.Namespace) -> int:
    options = _resolve_options(args)
    if args.input_path == "-":
        source = sys.stdin.read()
        is_html = bool(args.html)
    else:
        input_path = Path(args.input_path)
        if not input_path.is_file():
            raise SystemExit(f"Input file not found: {input_path}")
        source = input_path.read_text(encoding="utf-8")
        is_html = bool(args.html) or input_path.suffix.lower() in HTML_EXTS
    if args.fallback and not is_html:
        raise SystemExit("--fallback only applies to HTML input; plain text always uses fallback parentheses.")
    if is_html:
        rendered = convert_html(source, options, fallback=args.fallback)
    else:
        rendered = convert_plain(source, options)
    if args.output:
        output_path = Path(args.output)
        output_path.write_text(rendered, encoding="utf-8")
        logger.debug("Wrote %s", output_path)
    else:
        sys.stdout.write(rendered)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] == "match":
        match_args = build_match_parser().parse_args(argv[1:])
        configure_logging(match_args.debug)
        return _run_match(match_args)
    if argv and argv[0] == "render":
        render_args = build_render_parser().parse_args(argv[1:])
        configure_logging(render_args.debug)
        return _run_render(render_args)

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    parser.parse_args(argv)
    parser.error(f"unknown command: {argv[0]}")


if __name__ == "__main__":
    raise SystemExit(main())
