from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from importlib import metadata
from pathlib import Path

import tomllib
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .align import align
from .brackets import Bracketed, scan
from .options import OptionsError, RubyOptions, load_options
from .ruby import (
    BODY_BRACKET,
    READING_BRACKET,
    TEXT_MODES,
    render_html,
    render_text,
    set_debug_logging,
)


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
    __version__ = metadata.version("rubymark")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"rubymark {__version__}",
    )


def _add_option_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="JSON or TOML options file (defaults to $RUBYMARK_CONFIG when set).",
    )
    parser.add_argument(
        "--lang",
        help="Locale tag written to every <ruby> element, e.g. ja-JP.",
    )
    parens = parser.add_mutually_exclusive_group()
    parens.add_argument(
        "--fallback-parens",
        help="Two characters wrapping readings where ruby is unsupported (default: 【】).",
    )
    parens.add_argument(
        "--no-fallback-parens",
        action="store_true",
        help="Do not emit <rp> fallback parentheses.",
    )
    parser.add_argument(
        "--extra-separators",
        help="Additional characters that split readings between kanji.",
    )
    parser.add_argument(
        "--extra-combinators",
        help="Additional characters that mark a kanji boundary without splitting the reading.",
    )
    parser.add_argument(
        "--extra-kanji",
        help="Additional characters to treat as kanji, e.g. 々〆ヵヶ.",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rubymark",
        description=(
            "Furigana markup: turn [body]{reading} annotations into <ruby> markup. "
            "Commands: render, align, scan."
        ),
    )
    _add_version_flag(ap)
    ap.add_argument(
        "command",
        choices=["render", "align", "scan"],
        help="Subcommand to run; see `rubymark <command> --help`.",
    )
    return ap


def build_render_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rubymark render",
        description="Render [body]{reading} annotations in text. Reads stdin when no text is given.",
    )
    _add_version_flag(ap)
    ap.add_argument("text", nargs="*", help="Text to render. Multiple arguments are joined by spaces.")
    ap.add_argument(
        "-f",
        "--format",
        choices=["html", *TEXT_MODES],
        default="html",
        help=(
            "Output format: 'html' (default) emits <ruby> tags, 'parens' writes readings in "
            "parentheses after their kanji, 'reading' replaces annotated kanji by their readings."
        ),
    )
    ap.add_argument(
        "--debug",
        action="store_true",
        help="Report skipped annotations and whole-word fallbacks on stderr.",
    )
    _add_option_flags(ap)
    return ap


def build_align_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rubymark align",
        description="Show how a reading is distributed over a body. Exits with 1 on whole-word fallback.",
    )
    _add_version_flag(ap)
    ap.add_argument("body", help="Annotated text, e.g. 可愛い犬")
    ap.add_argument("reading", help="Reading, e.g. か.わい.い.いぬ")
    _add_option_flags(ap)
    return ap


def build_scan_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rubymark scan",
        description="Print the bracket tokens found in text.",
    )
    _add_version_flag(ap)
    ap.add_argument("text", nargs="+", help="Text to scan.")
    return ap


def _resolve_options(args: argparse.Namespace) -> RubyOptions:
    options = load_options(getattr(args, "config", None))
    updates: dict[str, object] = {}
    if getattr(args, "lang", None):
        updates["lang"] = args.lang
    if getattr(args, "no_fallback_parens", False):
        updates["fallback_parens"] = None
    elif getattr(args, "fallback_parens", None) is not None:
        updates["fallback_parens"] = args.fallback_parens
    if getattr(args, "extra_separators", None) is not None:
        updates["extra_separators"] = args.extra_separators
    if getattr(args, "extra_combinators", None) is not None:
        updates["extra_combinators"] = args.extra_combinators
    if getattr(args, "extra_kanji", None) is not None:
        updates["extra_kanji"] = args.extra_kanji
    if updates:
        options = replace(options, **updates)
    return options


def _run_render(args: argparse.Namespace) -> int:
    set_debug_logging(bool(getattr(args, "debug", False)))
    options = _resolve_options(args)
    if args.text:
        text = " ".join(args.text)
        trailer = "\n"
    else:
        text = sys.stdin.read()
        trailer = ""
    if args.format == "html":
        rendered = render_html(text, options)
    else:
        rendered = render_text(text, options, mode=args.format)
    sys.stdout.write(rendered + trailer)
    return 0


def _run_align(args: argparse.Namespace) -> int:
    options = _resolve_options(args)
    result = align(
        args.body,
        args.reading,
        options.extra_separators,
        options.extra_combinators,
        options.extra_kanji,
    )
    console = Console()
    table = Table(title=None)
    table.add_column("body")
    table.add_column("reading")
    for segment in result.segments:
        table.add_row(Text(segment.body), Text(segment.reading if segment.reading is not None else "-"))
    console.print(table)
    console.print(Text(f"matched: {'yes' if result.matched else 'no'}"))
    return 0 if result.matched else 1


def _run_scan(args: argparse.Namespace) -> int:
    tokens = scan(" ".join(args.text), [BODY_BRACKET, READING_BRACKET])
    console = Console()
    table = Table(title=None)
    table.add_column("kind")
    table.add_column("raw")
    table.add_column("issue")
    for token in tokens:
        if isinstance(token, Bracketed):
            table.add_row(token.kind.name, Text(token.raw), "")
        else:
            table.add_row("literal", Text(token.raw), token.issue.value if token.issue else "")
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    commands = {
        "render": (build_render_parser, _run_render),
        "align": (build_align_parser, _run_align),
        "scan": (build_scan_parser, _run_scan),
    }
    if argv and argv[0] in commands:
        build, run = commands[argv[0]]
        args = build().parse_args(argv[1:])
        try:
            return run(args)
        except OptionsError as exc:
            Console(stderr=True).print(f"[red]error:[/red] {escape(str(exc))}", soft_wrap=True)
            return 2

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    parser.parse_args(argv)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
