from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Iterable

from bs4 import BeautifulSoup, NavigableString  # type: ignore

from .align import AlignedSegment, AlignmentResult, align
from .brackets import BracketKind, combine_contiguous, scan
from .options import RubyOptions

__all__ = [
    "BODY_BRACKET",
    "READING_BRACKET",
    "TEXT_MODES",
    "RubySpan",
    "find_ruby_spans",
    "render_html",
    "render_text",
    "segments_to_html",
    "segments_to_text",
    "set_debug_logging",
]

BODY_BRACKET = BracketKind("body", "[", "]")
READING_BRACKET = BracketKind("reading", "{", "}")
TEXT_MODES = ("parens", "reading")

_DEBUG_LOG = False


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def _debug_log(message: str) -> None:
    if _DEBUG_LOG:
        print(f"[rubymark debug] {message}", file=sys.stderr)


@dataclass(frozen=True)
class RubySpan:
    body: str
    reading: str | None
    result: AlignmentResult
    extra_readings: tuple[str, ...] = ()


Emitter = Callable[[AlignmentResult, RubyOptions], str]


def _accept_span(body: str, readings: list[str], options: RubyOptions) -> RubySpan | None:
    if not body.strip():
        _debug_log(f"skipping [{body}]: empty body")
        return None
    reading: str | None = readings[0] if readings else None
    if reading is None or not reading.strip():
        if not options.lang:
            _debug_log(f"skipping [{body}]: empty reading")
            return None
        reading = None
    result = align(
        body,
        reading,
        options.extra_separators,
        options.extra_combinators,
        options.extra_kanji,
    )
    if reading is not None and not result.matched:
        _debug_log(f"fallback to whole-word reading for [{body}]{{{reading}}}")
    return RubySpan(body=body, reading=reading, result=result, extra_readings=tuple(readings[1:]))


class _RubyFolder:
    """Collects one body bracket and its reading brackets, then emits markup."""

    def __init__(self, options: RubyOptions, emit: Emitter) -> None:
        self.options = options
        self.emit = emit
        self.spans: list[RubySpan] = []
        self._body = ""
        self._readings: list[str] = []

    def __call__(self, acc: str, piece: str, kind: str | None) -> str:
        if kind == BODY_BRACKET.name:
            self._body = piece
            self._readings = []
            return acc
        if kind == READING_BRACKET.name:
            self._readings.append(piece)
            return acc
        return acc + self._finish()

    def _finish(self) -> str:
        raw_readings = [READING_BRACKET.open + r + READING_BRACKET.close for r in self._readings]
        span = _accept_span(self._body, self._readings, self.options)
        if span is None:
            return BODY_BRACKET.open + self._body + BODY_BRACKET.close + "".join(raw_readings)
        self.spans.append(span)
        return self.emit(span.result, self.options) + "".join(raw_readings[1:])


def _fold(text: str, options: RubyOptions, emit: Emitter) -> tuple[str, list[RubySpan]]:
    folder = _RubyFolder(options, emit)
    tokens = scan(text, [BODY_BRACKET, READING_BRACKET])
    rendered = combine_contiguous(tokens, BODY_BRACKET, READING_BRACKET, folder)
    return rendered, folder.spans


def segments_to_html(segments: Iterable[AlignedSegment], options: RubyOptions | None = None) -> str:
    """
    Build a single ``<ruby>`` element for aligned segments.

    Annotated segments become ``body<rp>(</rp><rt>reading</rt><rp>)</rp>``
    and plain ones ``body<rt></rt>``.
    """
    opts = options or RubyOptions()
    soup = BeautifulSoup("", "html.parser")
    attrs = {"lang": opts.lang} if opts.lang else {}
    ruby = soup.new_tag("ruby", attrs=attrs)
    for segment in segments:
        ruby.append(NavigableString(segment.body))
        if not segment.reading:
            ruby.append(soup.new_tag("rt"))
            continue
        if opts.fallback_parens:
            rp_open = soup.new_tag("rp")
            rp_open.string = opts.open_paren or ""
            ruby.append(rp_open)
        rt = soup.new_tag("rt")
        rt.string = segment.reading
        ruby.append(rt)
        if opts.fallback_parens:
            rp_close = soup.new_tag("rp")
            rp_close.string = opts.close_paren or ""
            ruby.append(rp_close)
    return str(ruby)


def segments_to_text(
    segments: Iterable[AlignedSegment],
    options: RubyOptions | None = None,
    mode: str = "parens",
) -> str:
    if mode not in TEXT_MODES:
        raise ValueError(f"Unknown text mode: {mode!r} (expected one of {', '.join(TEXT_MODES)})")
    opts = options or RubyOptions()
    parens = opts.fallback_parens or "()"
    parts: list[str] = []
    for segment in segments:
        if not segment.reading:
            parts.append(segment.body)
        elif mode == "reading":
            parts.append(segment.reading)
        else:
            parts.append(f"{segment.body}{parens[0]}{segment.reading}{parens[1]}")
    return "".join(parts)


def find_ruby_spans(text: str, options: RubyOptions | None = None) -> list[RubySpan]:
    _, spans = _fold(text, options or RubyOptions(), lambda result, opts: "")
    return spans


def render_html(text: str, options: RubyOptions | None = None) -> str:
    """Replace every ``[body]{reading}`` group in ``text`` with ``<ruby>`` markup."""
    rendered, _ = _fold(
        text,
        options or RubyOptions(),
        lambda result, opts: segments_to_html(result.segments, opts),
    )
    return rendered


def render_text(text: str, options: RubyOptions | None = None, mode: str = "parens") -> str:
    """
    Replace every ``[body]{reading}`` group with plain text.

    ``mode="parens"`` writes each reading in the fallback parentheses after
    its body; ``mode="reading"`` replaces annotated text by its reading.
    """
    if mode not in TEXT_MODES:
        raise ValueError(f"Unknown text mode: {mode!r} (expected one of {', '.join(TEXT_MODES)})")
    rendered, _ = _fold(
        text,
        options or RubyOptions(),
        lambda result, opts: segments_to_text(result.segments, opts, mode),
    )
    return rendered
