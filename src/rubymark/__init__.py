from .align import AlignedSegment, AlignmentResult, Run, RunKind, align, split_reading, split_runs
from .brackets import (
    BracketError,
    BracketKind,
    Bracketed,
    Literal,
    ScanIssue,
    combine_contiguous,
    parse_contiguous,
    scan,
)
from .chars import KANJI_LIKE_MARKS, is_combinator, is_kanji, is_separator
from .options import OptionsError, RubyOptions, load_options
from .ruby import RubySpan, find_ruby_spans, render_html, render_text, segments_to_html

__all__ = [
    "AlignedSegment",
    "AlignmentResult",
    "Run",
    "RunKind",
    "align",
    "split_reading",
    "split_runs",
    "BracketError",
    "BracketKind",
    "Bracketed",
    "Literal",
    "ScanIssue",
    "combine_contiguous",
    "parse_contiguous",
    "scan",
    "KANJI_LIKE_MARKS",
    "is_kanji",
    "is_separator",
    "is_combinator",
    "OptionsError",
    "RubyOptions",
    "load_options",
    "RubySpan",
    "find_ruby_spans",
    "render_html",
    "render_text",
    "segments_to_html",
]
