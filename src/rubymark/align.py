from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .chars import is_combinator, is_kanji, is_separator

__all__ = [
    "AlignedSegment",
    "AlignmentResult",
    "Run",
    "RunKind",
    "align",
    "split_reading",
    "split_runs",
]


class RunKind(str, Enum):
    KANJI = "kanji"
    LITERAL = "literal"


@dataclass(frozen=True)
class Run:
    text: str
    kind: RunKind

    @property
    def is_kanji(self) -> bool:
        return self.kind is RunKind.KANJI


@dataclass(frozen=True)
class AlignedSegment:
    body: str
    reading: str | None = None


@dataclass(frozen=True)
class AlignmentResult:
    """
    Ordered body sub-spans with their readings.

    ``matched`` is False when the reading could not be distributed over the
    body; the result then holds a single whole-body segment carrying the
    whole reading (or no reading at all when none was given).
    """

    segments: tuple[AlignedSegment, ...]
    matched: bool

    @property
    def body(self) -> str:
        return "".join(segment.body for segment in self.segments)

    def as_pairs(self) -> list[tuple[str, str | None]]:
        return [(segment.body, segment.reading) for segment in self.segments]


def split_runs(body: str, kanji: str = "") -> list[Run]:
    runs: list[Run] = []
    buf = ""
    current: RunKind | None = None
    for ch in body:
        kind = RunKind.KANJI if is_kanji(ch, kanji) else RunKind.LITERAL
        if current is not None and kind is not current:
            runs.append(Run(buf, current))
            buf = ""
        current = kind
        buf += ch
    if buf and current is not None:
        runs.append(Run(buf, current))
    return runs


def split_reading(span: str, separators: str = "", combinators: str = "") -> list[str]:
    """
    Break a reading span into per-character pieces.

    Separator runs split, separators at either edge are dropped, and
    combinator characters vanish so the pieces on both sides join.
    """
    pieces: list[str] = []
    buf = ""
    for ch in span:
        if is_combinator(ch, combinators):
            continue
        if is_separator(ch, separators):
            if buf:
                pieces.append(buf)
                buf = ""
            continue
        buf += ch
    if buf:
        pieces.append(buf)
    return pieces


def _find_anchor(
    reading: str,
    anchor: str,
    start: int,
    separators: str,
    combinators: str,
    owned: bool,
) -> int | None:
    pos = reading.find(anchor, start)
    if not owned:
        return None if pos == -1 else pos
    # The preceding kanji run needs a non-empty share of the reading.
    content = start
    while content < len(reading) and (
        is_separator(reading[content], separators) or is_combinator(reading[content], combinators)
    ):
        content += 1
    first_valid: int | None = None
    while pos != -1:
        if pos > content:
            end = pos + len(anchor)
            bounded = is_separator(reading[pos - 1], separators) and (
                end == len(reading) or is_separator(reading[end], separators)
            )
            if bounded:
                return pos
            if first_valid is None:
                first_valid = pos
        pos = reading.find(anchor, pos + 1)
    return first_valid


def _split_kanji_run(
    run: Run,
    span: str,
    separators: str,
    combinators: str,
) -> list[AlignedSegment] | None:
    pieces = split_reading(span, separators, combinators)
    if len(pieces) == len(run.text):
        return [AlignedSegment(ch, piece) for ch, piece in zip(run.text, pieces)]
    if len(pieces) == 1:
        return [AlignedSegment(run.text, pieces[0])]
    return None


def _align_runs(
    runs: list[Run],
    reading: str,
    separators: str,
    combinators: str,
) -> list[AlignedSegment] | None:
    segments: list[AlignedSegment] = []
    cursor = 0
    pending: Run | None = None
    for run in runs:
        if run.is_kanji:
            pending = run
            continue
        if not run.text:
            continue
        found = _find_anchor(reading, run.text, cursor, separators, combinators, pending is not None)
        if found is None:
            return None
        span = reading[cursor:found]
        if pending is not None:
            resolved = _split_kanji_run(pending, span, separators, combinators)
            if resolved is None:
                return None
            segments.extend(resolved)
            pending = None
        elif split_reading(span, separators, combinators):
            # Reading text before a leading literal has no kanji to belong to.
            return None
        segments.append(AlignedSegment(run.text, None))
        cursor = found + len(run.text)

    tail = reading[cursor:]
    if pending is not None:
        resolved = _split_kanji_run(pending, tail, separators, combinators)
        if resolved is None:
            return None
        segments.extend(resolved)
    elif split_reading(tail, separators, combinators):
        return None
    return segments


def align(
    body: str,
    reading: str | None,
    separators: str = "",
    combinators: str = "",
    kanji: str = "",
) -> AlignmentResult:
    """
    Distribute ``reading`` over ``body``.

    Literal (non-kanji) runs of the body are located verbatim in the reading
    and anchor the reading spans of the kanji runs between them. A kanji
    run's span is split by separators (``.．。・|｜/／``, whitespace and
    ``separators``); combinators (``+＋`` and ``combinators``) join pieces
    back together. Characters in ``kanji`` count as kanji on top of the
    CJK ideograph blocks. A run whose span yields one piece per character is
    annotated per character, a single piece covers the whole run, and
    anything else falls back to one whole-body segment with
    ``matched=False``. The pass is greedy and never raises.
    """
    if reading is None:
        return AlignmentResult((AlignedSegment(body, None),), False)
    runs = split_runs(body, kanji)
    if not any(run.is_kanji for run in runs):
        return AlignmentResult((AlignedSegment(body, reading),), True)
    segments = _align_runs(runs, reading, separators, combinators)
    if segments is None:
        return AlignmentResult((AlignedSegment(body, reading),), False)
    return AlignmentResult(tuple(segments), True)
