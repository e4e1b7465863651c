from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence, Union

__all__ = [
    "BracketError",
    "BracketKind",
    "Bracketed",
    "Combine",
    "Literal",
    "ScanIssue",
    "Token",
    "combine_contiguous",
    "parse_contiguous",
    "scan",
]


class BracketError(ValueError):
    """Raised when a Bracketed token is built from text that is not a bracket span."""


class ScanIssue(str, Enum):
    UNTERMINATED = "unterminated"
    MISMATCHED = "mismatched"


@dataclass(frozen=True)
class BracketKind:
    name: str
    open: str
    close: str

    def __post_init__(self) -> None:
        if not self.open or not self.close:
            raise BracketError(f"bracket kind {self.name!r} needs non-empty delimiters")


@dataclass(frozen=True)
class Literal:
    """
    Plain text between brackets.

    ``issue`` is set when the text contains bracket delimiters that did not
    form a span: an opening delimiter that never closed, or a closing
    delimiter with nothing open.
    """

    text: str
    issue: ScanIssue | None = None

    @property
    def raw(self) -> str:
        return self.text


@dataclass(frozen=True)
class Bracketed:
    kind: BracketKind
    raw: str

    def __post_init__(self) -> None:
        open_, close = self.kind.open, self.kind.close
        if len(self.raw) < len(open_) + len(close):
            raise BracketError(f"raw too short - {self.raw!r}")
        if not self.raw.startswith(open_):
            raise BracketError(f"raw not started with {open_!r} - {self.raw!r}")
        if not self.raw.endswith(close):
            raise BracketError(f"raw not ended with {close!r} - {self.raw!r}")

    @property
    def inner(self) -> str:
        return self.raw[len(self.kind.open) : len(self.raw) - len(self.kind.close)]

    def __str__(self) -> str:
        return self.raw


Token = Union[Literal, Bracketed]
# combine(accumulated, piece, kind_name) -> accumulated; kind_name is None on the final call.
Combine = Callable[[str, str, Union[str, None]], str]


def _match_open(raw: str, pos: int, kinds: Sequence[BracketKind]) -> BracketKind | None:
    for kind in kinds:
        if raw.startswith(kind.open, pos):
            return kind
    return None


def _match_close(raw: str, pos: int, kinds: Sequence[BracketKind]) -> BracketKind | None:
    for kind in kinds:
        if raw.startswith(kind.close, pos):
            return kind
    return None


def scan(raw: str, kinds: Iterable[BracketKind]) -> list[Token]:
    """
    Split ``raw`` into literal text and bracket spans.

    The first kind to open owns the span until its depth returns to zero;
    delimiters of other kinds inside it are ordinary characters. Input that
    does not form a bracket span is kept as a ``Literal`` with an ``issue``
    tag, so joining every token's ``raw`` always reproduces ``raw``.
    """
    kind_list = list(kinds)
    tokens: list[Token] = []
    buf = ""
    active: BracketKind | None = None
    depth = 0
    mismatched = False
    pos = 0
    size = len(raw)

    while pos < size:
        if active is None:
            opened = _match_open(raw, pos, kind_list)
            if opened is not None:
                if buf:
                    tokens.append(Literal(buf, ScanIssue.MISMATCHED if mismatched else None))
                    mismatched = False
                active = opened
                depth = 1
                buf = opened.open
                pos += len(opened.open)
                continue
            closed = _match_close(raw, pos, kind_list)
            if closed is not None:
                mismatched = True
                buf += closed.close
                pos += len(closed.close)
                continue
            buf += raw[pos]
            pos += 1
            continue

        # Symmetric delimiters such as "|" cannot nest, so they always close.
        if active.open != active.close and raw.startswith(active.open, pos):
            depth += 1
            buf += active.open
            pos += len(active.open)
            continue
        if raw.startswith(active.close, pos):
            depth -= 1
            buf += active.close
            pos += len(active.close)
            if depth == 0:
                tokens.append(Bracketed(active, buf))
                buf = ""
                active = None
            continue
        buf += raw[pos]
        pos += 1

    if buf:
        if active is not None:
            tokens.append(Literal(buf, ScanIssue.UNTERMINATED))
        else:
            tokens.append(Literal(buf, ScanIssue.MISMATCHED if mismatched else None))
    return tokens


def _is_kind(token: Token, kind: BracketKind) -> bool:
    return isinstance(token, Bracketed) and token.kind.name == kind.name


def combine_contiguous(
    tokens: Iterable[Token],
    opener: BracketKind,
    attacher: BracketKind,
    combine: Combine,
) -> str:
    """
    Rebuild the scanned text, folding each ``opener`` bracket that is
    directly followed by one or more ``attacher`` brackets.

    The fold is seeded with ``combine("", opener_inner, opener.name)``, fed
    ``combine(acc, attacher_inner, attacher.name)`` for every attached
    bracket, and closed with ``combine(acc, "", None)``. The final value
    replaces the whole group; every other token is emitted as raw text.
    """
    items = list(tokens)
    out: list[str] = []
    idx = 0
    while idx < len(items):
        token = items[idx]
        if _is_kind(token, opener) and idx + 1 < len(items) and _is_kind(items[idx + 1], attacher):
            acc = combine("", token.inner, opener.name)  # type: ignore[union-attr]
            idx += 1
            while idx < len(items) and _is_kind(items[idx], attacher):
                acc = combine(acc, items[idx].inner, attacher.name)  # type: ignore[union-attr]
                idx += 1
            out.append(combine(acc, "", None))
            continue
        out.append(token.raw)
        idx += 1
    return "".join(out)


def parse_contiguous(
    raw: str,
    opener: BracketKind,
    attacher: BracketKind,
    combine: Combine,
) -> str:
    return combine_contiguous(scan(raw, [opener, attacher]), opener, attacher, combine)
