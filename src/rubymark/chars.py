from __future__ import annotations

__all__ = [
    "DEFAULT_SEPARATORS",
    "DEFAULT_COMBINATORS",
    "KANJI_LIKE_MARKS",
    "is_kanji",
    "is_separator",
    "is_combinator",
]

DEFAULT_SEPARATORS = ".．。・|｜/／"
DEFAULT_COMBINATORS = "+＋"

# Iteration and abbreviation marks; not kanji unless passed as `extra` to is_kanji.
KANJI_LIKE_MARKS = "々〆ヵヶ"


def is_kanji(ch: str, extra: str = "") -> bool:
    if not ch or len(ch) != 1:
        return False
    if extra and ch in extra:
        return True
    code = ord(ch)
    return (
        0x4E00 <= code <= 0x9FFF  # CJK Unified Ideographs
        or 0x3400 <= code <= 0x4DBF  # Extension A
        or 0x20000 <= code <= 0x2A6DF  # Extension B
        or 0x2A700 <= code <= 0x2B73F  # Extension C
        or 0x2B740 <= code <= 0x2B81F  # Extension D
        or 0x2B820 <= code <= 0x2CEAF  # Extension E
        or 0x2CEB0 <= code <= 0x2EBEF  # Extension F
        or 0x30000 <= code <= 0x3134F  # Extension G
        or 0xF900 <= code <= 0xFAFF  # Compatibility Ideographs
        or 0x2F800 <= code <= 0x2FA1F  # Compatibility Supplement
    )


def is_separator(ch: str, extra: str = "") -> bool:
    """
    Return True when ``ch`` splits a reading into per-character pieces.

    Any whitespace counts, along with ``DEFAULT_SEPARATORS`` and every
    character of ``extra``.
    """
    if not ch:
        return False
    return ch.isspace() or ch in DEFAULT_SEPARATORS or (bool(extra) and ch in extra)


def is_combinator(ch: str, extra: str = "") -> bool:
    if not ch:
        return False
    return ch in DEFAULT_COMBINATORS or (bool(extra) and ch in extra)
