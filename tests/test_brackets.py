from __future__ import annotations

import pytest

from rubymark.brackets import (
    BracketError,
    BracketKind,
    Bracketed,
    Literal,
    ScanIssue,
    combine_contiguous,
    parse_contiguous,
    scan,
)

KANJI = BracketKind("kanji", "[", "]")
FURIGANA = BracketKind("furigana", "{", "}")


@pytest.mark.parametrize("raw", ["[", "]", "[] ", " []", "[[]] ", " [[]]"])
def test_bracketed_rejects_unbracketed_raw(raw: str) -> None:
    with pytest.raises(BracketError):
        Bracketed(KANJI, raw)


def test_bracketed_inner_keeps_nested_delimiters() -> None:
    token = Bracketed(KANJI, "[[a]]")
    assert token.inner == "[a]"
    assert str(token) == "[[a]]"


def test_scan_nested_brackets() -> None:
    assert scan("[[]]", [KANJI]) == [Bracketed(KANJI, "[[]]")]


def test_scan_multiple_brackets() -> None:
    tokens = scan("[漢字]{かんじ} [another]", [KANJI, FURIGANA])
    assert tokens == [
        Bracketed(KANJI, "[漢字]"),
        Bracketed(FURIGANA, "{かんじ}"),
        Literal(" "),
        Bracketed(KANJI, "[another]"),
    ]


def test_scan_other_kind_inside_span_is_literal() -> None:
    tokens = scan("[a{b]c}", [KANJI, FURIGANA])
    assert tokens == [
        Bracketed(KANJI, "[a{b]"),
        Literal("c}", ScanIssue.MISMATCHED),
    ]


def test_scan_unterminated_bracket_becomes_literal() -> None:
    tokens = scan("before [never closed", [KANJI])
    assert tokens == [
        Literal("before "),
        Literal("[never closed", ScanIssue.UNTERMINATED),
    ]


def test_scan_unterminated_nested_bracket() -> None:
    tokens = scan("[[x]", [KANJI])
    assert tokens == [Literal("[[x]", ScanIssue.UNTERMINATED)]


def test_scan_stray_close_is_flagged() -> None:
    tokens = scan("a]b[c]", [KANJI])
    assert tokens == [Literal("a]b", ScanIssue.MISMATCHED), Bracketed(KANJI, "[c]")]


def test_scan_multi_character_and_symmetric_delimiters() -> None:
    double = BracketKind("double", "<<", ">>")
    pipe = BracketKind("pipe", "|", "|")
    tokens = scan("x<<a<<b>>c>>|y|z", [double, pipe])
    assert tokens == [
        Literal("x"),
        Bracketed(double, "<<a<<b>>c>>"),
        Bracketed(pipe, "|y|"),
        Literal("z"),
    ]


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "plain text",
        "[漢字]{かんじ}",
        "}{][",
        "[a{b]c}d{",
        "[[[]]",
        "{[}]",
        "[猫]{ねこ}{cat} and [犬]",
    ],
)
def test_scan_round_trip(raw: str) -> None:
    tokens = scan(raw, [KANJI, FURIGANA])
    assert "".join(token.raw for token in tokens) == raw


def test_scan_without_kinds_is_one_literal() -> None:
    assert scan("[a]", []) == [Literal("[a]")]


def _ruby_combine(acc: str, piece: str, kind: str | None) -> str:
    if kind == "kanji":
        return acc + "<ruby>" + piece
    if kind == "furigana":
        return acc + "<rt>" + piece + "</rt>"
    return acc + "</ruby>"


def test_parse_contiguous_single_trailing_bracket() -> None:
    assert parse_contiguous("[漢字]{かんじ}", KANJI, FURIGANA, _ruby_combine) == (
        "<ruby>漢字<rt>かんじ</rt></ruby>"
    )


def test_parse_contiguous_multiple_attachers_and_passthrough() -> None:
    rendered = parse_contiguous("[a]{b}{c} x {d} [e] {f}", KANJI, FURIGANA, _ruby_combine)
    assert rendered == "<ruby>a<rt>b</rt><rt>c</rt></ruby> x {d} [e] {f}"


def test_combine_contiguous_call_sequence() -> None:
    calls: list[tuple[str, str, str | None]] = []

    def _record(acc: str, piece: str, kind: str | None) -> str:
        calls.append((acc, piece, kind))
        return acc + piece.upper()

    tokens = scan("[a]{b}{c}", [KANJI, FURIGANA])
    assert combine_contiguous(tokens, KANJI, FURIGANA, _record) == "ABC"
    assert calls == [
        ("", "a", "kanji"),
        ("A", "b", "furigana"),
        ("AB", "c", "furigana"),
        ("ABC", "", None),
    ]


def test_combine_contiguous_ignores_reversed_order() -> None:
    tokens = scan("{b}[a]", [KANJI, FURIGANA])
    assert combine_contiguous(tokens, KANJI, FURIGANA, _ruby_combine) == "{b}[a]"


def test_combine_contiguous_leaves_third_kind_alone() -> None:
    paren = BracketKind("paren", "(", ")")
    tokens = scan("[a](x){b}", [KANJI, FURIGANA, paren])
    assert combine_contiguous(tokens, KANJI, FURIGANA, _ruby_combine) == "[a](x){b}"
