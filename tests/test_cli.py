from __future__ import annotations

import io
from pathlib import Path

import pytest

import rubymark.cli as cli


def test_render_html_from_arguments(capsys) -> None:
    assert cli.main(["render", "[漢字]{かん.じ}"]) == 0
    out = capsys.readouterr().out
    assert out == "<ruby>漢<rp>【</rp><rt>かん</rt><rp>】</rp>字<rp>【</rp><rt>じ</rt><rp>】</rp></ruby>\n"


def test_render_reading_format_joins_arguments(capsys) -> None:
    assert cli.main(["render", "--format", "reading", "[猫]{ねこ}", "と[犬]{いぬ}"]) == 0
    assert capsys.readouterr().out == "ねこ といぬ\n"


def test_render_reads_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("[漢字]{かんじ}です\n"))
    assert cli.main(["render", "--no-fallback-parens", "--lang", "ja-JP"]) == 0
    assert capsys.readouterr().out == '<ruby lang="ja-JP">漢字<rt>かんじ</rt></ruby>です\n'


def test_render_uses_config_file(tmp_path: Path, capsys) -> None:
    config = tmp_path / "ruby.json"
    config.write_text('{"fallbackParens": "()", "extraSeparators": "-"}', encoding="utf-8")
    assert cli.main(["render", "-f", "parens", "--config", str(config), "[漢字]{かん-じ}"]) == 0
    assert capsys.readouterr().out == "漢(かん)字(じ)\n"


def test_render_flag_overrides_config(tmp_path: Path, capsys) -> None:
    config = tmp_path / "ruby.toml"
    config.write_text('fallback_parens = "()"\n', encoding="utf-8")
    assert cli.main(["render", "-f", "parens", "-c", str(config), "--fallback-parens", "<>", "[猫]{ねこ}"]) == 0
    assert capsys.readouterr().out == "猫<ねこ>\n"


def test_render_bad_config_returns_error(tmp_path: Path, capsys) -> None:
    assert cli.main(["render", "--config", str(tmp_path / "missing.json"), "x"]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "missing.json" in captured.err


def test_render_invalid_parens_returns_error(capsys) -> None:
    assert cli.main(["render", "--fallback-parens", "(", "x"]) == 2
    assert "fallback_parens" in capsys.readouterr().err


def test_align_prints_segments(capsys) -> None:
    assert cli.main(["align", "可愛い犬", "か.わい.い.いぬ"]) == 0
    out = capsys.readouterr().out
    assert "わい" in out
    assert "matched: yes" in out


def test_align_fallback_exit_code(capsys) -> None:
    assert cli.main(["align", "食べる", "たべべ"]) == 1
    assert "matched: no" in capsys.readouterr().out


def test_scan_reports_issues(capsys) -> None:
    assert cli.main(["scan", "[漢字]{かんじ"]) == 0
    out = capsys.readouterr().out
    assert "body" in out
    assert "unterminated" in out


def test_main_without_arguments_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "rubymark" in capsys.readouterr().out


def test_unknown_command_exits(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["bogus"])
    assert excinfo.value.code == 2


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["render", "--version"])
    assert excinfo.value.code == 0
    assert "rubymark" in capsys.readouterr().out


def test_align_extra_kanji_flag(capsys) -> None:
    assert cli.main(["align", "一ヶ月", "いっ.か.げつ"]) == 1
    capsys.readouterr()
    assert cli.main(["align", "--extra-kanji", "ヶ", "一ヶ月", "いっ.か.げつ"]) == 0
    assert "matched: yes" in capsys.readouterr().out
