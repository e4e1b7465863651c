from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

__all__ = [
    "CONFIG_ENV",
    "DEFAULT_FALLBACK_PARENS",
    "OptionsError",
    "RubyOptions",
    "load_options",
    "resolve_options_path",
]

CONFIG_ENV = "RUBYMARK_CONFIG"
DEFAULT_FALLBACK_PARENS = "【】"

# Accept the camelCase keys used by the markdown-it plugin options as well.
_KEY_ALIASES = {
    "fallbackParens": "fallback_parens",
    "extraSeparators": "extra_separators",
    "extraCombinators": "extra_combinators",
    "extraKanji": "extra_kanji",
}
_OPTION_NAMES = {"fallback_parens", "extra_separators", "extra_combinators", "extra_kanji", "lang"}


class OptionsError(ValueError):
    """Raised when ruby rendering options are malformed."""


@dataclass(frozen=True)
class RubyOptions:
    """
    Host-side settings for rendering ``[body]{reading}`` annotations.

    ``fallback_parens`` holds the opening and closing parenthesis shown
    around readings where ruby is unsupported (``None`` disables them).
    ``lang`` is written to every ``<ruby>`` element and also lets a blank
    reading through as a language-tagged span. ``extra_kanji`` lists
    characters such as ``々`` or ``ヶ`` to treat as kanji when aligning.
    """

    fallback_parens: str | None = DEFAULT_FALLBACK_PARENS
    extra_separators: str = ""
    extra_combinators: str = ""
    extra_kanji: str = ""
    lang: str | None = None

    def __post_init__(self) -> None:
        parens = self.fallback_parens
        if parens == "":
            object.__setattr__(self, "fallback_parens", None)
        elif parens is not None and len(parens) != 2:
            raise OptionsError(
                f"fallback_parens must be exactly two characters, got {parens!r}"
            )
        if self.lang is not None and not self.lang.strip():
            object.__setattr__(self, "lang", None)

    @property
    def open_paren(self) -> str | None:
        return self.fallback_parens[0] if self.fallback_parens else None

    @property
    def close_paren(self) -> str | None:
        return self.fallback_parens[1] if self.fallback_parens else None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "RubyOptions":
        values: dict[str, object] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in _OPTION_NAMES:
                raise OptionsError(f"Unknown option: {key}")
            values[name] = value

        parens = values.get("fallback_parens", DEFAULT_FALLBACK_PARENS)
        if parens is False:
            parens = None
        if parens is not None and not isinstance(parens, str):
            raise OptionsError("fallback_parens must be a string, false or null.")
        for name in ("extra_separators", "extra_combinators", "extra_kanji"):
            value = values.get(name, "")
            if not isinstance(value, str):
                raise OptionsError(f"{name} must be a string.")
        lang = values.get("lang")
        if lang is not None and not isinstance(lang, str):
            raise OptionsError("lang must be a string or null.")
        return cls(
            fallback_parens=parens,
            extra_separators=values.get("extra_separators", ""),  # type: ignore[arg-type]
            extra_combinators=values.get("extra_combinators", ""),  # type: ignore[arg-type]
            extra_kanji=values.get("extra_kanji", ""),  # type: ignore[arg-type]
            lang=lang,
        )


def resolve_options_path(path: Path | None = None) -> Path | None:
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return None


def load_options(path: Path | None = None) -> RubyOptions:
    """
    Load options from a ``.json`` or ``.toml`` file.

    Without an explicit path the ``RUBYMARK_CONFIG`` environment variable is
    consulted; with neither, default options are returned. A TOML file may
    keep its settings under a ``[rubymark]`` table.
    """
    config_path = resolve_options_path(path)
    if config_path is None:
        return RubyOptions()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OptionsError(f"Failed to read options file: {config_path}") from exc
    try:
        if config_path.suffix.lower() == ".toml":
            raw: object = tomllib.loads(text)
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise OptionsError(f"Failed to parse options file: {config_path}") from exc
    if isinstance(raw, dict) and isinstance(raw.get("rubymark"), dict):
        raw = raw["rubymark"]
    if not isinstance(raw, dict):
        raise OptionsError(f"{config_path.name} must contain an object of options.")
    return RubyOptions.from_mapping(raw)
