from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

import tomllib

__all__ = [
    "SEPARATOR",
    "COMBINATOR",
    "WHITESPACE",
    "BASE_SEPARATORS",
    "BASE_COMBINATORS",
    "DEFAULT_FALLBACK_PARENS",
    "MatchOptions",
    "DEFAULT_OPTIONS",
    "normalize_reading",
    "options_from_mapping",
    "load_options",
]

logger = logging.getLogger(__name__)

SEPARATOR = "."
COMBINATOR = "+"

# Space separators, line breaks and the BOM. Not str.isspace(): U+001C-U+001F and U+0085 stay literal.
WHITESPACE = frozenset(
    "\t\n\x0b\x0c\r \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)
BASE_SEPARATORS = WHITESPACE | frozenset(".．。・|｜/／")
BASE_COMBINATORS = frozenset("+＋")
DEFAULT_FALLBACK_PARENS = ("【", "】")

CONFIG_TABLE = "furigana"


@dataclass(frozen=True)
class MatchOptions:
    """
    Read-only settings threaded through a single ``annotate`` call.

    ``extra_separators`` and ``extra_combinators`` accept a string (each
    character is one member) or any iterable of single characters.
    ``fallback_parens`` is only consumed by renderers.
    """

    fallback_parens: tuple[str, str] = DEFAULT_FALLBACK_PARENS
    extra_separators: frozenset[str] = frozenset()
    extra_combinators: frozenset[str] = frozenset()
    separators: frozenset[str] = field(init=False, repr=False)
    combinators: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        parens = tuple(self.fallback_parens)
        if len(parens) != 2 or not all(isinstance(part, str) for part in parens):
            raise ValueError("fallback_parens must be a pair of strings.")
        extra_separators = _char_set(self.extra_separators, "extra_separators")
        extra_combinators = _char_set(self.extra_combinators, "extra_combinators")
        object.__setattr__(self, "fallback_parens", parens)
        object.__setattr__(self, "extra_separators", extra_separators)
        object.__setattr__(self, "extra_combinators", extra_combinators)
        object.__setattr__(self, "separators", BASE_SEPARATORS | extra_separators)
        object.__setattr__(self, "combinators", BASE_COMBINATORS | extra_combinators)

    def is_separator(self, ch: str) -> bool:
        return ch in self.separators

    def is_combinator(self, ch: str) -> bool:
        return ch in self.combinators


def _char_set(value: Iterable[str] | str | None, name: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    chars: set[str] = set()
    for item in value:
        if not isinstance(item, str) or len(item) != 1:
            raise ValueError(f"{name} must contain single characters, got {item!r}.")
        chars.add(item)
    return frozenset(chars)


DEFAULT_OPTIONS = MatchOptions()


def normalize_reading(reading: str, options: MatchOptions = DEFAULT_OPTIONS) -> str:
    """
    Rewrite separators to ``.`` and then combinators to ``+``.

    A character configured as both becomes ``.``.
    """
    separated = "".join(SEPARATOR if options.is_separator(ch) else ch for ch in reading)
    return "".join(COMBINATOR if options.is_combinator(ch) else ch for ch in separated)


def options_from_mapping(payload: Mapping[str, object]) -> MatchOptions:
    parens = payload.get("fallback_parens", DEFAULT_FALLBACK_PARENS)
    if isinstance(parens, str):
        if len(parens) != 2:
            raise ValueError("fallback_parens string must be exactly two characters.")
        parens = (parens[0], parens[1])
    elif isinstance(parens, (list, tuple)):
        parens = tuple(parens)
    else:
        raise ValueError("fallback_parens must be a string or a list of two strings.")
    separators = payload.get("extra_separators", "")
    if not isinstance(separators, str):
        raise ValueError("extra_separators must be a string.")
    combinators = payload.get("extra_combinators", "")
    if not isinstance(combinators, str):
        raise ValueError("extra_combinators must be a string.")
    return MatchOptions(
        fallback_parens=parens,  # type: ignore[arg-type]
        extra_separators=frozenset(separators),
        extra_combinators=frozenset(combinators),
    )


def load_options(config_path: Path) -> MatchOptions:
    """Load options from a TOML file, either top-level or under ``[furigana]``."""
    try:
        with config_path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        raise
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Failed to parse config file: {config_path}") from exc
    section = data.get(CONFIG_TABLE, data)
    if not isinstance(section, dict):
        raise ValueError(f"{config_path.name}: [{CONFIG_TABLE}] must be a table.")
    options = options_from_mapping(section)
    logger.debug("Loaded options from %s: %r", config_path, options)
    return options
