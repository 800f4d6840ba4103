from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from .chars import CharClass, classify
from .options import COMBINATOR, DEFAULT_OPTIONS, MatchOptions, normalize_reading
from .pattern import build_pattern

__all__ = [
    "AnnotationPair",
    "DISABLE_MARKERS",
    "EMPHASIS_MARKERS",
    "DEFAULT_EMPHASIS_MARK",
    "annotate",
    "emphasize",
    "match_reading",
    "reconstruct",
]

logger = logging.getLogger(__name__)

DISABLE_MARKERS = ("=", "＝")
EMPHASIS_MARKERS = ("*", "＊")
DEFAULT_EMPHASIS_MARK = "●"


class AnnotationPair(NamedTuple):
    base: str
    reading: str


def reconstruct(body: str, groups: Sequence[str]) -> list[AnnotationPair]:
    """
    Split ``body`` into annotation pairs using the groups captured by its
    pattern.

    Groups are consumed strictly in order. A logographic character following
    another one reads a boundary group first: ``+`` or nothing keeps both
    characters under one reading, anything else starts a new pair. Phonetic
    and other characters after a logographic run open a pair with an empty
    reading and collect the rest of the non-logographic run.
    """
    result: list[AnnotationPair] = []
    cur_base = ""
    cur_reading = ""
    cursor = 0
    last = CharClass.OTHER
    for ch in body:
        kind = classify(ch)
        if kind is CharClass.LOGOGRAPHIC:
            if last is not CharClass.LOGOGRAPHIC:
                if cur_base:
                    result.append(AnnotationPair(cur_base, cur_reading))
                cur_base = ch
                cur_reading = groups[cursor]
                cursor += 1
                last = CharClass.LOGOGRAPHIC
                continue
            connection = groups[cursor]
            cursor += 1
            if connection in ("", COMBINATOR):
                cur_base += ch
                cur_reading += groups[cursor]
            else:
                result.append(AnnotationPair(cur_base, cur_reading))
                cur_base = ch
                cur_reading = groups[cursor]
            cursor += 1
        elif last is not CharClass.LOGOGRAPHIC:
            cur_base += ch
        else:
            result.append(AnnotationPair(cur_base, cur_reading))
            cur_base = ch
            cur_reading = ""
            last = kind
    result.append(AnnotationPair(cur_base, cur_reading))
    return result


def match_reading(
    body: str,
    reading: str,
    options: MatchOptions = DEFAULT_OPTIONS,
) -> list[AnnotationPair]:
    """
    Assign parts of ``reading`` to the logographic runs of ``body``.

    Falls back to ``[(body, reading)]`` with the reading exactly as given
    when no assignment exists.
    """
    pattern = build_pattern(body)
    if pattern is None:
        return [AnnotationPair(body, reading)]
    groups = pattern.match(normalize_reading(reading, options))
    if groups is None:
        logger.debug("No reading assignment for %r ^ %r; keeping it whole", body, reading)
        return [AnnotationPair(body, reading)]
    return reconstruct(body, groups)


def emphasize(body: str, reading: str) -> list[AnnotationPair]:
    """Put the mark following the leading asterisk over every body character."""
    mark = reading[1:] or DEFAULT_EMPHASIS_MARK
    return [AnnotationPair(ch, mark) for ch in body]


def annotate(
    body: str,
    reading: str,
    options: MatchOptions | None = None,
) -> list[AnnotationPair]:
    """
    Split a ``{body^reading}`` annotation into ruby pairs.

    >>> annotate("美味しいご飯", "おいしいごはん")
    [AnnotationPair(base='美味', reading='おい'), AnnotationPair(base='しいご', reading=''), AnnotationPair(base='飯', reading='はん')]

    A reading starting with ``=`` or ``＝`` disables matching, one starting
    with ``*`` or ``＊`` repeats the following mark (``●`` by default) over
    every character.
    """
    if options is None:
        options = DEFAULT_OPTIONS
    if reading.startswith(DISABLE_MARKERS):
        logger.debug("Matching disabled for %r", body)
        return [AnnotationPair(body, reading[1:])]
    if reading.startswith(EMPHASIS_MARKERS):
        logger.debug("Emphasis marks for %r", body)
        return emphasize(body, reading)
    return match_reading(body, reading, options)
