"""
Reading patterns derived from a ruby body.

Every logographic run in the body becomes a capture slot that eats one or
more reading characters, phonetic characters must reappear verbatim, and
optional boundary slots let the author place a separator (``.``) or a
combinator (``+``) where two units meet. Consider ``可愛い犬`` against
``かわいいいぬ``: three assignments of the reading are possible, and only
marks such as ``か・わい・い・いぬ`` pin one down. Between two logographic
characters the boundary slot is captured, so the reconstructor can tell a
split (``.``) from a merge (``+`` or nothing).

The matcher follows the semantics of an anchored regular expression:
captures are greedy, optional boundaries prefer consuming a mark, and the
first successful assignment in that preference order wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .chars import CharClass, classify
from .options import COMBINATOR, SEPARATOR

__all__ = [
    "Literal",
    "Capture",
    "Boundary",
    "PatternElement",
    "Pattern",
    "build_pattern",
]

_MARKS = frozenset((SEPARATOR, COMBINATOR))


@dataclass(frozen=True)
class Literal:
    char: str


@dataclass(frozen=True)
class Capture:
    """One or more reading characters that are not marks."""


@dataclass(frozen=True)
class Boundary:
    """An optional single mark; ``capture`` records it (or ``""``) as a group."""

    capture: bool = False


PatternElement = Union[Literal, Capture, Boundary]


@dataclass(frozen=True)
class Pattern:
    elements: tuple[PatternElement, ...]

    @property
    def group_count(self) -> int:
        return sum(
            1
            for element in self.elements
            if isinstance(element, Capture) or (isinstance(element, Boundary) and element.capture)
        )

    def match(self, reading: str) -> list[str] | None:
        """
        Match the whole normalized reading and return the captured groups in
        emission order, or ``None`` when no assignment exists.

        Works in two passes over bitsets (bit ``p`` is reading position
        ``p``). The backward pass marks, per element, every position from
        which the rest of the pattern can still finish. The forward pass
        then takes the preferred option at each element among those that
        stay finishable, so the first solution found is the one a
        backtracking regex engine would pick.
        """
        elements = self.elements
        total = len(reading)
        reachable = _reachable_rows(elements, reading)
        if not reachable[0] & 1:
            return None
        run_end = [total] * (total + 1)
        for pos in range(total - 1, -1, -1):
            run_end[pos] = pos if reading[pos] in _MARKS else run_end[pos + 1]

        groups: list[str] = []
        pos = 0
        for index, element in enumerate(elements):
            following = reachable[index + 1]
            if isinstance(element, Literal):
                pos += 1
            elif isinstance(element, Capture):
                window = (following >> (pos + 1)) & ((1 << (run_end[pos] - pos)) - 1)
                end = pos + window.bit_length()
                groups.append(reading[pos:end])
                pos = end
            elif pos < total and reading[pos] in _MARKS and (following >> (pos + 1)) & 1:
                if element.capture:
                    groups.append(reading[pos])
                pos += 1
            elif element.capture:
                groups.append("")
        return groups


def _position_mask(reading: str, chars: frozenset[str]) -> int:
    bits = "".join("1" if ch in chars else "0" for ch in reversed(reading))
    return int(bits or "0", 2)


def _reachable_rows(elements: tuple[PatternElement, ...], reading: str) -> list[int]:
    """Row ``i`` has bit ``p`` set when ``elements[i:]`` can match ``reading[p:]``."""
    total = len(reading)
    marks = _position_mask(reading, _MARKS)
    # Position ``total`` is past the end and never holds a character.
    plain = ((1 << total) - 1) & ~marks
    literals: dict[str, int] = {}
    rows = [0] * (len(elements) + 1)
    rows[-1] = 1 << total
    for index in range(len(elements) - 1, -1, -1):
        following = rows[index + 1]
        element = elements[index]
        if isinstance(element, Literal):
            if element.char not in literals:
                literals[element.char] = _position_mask(reading, frozenset(element.char))
            rows[index] = literals[element.char] & (following >> 1)
        elif isinstance(element, Boundary):
            rows[index] = (marks & (following >> 1)) | following
        else:
            # A capture starting at p ends at some e > p with reading[p:e] free
            # of marks; smear each viable last character leftward through its run.
            reach = plain & (following >> 1)
            gate = plain
            step = 1
            while step <= total:
                reach |= gate & (reach >> step)
                gate &= gate >> step
                step <<= 1
            rows[index] = reach
    return rows


def build_pattern(body: str) -> Pattern | None:
    """Derive the reading pattern for ``body``; ``None`` when body is empty."""
    if not body:
        return None
    elements: list[PatternElement] = []
    last = CharClass.OTHER
    for ch in body:
        kind = classify(ch)
        if kind is CharClass.LOGOGRAPHIC:
            if last is CharClass.LOGOGRAPHIC:
                elements.append(Boundary(capture=True))
            elif last is CharClass.PHONETIC:
                elements.append(Boundary())
            elements.append(Capture())
        elif kind is CharClass.PHONETIC:
            if last is CharClass.LOGOGRAPHIC:
                elements.append(Boundary())
            elements.append(Literal(ch))
        elif last is not CharClass.OTHER:
            elements.append(Boundary())
        last = kind
    return Pattern(tuple(elements))
