from __future__ import annotations

from enum import Enum

__all__ = ["CharClass", "classify", "is_logographic", "is_phonetic"]


class CharClass(Enum):
    LOGOGRAPHIC = "logographic"
    PHONETIC = "phonetic"
    OTHER = "other"


def is_phonetic(ch: str) -> bool:
    if len(ch) != 1:
        return False
    code = ord(ch)
    return (
        0x3040 <= code <= 0x3096  # Hiragana
        or 0x30A1 <= code <= 0x30FA  # Katakana
        or 0xFF66 <= code <= 0xFF9F  # Halfwidth katakana
        or ch == "ー"
    )


def is_logographic(ch: str) -> bool:
    if len(ch) != 1:
        return False
    return 0x3400 <= ord(ch) <= 0x9FAF


def classify(ch: str) -> CharClass:
    """
    Classify a single code point.

    Works per code point, not per grapheme: combining marks and characters
    outside the BMP fall through to ``OTHER``.
    """
    if is_logographic(ch):
        return CharClass.LOGOGRAPHIC
    if is_phonetic(ch):
        return CharClass.PHONETIC
    return CharClass.OTHER
