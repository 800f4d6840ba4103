from .chars import CharClass, classify
from .core import AnnotationPair, annotate, emphasize, match_reading, reconstruct
from .markup import convert_html, convert_plain, convert_soup, find_spans, render_text
from .options import DEFAULT_OPTIONS, MatchOptions, load_options, normalize_reading
from .pattern import Pattern, build_pattern

__all__ = [
    "AnnotationPair",
    "CharClass",
    "DEFAULT_OPTIONS",
    "MatchOptions",
    "Pattern",
    "annotate",
    "build_pattern",
    "classify",
    "convert_html",
    "convert_plain",
    "convert_soup",
    "emphasize",
    "find_spans",
    "load_options",
    "match_reading",
    "normalize_reading",
    "reconstruct",
    "render_text",
]
