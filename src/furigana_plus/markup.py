from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore

from .core import AnnotationPair, annotate
from .options import DEFAULT_OPTIONS, MatchOptions

__all__ = [
    "MARKUP_RE",
    "BLOCK_TAGS",
    "SKIP_TAGS",
    "RubySpan",
    "find_spans",
    "build_ruby",
    "render_text",
    "convert_soup",
    "convert_html",
    "convert_plain",
]

logger = logging.getLogger(__name__)

MARKUP_RE = re.compile(r"\{(.+?)\^(.+?)\}")

# Only text inside these blocks is scanned for annotations.
BLOCK_TAGS = ("p", "h1", "h2", "h3", "h4", "h5", "h6", "ol", "ul", "table")
SKIP_TAGS = {"code", "pre", "ruby", "script", "style"}


@dataclass
class RubySpan:
    start: int
    end: int
    body: str
    reading: str

    @property
    def source(self) -> str:
        return f"{{{self.body}^{self.reading}}}"


def find_spans(text: str) -> list[RubySpan]:
    return [
        RubySpan(start=match.start(), end=match.end(), body=match.group(1), reading=match.group(2))
        for match in MARKUP_RE.finditer(text)
    ]


def build_ruby(
    soup: BeautifulSoup,
    pairs: Sequence[tuple[str, str]],
    options: MatchOptions = DEFAULT_OPTIONS,
    *,
    fallback: bool = False,
) -> Tag:
    """
    Build one ``<ruby>`` element: each base text followed by its ``<rt>``.

    With ``fallback`` every ``<rt>`` is wrapped in ``<rp>`` parentheses for
    readers without ruby support.
    """
    open_paren, close_paren = options.fallback_parens
    ruby = soup.new_tag("ruby")
    for base, reading in pairs:
        if base:
            ruby.append(NavigableString(base))
        if fallback:
            rp_open = soup.new_tag("rp")
            rp_open.string = open_paren
            ruby.append(rp_open)
        rt = soup.new_tag("rt")
        if reading:
            rt.string = reading
        ruby.append(rt)
        if fallback:
            rp_close = soup.new_tag("rp")
            rp_close.string = close_paren
            ruby.append(rp_close)
    return ruby


def render_text(pairs: Iterable[tuple[str, str]], options: MatchOptions = DEFAULT_OPTIONS) -> str:
    """Plain-text rendering: ``美味【おい】しいご飯【はん】``."""
    open_paren, close_paren = options.fallback_parens
    parts: list[str] = []
    for base, reading in pairs:
        parts.append(base)
        if reading:
            parts.append(f"{open_paren}{reading}{close_paren}")
    return "".join(parts)


def _collect_text_nodes(node: Tag, found: list[NavigableString]) -> None:
    for child in node.children:
        if type(child) is NavigableString:
            found.append(child)
        elif isinstance(child, Tag) and child.name not in SKIP_TAGS:
            _collect_text_nodes(child, found)


def _replace_text_node(
    soup: BeautifulSoup,
    node: NavigableString,
    options: MatchOptions,
    fallback: bool,
) -> int:
    text = str(node)
    spans = find_spans(text)
    if not spans:
        return 0
    pieces: list[NavigableString | Tag] = []
    cursor = 0
    for span in spans:
        if span.start > cursor:
            pieces.append(NavigableString(text[cursor : span.start]))
        pairs: list[AnnotationPair] = annotate(span.body, span.reading, options)
        pieces.append(build_ruby(soup, pairs, options, fallback=fallback))
        cursor = span.end
    if cursor < len(text):
        pieces.append(NavigableString(text[cursor:]))
    node.replace_with(*pieces)
    return len(spans)


def convert_soup(
    soup: BeautifulSoup,
    options: MatchOptions = DEFAULT_OPTIONS,
    *,
    fallback: bool = False,
    blocks: Sequence[str] | None = BLOCK_TAGS,
) -> int:
    """
    Replace ``{body^reading}`` spans in ``soup`` with ruby elements in place.

    Text inside code, preformatted and existing ruby elements is left alone.
    ``blocks=None`` scans the whole document instead of block elements.
    Returns the number of converted spans.
    """
    roots: list[Tag] = [soup] if blocks is None else list(soup.find_all(list(blocks)))
    replaced = 0
    for root in roots:
        # Blocks nested inside code or ruby stay untouched.
        if any(parent.name in SKIP_TAGS for parent in root.parents if isinstance(parent, Tag)):
            continue
        nodes: list[NavigableString] = []
        _collect_text_nodes(root, nodes)
        for node in nodes:
            replaced += _replace_text_node(soup, node, options, fallback)
    logger.debug("Converted %d ruby span(s)", replaced)
    return replaced


def convert_html(
    html: str,
    options: MatchOptions = DEFAULT_OPTIONS,
    *,
    fallback: bool = False,
    blocks: Sequence[str] | None = BLOCK_TAGS,
) -> str:
    soup = BeautifulSoup(html, "html.parser")
    convert_soup(soup, options, fallback=fallback, blocks=blocks)
    return str(soup)


def convert_plain(text: str, options: MatchOptions = DEFAULT_OPTIONS) -> str:
    return MARKUP_RE.sub(
        lambda match: render_text(annotate(match.group(1), match.group(2), options), options),
        text,
    )
