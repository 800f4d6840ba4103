from bs4 import BeautifulSoup

from furigana_plus.markup import (
    build_ruby,
    convert_html,
    convert_plain,
    convert_soup,
    find_spans,
    render_text,
)
from furigana_plus.options import MatchOptions


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_find_spans_reports_offsets() -> None:
    spans = find_spans("前{可愛い犬^か・わい・い・いぬ}後{日^ひ}")
    assert [(span.body, span.reading) for span in spans] == [
        ("可愛い犬", "か・わい・い・いぬ"),
        ("日", "ひ"),
    ]
    assert spans[0].start == 1
    assert spans[0].source == "{可愛い犬^か・わい・い・いぬ}"
    assert find_spans("{^}{a^}") == []


def test_build_ruby_emits_rt_per_pair() -> None:
    soup = _soup("")
    ruby = build_ruby(soup, [("美味", "おい"), ("しいご", ""), ("飯", "はん")])
    assert str(ruby) == "<ruby>美味<rt>おい</rt>しいご<rt></rt>飯<rt>はん</rt></ruby>"


def test_build_ruby_fallback_parens() -> None:
    soup = _soup("")
    ruby = build_ruby(soup, [("日", "ひ")], MatchOptions(fallback_parens=("(", ")")), fallback=True)
    assert str(ruby) == "<ruby>日<rp>(</rp><rt>ひ</rt><rp>)</rp></ruby>"


def test_convert_html_replaces_spans_in_blocks() -> None:
    html = "<p>今日は{美味しいご飯^おいしいごはん}です</p>"
    assert convert_html(html) == (
        "<p>今日は<ruby>美味<rt>おい</rt>しいご<rt></rt>飯<rt>はん</rt></ruby>です</p>"
    )


def test_convert_html_default_fallback_parens() -> None:
    assert convert_html("<h1>{日^ひ}</h1>", fallback=True) == (
        "<h1><ruby>日<rp>【</rp><rt>ひ</rt><rp>】</rp></ruby></h1>"
    )


def test_convert_html_skips_code_and_existing_ruby() -> None:
    html = "<p><code>{日^ひ}</code> <ruby>月<rt>つき</rt></ruby>{火^ひ}</p>"
    assert convert_html(html) == (
        "<p><code>{日^ひ}</code> <ruby>月<rt>つき</rt></ruby><ruby>火<rt>ひ</rt></ruby></p>"
    )


def test_convert_soup_only_scans_block_elements_by_default() -> None:
    soup = _soup("<div>{日^ひ}</div><ul><li><b>{だから^*}</b></li></ul>")
    assert convert_soup(soup) == 1
    assert str(soup) == (
        "<div>{日^ひ}</div><ul><li><b><ruby>だ<rt>●</rt>か<rt>●</rt>ら<rt>●</rt></ruby></b></li></ul>"
    )

    whole = _soup("<div>{日^ひ}</div>")
    assert convert_soup(whole, blocks=None) == 1
    assert str(whole) == "<div><ruby>日<rt>ひ</rt></ruby></div>"


def test_nested_blocks_convert_each_span_once() -> None:
    soup = _soup("<table><tr><td><p>{日^ひ}と{月^つき}</p></td></tr></table>")
    assert convert_soup(soup) == 2
    assert str(soup).count("<ruby>") == 2


def test_render_text_uses_fallback_parens() -> None:
    pairs = [("美味", "おい"), ("しいご", ""), ("飯", "はん")]
    assert render_text(pairs) == "美味【おい】しいご飯【はん】"
    assert render_text(pairs, MatchOptions(fallback_parens=("(", ")"))) == "美味(おい)しいご飯(はん)"


def test_convert_plain_keeps_surrounding_text() -> None:
    text = "今日は{美味しいご飯^おいしいごはん}、{食べる^たべべ}。"
    assert convert_plain(text) == "今日は美味【おい】しいご飯【はん】、食べる【たべべ】。"


def test_convert_plain_handles_long_span() -> None:
    text = "{" + "漢字" * 300 + "^" + "か" * 600 + "}"
    assert convert_plain(text) == "漢字" * 300 + "【" + "か" * 600 + "】"
