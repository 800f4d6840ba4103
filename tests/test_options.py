import dataclasses

import pytest

from furigana_plus.options import (
    DEFAULT_OPTIONS,
    MatchOptions,
    load_options,
    normalize_reading,
    options_from_mapping,
)


def test_normalize_maps_separators_and_combinators() -> None:
    assert normalize_reading("か・わい　い｜いぬ") == "か.わい.い.いぬ"
    assert normalize_reading("か／わ．い。い/ぬ|") == "か.わ.い.い.ぬ."
    assert normalize_reading("か＋わい+い") == "か+わい+い"
    assert normalize_reading("かわいい") == "かわいい"


def test_normalize_is_idempotent() -> None:
    once = normalize_reading("か＋わい・い　いぬ")
    assert normalize_reading(once) == once


def test_extra_characters_join_the_sets() -> None:
    options = MatchOptions(extra_separators="_-", extra_combinators="&")
    assert normalize_reading("か_わ-い&い", options) == "か.わ.い+い"
    assert normalize_reading("か_わ", DEFAULT_OPTIONS) == "か_わ"


def test_separator_wins_when_character_is_both() -> None:
    options = MatchOptions(extra_separators="~", extra_combinators="~")
    assert normalize_reading("か~わ", options) == "か.わ"


def test_options_are_frozen_and_compare_by_value() -> None:
    options = MatchOptions(extra_separators="_")
    assert options == MatchOptions(extra_separators=frozenset("_"))
    assert "_" in options.separators
    assert "+" in options.combinators
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.fallback_parens = ("(", ")")  # type: ignore[misc]


def test_invalid_options_raise() -> None:
    with pytest.raises(ValueError):
        MatchOptions(fallback_parens=("(",))  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        MatchOptions(extra_separators=["ab"])  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        options_from_mapping({"fallback_parens": "((("})
    with pytest.raises(ValueError):
        options_from_mapping({"extra_separators": 3})


def test_options_from_mapping_accepts_string_or_list_parens() -> None:
    assert options_from_mapping({"fallback_parens": "()"}).fallback_parens == ("(", ")")
    assert options_from_mapping({"fallback_parens": ["《", "》"]}).fallback_parens == ("《", "》")
    assert options_from_mapping({}) == DEFAULT_OPTIONS


def test_load_options_reads_table_or_top_level(tmp_path) -> None:
    table = tmp_path / "table.toml"
    table.write_text('[furigana]\nextra_separators = "_"\nfallback_parens = "()"\n', encoding="utf-8")
    top = tmp_path / "top.toml"
    top.write_text('extra_combinators = "&"\n', encoding="utf-8")

    loaded = load_options(table)
    assert loaded.extra_separators == frozenset("_")
    assert loaded.fallback_parens == ("(", ")")
    assert load_options(top).extra_combinators == frozenset("&")


def test_load_options_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_options(tmp_path / "missing.toml")
    broken = tmp_path / "broken.toml"
    broken.write_text("extra_separators = \n", encoding="utf-8")
    with pytest.raises(ValueError) as excinfo:
        load_options(broken)
    assert "broken.toml" in str(excinfo.value)


def test_whitespace_set_excludes_control_separators() -> None:
    assert normalize_reading("か\x1cわ\x85い") == "か\x1cわ\x85い"
    assert normalize_reading("か\ufeffわ\u2003い\nぬ") == "か.わ.い.ぬ"
