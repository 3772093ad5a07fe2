"""Tests for nanistats.text.markup."""

from __future__ import annotations

import time

import pytest

from nanistats.text import normalize
from nanistats.text.markup import strip_format_tags, strip_ruby


def test_ruby_keeps_base_text_only() -> None:
    assert normalize('<ruby="かんじ">漢字</ruby>を読む') == "漢字を読む"
    assert normalize("<ruby='kan'>漢</ruby>") == "漢"
    assert normalize("<ruby=kanji>漢字</ruby>") == "漢字"
    assert normalize('<RUBY="x">Base</RUBY>') == "Base"


def test_line_break_is_removed_without_separator() -> None:
    assert normalize("Kohaku: Today is<br/>a good day.") == "Kohaku: Today isa good day."
    assert normalize("one<br>two<br />three<BR>") == "onetwothree"


def test_format_pairs_keep_inner_text() -> None:
    assert normalize("<color=#ff0000>Red</color> and <b>bold</b>") == "Red and bold"
    assert normalize('<size=40><i>big</i></size>') == "big"
    assert normalize('<link="note">see</link>') == "see"


def test_nested_markup_is_resolved_innermost_first() -> None:
    text = '<color=red><b><ruby="よ">読</ruby>む</b></color>'
    assert normalize(text) == "読む"


def test_inline_commands_are_removed() -> None:
    assert normalize("Hello[i] world[wait 0.5].") == "Hello world."
    assert normalize(r"Literal \[bracket\] stays") == r"Literal \[bracket\] stays"


def test_malformed_markup_is_left_as_text() -> None:
    assert normalize("<color=red>never closed") == "<color=red>never closed"
    assert normalize("stray </b> close") == "stray </b> close"
    assert normalize("<ruby=\"x\">open") == "<ruby=\"x\">open"


@pytest.mark.parametrize("opening", ["<color=", "<ruby=", "<size = "])
def test_unclosed_tag_value_with_long_whitespace_run_is_fast(opening: str) -> None:
    line = opening + " " * 5000 + "oops"
    started = time.perf_counter()
    assert normalize(line) == line
    assert time.perf_counter() - started < 1.0


def test_tag_values_allow_surrounding_whitespace() -> None:
    assert normalize("<color = red >Red</color>") == "Red"
    assert normalize('<ruby = "r" >Base</ruby>') == "Base"
    assert normalize("<size=>x</size>") == "x"


def test_unknown_tags_and_comparisons_survive() -> None:
    assert normalize("a < b and c > d") == "a < b and c > d"
    assert normalize("<custom>x</custom>") == "<custom>x</custom>"
    assert normalize("<color=red>a < b</color>") == "a < b"


@pytest.mark.parametrize(
    "line",
    [
        "Kohaku: Today is<br/>a good day.",
        '<color=red><b><ruby="よ">読</ruby>む</b></color>',
        "[[nested]] brackets",
        "<b><b>double</b></b>",
        "<color=red>never closed",
        "plain narration",
    ],
)
def test_normalize_is_idempotent(line: str) -> None:
    once = normalize(line)
    assert normalize(once) == once


def test_single_step_helpers() -> None:
    assert strip_ruby('<ruby="r">b</ruby>') == "b"
    assert strip_format_tags("<u>x</u>") == "x"
