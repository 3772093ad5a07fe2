"""Tests for nanistats.text.parser."""

from __future__ import annotations

from nanistats.models import ParsedLine
from nanistats.text import parse


def test_parse_splits_speaker_and_content() -> None:
    assert parse("Kohaku: Today is a good day.") == ParsedLine("Kohaku", "Today is a good day.")
    assert parse("Kohaku:Hi") == ParsedLine("Kohaku", "Hi")
    assert parse("Kohaku  :  spaced") == ParsedLine("Kohaku", "spaced")
    assert parse("琥珀: こんにちは") == ParsedLine("琥珀", "こんにちは")


def test_parse_keeps_appearance_suffix_in_speaker() -> None:
    assert parse("Kohaku.Happy: Yay").speaker == "Kohaku.Happy"


def test_parse_without_speaker_is_narration() -> None:
    assert parse("The door creaks open.") == ParsedLine(None, "The door creaks open.")
    # A colon later in the sentence does not make the first word a speaker.
    assert parse("It was 5:30 already") == ParsedLine(None, "It was 5:30 already")


def test_parse_never_yields_empty_speaker() -> None:
    parsed = parse(": orphaned colon")
    assert parsed.speaker is None
    assert parsed.content == ": orphaned colon"


def test_parse_with_empty_content() -> None:
    assert parse("Kohaku:") == ParsedLine("Kohaku", "")
