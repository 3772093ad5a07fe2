"""Tests for nanistats.aggregator."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from nanistats.aggregator import TreeAggregator
from nanistats.analyzer import FileAnalyzer
from nanistats.models import AggregateStats, merge_stats
from tests._fixtures.script_tree import MemoryFileSystem, ScriptTreeBuilder


def test_speaker_counted_once_across_files(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write(
        {f"chapter{index}/scene.nani": "Kohaku: Hello.\n" for index in range(5)}
    )

    tree = script_tree.tree()

    assert tree.stats.speakers == frozenset({"Kohaku"})
    assert tree.stats.word_count == 5
    assert tree.stats.file_count == 5
    for chapter in tree.children:
        (scene,) = chapter.children
        assert scene.stats.speakers == frozenset({"Kohaku"})


def test_only_script_extension_is_analyzed(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write(
        {
            "a.nani": "Kohaku: one two",
            "notes.txt": "Kohaku: ignored words here",
            "b.nani.bak": "Yuki: ignored",
        }
    )

    stats = script_tree.aggregate()

    assert stats.word_count == 2
    assert stats.speakers == frozenset({"Kohaku"})
    assert stats.file_count == 1


def test_excluded_directories_are_skipped_by_exact_name(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write(
        {
            "main.nani": "Kohaku: kept",
            "Backup/old.nani": "Yuki: skipped",
            "Backups/other.nani": "Rin: kept too",
            "deep/Backup/old.nani": "Mio: skipped as well",
        }
    )

    stats = script_tree.aggregate("Backup")

    assert stats.speakers == frozenset({"Kohaku", "Rin"})
    assert stats.file_count == 2


def test_single_excluded_name_is_not_split_into_characters() -> None:
    fs = MemoryFileSystem(
        {
            "/ws/A/a.nani": "A: kept",
            "/ws/O/o.nani": "O: kept",
            "/ws/Old/old.nani": "Old: skipped",
        }
    )

    stats = TreeAggregator(fs).aggregate("/ws", "Old")

    assert stats.speakers == frozenset({"A", "O"})


def test_fully_excluded_tree_is_empty(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write({"Generated/a.nani": "Kohaku: hi"})

    stats = script_tree.aggregate("Generated")

    assert stats.body_char_count == 0
    assert stats.word_count == 0
    assert stats.speakers == frozenset()


def test_undecodable_file_contributes_nothing(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write({"good.nani": "Kohaku: fine words", "also.nani": "Yuki: more"})
    script_tree.write_bytes("broken.nani", b"\xff\xfe\xfa")

    tree = script_tree.tree()
    siblings = [child.stats for child in tree.children if child.name != "broken.nani"]

    expected = merge_stats(siblings)
    assert tree.stats.body_char_count == expected.body_char_count
    assert tree.stats.word_count == expected.word_count
    assert tree.stats.speakers == expected.speakers


def test_listing_failure_yields_empty_subtree() -> None:
    fs = MemoryFileSystem(
        {
            "/ws/a.nani": "Kohaku: visible",
            "/ws/locked/b.nani": "Yuki: hidden",
        }
    )
    fs.unlistable.add("/ws/locked")

    tree = TreeAggregator(fs).build_tree("/ws")

    assert tree.stats.speakers == frozenset({"Kohaku"})
    locked = next(child for child in tree.children if child.name == "locked")
    assert locked.stats == AggregateStats()


def test_missing_root_is_empty_not_error() -> None:
    stats = TreeAggregator(MemoryFileSystem()).aggregate("/nowhere")
    assert stats == AggregateStats()


def test_children_follow_listing_order() -> None:
    fs = MemoryFileSystem(
        {
            "/ws/b.nani": "B: x",
            "/ws/a/inner.nani": "A: y",
            "/ws/c.nani": "C: z",
        }
    )
    tree = TreeAggregator(fs).build_tree("/ws")
    assert [child.name for child in tree.children] == ["a", "b.nani", "c.nani"]


def test_grouped_aggregation_matches_whole_tree() -> None:
    files = {
        "/ws/one/a.nani": "Kohaku: alpha beta",
        "/ws/one/b.nani": "Yuki: gamma",
        "/ws/two/c.nani": "Kohaku: delta\nRin: epsilon zeta",
        "/ws/d.nani": "narration only here",
    }
    fs = MemoryFileSystem(files)
    aggregator = TreeAggregator(fs)

    whole = aggregator.aggregate("/ws")
    per_file = [FileAnalyzer(fs).analyze_file(path) for path in sorted(files)]
    by_group = merge_stats(
        [aggregator.aggregate("/ws/one"), aggregator.aggregate("/ws/two"), per_file[0]]
    )

    assert merge_stats(per_file) == whole
    assert by_group.body_char_count == whole.body_char_count
    assert by_group.word_count == whole.word_count
    assert by_group.speakers == whole.speakers
    assert by_group.file_count == whole.file_count
    assert sorted(by_group.words) == sorted(whole.words)


def test_parallel_reads_match_sequential(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write(
        {f"scene{index:02d}.nani": f"Speaker{index % 3}: line {index} text\n" for index in range(12)}
    )
    root = script_tree.path()

    sequential = TreeAggregator().aggregate(root)
    parallel = TreeAggregator(max_workers=4).aggregate(root)

    assert parallel == sequential


def test_max_depth_limits_descent(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write({"top.nani": "A: one", "d1/mid.nani": "B: two", "d1/d2/low.nani": "C: three"})

    shallow = TreeAggregator(max_depth=1).aggregate(script_tree.path())
    assert shallow.speakers == frozenset({"A", "B"})

    rooted = TreeAggregator(max_depth=0).aggregate(script_tree.path())
    assert rooted.speakers == frozenset({"A"})


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlink_cycle_terminates(script_tree: ScriptTreeBuilder) -> None:
    script_tree.write({"story/a.nani": "Kohaku: loop safe"})
    link = script_tree.path() / "story" / "again"
    try:
        link.symlink_to(script_tree.path(), target_is_directory=True)
    except OSError:  # pragma: no cover - platform without symlink permission
        pytest.skip("cannot create symlinks")

    stats = script_tree.aggregate()

    assert stats.file_count == 1
    assert stats.speakers == frozenset({"Kohaku"})


def test_custom_extension(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("Kohaku: hi", encoding="utf-8")
    (tmp_path / "b.nani").write_text("Yuki: hi", encoding="utf-8")

    stats = TreeAggregator(extension=".txt").aggregate(tmp_path)

    assert stats.speakers == frozenset({"Kohaku"})
