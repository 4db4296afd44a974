#!/usr/bin/env python3
"""
Tests for merge, rebase and cherry-pick outcome parsing.
"""

from git_engine.options import CherryPickOptions, MergeOptions, RebaseMode, RebaseOptions
from git_engine.parsers.conflicts import (
    CherryPickParser,
    MergeParser,
    RebaseParser,
    conflicted_paths,
    has_conflicts,
)

MERGE_CONFLICT = """Auto-merging a.txt
CONFLICT (content): Merge conflict in a.txt
CONFLICT (modify/delete): b.txt deleted in topic and modified in HEAD.  Version HEAD of b.txt left in tree.
CONFLICT (content): Merge conflict in a.txt
Automatic merge failed; fix conflicts and then commit the result.
"""


def test_conflicted_paths_are_ordered_and_unique():
    assert conflicted_paths(MERGE_CONFLICT, "") == ("a.txt", "b.txt")


def test_conflict_marker_requires_a_conflict_line():
    assert has_conflicts("", "CONFLICT (content): Merge conflict in x") is True
    assert has_conflicts("NONCONFLICTING change", "") is False
    assert has_conflicts(" CONFLICT.md | 1 +\n", "") is False
    assert has_conflicts("[main 1a2b3c4] Fix CONFLICT detection\n", "") is False


def test_rename_delete_names_the_renamed_path():
    stdout = "CONFLICT (rename/delete): old.txt renamed to new.txt in HEAD, but deleted in topic.\n"

    assert conflicted_paths(stdout, "") == ("new.txt",)


def test_file_directory_conflicts_name_the_path():
    stdout = (
        "CONFLICT (file/directory): directory in the way of foo from HEAD; moving it to foo~HEAD instead.\n"
        "CONFLICT (directory/file): dir/ in the way of bar from topic; moving it to bar~topic instead.\n"
        "CONFLICT (distinct types): link had different types on each side; renamed one of them so each can be recorded somewhere.\n"
    )

    assert conflicted_paths(stdout, "") == ("foo", "bar", "link")


def test_unrecognized_conflict_line_still_yields_a_path():
    stdout = "CONFLICT (modify/rename): unusual outcome in lib/x.txt\nCONFLICT (other): lib/y.txt.\n"

    assert conflicted_paths(stdout, "") == ("lib/x.txt", "lib/y.txt")


def test_merge_conflict_result():
    result = MergeParser().parse(MERGE_CONFLICT, "", MergeOptions(branch="topic"))

    assert result.success is False
    assert result.conflicts is True
    assert result.conflicted_files == ("a.txt", "b.txt")
    assert result.message == "Auto-merging a.txt"


def test_fast_forward_merge_lists_changed_files():
    stdout = (
        "Updating 1a2b3c4..5d6e7f8\n"
        "Fast-forward\n"
        " a.txt       | 2 +-\n"
        " img/logo.png | Bin 0 -> 120 bytes\n"
        " 2 files changed, 1 insertion(+), 1 deletion(-)\n"
    )

    result = MergeParser().parse(stdout, "", MergeOptions(branch="topic"))

    assert result.success is True
    assert result.fast_forward is True
    assert result.changed_files == ("a.txt", "img/logo.png")
    assert result.strategy is None


def test_three_way_merge_reports_strategy():
    stdout = "Merge made by the 'ort' strategy.\n b.txt | 1 +\n 1 file changed, 1 insertion(+)\n"

    result = MergeParser().parse(stdout, "", MergeOptions(branch="topic"))

    assert result.fast_forward is False
    assert result.strategy == "ort"
    assert result.changed_files == ("b.txt",)


def test_already_up_to_date():
    result = MergeParser().parse("Already up to date.\n", "", MergeOptions(branch="topic"))

    assert result.success is True
    assert result.already_up_to_date is True
    assert result.changed_files == ()


def test_squash_and_abort():
    squashed = MergeParser().parse(
        "Squash commit -- not updating HEAD\n", "", MergeOptions(branch="topic", squash=True)
    )
    aborted = MergeParser().parse("", "", MergeOptions(abort=True))

    assert squashed.squashed is True
    assert aborted.aborted is True
    assert aborted.success is True


def test_rebase_conflict_names_stopping_commit():
    stderr = (
        "Auto-merging a.txt\n"
        "CONFLICT (content): Merge conflict in a.txt\n"
        "error: could not apply 1a2b3c4... Change a\n"
        "hint: Resolve all conflicts manually\n"
    )

    result = RebaseParser().parse("", stderr, RebaseOptions(upstream="main"))

    assert result.success is False
    assert result.conflicts is True
    assert result.conflicted_files == ("a.txt",)
    assert result.stopped_at == "1a2b3c4"
    assert result.message == "hint: Resolve all conflicts manually"


def test_rebase_up_to_date_only_for_start():
    started = RebaseParser().parse("Current branch topic is up to date.\n", "", RebaseOptions(upstream="main"))
    aborted = RebaseParser().parse("", "", RebaseOptions(mode=RebaseMode.ABORT))

    assert started.up_to_date is True
    assert started.success is True
    assert aborted.up_to_date is False
    assert aborted.mode is RebaseMode.ABORT


def test_cherry_pick_reports_created_commits():
    stdout = (
        "[main 1a2b3c4] First pick\n"
        " Date: Mon Jan 1 00:00:00 2024 +0000\n"
        " 1 file changed, 1 insertion(+)\n"
        "[main 5d6e7f8] Second pick\n"
    )
    options = CherryPickOptions(commits=("aaaaaaa", "bbbbbbb"))

    result = CherryPickParser().parse(stdout, "", options)

    assert result.success is True
    assert result.picked_commits == ("aaaaaaa", "bbbbbbb")
    assert result.created_commits == ("1a2b3c4", "5d6e7f8")


def test_cherry_pick_conflict():
    stderr = "error: could not apply aaaaaaa... change\nCONFLICT (content): Merge conflict in a.txt\n"

    result = CherryPickParser().parse("", stderr, CherryPickOptions(commits=("aaaaaaa",)))

    assert result.success is False
    assert result.conflicted_files == ("a.txt",)


def test_clean_merge_touching_a_conflict_named_file():
    stdout = (
        "Updating 1a2b3c4..5d6e7f8\n"
        "Fast-forward\n"
        " CONFLICT.md | 1 +\n"
        " 1 file changed, 1 insertion(+)\n"
    )

    result = MergeParser().parse(stdout, "", MergeOptions(branch="topic"))

    assert result.success is True
    assert result.conflicts is False
    assert result.changed_files == ("CONFLICT.md",)


def test_clean_cherry_pick_with_conflict_in_subject():
    stdout = "[main 1a2b3c4] Fix CONFLICT detection\n 1 file changed, 1 insertion(+)\n"

    result = CherryPickParser().parse(stdout, "", CherryPickOptions(commits=("aaaaaaa",)))

    assert result.success is True
    assert result.conflicts is False
    assert result.created_commits == ("1a2b3c4",)
