#!/usr/bin/env python3
"""
Tests for the porcelain v1 status parser.
"""

from git_engine.parsers.status import StatusParser
from git_engine.results import ChangeType

PORCELAIN = "\n".join(
    [
        "## main...origin/main [ahead 2, behind 1]",
        "M  staged.txt",
        " M unstaged.txt",
        "MM both.txt",
        "A  added.txt",
        "R  old.txt -> new.txt",
        "?? untracked.txt",
        '?? "caf\\303\\251 menu.txt"',
        "UU conflict.txt",
        "AA both_added.txt",
        "!! ignored.log",
        "",
    ]
)


def test_parses_branch_header_with_tracking():
    result = StatusParser().parse(PORCELAIN, "")

    assert result.current_branch == "main"
    assert result.upstream == "origin/main"
    assert result.ahead == 2
    assert result.behind == 1
    assert result.detached is False


def test_every_entry_lands_in_exactly_one_bucket():
    result = StatusParser().parse(PORCELAIN, "")

    assert result.staged_paths == ("staged.txt", "both.txt", "added.txt", "new.txt")
    assert result.unstaged_paths == ("unstaged.txt",)
    assert result.untracked_files == ("untracked.txt", "café menu.txt")
    assert result.conflicted_files == ("conflict.txt", "both_added.txt")
    assert result.ignored_files == ("ignored.log",)
    assert result.is_clean is False


def test_bucketed_paths_cover_every_entry_line():
    entries = [line for line in PORCELAIN.splitlines() if line and not line.startswith(("## ", "!! "))]
    result = StatusParser().parse(PORCELAIN, "")

    bucketed = (
        len(result.staged_changes)
        + len(result.unstaged_changes)
        + len(result.untracked_files)
        + len(result.conflicted_files)
    )
    assert bucketed == len(entries)


def test_partially_staged_file_keeps_both_columns():
    result = StatusParser().parse(PORCELAIN, "")

    both = next(change for change in result.staged_changes if change.path == "both.txt")
    assert both.index_status is ChangeType.MODIFIED
    assert both.worktree_status is ChangeType.MODIFIED


def test_rename_records_original_path():
    result = StatusParser().parse(PORCELAIN, "")

    renamed = next(change for change in result.staged_changes if change.path == "new.txt")
    assert renamed.index_status is ChangeType.RENAMED
    assert renamed.original_path == "old.txt"


def test_clean_repository():
    result = StatusParser().parse("## main\n", "")

    assert result.is_clean is True
    assert result.current_branch == "main"
    assert result.upstream is None
    assert result.ahead == result.behind == 0


def test_ignored_files_do_not_make_tree_dirty():
    result = StatusParser().parse("## main\n!! build/\n", "")

    assert result.is_clean is True
    assert result.ignored_files == ("build/",)


def test_repository_without_commits():
    result = StatusParser().parse("## No commits yet on main\n?? a.txt\n", "")

    assert result.no_commits is True
    assert result.current_branch == "main"
    assert result.untracked_files == ("a.txt",)


def test_initial_commit_header_from_older_git():
    result = StatusParser().parse("## Initial commit on trunk\n", "")

    assert result.no_commits is True
    assert result.current_branch == "trunk"


def test_detached_head():
    result = StatusParser().parse("## HEAD (no branch)\n M a.txt\n", "")

    assert result.detached is True
    assert result.current_branch is None
    assert result.unstaged_paths == ("a.txt",)


def test_gone_upstream_reports_no_counts():
    result = StatusParser().parse("## feature...origin/feature [gone]\n", "")

    assert result.upstream == "origin/feature"
    assert result.ahead == 0
    assert result.behind == 0


def test_malformed_line_is_kept_as_unknown(log_messages):
    result = StatusParser().parse("## main\nXY\n", "")

    assert len(result.unstaged_changes) == 1
    change = result.unstaged_changes[0]
    assert change.path == "XY"
    assert change.index_status is ChangeType.UNKNOWN
    assert result.is_clean is False
    assert any("Unrecognized status line" in message for message in log_messages)


def test_undecodable_quoted_path_falls_back_to_raw_text():
    result = StatusParser().parse('## main\n?? "bad\\q.txt"\n', "")

    assert result.untracked_files == ('"bad\\q.txt"',)


def test_to_dict_is_json_friendly():
    data = StatusParser().parse("## main\n M a.txt\n", "").to_dict()

    assert data["current_branch"] == "main"
    assert data["unstaged_changes"] == [
        {"path": "a.txt", "index_status": " ", "worktree_status": "M", "original_path": None}
    ]
    assert data["is_clean"] is False
