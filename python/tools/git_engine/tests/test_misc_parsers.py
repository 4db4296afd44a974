#!/usr/bin/env python3
"""
Tests for remote, worktree, stash and working tree parsers, and the factory.
"""

import pytest
from conftest import HASH_A, HASH_B, raw

from git_engine.models import GitOperation
from git_engine.options import (
    AddOptions,
    CheckoutOptions,
    CleanOptions,
    DiffOptions,
    RemoteMode,
    RemoteOptions,
    ResetMode,
    ResetOptions,
    StashMode,
    StashOptions,
    StatusOptions,
    WorktreeMode,
    WorktreeOptions,
)
from git_engine.parsers import ParserFactory, parse_output
from git_engine.parsers.remote import RemoteParser
from git_engine.parsers.stash import StashParser
from git_engine.parsers.status import StatusParser
from git_engine.parsers.working_tree import (
    AddParser,
    CheckoutParser,
    CleanParser,
    DiffParser,
    ResetParser,
)
from git_engine.parsers.worktree import WorktreeParser

US = "\x1f"


def test_remote_verbose_groups_fetch_and_push():
    stdout = (
        "origin\thttps://example.com/repo.git (fetch)\n"
        "origin\tgit@example.com:repo.git (push)\n"
        "mirror\t/srv/mirror.git (fetch)\n"
    )

    result = RemoteParser().parse(stdout, "", RemoteOptions())

    origin, mirror = result.remotes
    assert origin.name == "origin"
    assert origin.fetch_url == "https://example.com/repo.git"
    assert origin.push_url == "git@example.com:repo.git"
    assert mirror.push_url == "/srv/mirror.git"


def test_remote_prune_and_get_url():
    pruned = RemoteParser().parse(
        "Pruning origin\nURL: /srv/origin.git\n * [pruned] origin/old\n",
        "",
        RemoteOptions(mode=RemoteMode.PRUNE, name="origin"),
    )
    urls = RemoteParser().parse(
        "https://a/repo.git\nhttps://b/repo.git\n",
        "",
        RemoteOptions(mode=RemoteMode.GET_URL, name="origin"),
    )

    assert pruned.pruned == ("origin/old",)
    assert urls.urls == ("https://a/repo.git", "https://b/repo.git")


def test_worktree_porcelain_blocks():
    stdout = "\n".join(
        [
            "worktree /srv/repo",
            f"HEAD {HASH_A}",
            "branch refs/heads/main",
            "",
            "worktree /srv/repo-detached",
            f"HEAD {HASH_B}",
            "detached",
            "locked on usb drive",
            "",
            "worktree /srv/gone",
            f"HEAD {HASH_B}",
            "branch refs/heads/old",
            "prunable gitdir file points to non-existent location",
            "",
        ]
    )

    main, detached, gone = WorktreeParser().parse(stdout, "", WorktreeOptions()).worktrees

    assert main.path == "/srv/repo"
    assert main.branch == "main"
    assert main.detached is False
    assert detached.detached is True
    assert detached.locked is True
    assert detached.lock_reason == "on usb drive"
    assert gone.prunable is True
    assert gone.prunable_reason == "gitdir file points to non-existent location"


def test_worktree_prune_names():
    result = WorktreeParser().parse(
        "Removing worktrees/old: gitdir file points to non-existent location\n",
        "",
        WorktreeOptions(mode=WorktreeMode.PRUNE),
    )

    assert result.pruned == ("old",)


def test_stash_list_entries():
    stdout = "\n".join(
        [
            US.join(["stash@{0}", HASH_A, "1700000000", "WIP on main: 1a2b3c4 subject"]),
            US.join(["stash@{1}", HASH_B, "1690000000", "On feature: saved work"]),
        ]
    )

    first, second = StashParser().parse(stdout, "", StashOptions()).stashes

    assert first.index == 0
    assert first.branch == "main"
    assert first.commit_hash == HASH_A
    assert second.ref == "stash@{1}"
    assert second.branch == "feature"
    assert second.timestamp == 1690000000


def test_stash_push_without_changes_is_no_op():
    options = StashOptions(mode=StashMode.PUSH)

    assert StashParser().parse("No local changes to save\n", "", options).no_op is True
    assert StashParser().parse("Saved working directory", "", options).stash_ref == "stash@{0}"


def test_stash_pop_conflict():
    result = StashParser().parse(
        "CONFLICT (content): Merge conflict in a.txt\n", "", StashOptions(mode=StashMode.POP)
    )

    assert result.conflicts is True
    assert result.conflicted_files == ("a.txt",)


def test_add_verbose_output():
    result = AddParser().parse("add 'a.txt'\nremove 'old.txt'\nadd 'dir/b c.txt'\n", "", AddOptions(all_changes=True))

    assert result.staged_files == ("a.txt", "dir/b c.txt")
    assert result.removed_files == ("old.txt",)


def test_checkout_new_branch():
    result = CheckoutParser().parse(
        "M\ta.txt\n", "Switched to a new branch 'topic'\n", CheckoutOptions(target="topic", create_branch=True)
    )

    assert result.branch_created is True
    assert result.detached is False
    assert result.files_modified == ("a.txt",)
    assert result.message == "Switched to a new branch 'topic'"


def test_checkout_detached_head():
    stderr = "Note: switching to '1a2b3c4'.\n\nHEAD is now at 1a2b3c4 subject\n"

    result = CheckoutParser().parse("", stderr, CheckoutOptions(target="1a2b3c4"))

    assert result.detached is True


def test_reset_reports_head_and_unstaged_files():
    hard = ResetParser().parse("HEAD is now at 1a2b3c4 subject\n", "", ResetOptions(mode=ResetMode.HARD))
    mixed = ResetParser().parse("Unstaged changes after reset:\nM\ta.txt\nD\tb.txt\n", "", ResetOptions())

    assert hard.head_message == "1a2b3c4 subject"
    assert mixed.unstaged_files == ("a.txt", "b.txt")
    assert mixed.mode is ResetMode.MIXED


def test_clean_separates_directories():
    result = CleanParser().parse("Would remove build/\nWould remove tmp.txt\n", "", CleanOptions(directories=True))

    assert result.dry_run is True
    assert result.files == ("tmp.txt",)
    assert result.directories == ("build",)


def test_diff_numstat(log_messages):
    stdout = "3\t1\ta.txt\n-\t-\timg.png\nbogus\n"

    result = DiffParser().parse(stdout, "", DiffOptions())

    text, image = result.files
    assert (text.additions, text.deletions) == (3, 1)
    assert image.binary is True
    assert result.total_additions == 3
    assert result.total_deletions == 1
    assert log_messages


def test_factory_maps_operations():
    assert isinstance(ParserFactory.create_parser(GitOperation.STATUS), StatusParser)
    assert isinstance(ParserFactory.create_parser("stash"), StashParser)
    with pytest.raises(ValueError):
        ParserFactory.create_parser(GitOperation.COMMIT)


def test_parse_output_uses_options_operation():
    result = parse_output(raw(stdout="## main\n"), StatusOptions())

    assert result.current_branch == "main"
