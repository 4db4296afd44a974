#!/usr/bin/env python3
"""
Tests for the log, reflog and commit details parsers.
"""

from conftest import HASH_A, HASH_B, HASH_C

from git_engine.options import ReflogOptions
from git_engine.parsers.log import CommitDetailsParser, LogParser, ReflogParser

US = "\x1f"
RS = "\x1e"


def log_record(*fields: str) -> str:
    return US.join(fields) + RS + "\n"


def test_parses_records_and_skips_corrupt_ones(log_messages):
    stdout = "".join(
        [
            log_record(
                HASH_A, "aaaaaaa", "Ada", "ada@example.com", "1700000000",
                HASH_B, "HEAD -> main, tag: v1.0", "Add feature", "Longer body\n\nSecond paragraph\n",
            ),
            log_record(HASH_B, "bbbbbbb", "Bob", "bob@example.com", "1600000000", "", "", "Initial", ""),
            log_record("not-a-hash", "x", "Eve", "eve@example.com", "1", "", "", "bad hash", ""),
            log_record(HASH_C, "ccccccc", "Eve", "eve@example.com", "yesterday", "", "", "bad time", ""),
            log_record(HASH_C, "ccccccc", "too few fields"),
        ]
    )

    result = LogParser().parse(stdout, "")

    assert result.total_count == 2
    assert result.skipped_records == 3
    assert len(log_messages) == 3

    first, second = result.commits
    assert first.hash == HASH_A
    assert first.short_hash == "aaaaaaa"
    assert first.author_name == "Ada"
    assert first.timestamp == 1700000000
    assert first.parents == (HASH_B,)
    assert first.refs == ("HEAD -> main", "tag: v1.0")
    assert first.subject == "Add feature"
    assert first.body == "Longer body\n\nSecond paragraph"

    assert second.parents == ()
    assert second.refs is None
    assert second.body is None


def test_merge_commit_lists_every_parent():
    stdout = log_record(HASH_A, "aaaaaaa", "Ada", "a@x", "1", f"{HASH_B} {HASH_C}", "", "Merge", "")

    (entry,) = LogParser().parse(stdout, "").commits

    assert entry.parents == (HASH_B, HASH_C)


def test_subject_with_special_characters_is_kept_verbatim():
    stdout = log_record(HASH_A, "aaaaaaa", "Ada", "a@x", "1", "", "", "fix: a | b -> c \"quoted\"", "")

    (entry,) = LogParser().parse(stdout, "").commits

    assert entry.subject == 'fix: a | b -> c "quoted"'


def test_empty_history():
    result = LogParser().parse("", "")

    assert result.commits == ()
    assert result.skipped_records == 0


def test_reflog_splits_action_from_message(log_messages):
    stdout = (
        US.join([HASH_A, "HEAD@{0}", "commit: Add feature", "1700000000"]) + RS + "\n"
        + US.join([HASH_B, "HEAD@{1}", "checkout: moving from main to topic", "1690000000"]) + RS + "\n"
        + US.join([HASH_C, "HEAD@{2}", "broken"]) + RS + "\n"
    )

    result = ReflogParser().parse(stdout, "", ReflogOptions(ref="HEAD"))

    assert result.ref == "HEAD"
    assert result.skipped_records == 1
    first, second = result.entries
    assert first.selector == "HEAD@{0}"
    assert first.action == "commit"
    assert first.message == "Add feature"
    assert second.action == "checkout"
    assert second.message == "moving from main to topic"
    assert second.timestamp == 1690000000


def test_reflog_uses_requested_ref():
    result = ReflogParser().parse("", "", ReflogOptions(ref="topic"))

    assert result.ref == "topic"
    assert result.entries == ()


def test_commit_details_from_show():
    stdout = US.join([HASH_A, "Ada", "ada@example.com", "1700000000", "Add feature"]) + RS + "\n\na.txt\nsrc/b.py\n"

    result = CommitDetailsParser().parse(stdout, "")

    assert result.commit_hash == HASH_A
    assert result.author == "Ada"
    assert result.author_email == "ada@example.com"
    assert result.timestamp == 1700000000
    assert result.subject == "Add feature"
    assert result.files_changed == ("a.txt", "src/b.py")
    assert result.committed is True


def test_unreadable_show_output_yields_no_hash(log_messages):
    result = CommitDetailsParser().parse("garbage", "")

    assert result.commit_hash is None
    assert log_messages
