"""
Parsers for commit history: ``git log``, ``git reflog`` and the single-commit
``git show`` read back after a commit.

Records are separated by 0x1E and fields by 0x1F. A record that cannot be
trusted is skipped and logged, never guessed at.
"""

from typing import List, Optional

from loguru import logger

from ..options import LogOptions, ReflogOptions, ShowCommitOptions
from ..results import CommitEntry, CommitResult, LogResult, ReflogEntry, ReflogResult
from .base import FIELD_SEPARATOR, RECORD_SEPARATOR, is_full_hash, lines_of, split_records

_LOG_MIN_FIELDS = 8
_REFLOG_MIN_FIELDS = 4
_SHOW_MIN_FIELDS = 5


def _timestamp(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


class LogParser:
    """Parser for ``git log`` with the engine's record format."""

    def parse(
        self, stdout: str, stderr: str, options: Optional[LogOptions] = None
    ) -> LogResult:
        commits: List[CommitEntry] = []
        skipped = 0

        for record in split_records(stdout):
            fields = record.split(FIELD_SEPARATOR)
            if len(fields) < _LOG_MIN_FIELDS:
                logger.warning(f"Skipping log record with {len(fields)} fields")
                skipped += 1
                continue

            commit_hash = fields[0].strip()
            timestamp = _timestamp(fields[4])
            if not is_full_hash(commit_hash) or timestamp is None:
                logger.warning(f"Skipping malformed log record for {commit_hash!r}")
                skipped += 1
                continue

            refs = fields[6].strip()
            body = fields[8].strip() if len(fields) > 8 else ""
            commits.append(
                CommitEntry(
                    hash=commit_hash,
                    short_hash=fields[1].strip(),
                    author_name=fields[2],
                    author_email=fields[3],
                    timestamp=timestamp,
                    subject=fields[7],
                    body=body or None,
                    parents=tuple(fields[5].split()),
                    refs=tuple(ref.strip() for ref in refs.split(", ")) if refs else None,
                )
            )

        return LogResult(commits=tuple(commits), skipped_records=skipped)


class ReflogParser:
    """Parser for ``git reflog show`` with the engine's record format."""

    def parse(
        self, stdout: str, stderr: str, options: Optional[ReflogOptions] = None
    ) -> ReflogResult:
        entries: List[ReflogEntry] = []
        skipped = 0

        for record in split_records(stdout):
            fields = record.split(FIELD_SEPARATOR)
            timestamp = _timestamp(fields[3]) if len(fields) >= _REFLOG_MIN_FIELDS else None
            if timestamp is None or not is_full_hash(fields[0].strip()):
                logger.warning(f"Skipping malformed reflog record: {record!r}")
                skipped += 1
                continue

            action, _, message = fields[2].partition(": ")
            entries.append(
                ReflogEntry(
                    hash=fields[0].strip(),
                    selector=fields[1],
                    action=action,
                    message=message,
                    timestamp=timestamp,
                )
            )

        ref = options.ref if options else "HEAD"
        return ReflogResult(ref=ref, entries=tuple(entries), skipped_records=skipped)


class CommitDetailsParser:
    """Parser for ``git show --name-only`` output of a freshly created commit."""

    def parse(
        self, stdout: str, stderr: str, options: Optional[ShowCommitOptions] = None
    ) -> CommitResult:
        header, _, files = stdout.partition(RECORD_SEPARATOR)
        fields = header.strip("\n").split(FIELD_SEPARATOR)
        if len(fields) < _SHOW_MIN_FIELDS or not is_full_hash(fields[0].strip()):
            logger.warning(f"Could not read commit details from show output: {header!r}")
            return CommitResult(commit_hash=None)

        return CommitResult(
            commit_hash=fields[0].strip(),
            author=fields[1],
            author_email=fields[2],
            timestamp=_timestamp(fields[3]),
            subject=fields[4],
            files_changed=tuple(lines_of(files)),
        )
