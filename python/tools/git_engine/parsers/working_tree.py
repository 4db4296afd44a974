"""
Line-oriented parsers for commands that change the index or the working tree:
add, checkout, reset, clean and diff.
"""

import re
from typing import List

from loguru import logger

from ..options import AddOptions, CheckoutOptions, CleanOptions, DiffOptions, ResetOptions
from ..results import AddResult, CheckoutResult, CleanResult, DiffFileStat, DiffResult, ResetResult
from .base import first_line, lines_of, unquote_path

_ADD_LINE = re.compile(r"^(?P<action>add|remove) '(?P<path>.+)'$")
_NEW_BRANCH = re.compile(r"Switched to a new branch '(?P<branch>[^']+)'")
_DETACHED = re.compile(r"HEAD is now at|detached HEAD")
_STATUS_LINE = re.compile(r"^[MADRCTU]\t(?P<path>.+)$")
_HEAD_IS_NOW_AT = re.compile(r"^HEAD is now at (?P<message>.+)$", re.MULTILINE)
_CLEAN_LINE = re.compile(r"^(?:Would remove|Removing) (?P<path>.+)$")


class AddParser:
    def parse(self, stdout: str, stderr: str, options: AddOptions) -> AddResult:
        staged: List[str] = []
        removed: List[str] = []
        for line in lines_of(stdout):
            match = _ADD_LINE.match(line.strip())
            if not match:
                continue
            target = staged if match.group("action") == "add" else removed
            target.append(match.group("path"))
        return AddResult(staged_files=tuple(staged), removed_files=tuple(removed))


class CheckoutParser:
    def parse(self, stdout: str, stderr: str, options: CheckoutOptions) -> CheckoutResult:
        text = f"{stdout}\n{stderr}"
        modified = tuple(
            unquote_path(match.group("path"))
            for match in map(_STATUS_LINE.match, stdout.splitlines())
            if match
        )
        return CheckoutResult(
            target=options.target,
            branch_created=bool(_NEW_BRANCH.search(text)),
            detached=bool(_DETACHED.search(text)),
            files_modified=modified,
            message=first_line(stderr) or first_line(stdout) or "",
        )


class ResetParser:
    def parse(self, stdout: str, stderr: str, options: ResetOptions) -> ResetResult:
        head = _HEAD_IS_NOW_AT.search(stdout)
        unstaged = tuple(
            unquote_path(match.group("path"))
            for match in map(_STATUS_LINE.match, stdout.splitlines())
            if match
        )
        return ResetResult(
            mode=options.mode,
            target=options.commit,
            head_message=head.group("message") if head else None,
            unstaged_files=unstaged,
        )


class CleanParser:
    def parse(self, stdout: str, stderr: str, options: CleanOptions) -> CleanResult:
        files: List[str] = []
        directories: List[str] = []
        for line in lines_of(stdout):
            match = _CLEAN_LINE.match(line.strip())
            if not match:
                continue
            path = unquote_path(match.group("path"))
            if path.endswith("/"):
                directories.append(path.rstrip("/"))
            else:
                files.append(path)
        return CleanResult(
            dry_run=options.dry_run, files=tuple(files), directories=tuple(directories)
        )


class DiffParser:
    """Parser for ``git diff --numstat``. Binary files report ``-`` counts."""

    def parse(self, stdout: str, stderr: str, options: DiffOptions) -> DiffResult:
        stats: List[DiffFileStat] = []
        for line in lines_of(stdout):
            parts = line.split("\t", 2)
            if len(parts) != 3:
                logger.warning(f"Skipping unrecognized numstat line: {line!r}")
                continue

            additions, deletions, path = parts
            if additions == "-" and deletions == "-":
                stats.append(DiffFileStat(path=unquote_path(path), binary=True))
            elif additions.isdigit() and deletions.isdigit():
                stats.append(
                    DiffFileStat(
                        path=unquote_path(path),
                        additions=int(additions),
                        deletions=int(deletions),
                    )
                )
            else:
                logger.warning(f"Skipping numstat line with invalid counts: {line!r}")
        return DiffResult(files=tuple(stats))
