"""
Parsers for the merge family: merge, rebase and cherry-pick.

Git reports these outcomes only in human-readable text, so every substring the
engine relies on lives here. The executor pins the C locale, which keeps these
markers stable across installations.
"""

import re
from typing import List, Tuple

from ..options import CherryPickOptions, MergeOptions, RebaseMode, RebaseOptions
from ..results import CherryPickResult, MergeResult, RebaseResult
from .base import first_line

CONFLICT_MARKER = re.compile(r"^CONFLICT \(", re.MULTILINE)

# Tried in order against each ``CONFLICT (...)`` line; the first match names
# the path. Rename/delete comes before the generic */delete form.
_CONFLICT_PATH_PATTERNS = (
    re.compile(r"^CONFLICT \([^)]*\): Merge conflict in (?P<path>.+)$"),
    re.compile(r"^CONFLICT \(rename/delete\): .+? renamed to (?P<path>.+?) in .+?, but deleted in "),
    re.compile(r"^CONFLICT \([^)]*/delete\): (?P<path>.+?) deleted in "),
    re.compile(r"^CONFLICT \((?:file/directory|directory/file)\): .*? of (?P<path>.+?) from "),
    re.compile(r"^CONFLICT \([^)]*\): There is a directory with name (?P<path>.+?) in "),
    re.compile(r"^CONFLICT \(distinct types\): (?P<path>.+?) had different types "),
    re.compile(r"^CONFLICT \(file location\): (?P<path>.+?) added in "),
    re.compile(r"^CONFLICT \(rename/rename\): (?P<path>.+?) renamed to "),
    re.compile(r"^CONFLICT \([^)]*\): .*? in (?P<path>.+?)\.?$"),
    re.compile(r"^CONFLICT \([^)]*\): (?P<path>.+?)\.?$"),
)
_FAST_FORWARD = re.compile(r"^Fast-forward$", re.MULTILINE)
_ALREADY_UP_TO_DATE = re.compile(r"Already up[ -]to[ -]date")
_STRATEGY = re.compile(r"Merge made by the '(?P<strategy>[\w-]+)' strategy")
_DIFFSTAT_LINE = re.compile(r"^ (?P<path>\S.*?)\s+\|\s+(?:\d+|Bin)", re.MULTILINE)
_REBASE_UP_TO_DATE = re.compile(r"is up to date")
_REBASE_STOPPED_AT = re.compile(r"[Cc]ould not apply (?P<commit>[0-9a-f]{7,64})")
_NEW_COMMIT = re.compile(r"^\[[^\]]*? (?P<hash>[0-9a-f]{7,64})\] ", re.MULTILINE)


def has_conflicts(stdout: str, stderr: str) -> bool:
    """True when git reported at least one ``CONFLICT`` line."""
    return bool(CONFLICT_MARKER.search(f"{stdout}\n{stderr}"))


def conflicted_paths(stdout: str, stderr: str) -> Tuple[str, ...]:
    """Paths named by ``CONFLICT (...)`` lines, one per line, in order of first appearance."""
    paths: List[str] = []
    for line in f"{stdout}\n{stderr}".split("\n"):
        line = line.strip()
        if not CONFLICT_MARKER.match(line):
            continue
        for pattern in _CONFLICT_PATH_PATTERNS:
            match = pattern.match(line)
            if match:
                path = match.group("path").strip()
                if path not in paths:
                    paths.append(path)
                break
    return tuple(paths)


class MergeParser:
    """Parser for ``git merge`` output."""

    def parse(self, stdout: str, stderr: str, options: MergeOptions) -> MergeResult:
        text = f"{stdout}\n{stderr}"
        if options.abort:
            return MergeResult(success=True, aborted=True, message=first_line(text) or "")

        if has_conflicts(stdout, stderr):
            return MergeResult(
                success=False,
                conflicts=True,
                conflicted_files=conflicted_paths(stdout, stderr),
                message=first_line(text) or "",
            )

        strategy = _STRATEGY.search(text)
        return MergeResult(
            success=True,
            fast_forward=bool(_FAST_FORWARD.search(stdout)),
            already_up_to_date=bool(_ALREADY_UP_TO_DATE.search(text)),
            strategy=strategy.group("strategy") if strategy else None,
            changed_files=tuple(m.group("path") for m in _DIFFSTAT_LINE.finditer(stdout)),
            squashed=options.squash,
            message=first_line(text) or "",
        )


class RebaseParser:
    """Parser for ``git rebase`` output."""

    def parse(self, stdout: str, stderr: str, options: RebaseOptions) -> RebaseResult:
        text = f"{stdout}\n{stderr}"
        stopped_at = _REBASE_STOPPED_AT.search(text)
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        message = lines[-1] if lines else ""

        if has_conflicts(stdout, stderr):
            return RebaseResult(
                success=False,
                mode=options.mode,
                conflicts=True,
                conflicted_files=conflicted_paths(stdout, stderr),
                stopped_at=stopped_at.group("commit") if stopped_at else None,
                message=message,
            )

        return RebaseResult(
            success=True,
            mode=options.mode,
            up_to_date=(
                options.mode is RebaseMode.START and bool(_REBASE_UP_TO_DATE.search(text))
            ),
            message=message,
        )


class CherryPickParser:
    """Parser for ``git cherry-pick`` output."""

    def parse(self, stdout: str, stderr: str, options: CherryPickOptions) -> CherryPickResult:
        if options.abort:
            return CherryPickResult(success=True, aborted=True)

        created = tuple(match.group("hash") for match in _NEW_COMMIT.finditer(stdout))
        if has_conflicts(stdout, stderr):
            return CherryPickResult(
                success=False,
                conflicts=True,
                conflicted_files=conflicted_paths(stdout, stderr),
                picked_commits=options.commits,
                created_commits=created,
            )

        return CherryPickResult(
            success=True,
            picked_commits=options.commits,
            created_commits=created,
        )
