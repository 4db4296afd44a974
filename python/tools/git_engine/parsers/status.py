"""
Parser for ``git status --porcelain=v1 -b`` output.
"""

import re
from typing import List, Optional, Tuple

from loguru import logger

from ..options import StatusOptions
from ..results import ChangeType, FileChange, StatusResult
from .base import parse_tracking, unquote_path

_NO_COMMITS_PATTERN = re.compile(
    r"^## (?:No commits yet|Initial commit) on (?P<branch>.+?)(?:\.\.\.(?P<upstream>\S+))?$"
)
_BRANCH_PATTERN = re.compile(
    r"^## (?P<branch>.+?)(?:\.\.\.(?P<upstream>\S+))?(?: \[(?P<track>[^\]]+)\])?$"
)
_DETACHED_HEADER = "## HEAD (no branch)"


class StatusParser:
    """Parser for porcelain v1 status output with a branch header."""

    def parse(
        self, stdout: str, stderr: str, options: Optional[StatusOptions] = None
    ) -> StatusResult:
        branch: Optional[str] = None
        upstream: Optional[str] = None
        ahead = behind = 0
        detached = no_commits = False

        staged: List[FileChange] = []
        unstaged: List[FileChange] = []
        untracked: List[str] = []
        conflicted: List[str] = []
        ignored: List[str] = []

        for line in stdout.splitlines():
            if not line.strip():
                continue

            if line.startswith("## "):
                if line.strip() == _DETACHED_HEADER:
                    detached = True
                elif match := _NO_COMMITS_PATTERN.match(line):
                    branch, upstream = match.group("branch"), match.group("upstream")
                    no_commits = True
                elif match := _BRANCH_PATTERN.match(line):
                    branch, upstream = match.group("branch"), match.group("upstream")
                    ahead, behind, _ = parse_tracking(match.group("track") or "")
                continue

            if len(line) < 4 or line[2] != " ":
                logger.warning(f"Unrecognized status line kept as unknown change: {line!r}")
                unstaged.append(
                    FileChange(line.strip(), ChangeType.UNKNOWN, ChangeType.UNKNOWN)
                )
                continue

            code = line[:2]
            path, original_path = self._split_paths(code, line[3:])

            if code == "??":
                untracked.append(path)
            elif code == "!!":
                ignored.append(path)
            elif "U" in code or code in ("AA", "DD"):
                conflicted.append(path)
            else:
                change = FileChange(
                    path=path,
                    index_status=ChangeType.from_code(code[0]),
                    worktree_status=ChangeType.from_code(code[1]),
                    original_path=original_path,
                )
                if code[0] not in (" ", "?", "!"):
                    staged.append(change)
                else:
                    unstaged.append(change)

        return StatusResult(
            current_branch=branch,
            staged_changes=tuple(staged),
            unstaged_changes=tuple(unstaged),
            untracked_files=tuple(untracked),
            conflicted_files=tuple(conflicted),
            ignored_files=tuple(ignored),
            upstream=upstream,
            ahead=ahead,
            behind=behind,
            detached=detached,
            no_commits=no_commits,
        )

    @staticmethod
    def _split_paths(code: str, text: str) -> Tuple[str, Optional[str]]:
        """Split a rename/copy entry into (new path, original path)."""
        if ("R" in code or "C" in code) and " -> " in text:
            original, path = text.split(" -> ", 1)
            return unquote_path(path), unquote_path(original)
        return unquote_path(text), None
