"""
Parser for ``git worktree`` subcommands.

``worktree list --porcelain`` prints one block per worktree, blocks separated by
a blank line, each starting with ``worktree <path>``.
"""

import re
from typing import Dict, List, Optional, Tuple

from loguru import logger

from ..options import WorktreeMode, WorktreeOptions
from ..results import WorktreeInfo, WorktreeResult
from .base import lines_of

_BRANCH_PREFIX = "refs/heads/"
_PRUNE_LINE = re.compile(r"^Removing (?:worktrees/)?(?P<name>[^:]+):")


def _blocks(stdout: str) -> List[List[str]]:
    blocks: List[List[str]] = []
    current: List[str] = []
    for line in stdout.splitlines():
        if line.strip():
            current.append(line)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


class WorktreeParser:
    """Parser for worktree listing and worktree mutations."""

    def parse(self, stdout: str, stderr: str, options: WorktreeOptions) -> WorktreeResult:
        match options.mode:
            case WorktreeMode.LIST:
                return WorktreeResult(mode=options.mode, worktrees=self.parse_porcelain(stdout))
            case WorktreeMode.ADD:
                return WorktreeResult(
                    mode=options.mode, path=options.path, branch=options.branch
                )
            case WorktreeMode.MOVE:
                return WorktreeResult(
                    mode=options.mode, path=options.path, new_path=options.new_path
                )
            case WorktreeMode.PRUNE:
                pruned = tuple(
                    match.group("name")
                    for match in map(_PRUNE_LINE.match, lines_of(f"{stdout}\n{stderr}"))
                    if match
                )
                return WorktreeResult(mode=options.mode, pruned=pruned)
            case _:
                return WorktreeResult(mode=options.mode, path=options.path)

    @staticmethod
    def parse_porcelain(stdout: str) -> Tuple[WorktreeInfo, ...]:
        worktrees = []
        for block in _blocks(stdout):
            attributes: Dict[str, Optional[str]] = {}
            for line in block:
                key, _, value = line.partition(" ")
                attributes[key] = value or None

            path = attributes.get("worktree")
            if not path:
                logger.warning(f"Skipping worktree block without a path: {block!r}")
                continue

            branch = attributes.get("branch")
            if branch and branch.startswith(_BRANCH_PREFIX):
                branch = branch[len(_BRANCH_PREFIX):]

            worktrees.append(
                WorktreeInfo(
                    path=path,
                    head=attributes.get("HEAD"),
                    branch=branch,
                    detached="detached" in attributes,
                    bare="bare" in attributes,
                    locked="locked" in attributes,
                    lock_reason=attributes.get("locked"),
                    prunable="prunable" in attributes,
                    prunable_reason=attributes.get("prunable"),
                )
            )
        return tuple(worktrees)
