"""
Parser for ``git stash`` subcommands.
"""

import re
from typing import List, Optional, Tuple

from loguru import logger

from ..options import StashMode, StashOptions
from ..results import StashEntry, StashResult
from .base import FIELD_SEPARATOR, lines_of
from .conflicts import conflicted_paths, has_conflicts

_SELECTOR = re.compile(r"stash@\{(?P<index>\d+)\}")
_DESCRIPTION = re.compile(r"^(?:WIP on|On) (?P<branch>[^:]+):")
_NOTHING_TO_SAVE = "No local changes to save"
_LATEST = "stash@{0}"


class StashParser:
    """Parser for stash listing and stash mutations."""

    def parse(self, stdout: str, stderr: str, options: StashOptions) -> StashResult:
        match options.mode:
            case StashMode.LIST:
                return StashResult(mode=options.mode, stashes=self.parse_list(stdout))
            case StashMode.PUSH:
                if _NOTHING_TO_SAVE in f"{stdout}\n{stderr}":
                    return StashResult(mode=options.mode, no_op=True)
                return StashResult(mode=options.mode, stash_ref=_LATEST)
            case StashMode.POP | StashMode.APPLY:
                return StashResult(
                    mode=options.mode,
                    stash_ref=options.stash_ref or _LATEST,
                    conflicts=has_conflicts(stdout, stderr),
                    conflicted_files=conflicted_paths(stdout, stderr),
                )
            case StashMode.DROP:
                return StashResult(mode=options.mode, stash_ref=options.stash_ref)
            case _:
                return StashResult(mode=options.mode)

    @staticmethod
    def parse_list(stdout: str) -> Tuple[StashEntry, ...]:
        entries: List[StashEntry] = []
        for line in lines_of(stdout):
            fields = line.split(FIELD_SEPARATOR)
            selector = _SELECTOR.search(fields[0])
            if not selector:
                logger.warning(f"Skipping stash record without a selector: {line!r}")
                continue

            description = fields[3] if len(fields) > 3 else ""
            timestamp: Optional[int] = None
            if len(fields) > 2 and fields[2].strip().isdigit():
                timestamp = int(fields[2])
            branch = _DESCRIPTION.match(description)

            entries.append(
                StashEntry(
                    ref=fields[0],
                    index=int(selector.group("index")),
                    commit_hash=(fields[1] or None) if len(fields) > 1 else None,
                    timestamp=timestamp,
                    branch=branch.group("branch") if branch else None,
                    description=description,
                )
            )
        return tuple(entries)
