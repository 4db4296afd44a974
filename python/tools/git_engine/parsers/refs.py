"""
Parsers for branch and tag commands.

Listing modes read the separator-delimited ``for-each-ref`` style formats; the
mutating modes report the names they acted on.
"""

from typing import List, Optional, Tuple

from loguru import logger

from ..options import BranchMode, BranchOptions, TagMode, TagOptions
from ..results import BranchInfo, BranchResult, TagInfo, TagResult
from .base import FIELD_SEPARATOR, lines_of, parse_tracking

_LOCAL_PREFIX = "refs/heads/"
_REMOTE_PREFIX = "refs/remotes/"


def _padded(line: str, count: int) -> List[str]:
    fields = line.split(FIELD_SEPARATOR)
    return fields + [""] * (count - len(fields))


class BranchParser:
    """Parser for branch listing and branch mutations."""

    def parse(self, stdout: str, stderr: str, options: BranchOptions) -> BranchResult:
        match options.mode:
            case BranchMode.LIST:
                return BranchResult(mode=options.mode, branches=self.parse_list(stdout))
            case BranchMode.CREATE:
                return BranchResult(mode=options.mode, created=options.name)
            case BranchMode.DELETE:
                return BranchResult(mode=options.mode, deleted=options.name)
            case _:
                return BranchResult(
                    mode=options.mode,
                    renamed_from=options.name,
                    renamed_to=options.new_name,
                )

    def parse_list(self, stdout: str) -> Tuple[BranchInfo, ...]:
        branches = []
        for line in lines_of(stdout):
            ref_name, object_name, upstream, track, head = _padded(line, 5)[:5]
            if not ref_name:
                logger.warning(f"Skipping branch record without a ref name: {line!r}")
                continue

            is_remote = ref_name.startswith(_REMOTE_PREFIX)
            prefix = _REMOTE_PREFIX if is_remote else _LOCAL_PREFIX
            name = ref_name[len(prefix):] if ref_name.startswith(prefix) else ref_name
            ahead, behind, gone = parse_tracking(track)

            branches.append(
                BranchInfo(
                    name=name,
                    ref_name=ref_name,
                    commit_hash=object_name,
                    is_current=head.strip() == "*",
                    is_remote=is_remote,
                    upstream=upstream or None,
                    tracking=track.strip("[]") or None,
                    ahead=ahead,
                    behind=behind,
                    upstream_gone=gone,
                )
            )
        return tuple(branches)


class TagParser:
    """Parser for tag listing and tag mutations."""

    def parse(self, stdout: str, stderr: str, options: TagOptions) -> TagResult:
        match options.mode:
            case TagMode.LIST:
                return TagResult(mode=options.mode, tags=self.parse_list(stdout))
            case TagMode.CREATE:
                return TagResult(mode=options.mode, created=options.name)
            case _:
                return TagResult(mode=options.mode, deleted=options.name)

    def parse_list(self, stdout: str) -> Tuple[TagInfo, ...]:
        tags = []
        for line in lines_of(stdout):
            name, object_name, peeled, object_type, created, subject = _padded(line, 6)[:6]
            if not name:
                logger.warning(f"Skipping tag record without a name: {line!r}")
                continue

            annotated = object_type == "tag"
            timestamp: Optional[int] = int(created) if created.isdigit() else None
            tags.append(
                TagInfo(
                    name=name,
                    commit_hash=peeled or object_name,
                    annotated=annotated,
                    timestamp=timestamp,
                    message=(subject or None) if annotated else None,
                )
            )
        return tuple(tags)
