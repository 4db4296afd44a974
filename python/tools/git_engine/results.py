"""
Typed results produced by the output parsers.

Each result is built from exactly one captured git process and is immutable.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .options import (
    BranchMode,
    RebaseMode,
    RemoteMode,
    ResetMode,
    StashMode,
    TagMode,
    WorktreeMode,
)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


class SerializableResult:
    """Mixin giving dataclass results a JSON-friendly ``to_dict``."""

    __slots__ = ()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self, dict_factory=lambda items: {k: _plain(v) for k, v in items})


class ChangeType(str, Enum):
    """Single status column of a porcelain v1 entry."""

    UNMODIFIED = " "
    MODIFIED = "M"
    TYPE_CHANGED = "T"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNMERGED = "U"
    UNTRACKED = "?"
    IGNORED = "!"
    UNKNOWN = "X"

    @classmethod
    def from_code(cls, code: str) -> "ChangeType":
        for member in cls:
            if member.value == code:
                return member
        return cls.UNKNOWN


# --- Status ---


@dataclass(frozen=True, slots=True)
class FileChange(SerializableResult):
    """One porcelain status entry with both of its status columns."""

    path: str
    index_status: ChangeType
    worktree_status: ChangeType
    original_path: Optional[str] = None


@dataclass(frozen=True, slots=True)
class StatusResult(SerializableResult):
    current_branch: Optional[str]
    staged_changes: Tuple[FileChange, ...] = ()
    unstaged_changes: Tuple[FileChange, ...] = ()
    untracked_files: Tuple[str, ...] = ()
    conflicted_files: Tuple[str, ...] = ()
    ignored_files: Tuple[str, ...] = ()
    upstream: Optional[str] = None
    ahead: int = 0
    behind: int = 0
    detached: bool = False
    no_commits: bool = False
    is_clean: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "is_clean",
            not (
                self.staged_changes
                or self.unstaged_changes
                or self.untracked_files
                or self.conflicted_files
            ),
        )

    @property
    def staged_paths(self) -> Tuple[str, ...]:
        return tuple(change.path for change in self.staged_changes)

    @property
    def unstaged_paths(self) -> Tuple[str, ...]:
        return tuple(change.path for change in self.unstaged_changes)


# --- Commit & history ---


@dataclass(frozen=True, slots=True)
class CommitResult(SerializableResult):
    commit_hash: Optional[str]
    author: Optional[str] = None
    author_email: Optional[str] = None
    timestamp: Optional[int] = None
    subject: Optional[str] = None
    files_changed: Tuple[str, ...] = ()
    committed: bool = True
    no_op: bool = False
    unsigned_fallback: bool = False


@dataclass(frozen=True, slots=True)
class CommitEntry(SerializableResult):
    hash: str
    short_hash: str
    author_name: str
    author_email: str
    timestamp: int
    subject: str
    body: Optional[str] = None
    parents: Tuple[str, ...] = ()
    refs: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True, slots=True)
class LogResult(SerializableResult):
    commits: Tuple[CommitEntry, ...] = ()
    skipped_records: int = 0

    @property
    def total_count(self) -> int:
        return len(self.commits)


@dataclass(frozen=True, slots=True)
class ReflogEntry(SerializableResult):
    hash: str
    selector: str
    action: str
    message: str
    timestamp: int


@dataclass(frozen=True, slots=True)
class ReflogResult(SerializableResult):
    ref: str
    entries: Tuple[ReflogEntry, ...] = ()
    skipped_records: int = 0


@dataclass(frozen=True, slots=True)
class BlameLine(SerializableResult):
    line_number: int
    commit_hash: str
    author: str
    timestamp: int
    content: str
    author_email: Optional[str] = None
    summary: Optional[str] = None


@dataclass(frozen=True, slots=True)
class BlameResult(SerializableResult):
    file: str
    lines: Tuple[BlameLine, ...] = ()
    dropped_blocks: int = 0

    @property
    def total_lines(self) -> int:
        return len(self.lines)


# --- Branches & tags ---


@dataclass(frozen=True, slots=True)
class BranchInfo(SerializableResult):
    name: str
    ref_name: str
    commit_hash: str
    is_current: bool = False
    is_remote: bool = False
    upstream: Optional[str] = None
    tracking: Optional[str] = None
    ahead: int = 0
    behind: int = 0
    upstream_gone: bool = False


@dataclass(frozen=True, slots=True)
class BranchResult(SerializableResult):
    mode: BranchMode
    branches: Tuple[BranchInfo, ...] = ()
    created: Optional[str] = None
    deleted: Optional[str] = None
    renamed_from: Optional[str] = None
    renamed_to: Optional[str] = None

    @property
    def current(self) -> Optional[BranchInfo]:
        return next((branch for branch in self.branches if branch.is_current), None)


@dataclass(frozen=True, slots=True)
class TagInfo(SerializableResult):
    name: str
    commit_hash: str
    annotated: bool = False
    timestamp: Optional[int] = None
    message: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TagResult(SerializableResult):
    mode: TagMode
    tags: Tuple[TagInfo, ...] = ()
    created: Optional[str] = None
    deleted: Optional[str] = None
    unsigned_fallback: bool = False


# --- Merge family ---


@dataclass(frozen=True, slots=True)
class MergeResult(SerializableResult):
    success: bool
    conflicts: bool = False
    conflicted_files: Tuple[str, ...] = ()
    fast_forward: bool = False
    already_up_to_date: bool = False
    strategy: Optional[str] = None
    changed_files: Tuple[str, ...] = ()
    squashed: bool = False
    aborted: bool = False
    message: str = ""
    unsigned_fallback: bool = False


@dataclass(frozen=True, slots=True)
class RebaseResult(SerializableResult):
    success: bool
    mode: RebaseMode = RebaseMode.START
    conflicts: bool = False
    conflicted_files: Tuple[str, ...] = ()
    up_to_date: bool = False
    stopped_at: Optional[str] = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class CherryPickResult(SerializableResult):
    success: bool
    conflicts: bool = False
    conflicted_files: Tuple[str, ...] = ()
    picked_commits: Tuple[str, ...] = ()
    created_commits: Tuple[str, ...] = ()
    no_op: bool = False
    aborted: bool = False
    unsigned_fallback: bool = False


# --- Remotes & worktrees ---


@dataclass(frozen=True, slots=True)
class RemoteInfo(SerializableResult):
    name: str
    fetch_url: str
    push_url: str


@dataclass(frozen=True, slots=True)
class RemoteResult(SerializableResult):
    mode: RemoteMode
    remotes: Tuple[RemoteInfo, ...] = ()
    name: Optional[str] = None
    new_name: Optional[str] = None
    urls: Tuple[str, ...] = ()
    pruned: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class WorktreeInfo(SerializableResult):
    path: str
    head: Optional[str] = None
    branch: Optional[str] = None
    detached: bool = False
    bare: bool = False
    locked: bool = False
    lock_reason: Optional[str] = None
    prunable: bool = False
    prunable_reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class WorktreeResult(SerializableResult):
    mode: WorktreeMode
    worktrees: Tuple[WorktreeInfo, ...] = ()
    path: Optional[str] = None
    new_path: Optional[str] = None
    branch: Optional[str] = None
    pruned: Tuple[str, ...] = ()


# --- Working tree operations ---


@dataclass(frozen=True, slots=True)
class AddResult(SerializableResult):
    staged_files: Tuple[str, ...] = ()
    removed_files: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CheckoutResult(SerializableResult):
    target: Optional[str]
    branch_created: bool = False
    detached: bool = False
    files_modified: Tuple[str, ...] = ()
    message: str = ""


@dataclass(frozen=True, slots=True)
class ResetResult(SerializableResult):
    mode: ResetMode
    target: Optional[str] = None
    head_message: Optional[str] = None
    unstaged_files: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StashEntry(SerializableResult):
    ref: str
    index: int
    commit_hash: Optional[str] = None
    timestamp: Optional[int] = None
    branch: Optional[str] = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class StashResult(SerializableResult):
    mode: StashMode
    stashes: Tuple[StashEntry, ...] = ()
    stash_ref: Optional[str] = None
    conflicts: bool = False
    conflicted_files: Tuple[str, ...] = ()
    no_op: bool = False


@dataclass(frozen=True, slots=True)
class CleanResult(SerializableResult):
    dry_run: bool
    files: Tuple[str, ...] = ()
    directories: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DiffFileStat(SerializableResult):
    path: str
    additions: int = 0
    deletions: int = 0
    binary: bool = False


@dataclass(frozen=True, slots=True)
class DiffResult(SerializableResult):
    files: Tuple[DiffFileStat, ...] = ()

    @property
    def total_additions(self) -> int:
        return sum(item.additions for item in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(item.deletions for item in self.files)


__all__ = [
    "SerializableResult",
    "ChangeType",
    "FileChange",
    "StatusResult",
    "CommitResult",
    "CommitEntry",
    "LogResult",
    "ReflogEntry",
    "ReflogResult",
    "BlameLine",
    "BlameResult",
    "BranchInfo",
    "BranchResult",
    "TagInfo",
    "TagResult",
    "MergeResult",
    "RebaseResult",
    "CherryPickResult",
    "RemoteInfo",
    "RemoteResult",
    "WorktreeInfo",
    "WorktreeResult",
    "AddResult",
    "CheckoutResult",
    "ResetResult",
    "StashEntry",
    "StashResult",
    "CleanResult",
    "DiffFileStat",
    "DiffResult",
]
