"""
Typed options for every engine operation.

Options are plain value objects. Domain validation (does the branch exist, is
the path inside the repository, ...) is the caller's job; the checks here only
reject combinations that cannot be turned into a command at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

from .models import GitIdentity, GitOperation


def _freeze(instance: object, *names: str) -> None:
    """Store sequence fields as tuples so options stay hashable and immutable."""
    for name in names:
        value = getattr(instance, name)
        if value is None:
            continue
        if isinstance(value, str):
            value = (value,)
        object.__setattr__(instance, name, tuple(value))


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


class BranchMode(str, Enum):
    LIST = "list"
    CREATE = "create"
    DELETE = "delete"
    RENAME = "rename"


class TagMode(str, Enum):
    LIST = "list"
    CREATE = "create"
    DELETE = "delete"


class RemoteMode(str, Enum):
    LIST = "list"
    ADD = "add"
    REMOVE = "remove"
    RENAME = "rename"
    GET_URL = "get-url"
    SET_URL = "set-url"
    PRUNE = "prune"


class WorktreeMode(str, Enum):
    LIST = "list"
    ADD = "add"
    REMOVE = "remove"
    MOVE = "move"
    PRUNE = "prune"
    LOCK = "lock"
    UNLOCK = "unlock"


class StashMode(str, Enum):
    LIST = "list"
    PUSH = "push"
    POP = "pop"
    APPLY = "apply"
    DROP = "drop"
    CLEAR = "clear"


class RebaseMode(str, Enum):
    START = "start"
    CONTINUE = "continue"
    ABORT = "abort"
    SKIP = "skip"


class ResetMode(str, Enum):
    SOFT = "soft"
    MIXED = "mixed"
    HARD = "hard"
    MERGE = "merge"
    KEEP = "keep"


@dataclass(frozen=True, slots=True)
class StatusOptions:
    operation: ClassVar[GitOperation] = GitOperation.STATUS

    include_untracked: bool = True
    ignore_submodules: bool = False


@dataclass(frozen=True, slots=True)
class CommitOptions:
    """
    Options for creating a commit.

    ``sign`` is tri-state: ``True`` forces signing, ``False`` disables it and
    ``None`` defers to the engine configuration.
    """

    operation: ClassVar[GitOperation] = GitOperation.COMMIT

    message: str
    amend: bool = False
    allow_empty: bool = False
    no_verify: bool = False
    all_tracked: bool = False
    sign: Optional[bool] = None
    force_unsigned_on_failure: bool = False
    author: Optional[GitIdentity] = None
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "paths")
        _require(bool(self.message) or self.amend, "Commit message is required")


@dataclass(frozen=True, slots=True)
class LogOptions:
    operation: ClassVar[GitOperation] = GitOperation.LOG

    max_count: Optional[int] = None
    skip: Optional[int] = None
    since: Optional[str] = None
    until: Optional[str] = None
    author: Optional[str] = None
    grep: Optional[str] = None
    revision: Optional[str] = None
    all_refs: bool = False
    first_parent: bool = False
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "paths")
        _require(self.max_count is None or self.max_count > 0, "max_count must be positive")


@dataclass(frozen=True, slots=True)
class BlameOptions:
    operation: ClassVar[GitOperation] = GitOperation.BLAME

    file: str
    revision: Optional[str] = None
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    ignore_whitespace: bool = False

    def __post_init__(self) -> None:
        _require(bool(self.file), "File is required for blame")
        if self.start_line is not None and self.end_line is not None:
            _require(self.start_line <= self.end_line, "start_line must not exceed end_line")


@dataclass(frozen=True, slots=True)
class BranchOptions:
    operation: ClassVar[GitOperation] = GitOperation.BRANCH

    mode: BranchMode = BranchMode.LIST
    name: Optional[str] = None
    new_name: Optional[str] = None
    start_point: Optional[str] = None
    force: bool = False
    remote: bool = False
    all_branches: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", BranchMode(self.mode))
        if self.mode in (BranchMode.CREATE, BranchMode.DELETE):
            _require(bool(self.name), f"Branch name is required for {self.mode.value}")
        if self.mode is BranchMode.RENAME:
            _require(
                bool(self.name) and bool(self.new_name),
                "Both branch names are required for rename",
            )


@dataclass(frozen=True, slots=True)
class MergeOptions:
    operation: ClassVar[GitOperation] = GitOperation.MERGE

    branch: Optional[str] = None
    no_fast_forward: bool = False
    fast_forward_only: bool = False
    squash: bool = False
    strategy: Optional[str] = None
    message: Optional[str] = None
    abort: bool = False
    sign: Optional[bool] = None
    force_unsigned_on_failure: bool = False

    def __post_init__(self) -> None:
        _require(self.abort or bool(self.branch), "Branch is required to merge")
        _require(
            not (self.no_fast_forward and self.fast_forward_only),
            "no_fast_forward and fast_forward_only are mutually exclusive",
        )


@dataclass(frozen=True, slots=True)
class RebaseOptions:
    operation: ClassVar[GitOperation] = GitOperation.REBASE

    mode: RebaseMode = RebaseMode.START
    upstream: Optional[str] = None
    branch: Optional[str] = None
    onto: Optional[str] = None
    autostash: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", RebaseMode(self.mode))
        if self.mode is RebaseMode.START:
            _require(bool(self.upstream), "Upstream is required to start a rebase")


@dataclass(frozen=True, slots=True)
class CherryPickOptions:
    operation: ClassVar[GitOperation] = GitOperation.CHERRY_PICK

    commits: Tuple[str, ...] = ()
    no_commit: bool = False
    mainline: Optional[int] = None
    record_origin: bool = False
    abort: bool = False
    continue_operation: bool = False
    sign: Optional[bool] = None
    force_unsigned_on_failure: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "commits")
        _require(
            not (self.abort and self.continue_operation),
            "abort and continue_operation are mutually exclusive",
        )
        if not (self.abort or self.continue_operation):
            _require(bool(self.commits), "At least one commit is required to cherry-pick")


@dataclass(frozen=True, slots=True)
class TagOptions:
    operation: ClassVar[GitOperation] = GitOperation.TAG

    mode: TagMode = TagMode.LIST
    name: Optional[str] = None
    commit: Optional[str] = None
    message: Optional[str] = None
    annotated: bool = False
    force: bool = False
    pattern: Optional[str] = None
    sign: Optional[bool] = None
    force_unsigned_on_failure: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", TagMode(self.mode))
        if self.mode is not TagMode.LIST:
            _require(bool(self.name), f"Tag name is required for {self.mode.value}")


@dataclass(frozen=True, slots=True)
class RemoteOptions:
    operation: ClassVar[GitOperation] = GitOperation.REMOTE

    mode: RemoteMode = RemoteMode.LIST
    name: Optional[str] = None
    url: Optional[str] = None
    new_name: Optional[str] = None
    push: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", RemoteMode(self.mode))
        if self.mode is not RemoteMode.LIST:
            _require(bool(self.name), f"Remote name is required for {self.mode.value}")
        if self.mode in (RemoteMode.ADD, RemoteMode.SET_URL):
            _require(bool(self.url), f"Remote URL is required for {self.mode.value}")
        if self.mode is RemoteMode.RENAME:
            _require(bool(self.new_name), "New remote name is required for rename")


@dataclass(frozen=True, slots=True)
class WorktreeOptions:
    operation: ClassVar[GitOperation] = GitOperation.WORKTREE

    mode: WorktreeMode = WorktreeMode.LIST
    path: Optional[str] = None
    new_path: Optional[str] = None
    commitish: Optional[str] = None
    branch: Optional[str] = None
    detach: bool = False
    force: bool = False
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", WorktreeMode(self.mode))
        if self.mode not in (WorktreeMode.LIST, WorktreeMode.PRUNE):
            _require(bool(self.path), f"Worktree path is required for {self.mode.value}")
        if self.mode is WorktreeMode.MOVE:
            _require(bool(self.new_path), "New worktree path is required for move")


@dataclass(frozen=True, slots=True)
class AddOptions:
    operation: ClassVar[GitOperation] = GitOperation.ADD

    paths: Tuple[str, ...] = ()
    all_changes: bool = False
    update: bool = False
    force: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "paths")
        _require(
            bool(self.paths) or self.all_changes or self.update,
            "Nothing specified to add",
        )


@dataclass(frozen=True, slots=True)
class CheckoutOptions:
    operation: ClassVar[GitOperation] = GitOperation.CHECKOUT

    target: Optional[str] = None
    create_branch: bool = False
    force: bool = False
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "paths")
        _require(bool(self.target) or bool(self.paths), "Checkout target or paths required")
        _require(
            not (self.create_branch and not self.target),
            "A branch name is required when creating a branch",
        )


@dataclass(frozen=True, slots=True)
class ResetOptions:
    operation: ClassVar[GitOperation] = GitOperation.RESET

    mode: ResetMode = ResetMode.MIXED
    commit: Optional[str] = None
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", ResetMode(self.mode))
        _freeze(self, "paths")


@dataclass(frozen=True, slots=True)
class StashOptions:
    operation: ClassVar[GitOperation] = GitOperation.STASH

    mode: StashMode = StashMode.LIST
    message: Optional[str] = None
    include_untracked: bool = False
    keep_index: bool = False
    stash_ref: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", StashMode(self.mode))
        if self.mode is StashMode.DROP:
            _require(bool(self.stash_ref), "Stash reference is required for drop")


@dataclass(frozen=True, slots=True)
class ReflogOptions:
    operation: ClassVar[GitOperation] = GitOperation.REFLOG

    ref: str = "HEAD"
    max_count: Optional[int] = None


@dataclass(frozen=True, slots=True)
class CleanOptions:
    operation: ClassVar[GitOperation] = GitOperation.CLEAN

    force: bool = False
    dry_run: bool = True
    directories: bool = False
    ignored: bool = False
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "paths")
        _require(self.dry_run or self.force, "Clean requires dry_run or force")


@dataclass(frozen=True, slots=True)
class DiffOptions:
    operation: ClassVar[GitOperation] = GitOperation.DIFF

    staged: bool = False
    commit1: Optional[str] = None
    commit2: Optional[str] = None
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "paths")
        _require(not (self.commit2 and not self.commit1), "commit2 requires commit1")


@dataclass(frozen=True, slots=True)
class ShowCommitOptions:
    """Reads back the details of a commit right after it was created."""

    operation: ClassVar[GitOperation] = GitOperation.SHOW_COMMIT

    revision: str = "HEAD"


SIGNABLE_OPTIONS = (CommitOptions, MergeOptions, CherryPickOptions, TagOptions)


__all__ = [
    "BranchMode",
    "TagMode",
    "RemoteMode",
    "WorktreeMode",
    "StashMode",
    "RebaseMode",
    "ResetMode",
    "StatusOptions",
    "CommitOptions",
    "LogOptions",
    "BlameOptions",
    "BranchOptions",
    "MergeOptions",
    "RebaseOptions",
    "CherryPickOptions",
    "TagOptions",
    "RemoteOptions",
    "WorktreeOptions",
    "AddOptions",
    "CheckoutOptions",
    "ResetOptions",
    "StashOptions",
    "ReflogOptions",
    "CleanOptions",
    "DiffOptions",
    "ShowCommitOptions",
    "SIGNABLE_OPTIONS",
]
