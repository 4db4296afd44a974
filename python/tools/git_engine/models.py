"""Core data models shared by the builder, executor and parsers."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union


class GitOperation(str, Enum):
    """Operations the engine knows how to build, run and parse."""

    STATUS = "status"
    COMMIT = "commit"
    SHOW_COMMIT = "show"
    LOG = "log"
    BLAME = "blame"
    BRANCH = "branch"
    MERGE = "merge"
    REBASE = "rebase"
    CHERRY_PICK = "cherry-pick"
    TAG = "tag"
    REMOTE = "remote"
    WORKTREE = "worktree"
    ADD = "add"
    CHECKOUT = "checkout"
    RESET = "reset"
    STASH = "stash"
    REFLOG = "reflog"
    CLEAN = "clean"
    DIFF = "diff"


@dataclass(frozen=True, slots=True)
class GitIdentity:
    """Author/committer identity applied to a single invocation."""

    name: str
    email: str

    def config_args(self) -> Tuple[str, ...]:
        return ("-c", f"user.name={self.name}", "-c", f"user.email={self.email}")

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True, slots=True)
class OperationContext:
    """
    Per-call execution context supplied by the caller.

    Attributes:
        working_directory: Absolute, already sanitized repository path.
        cancel_event: Setting this event terminates the running git process.
        request_id: Identifier used to correlate log lines of one call.
        identity: Optional author/committer identity for this call only.
        timeout_seconds: Overrides the configured timeout when set.
    """

    working_directory: Path
    cancel_event: Optional[asyncio.Event] = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    identity: Optional[GitIdentity] = None
    timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        path = Path(self.working_directory)
        if not path.is_absolute():
            raise ValueError(
                f"Working directory must be an absolute path, got: {self.working_directory}"
            )
        object.__setattr__(self, "working_directory", path)
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(f"Timeout must be positive, got: {self.timeout_seconds}")

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """A git subcommand and its argument tokens. Never joined into a shell string."""

    subcommand: str
    args: Tuple[str, ...] = ()

    @property
    def argv(self) -> Tuple[str, ...]:
        return (self.subcommand, *self.args)

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True, slots=True)
class RawProcessResult:
    """Captured outcome of one git process."""

    exit_code: int
    stdout: str
    stderr: str
    duration_ms: float
    argv: Tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def combined_output(self) -> str:
        return f"{self.stdout}\n{self.stderr}"


PathLike = Union[str, Path]


__all__ = [
    "GitOperation",
    "GitIdentity",
    "OperationContext",
    "CommandSpec",
    "RawProcessResult",
    "PathLike",
]
