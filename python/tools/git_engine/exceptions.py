#!/usr/bin/env python3
"""
Error taxonomy for the git execution engine.

Every failure surfaced by the engine is one of the ``ErrorKind`` values below,
carried either as a ``ClassifiedError`` value (the classifier's output) or as
the matching ``GitException`` subclass raised to the caller.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type


class ErrorKind(str, Enum):
    """Stable classification of a failed git invocation."""

    NOT_A_REPOSITORY = "not_a_repository"
    REF_NOT_FOUND = "ref_not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_REFERENCE = "invalid_reference"
    CONFLICT = "conflict"
    SIGNING_FAILED = "signing_failed"
    HOOK_REJECTED = "hook_rejected"
    NO_OP = "no_op"
    CANCELLED = "cancelled"
    OUTPUT_TOO_LARGE = "output_too_large"
    INVALID_OPTIONS = "invalid_options"
    INTERNAL = "internal"

    @property
    def is_error(self) -> bool:
        """NO_OP is a success signal; every other kind is a failure."""
        return self is not ErrorKind.NO_OP


@dataclass(frozen=True, slots=True)
class GitErrorContext:
    """Context information for debugging git errors."""

    timestamp: float = field(default_factory=time.time)
    working_directory: Optional[Path] = None
    command: Tuple[str, ...] = ()
    request_id: Optional[str] = None
    exit_code: Optional[int] = None
    stderr_excerpt: str = ""
    additional_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp,
            "working_directory": (
                str(self.working_directory) if self.working_directory else None
            ),
            "command": list(self.command),
            "request_id": self.request_id,
            "exit_code": self.exit_code,
            "stderr_excerpt": self.stderr_excerpt,
            "additional_data": self.additional_data,
        }


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """Result of classifying a failed invocation. Immutable once built."""

    kind: ErrorKind
    message: str
    context: GitErrorContext = field(default_factory=GitErrorContext)

    def to_exception(self) -> "GitException":
        """Build the exception that represents this classification."""
        if not self.kind.is_error:
            raise ValueError(f"{self.kind.value} classifications are not errors")
        exc_type = EXCEPTION_BY_KIND.get(self.kind, GitExecutionError)
        return exc_type(self.message, context=self.context, classified=self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "context": self.context.to_dict(),
        }


class GitException(Exception):
    """
    Base exception for all git engine errors.

    Carries the taxonomy kind, a stable error code and the debugging context
    captured at the point of failure.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        context: Optional[GitErrorContext] = None,
        classified: Optional[ClassifiedError] = None,
        original_error: Optional[BaseException] = None,
        **extra_context: Any,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or GitErrorContext()
        self.classified = classified or ClassifiedError(
            self.kind, message, self.context
        )
        self.original_error = original_error
        self.extra_context = extra_context
        self.error_code = f"GIT_{self.kind.name}"

    @property
    def exit_code(self) -> Optional[int]:
        return self.context.exit_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context.to_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
            "extra_context": self.extra_context,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, error_code={self.error_code!r})"


class GitNotARepositoryError(GitException):
    """The working directory is not inside a git repository."""

    kind = ErrorKind.NOT_A_REPOSITORY


class GitRefNotFoundError(GitException):
    """A branch, tag, remote, revision or pathspec could not be resolved."""

    kind = ErrorKind.REF_NOT_FOUND


class GitAlreadyExistsError(GitException):
    """The branch, tag, remote or worktree being created already exists."""

    kind = ErrorKind.ALREADY_EXISTS


class GitInvalidReferenceError(GitException):
    """A reference name or revision expression is malformed."""

    kind = ErrorKind.INVALID_REFERENCE


class GitConflictError(GitException):
    """Unresolved conflicts block an operation that cannot report them as a result."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, conflicted_files: Tuple[str, ...] = (), **kwargs: Any):
        self.conflicted_files = tuple(conflicted_files)
        super().__init__(message, conflicted_files=list(self.conflicted_files), **kwargs)


class GitSigningFailedError(GitException):
    """GPG/SSH signing of a commit or tag failed."""

    kind = ErrorKind.SIGNING_FAILED


class GitHookRejectedError(GitException):
    """A repository hook rejected the operation."""

    kind = ErrorKind.HOOK_REJECTED


class GitCancelledError(GitException):
    """The operation was cancelled by the caller before git finished."""

    kind = ErrorKind.CANCELLED


class GitTimeoutError(GitCancelledError):
    """The operation exceeded its time budget and was terminated."""

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs: Any):
        self.timeout_seconds = timeout_seconds
        super().__init__(message, timed_out=True, timeout_seconds=timeout_seconds, **kwargs)


class GitOutputTooLargeError(GitException):
    """Captured output exceeded the configured ceiling; nothing was parsed."""

    kind = ErrorKind.OUTPUT_TOO_LARGE

    def __init__(self, message: str, limit_bytes: Optional[int] = None, **kwargs: Any):
        self.limit_bytes = limit_bytes
        super().__init__(message, limit_bytes=limit_bytes, **kwargs)


class GitInvalidOptionsError(GitException):
    """Operation options were rejected before anything was executed."""

    kind = ErrorKind.INVALID_OPTIONS


class GitExecutionError(GitException):
    """Catch-all for failures that match no known pattern."""

    kind = ErrorKind.INTERNAL


EXCEPTION_BY_KIND: Dict[ErrorKind, Type[GitException]] = {
    ErrorKind.NOT_A_REPOSITORY: GitNotARepositoryError,
    ErrorKind.REF_NOT_FOUND: GitRefNotFoundError,
    ErrorKind.ALREADY_EXISTS: GitAlreadyExistsError,
    ErrorKind.INVALID_REFERENCE: GitInvalidReferenceError,
    ErrorKind.CONFLICT: GitConflictError,
    ErrorKind.SIGNING_FAILED: GitSigningFailedError,
    ErrorKind.HOOK_REJECTED: GitHookRejectedError,
    ErrorKind.CANCELLED: GitCancelledError,
    ErrorKind.OUTPUT_TOO_LARGE: GitOutputTooLargeError,
    ErrorKind.INVALID_OPTIONS: GitInvalidOptionsError,
    ErrorKind.INTERNAL: GitExecutionError,
}


__all__ = [
    "ErrorKind",
    "GitErrorContext",
    "ClassifiedError",
    "GitException",
    "GitNotARepositoryError",
    "GitRefNotFoundError",
    "GitAlreadyExistsError",
    "GitInvalidReferenceError",
    "GitConflictError",
    "GitSigningFailedError",
    "GitHookRejectedError",
    "GitCancelledError",
    "GitTimeoutError",
    "GitOutputTooLargeError",
    "GitInvalidOptionsError",
    "GitExecutionError",
    "EXCEPTION_BY_KIND",
]
