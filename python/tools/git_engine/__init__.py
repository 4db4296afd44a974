"""
Git Command Execution & Result-Parsing Engine

This package drives an installed git binary and turns its output into typed,
stable results for callers that need machine-readable repository state.

Features:
- Command building: typed options to argument vectors, safe against flag injection
- Process execution: async, cancellable, time- and output-bounded git processes
- Output parsing: status, log, reflog, blame, branches, tags, remotes, worktrees,
  stashes, merge/rebase/cherry-pick outcomes and working tree summaries
- Error classification: a stable taxonomy of failure kinds
- Signing fallback: one unsigned retry when signing fails and the caller opted in

Author:
    Max Qian <lightapt.com>

License:
    GPL-3.0-or-later

Version:
    1.0.0
"""

from .classifier import classify, classify_validation_failure
from .command_builder import build_command
from .config import EngineConfig
from .engine import GitEngine
from .exceptions import (
    ClassifiedError,
    ErrorKind,
    GitAlreadyExistsError,
    GitCancelledError,
    GitConflictError,
    GitErrorContext,
    GitException,
    GitExecutionError,
    GitHookRejectedError,
    GitInvalidOptionsError,
    GitInvalidReferenceError,
    GitNotARepositoryError,
    GitOutputTooLargeError,
    GitRefNotFoundError,
    GitSigningFailedError,
    GitTimeoutError,
)
from .executor import ProcessExecutor
from .models import CommandSpec, GitIdentity, GitOperation, OperationContext, RawProcessResult
from .options import (
    AddOptions,
    BlameOptions,
    BranchMode,
    BranchOptions,
    CheckoutOptions,
    CherryPickOptions,
    CleanOptions,
    CommitOptions,
    DiffOptions,
    LogOptions,
    MergeOptions,
    RebaseMode,
    RebaseOptions,
    ReflogOptions,
    RemoteMode,
    RemoteOptions,
    ResetMode,
    ResetOptions,
    StashMode,
    StashOptions,
    StatusOptions,
    TagMode,
    TagOptions,
    WorktreeMode,
    WorktreeOptions,
)
from .parsers import ParserFactory, parse_output
from .results import (
    AddResult,
    BlameLine,
    BlameResult,
    BranchInfo,
    BranchResult,
    ChangeType,
    CheckoutResult,
    CherryPickResult,
    CleanResult,
    CommitEntry,
    CommitResult,
    DiffFileStat,
    DiffResult,
    FileChange,
    LogResult,
    MergeResult,
    RebaseResult,
    ReflogEntry,
    ReflogResult,
    RemoteInfo,
    RemoteResult,
    ResetResult,
    StashEntry,
    StashResult,
    StatusResult,
    TagInfo,
    TagResult,
    WorktreeInfo,
    WorktreeResult,
)
from .retry import SigningFallbackPolicy

__version__ = "1.0.0"
__author__ = "Max Qian"
__license__ = "GPL-3.0-or-later"

__all__ = [
    "GitEngine",
    "EngineConfig",
    "ProcessExecutor",
    "SigningFallbackPolicy",
    "ParserFactory",
    "parse_output",
    "build_command",
    "classify",
    "classify_validation_failure",
    "CommandSpec",
    "GitIdentity",
    "GitOperation",
    "OperationContext",
    "RawProcessResult",
    "ClassifiedError",
    "ErrorKind",
    "GitErrorContext",
    "GitException",
    "GitAlreadyExistsError",
    "GitCancelledError",
    "GitConflictError",
    "GitExecutionError",
    "GitHookRejectedError",
    "GitInvalidOptionsError",
    "GitInvalidReferenceError",
    "GitNotARepositoryError",
    "GitOutputTooLargeError",
    "GitRefNotFoundError",
    "GitSigningFailedError",
    "GitTimeoutError",
    "AddOptions",
    "BlameOptions",
    "BranchMode",
    "BranchOptions",
    "CheckoutOptions",
    "CherryPickOptions",
    "CleanOptions",
    "CommitOptions",
    "DiffOptions",
    "LogOptions",
    "MergeOptions",
    "RebaseMode",
    "RebaseOptions",
    "ReflogOptions",
    "RemoteMode",
    "RemoteOptions",
    "ResetMode",
    "ResetOptions",
    "StashMode",
    "StashOptions",
    "StatusOptions",
    "TagMode",
    "TagOptions",
    "WorktreeMode",
    "WorktreeOptions",
    "AddResult",
    "BlameLine",
    "BlameResult",
    "BranchInfo",
    "BranchResult",
    "ChangeType",
    "CheckoutResult",
    "CherryPickResult",
    "CleanResult",
    "CommitEntry",
    "CommitResult",
    "DiffFileStat",
    "DiffResult",
    "FileChange",
    "LogResult",
    "MergeResult",
    "RebaseResult",
    "ReflogEntry",
    "ReflogResult",
    "RemoteInfo",
    "RemoteResult",
    "ResetResult",
    "StashEntry",
    "StashResult",
    "StatusResult",
    "TagInfo",
    "TagResult",
    "WorktreeInfo",
    "WorktreeResult",
    "get_tool_info",
]


def get_tool_info() -> dict:
    """
    Return metadata about this tool for discovery by PythonWrapper.

    Returns:
        Dict containing tool metadata including name, version, description,
        available operations, requirements, and platform compatibility.
    """
    return {
        "name": "git_engine",
        "version": __version__,
        "description": "Typed git command execution and result parsing",
        "author": __author__,
        "license": __license__,
        "supported": True,
        "platform": ["windows", "linux", "macos"],
        "functions": [operation.value for operation in GitOperation],
        "requirements": ["loguru", "pydantic"],
        "capabilities": [
            "async_operations",
            "cancellation",
            "output_limits",
            "error_classification",
            "signing_fallback",
        ],
        "classes": {
            "GitEngine": "Typed git operations interface",
            "ProcessExecutor": "Bounded async git process runner",
        },
    }
