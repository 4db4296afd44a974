"""
Error classification.

Maps a failed git invocation onto the stable :class:`ErrorKind` taxonomy. The
pattern table is ordered and the first match wins, so more specific causes
(a missing repository, a signing failure) shadow the generic ones.
"""

import re
from pathlib import Path
from typing import FrozenSet, NamedTuple, Optional, Pattern, Union

from .exceptions import ClassifiedError, ErrorKind, GitErrorContext
from .models import GitOperation, RawProcessResult

STDERR_EXCERPT_LIMIT = 2000

_IGNORECASE = re.IGNORECASE | re.MULTILINE
_CREATING_OPERATIONS = frozenset(
    {
        GitOperation.BRANCH,
        GitOperation.TAG,
        GitOperation.REMOTE,
        GitOperation.WORKTREE,
        GitOperation.CHECKOUT,
        GitOperation.STASH,
    }
)


class _Rule(NamedTuple):
    kind: ErrorKind
    pattern: Pattern[str]
    operations: Optional[FrozenSet[GitOperation]] = None


_RULES = (
    _Rule(ErrorKind.NOT_A_REPOSITORY, re.compile(r"not a git repository", _IGNORECASE)),
    _Rule(
        ErrorKind.SIGNING_FAILED,
        re.compile(
            r"gpg failed to sign|failed to sign the data|cannot run gpg"
            r"|error: (?:gpg|ssh-keygen)\b.*fail|signing failed|no secret key",
            _IGNORECASE,
        ),
    ),
    _Rule(
        ErrorKind.HOOK_REJECTED,
        re.compile(
            r"hook declined|\bhook\b.*\b(?:rejected|failed|returned non-zero)"
            r"|rejected by .*\bhook\b",
            _IGNORECASE,
        ),
    ),
    _Rule(
        ErrorKind.NO_OP,
        re.compile(
            r"nothing to commit|nothing added to commit|no changes added to commit"
            r"|previous cherry-pick is now empty",
            _IGNORECASE,
        ),
    ),
    _Rule(
        ErrorKind.CONFLICT,
        re.compile(
            r"^CONFLICT \(|Automatic merge failed|\bunmerged (?:files|paths)\b"
            r"|could not apply|resolve your current index first"
            r"|local changes to the following files would be overwritten",
            re.MULTILINE,
        ),
    ),
    _Rule(
        ErrorKind.ALREADY_EXISTS,
        re.compile(r"already exists", _IGNORECASE),
        _CREATING_OPERATIONS,
    ),
    _Rule(
        ErrorKind.REF_NOT_FOUND,
        re.compile(
            r"pathspec '.*' did not match|unknown revision|bad revision|no such remote"
            r"|not a valid object name|no such ref|no stash entries found"
            r"|is not a working tree|does not have any commits yet|no commits yet"
            r"|not found",
            _IGNORECASE,
        ),
    ),
    _Rule(
        ErrorKind.INVALID_REFERENCE,
        re.compile(
            r"invalid reference|not a valid (?:\w+ )*name|invalid upstream"
            r"|invalid (?:branch|tag|ref) name",
            _IGNORECASE,
        ),
    ),
)

_MESSAGE_PREFIX = re.compile(r"^(?:fatal|error): ", re.MULTILINE)


def extract_git_error_message(stderr: str, stdout: str = "", exit_code: Optional[int] = None) -> str:
    """
    Pick the most useful human-readable line from a failed invocation.

    ``fatal:``/``error:`` lines are preferred, then the first non-blank line of
    stderr, then stdout.
    """
    for line in stderr.splitlines():
        if _MESSAGE_PREFIX.match(line):
            return _MESSAGE_PREFIX.sub("", line).strip()
    for text in (stderr, stdout):
        for line in text.splitlines():
            if line.strip():
                return line.strip()
    return f"git exited with code {exit_code}"


def classify(
    raw: RawProcessResult,
    operation: Union[GitOperation, str],
    *,
    working_directory: Optional[Path] = None,
    request_id: Optional[str] = None,
) -> ClassifiedError:
    """
    Classify a finished git invocation.

    Args:
        raw: Captured process result. Expected to have a non-zero exit code.
        operation: Operation that produced it; scopes operation-specific rules.
        working_directory: Recorded in the error context.
        request_id: Recorded in the error context.

    Returns:
        ClassifiedError: The first matching kind, or ``INTERNAL``.
    """
    operation = GitOperation(operation)
    text = f"{raw.stderr}\n{raw.stdout}"
    kind = ErrorKind.INTERNAL
    for rule in _RULES:
        if rule.operations is not None and operation not in rule.operations:
            continue
        if rule.pattern.search(text):
            kind = rule.kind
            break

    context = GitErrorContext(
        working_directory=working_directory,
        command=raw.argv,
        request_id=request_id,
        exit_code=raw.exit_code,
        stderr_excerpt=raw.stderr[:STDERR_EXCERPT_LIMIT],
        additional_data={"operation": operation.value},
    )
    message = extract_git_error_message(raw.stderr, raw.stdout, raw.exit_code)
    if kind is ErrorKind.INTERNAL:
        message = f"git {operation.value} failed with exit code {raw.exit_code}: {message}"
    return ClassifiedError(kind=kind, message=message, context=context)


def classify_validation_failure(
    message: str,
    operation: Union[GitOperation, str],
    *,
    working_directory: Optional[Path] = None,
    request_id: Optional[str] = None,
) -> ClassifiedError:
    """Wrap an options validation failure raised before anything ran."""
    operation = GitOperation(operation)
    return ClassifiedError(
        kind=ErrorKind.INVALID_OPTIONS,
        message=message,
        context=GitErrorContext(
            working_directory=working_directory,
            request_id=request_id,
            additional_data={"operation": operation.value},
        ),
    )
