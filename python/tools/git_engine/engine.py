"""
Git engine.

This module provides the GitEngine class, which composes the command builder,
process executor, output parsers, error classifier and signing fallback into
one call per operation.
"""

from dataclasses import replace
from typing import Any, Optional, Tuple

from loguru import logger

from .classifier import classify, classify_validation_failure
from .command_builder import build_command
from .config import EngineConfig
from .exceptions import (
    ClassifiedError,
    ErrorKind,
    GitConflictError,
    GitErrorContext,
    GitException,
    GitExecutionError,
    GitInvalidOptionsError,
)
from .executor import ProcessExecutor
from .models import GitOperation, OperationContext, RawProcessResult
from .options import (
    SIGNABLE_OPTIONS,
    AddOptions,
    BlameOptions,
    BranchOptions,
    CheckoutOptions,
    CherryPickOptions,
    CleanOptions,
    CommitOptions,
    DiffOptions,
    LogOptions,
    MergeOptions,
    RebaseOptions,
    ReflogOptions,
    RemoteOptions,
    ResetOptions,
    ShowCommitOptions,
    StashMode,
    StashOptions,
    StatusOptions,
    TagMode,
    TagOptions,
    WorktreeOptions,
)
from .parsers import conflicted_paths, has_conflicts, parse_output
from .results import (
    AddResult,
    BlameResult,
    BranchResult,
    CheckoutResult,
    CherryPickResult,
    CleanResult,
    CommitResult,
    DiffResult,
    LogResult,
    MergeResult,
    RebaseResult,
    ReflogResult,
    RemoteResult,
    ResetResult,
    StashResult,
    StatusResult,
    TagResult,
    WorktreeResult,
)
from .retry import SigningFallbackPolicy

_CONFLICT_REPORTING = frozenset(
    {GitOperation.MERGE, GitOperation.REBASE, GitOperation.CHERRY_PICK}
)
_NO_OP_REPORTING = frozenset({GitOperation.CHERRY_PICK, GitOperation.STASH})


class GitEngine:
    """
    Executes typed git operations and returns typed results.

    The engine is stateless between calls: every call builds its own command,
    runs exactly one git process per step and derives its result from that
    process alone. Calls may run concurrently.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        executor: Optional[ProcessExecutor] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Engine settings. Defaults to ``EngineConfig()``.
            executor: Process executor; injectable for tests.
        """
        self.config = config or EngineConfig()
        self.executor = executor or ProcessExecutor(self.config)
        self.fallback_policy = SigningFallbackPolicy()

    async def run(self, options: Any, context: OperationContext) -> Any:
        """
        Run one operation.

        Args:
            options: Options dataclass naming the operation.
            context: Per-call working directory, cancellation and identity.

        Returns:
            The typed result for the operation.

        Raises:
            GitException: The subclass matching the classified failure.
        """
        options = self._resolve_signing(options)
        if isinstance(options, SIGNABLE_OPTIONS):
            return await self.fallback_policy.run(
                options,
                lambda opts: self._attempt(opts, context),
                context.request_id,
                prepare=lambda opts: self._abort_unsigned_leftovers(opts, context),
            )
        return await self._attempt(options, context)

    async def status(self, options: StatusOptions, context: OperationContext) -> StatusResult:
        return await self.run(options, context)

    async def commit(self, options: CommitOptions, context: OperationContext) -> CommitResult:
        return await self.run(options, context)

    async def log(self, options: LogOptions, context: OperationContext) -> LogResult:
        return await self.run(options, context)

    async def blame(self, options: BlameOptions, context: OperationContext) -> BlameResult:
        return await self.run(options, context)

    async def branch(self, options: BranchOptions, context: OperationContext) -> BranchResult:
        return await self.run(options, context)

    async def merge(self, options: MergeOptions, context: OperationContext) -> MergeResult:
        return await self.run(options, context)

    async def rebase(self, options: RebaseOptions, context: OperationContext) -> RebaseResult:
        return await self.run(options, context)

    async def cherry_pick(
        self, options: CherryPickOptions, context: OperationContext
    ) -> CherryPickResult:
        return await self.run(options, context)

    async def tag(self, options: TagOptions, context: OperationContext) -> TagResult:
        return await self.run(options, context)

    async def remote(self, options: RemoteOptions, context: OperationContext) -> RemoteResult:
        return await self.run(options, context)

    async def worktree(
        self, options: WorktreeOptions, context: OperationContext
    ) -> WorktreeResult:
        return await self.run(options, context)

    async def add(self, options: AddOptions, context: OperationContext) -> AddResult:
        return await self.run(options, context)

    async def checkout(
        self, options: CheckoutOptions, context: OperationContext
    ) -> CheckoutResult:
        return await self.run(options, context)

    async def reset(self, options: ResetOptions, context: OperationContext) -> ResetResult:
        return await self.run(options, context)

    async def stash(self, options: StashOptions, context: OperationContext) -> StashResult:
        return await self.run(options, context)

    async def reflog(self, options: ReflogOptions, context: OperationContext) -> ReflogResult:
        return await self.run(options, context)

    async def clean(self, options: CleanOptions, context: OperationContext) -> CleanResult:
        return await self.run(options, context)

    async def diff(self, options: DiffOptions, context: OperationContext) -> DiffResult:
        return await self.run(options, context)

    def _resolve_signing(self, options: Any) -> Any:
        """Apply the configured signing default to options that leave it open."""
        if not isinstance(options, SIGNABLE_OPTIONS) or options.sign is not None:
            return options
        if isinstance(options, TagOptions) and options.mode is not TagMode.CREATE:
            return options
        if self.config.sign_commits:
            return replace(options, sign=True)
        return options

    async def _attempt(self, options: Any, context: OperationContext) -> Any:
        if isinstance(options, CommitOptions):
            return await self._commit(options, context)
        return await self._execute(options, context)

    async def _abort_unsigned_leftovers(self, options: Any, context: OperationContext) -> None:
        """Abort a merge or cherry-pick that applied its changes but failed to sign."""
        if isinstance(options, MergeOptions) and not (options.abort or options.squash):
            abort: Any = MergeOptions(abort=True)
        elif isinstance(options, CherryPickOptions) and not (
            options.abort or options.continue_operation or options.no_commit
        ):
            abort = CherryPickOptions(abort=True)
        else:
            return
        self._log(context, options).info("Aborting the state left by the failed signed attempt")
        await self._execute(abort, context)

    async def _commit(self, options: CommitOptions, context: OperationContext) -> CommitResult:
        raw, classified = await self._invoke(options, context)
        if classified is not None:
            if classified.kind is ErrorKind.NO_OP:
                self._log(context, options).info("Nothing to commit")
                return CommitResult(commit_hash=None, committed=False, no_op=True)
            raise self._exception_for(classified, raw)

        return await self._execute(ShowCommitOptions(), context)

    async def _execute(self, options: Any, context: OperationContext) -> Any:
        raw, classified = await self._invoke(options, context)
        if classified is None:
            return parse_output(raw, options)

        log = self._log(context, options)
        if (
            classified.kind is ErrorKind.CONFLICT
            and self._reports_conflicts(options)
            and has_conflicts(raw.stdout, raw.stderr)
        ):
            log.info("Operation stopped on conflicts")
            return parse_output(raw, options)

        if classified.kind is ErrorKind.NO_OP and options.operation in _NO_OP_REPORTING:
            log.info("Operation had nothing to do")
            return replace(parse_output(raw, options), no_op=True)

        raise self._exception_for(classified, raw)

    async def _invoke(
        self, options: Any, context: OperationContext
    ) -> Tuple[RawProcessResult, Optional[ClassifiedError]]:
        """Build and run the command; classify it when git exits non-zero."""
        operation = getattr(options, "operation", None)
        if operation is None:
            raise GitInvalidOptionsError(
                f"Unsupported options type: {type(options).__name__}",
                context=GitErrorContext(
                    working_directory=context.working_directory,
                    request_id=context.request_id,
                ),
            )

        try:
            spec = build_command(options)
        except (TypeError, ValueError) as e:
            raise classify_validation_failure(
                str(e),
                operation,
                working_directory=context.working_directory,
                request_id=context.request_id,
            ).to_exception() from e

        raw = await self.executor.execute(spec, context)
        if raw.success:
            return raw, None

        classified = classify(
            raw,
            operation,
            working_directory=context.working_directory,
            request_id=context.request_id,
        )
        self._log(context, options).debug(
            f"git {spec.subcommand} exited with {raw.exit_code}, classified as {classified.kind.value}"
        )
        return raw, classified

    @staticmethod
    def _reports_conflicts(options: Any) -> bool:
        if isinstance(options, StashOptions):
            return options.mode in (StashMode.POP, StashMode.APPLY)
        return options.operation in _CONFLICT_REPORTING

    @staticmethod
    def _exception_for(classified: ClassifiedError, raw: RawProcessResult) -> GitException:
        if classified.kind is ErrorKind.CONFLICT:
            return GitConflictError(
                classified.message,
                conflicted_files=conflicted_paths(raw.stdout, raw.stderr),
                context=classified.context,
                classified=classified,
            )
        if not classified.kind.is_error:
            return GitExecutionError(
                classified.message, context=classified.context, classified=classified
            )
        return classified.to_exception()

    @staticmethod
    def _log(context: OperationContext, options: Any):
        return logger.bind(request_id=context.request_id, operation=options.operation.value)
