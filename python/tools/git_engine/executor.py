"""
Asynchronous git process execution.

Runs exactly one git process per call against an explicit working directory,
captures its output under a byte ceiling and guarantees the child is reaped on
every exit path, including cancellation and timeouts.
"""

import asyncio
import os
import time
from typing import Dict, List, Optional

from loguru import logger

from .config import EngineConfig
from .exceptions import (
    GitCancelledError,
    GitErrorContext,
    GitExecutionError,
    GitOutputTooLargeError,
    GitTimeoutError,
)
from .models import CommandSpec, OperationContext, RawProcessResult

READ_CHUNK_SIZE = 64 * 1024
MISSING_BINARY_EXIT_CODE = 127


class _OutputBudget:
    """Byte ceiling shared by the stdout and stderr readers of one process."""

    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0
        self.exceeded = False

    def consume(self, size: int) -> bool:
        """Account for a chunk; False once the ceiling has been crossed."""
        self.used += size
        if self.used > self.limit:
            self.exceeded = True
        return not self.exceeded


class ProcessExecutor:
    """
    Runs git commands for the engine.

    The executor holds configuration only; it keeps no per-call state, so one
    instance can serve any number of concurrent calls.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def build_argv(self, spec: CommandSpec, context: OperationContext) -> List[str]:
        argv = [self.config.git_binary, "-C", str(context.working_directory)]
        if context.identity:
            argv.extend(context.identity.config_args())
        argv.extend(spec.argv)
        return argv

    def build_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self.config.extra_env)
        env.update(
            {
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_EDITOR": "true",
                "GIT_PAGER": "cat",
                "LC_ALL": self.config.locale,
                "LANG": self.config.locale,
            }
        )
        return env

    async def execute(self, spec: CommandSpec, context: OperationContext) -> RawProcessResult:
        """
        Run one git command and capture its output.

        Args:
            spec: Subcommand and arguments to run.
            context: Working directory, cancellation and identity for this call.

        Returns:
            RawProcessResult: Exit code and decoded output. Non-zero exits are
            returned, not raised.

        Raises:
            GitCancelledError: The cancel event was set before or during the run.
            GitTimeoutError: The time budget elapsed before git finished.
            GitOutputTooLargeError: Output exceeded ``max_output_bytes``.
            GitExecutionError: The git binary could not be started.
        """
        log = logger.bind(request_id=context.request_id, operation=spec.subcommand)
        argv = self.build_argv(spec, context)
        error_context = GitErrorContext(
            working_directory=context.working_directory,
            command=tuple(argv),
            request_id=context.request_id,
        )

        if context.cancelled:
            log.info("Cancel requested before start, git was not spawned")
            raise GitCancelledError("Operation cancelled before start", context=error_context)

        timeout = (
            context.timeout_seconds
            if context.timeout_seconds is not None
            else self.config.timeout_seconds
        )
        log.debug(f"Running git command: {' '.join(argv)}")
        start = time.perf_counter()

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.build_env(),
            )
        except FileNotFoundError as e:
            log.error(f"Git executable not found: {self.config.git_binary}")
            raise GitExecutionError(
                f"Git executable not found: {self.config.git_binary}",
                context=GitErrorContext(
                    working_directory=context.working_directory,
                    command=tuple(argv),
                    request_id=context.request_id,
                    exit_code=MISSING_BINARY_EXIT_CODE,
                ),
                original_error=e,
            ) from e
        except OSError as e:
            log.error(f"Failed to start git: {e}")
            raise GitExecutionError(
                f"Failed to start git: {e}", context=error_context, original_error=e
            ) from e

        budget = _OutputBudget(self.config.max_output_bytes)
        stdout_chunks: List[bytes] = []
        stderr_chunks: List[bytes] = []
        io_task = asyncio.ensure_future(
            self._communicate(process, budget, stdout_chunks, stderr_chunks)
        )
        cancel_task = (
            asyncio.ensure_future(context.cancel_event.wait())
            if context.cancel_event is not None
            else None
        )

        try:
            waiters = {io_task} if cancel_task is None else {io_task, cancel_task}
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )

            if io_task in done:
                io_task.result()
                if budget.exceeded:
                    log.warning(
                        f"Output exceeded {self.config.max_output_bytes} bytes, git was killed"
                    )
                    raise GitOutputTooLargeError(
                        f"git output exceeded {self.config.max_output_bytes} bytes",
                        limit_bytes=self.config.max_output_bytes,
                        context=error_context,
                    )
            elif cancel_task is not None and cancel_task in done:
                await self._terminate(process)
                log.info("Operation cancelled, git was terminated")
                raise GitCancelledError("Operation cancelled", context=error_context)
            else:
                await self._terminate(process)
                log.warning(f"Operation timed out after {timeout} seconds, git was terminated")
                raise GitTimeoutError(
                    f"git timed out after {timeout} seconds",
                    timeout_seconds=timeout,
                    context=error_context,
                )
        except asyncio.CancelledError:
            log.info("Awaiting task cancelled, terminating git")
            await self._terminate(process)
            raise
        finally:
            for task in (io_task, cancel_task):
                if task is not None and not task.done():
                    task.cancel()

        duration_ms = (time.perf_counter() - start) * 1000
        exit_code = process.returncode if process.returncode is not None else -1
        log.debug(f"git {spec.subcommand} exited with {exit_code} in {duration_ms:.1f} ms")

        return RawProcessResult(
            exit_code=exit_code,
            stdout=b"".join(stdout_chunks).decode("utf-8", errors="replace"),
            stderr=b"".join(stderr_chunks).decode("utf-8", errors="replace"),
            duration_ms=duration_ms,
            argv=tuple(argv),
        )

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        budget: _OutputBudget,
        stdout_chunks: List[bytes],
        stderr_chunks: List[bytes],
    ) -> None:
        await asyncio.gather(
            self._drain(process, process.stdout, budget, stdout_chunks),
            self._drain(process, process.stderr, budget, stderr_chunks),
        )
        await process.wait()

    @staticmethod
    async def _drain(
        process: asyncio.subprocess.Process,
        stream: Optional[asyncio.StreamReader],
        budget: _OutputBudget,
        chunks: List[bytes],
    ) -> None:
        """Read a pipe to EOF. Past the ceiling the child is killed and the rest discarded."""
        if stream is None:
            return
        while chunk := await stream.read(READ_CHUNK_SIZE):
            if budget.exceeded:
                continue
            if budget.consume(len(chunk)):
                chunks.append(chunk)
            elif process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL once the grace period has passed."""
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), self.config.kill_grace_seconds)
        except asyncio.TimeoutError:
            await self._kill(process)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()
