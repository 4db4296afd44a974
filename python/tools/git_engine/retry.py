"""
Signing fallback policy.

When git fails to sign a commit or tag and the caller explicitly allowed it,
the operation is retried exactly once with signing disabled. The result of the
retry is final.
"""

from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from .exceptions import GitException, GitSigningFailedError
from .options import SIGNABLE_OPTIONS, TagOptions

OptionsT = TypeVar("OptionsT")
ResultT = TypeVar("ResultT")


def unsigned_variant(options: OptionsT) -> OptionsT:
    """Copy of ``options`` with signing explicitly disabled."""
    if isinstance(options, TagOptions):
        # A signed tag is annotated; keep it annotated without the signature.
        return replace(options, sign=False, annotated=True)
    return replace(options, sign=False)


class SigningFallbackPolicy:
    """
    Retries a signable operation once without signing.

    Args:
        enabled: Global switch. When False the policy never retries, whatever
            the options request.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def allows_fallback(self, options: Any) -> bool:
        return (
            self.enabled
            and isinstance(options, SIGNABLE_OPTIONS)
            and options.force_unsigned_on_failure
        )

    async def run(
        self,
        options: OptionsT,
        attempt: Callable[[OptionsT], Awaitable[ResultT]],
        request_id: str = "-",
        prepare: Optional[Callable[[OptionsT], Awaitable[None]]] = None,
    ) -> ResultT:
        """
        Run ``attempt(options)``, falling back to an unsigned attempt once.

        ``prepare`` runs between the failed attempt and the retry. It undoes
        whatever the failed attempt left half-finished in the repository.

        Returns:
            The result of the first successful attempt. A fallback result has
            ``unsigned_fallback`` set to True.

        Raises:
            GitSigningFailedError: Signing failed and no fallback was allowed,
                or the failed attempt could not be undone.
            GitException: Whatever the unsigned attempt raised.
        """
        try:
            return await attempt(options)
        except GitSigningFailedError as e:
            if not self.allows_fallback(options):
                raise
            logger.bind(request_id=request_id, operation=options.operation.value).warning(
                f"Signing failed ({e.message}), retrying once without signing"
            )
            if prepare is not None:
                try:
                    await prepare(options)
                except GitException as prepare_error:
                    raise e from prepare_error

        result = await attempt(unsigned_variant(options))
        return replace(result, unsigned_fallback=True)
