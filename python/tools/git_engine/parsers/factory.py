"""
Parser factory.

This module maps each operation to the parser that understands its output.
"""

from typing import Any, Union

from ..models import GitOperation, RawProcessResult
from .base import GitOutputParser
from .blame import BlameParser
from .conflicts import CherryPickParser, MergeParser, RebaseParser
from .log import CommitDetailsParser, LogParser, ReflogParser
from .refs import BranchParser, TagParser
from .remote import RemoteParser
from .stash import StashParser
from .status import StatusParser
from .working_tree import AddParser, CheckoutParser, CleanParser, DiffParser, ResetParser
from .worktree import WorktreeParser


class ParserFactory:
    """Factory for creating the parser that matches an operation."""

    @staticmethod
    def create_parser(operation: Union[GitOperation, str]) -> GitOutputParser:
        """Create and return the parser for the given operation."""
        if isinstance(operation, str):
            operation = GitOperation(operation)

        match operation:
            case GitOperation.STATUS:
                return StatusParser()
            case GitOperation.SHOW_COMMIT:
                return CommitDetailsParser()
            case GitOperation.LOG:
                return LogParser()
            case GitOperation.REFLOG:
                return ReflogParser()
            case GitOperation.BLAME:
                return BlameParser()
            case GitOperation.BRANCH:
                return BranchParser()
            case GitOperation.TAG:
                return TagParser()
            case GitOperation.MERGE:
                return MergeParser()
            case GitOperation.REBASE:
                return RebaseParser()
            case GitOperation.CHERRY_PICK:
                return CherryPickParser()
            case GitOperation.REMOTE:
                return RemoteParser()
            case GitOperation.WORKTREE:
                return WorktreeParser()
            case GitOperation.STASH:
                return StashParser()
            case GitOperation.ADD:
                return AddParser()
            case GitOperation.CHECKOUT:
                return CheckoutParser()
            case GitOperation.RESET:
                return ResetParser()
            case GitOperation.CLEAN:
                return CleanParser()
            case GitOperation.DIFF:
                return DiffParser()
            case _:
                raise ValueError(f"No output parser for operation: {operation.value}")


def parse_output(raw: RawProcessResult, options: Any) -> Any:
    """Parse one captured process result with the parser for ``options.operation``."""
    parser = ParserFactory.create_parser(options.operation)
    return parser.parse(raw.stdout, raw.stderr, options)
