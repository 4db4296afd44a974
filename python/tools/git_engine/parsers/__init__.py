"""
Output parsers for git commands.

Each parser turns the captured stdout/stderr of exactly one git process into a
typed result from :mod:`git_engine.results`.
"""

from .base import FIELD_SEPARATOR, RECORD_SEPARATOR, GitOutputParser, unquote_path
from .blame import BlameParser
from .conflicts import (
    CherryPickParser,
    MergeParser,
    RebaseParser,
    conflicted_paths,
    has_conflicts,
)
from .factory import ParserFactory, parse_output
from .log import CommitDetailsParser, LogParser, ReflogParser
from .refs import BranchParser, TagParser
from .remote import RemoteParser
from .stash import StashParser
from .status import StatusParser
from .working_tree import AddParser, CheckoutParser, CleanParser, DiffParser, ResetParser
from .worktree import WorktreeParser

__all__ = [
    "FIELD_SEPARATOR",
    "RECORD_SEPARATOR",
    "GitOutputParser",
    "unquote_path",
    "BlameParser",
    "CherryPickParser",
    "MergeParser",
    "RebaseParser",
    "conflicted_paths",
    "has_conflicts",
    "ParserFactory",
    "parse_output",
    "CommitDetailsParser",
    "LogParser",
    "ReflogParser",
    "BranchParser",
    "TagParser",
    "RemoteParser",
    "StashParser",
    "StatusParser",
    "AddParser",
    "CheckoutParser",
    "CleanParser",
    "DiffParser",
    "ResetParser",
    "WorktreeParser",
]
