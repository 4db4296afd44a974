"""
Parser for ``git remote`` subcommands.
"""

import re
from typing import Dict, Tuple

from loguru import logger

from ..options import RemoteMode, RemoteOptions
from ..results import RemoteInfo, RemoteResult
from .base import lines_of

_VERBOSE_LINE = re.compile(r"^(?P<name>\S+)\s+(?P<url>.+?)\s+\((?P<kind>fetch|push)\)$")
_PRUNED_LINE = re.compile(r"\[(?:would prune|pruned)\] (?P<ref>.+)$")


class RemoteParser:
    """Parser for remote listing and remote mutations."""

    def parse(self, stdout: str, stderr: str, options: RemoteOptions) -> RemoteResult:
        match options.mode:
            case RemoteMode.LIST:
                return RemoteResult(mode=options.mode, remotes=self.parse_verbose(stdout))
            case RemoteMode.GET_URL:
                return RemoteResult(
                    mode=options.mode, name=options.name, urls=tuple(lines_of(stdout))
                )
            case RemoteMode.ADD | RemoteMode.SET_URL:
                return RemoteResult(mode=options.mode, name=options.name, urls=(options.url,))
            case RemoteMode.RENAME:
                return RemoteResult(
                    mode=options.mode, name=options.name, new_name=options.new_name
                )
            case RemoteMode.PRUNE:
                pruned = tuple(
                    match.group("ref").strip()
                    for match in map(_PRUNED_LINE.search, lines_of(f"{stdout}\n{stderr}"))
                    if match
                )
                return RemoteResult(mode=options.mode, name=options.name, pruned=pruned)
            case _:
                return RemoteResult(mode=options.mode, name=options.name)

    @staticmethod
    def parse_verbose(stdout: str) -> Tuple[RemoteInfo, ...]:
        """Group ``remote -v`` lines by remote name, keeping first-seen order."""
        grouped: Dict[str, Dict[str, str]] = {}
        for line in lines_of(stdout):
            match = _VERBOSE_LINE.match(line.strip())
            if not match:
                logger.warning(f"Skipping unrecognized remote line: {line!r}")
                continue
            grouped.setdefault(match.group("name"), {})[match.group("kind")] = match.group("url")

        return tuple(
            RemoteInfo(
                name=name,
                fetch_url=urls.get("fetch", urls.get("push", "")),
                push_url=urls.get("push", urls.get("fetch", "")),
            )
            for name, urls in grouped.items()
        )
