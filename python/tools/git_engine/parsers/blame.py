"""
Parser for ``git blame --porcelain`` output.

Porcelain output prints a commit's metadata only the first time the commit
appears; later blocks of the same commit carry the header line alone. The
parser keeps the metadata of every commit seen so far and applies it to each
content line.
"""

import re
from typing import Dict, List, Optional

from loguru import logger

from ..options import BlameOptions
from ..results import BlameLine, BlameResult

_HEADER_PATTERN = re.compile(
    r"^(?P<hash>[0-9a-f]{40}|[0-9a-f]{64}) (?P<orig>\d+) (?P<final>\d+)(?: (?P<count>\d+))?$"
)


class BlameParser:
    """State machine over porcelain blame blocks."""

    def parse(self, stdout: str, stderr: str, options: BlameOptions) -> BlameResult:
        metadata: Dict[str, Dict[str, str]] = {}
        lines: List[BlameLine] = []
        dropped = 0

        commit_hash: Optional[str] = None
        line_number = 0

        for raw in stdout.split("\n"):
            if raw.startswith("\t"):
                if commit_hash is None:
                    logger.warning("Blame content line without a header, dropped")
                    dropped += 1
                    continue
                if line := self._build_line(
                    commit_hash, line_number, raw[1:], metadata.get(commit_hash, {})
                ):
                    lines.append(line)
                else:
                    dropped += 1
                commit_hash = None
                continue

            if match := _HEADER_PATTERN.match(raw):
                commit_hash = match.group("hash")
                line_number = int(match.group("final"))
                metadata.setdefault(commit_hash, {})
                continue

            if commit_hash is not None and raw:
                key, _, value = raw.partition(" ")
                metadata[commit_hash][key] = value

        return BlameResult(file=options.file, lines=tuple(lines), dropped_blocks=dropped)

    @staticmethod
    def _build_line(
        commit_hash: str, line_number: int, content: str, meta: Dict[str, str]
    ) -> Optional[BlameLine]:
        author = meta.get("author")
        author_time = meta.get("author-time", "")
        if not author or not author_time.isdigit():
            logger.warning(
                f"Blame block for {commit_hash[:8]} at line {line_number} "
                f"is missing author metadata, dropped"
            )
            return None

        return BlameLine(
            line_number=line_number,
            commit_hash=commit_hash,
            author=author,
            timestamp=int(author_time),
            content=content,
            author_email=meta.get("author-mail", "").strip("<>") or None,
            summary=meta.get("summary"),
        )
