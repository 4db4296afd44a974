"""
Base parser interface and shared helpers.

This module defines the protocol that all git output parsers implement, plus the
small text utilities they share.
"""

import re
from typing import Any, Iterator, List, Optional, Protocol, Tuple

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"

_HASH_PATTERN = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")
_TRACK_PATTERN = re.compile(r"(ahead|behind) (\d+)")

_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}


class GitOutputParser(Protocol):
    """Protocol defining interface for git output parsers."""

    def parse(self, stdout: str, stderr: str, options: Any) -> Any:
        """Parse captured git output into a typed result."""
        ...


def is_full_hash(value: str) -> bool:
    """True for a full SHA-1 or SHA-256 object name."""
    return bool(_HASH_PATTERN.match(value))


def split_records(text: str) -> Iterator[str]:
    """Yield non-blank records of record-separated output, leading newlines removed."""
    for record in text.split(RECORD_SEPARATOR):
        record = record.lstrip("\n")
        if record.strip():
            yield record


def lines_of(text: str) -> List[str]:
    return [line for line in text.splitlines() if line.strip()]


def parse_tracking(text: str) -> Tuple[int, int, bool]:
    """
    Parse an upstream tracking summary such as ``[ahead 2, behind 1]``.

    Returns:
        (ahead, behind, gone)
    """
    if "gone" in text:
        return 0, 0, True
    counts = {name: int(value) for name, value in _TRACK_PATTERN.findall(text)}
    return counts.get("ahead", 0), counts.get("behind", 0), False


def unquote_path(path: str) -> str:
    """
    Undo git's C-style quoting of a path.

    Paths that are not quoted are returned as-is. If the quoted form cannot be
    decoded the raw text is returned unchanged.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    decoded = bytearray()
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\":
            decoded += char.encode("utf-8")
            index += 1
            continue
        escape = body[index + 1 : index + 2]
        octal = body[index + 1 : index + 4]
        if escape in _C_ESCAPES:
            decoded.append(_C_ESCAPES[escape])
            index += 2
        elif re.fullmatch(r"[0-7]{3}", octal):
            decoded.append(int(octal, 8))
            index += 4
        else:
            return path

    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError:
        return path


def first_line(text: str) -> Optional[str]:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None
