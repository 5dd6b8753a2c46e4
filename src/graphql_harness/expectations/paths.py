"""Dotted path lookup into JSON values (``albums.data[0].title``)."""

from __future__ import annotations

import re
from typing import Any, Union

from ..errors import BuildError

PathSegment = Union[str, int]

_TOKEN_RE = re.compile(r"([^\[\]]*)((?:\[-?\d+\])*)")
_INDEX_RE = re.compile(r"\[(-?\d+)\]")


class PathError(LookupError):
    """Path does not exist in the value being inspected."""


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Split a dotted path into keys and list indices.

    An empty path addresses the value itself.

    Raises:
        BuildError: If the path is syntactically invalid
    """
    if path is None or path == "":
        return ()
    if not isinstance(path, str):
        raise BuildError(f"Path must be a string, got {type(path).__name__}")

    segments: list[PathSegment] = []
    for token in path.split("."):
        match = _TOKEN_RE.fullmatch(token)
        if match is None or (not match.group(1) and not match.group(2)):
            raise BuildError(f"Invalid path '{path}': bad segment '{token}'")
        if match.group(1):
            segments.append(match.group(1))
        segments.extend(int(index) for index in _INDEX_RE.findall(match.group(2)))
    return tuple(segments)


def format_path(segments: tuple[PathSegment, ...]) -> str:
    text = ""
    for segment in segments:
        if isinstance(segment, int):
            text += f"[{segment}]"
        else:
            text += f".{segment}" if text else segment
    return text or "<root>"


def resolve_path(root: Any, path: Union[str, tuple[PathSegment, ...]]) -> Any:
    """Return the value at ``path`` inside ``root``.

    A key that is present with a null value resolves to ``None``; a missing
    key or out-of-range index raises ``PathError``.
    """
    segments = parse_path(path) if isinstance(path, str) or path is None else path
    current = root
    for position, segment in enumerate(segments):
        walked = format_path(segments[: position + 1])
        if isinstance(segment, int):
            if not isinstance(current, list):
                raise PathError(f"'{walked}': expected a list, got {type(current).__name__}")
            try:
                current = current[segment]
            except IndexError:
                raise PathError(f"'{walked}': index out of range (length {len(current)})") from None
        else:
            if not isinstance(current, dict):
                raise PathError(f"'{walked}': expected an object, got {type(current).__name__}")
            if segment not in current:
                raise PathError(f"'{walked}': key '{segment}' not present")
            current = current[segment]
    return current
