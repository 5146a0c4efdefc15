"""Case-insensitive helpers for slash-separated paths."""

from __future__ import annotations

from typing import List


def path_segments(path: str) -> List[str]:
    """Lower-cased, non-empty, whitespace-trimmed segments of ``path``."""
    return [part.strip() for part in path.lower().split("/") if part.strip()]


def path_has_segment(path: str, segment: str) -> bool:
    return segment.lower() in path_segments(path)


def path_has_segment_prefix(path: str, prefix: str) -> bool:
    prefix = prefix.lower()
    return any(item.startswith(prefix) for item in path_segments(path))


def path_last_segment(path: str) -> str:
    segments = path_segments(path)
    return segments[-1] if segments else ""


def path_has_prefix_boundary(path: str, prefix: str) -> bool:
    """True if ``path`` equals ``prefix`` or lies beneath it."""
    path = path.strip().lower().rstrip("/")
    prefix = prefix.strip().lower().rstrip("/")
    if not path or not prefix:
        return False
    return path == prefix or path.startswith(prefix + "/")