"""Path scoping: which request paths require a signature."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeAlias

WILDCARD_PREFIX = ":"

ScopePattern: TypeAlias = tuple[str, ...]
ScopeRule: TypeAlias = tuple[ScopePattern, ...]


def path_segments(path: str) -> tuple[str, ...]:
    """Split a URL path into its non-empty segments."""
    return tuple(segment for segment in path.split("/") if segment)


def parse_scope(patterns: Iterable[str] | None) -> ScopeRule | None:
    """Turn ``["webhooks/:id", ...]`` into segment tuples; None means verify everything."""
    if patterns is None:
        return None
    if isinstance(patterns, str):
        patterns = [patterns]
    return tuple(path_segments(pattern) for pattern in patterns)


def _is_wildcard(segment: str) -> bool:
    return segment.startswith(WILDCARD_PREFIX)


def matches(pattern: Sequence[str], path: Sequence[str]) -> bool:
    """Return True when the path falls under one pattern.

    Segments compare positionally and a wildcard stands for exactly one
    segment. Path segments beyond the end of the pattern are allowed, so a
    pattern also covers everything nested below it.
    """
    if len(pattern) > len(path):
        return False
    if not pattern:
        return not path
    return all(_is_wildcard(expected) or expected == actual for expected, actual in zip(pattern, path))


def in_scope(path: Sequence[str], scope: ScopeRule | None) -> bool:
    """Return True when the request path must carry a valid signature."""
    if scope is None:
        return True
    return any(matches(pattern, path) for pattern in scope)
