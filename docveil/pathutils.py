"""Dotted-path utilities for docveil."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from jsonpath_ng.jsonpath import Child, Fields

from .exceptions import InvalidPathError


class _Missing:
    """Sentinel for a value that is absent, as opposed to a stored None."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments."""
    if not isinstance(path, str):
        raise InvalidPathError(path)
    return path.split(".")


def join_key(parent: str | None, child: str) -> str:
    """Join a parent path and a child key."""
    if not parent:
        return child
    return f"{parent}.{child}"


class DottedPath:
    """Get, set and unset values in nested mappings by dotted path."""

    # Cache for compiled field chains
    _cache: dict = {}
    _cache_size = 1024

    @classmethod
    def compile(cls, path: str):
        """Compile and cache the JSONPath field chain for a dotted path."""
        segments = split_path(path)
        if path not in cls._cache:
            if len(cls._cache) >= cls._cache_size:
                cls._cache.clear()
            expr = Fields(segments[0])
            for segment in segments[1:]:
                expr = Child(expr, Fields(segment))
            cls._cache[path] = expr
        return cls._cache[path]

    @staticmethod
    def _match_keys(match) -> list:
        """Concrete keys a match was reached through, root first."""
        keys = []
        while match is not None and isinstance(match.path, Fields):
            keys.extend(match.path.fields)
            match = match.context
        keys.reverse()
        return keys

    @classmethod
    def get(cls, root: Any, path: str) -> Any:
        """
        Resolve a dotted path.

        Segments are matched literally, so a key named '*' is only found
        under that exact name.

        Returns:
            The stored value, or MISSING when the path cannot be resolved
        """
        expr = cls.compile(path)
        if not isinstance(root, Mapping):
            return MISSING
        segments = split_path(path)
        for match in expr.find(root):
            if cls._match_keys(match) == segments:
                return match.value
        return MISSING

    @classmethod
    def set(cls, root: MutableMapping, path: str, value: Any) -> bool:
        """
        Write value at path, creating missing intermediate mappings.

        A segment along the way that holds a non-mapping value stops the
        write and leaves root untouched.

        Returns:
            True if the value was written
        """
        segments = split_path(path)
        if value is MISSING:
            return False

        current = root
        index = 0
        # Traverse existing path to the nearest mapping
        while index < len(segments) - 1 and segments[index] in current:
            current = current[segments[index]]
            if not isinstance(current, MutableMapping):
                return False
            index += 1

        for segment in segments[index:-1]:
            current[segment] = {}
            current = current[segment]

        current[segments[-1]] = value
        return True

    @classmethod
    def unset(cls, root: Any, path: str) -> bool:
        """
        Delete the value at path.

        Returns:
            True if a key was removed
        """
        segments = split_path(path)
        if len(segments) == 1:
            parent = root
        else:
            parent = cls.get(root, ".".join(segments[:-1]))

        if isinstance(parent, MutableMapping) and segments[-1] in parent:
            del parent[segments[-1]]
            return True
        return False


def get_path(root: Any, path: str) -> Any:
    """Return the value at path in root, or MISSING."""
    return DottedPath.get(root, path)


def set_path(root: MutableMapping, path: str, value: Any) -> bool:
    """Set value at path in root, creating intermediate dicts as needed."""
    return DottedPath.set(root, path, value)


def unset_path(root: Any, path: str) -> bool:
    """Remove the value at path from root if it is there."""
    return DottedPath.unset(root, path)
