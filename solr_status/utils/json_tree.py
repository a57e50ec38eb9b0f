"""Tolerant navigation over dynamically-shaped JSON documents."""

import json
import math
from typing import Any, List, Union

from .errors import ParseError


Segment = Union[str, int]


class JSONTree:
    """
    Read-only wrapper around a parsed JSON value.

    Lookups never raise for missing keys or type mismatches: absence is
    an expected outcome when reading Solr admin responses, whose shape
    depends on server version and on whether the requested data exists.
    """

    def __init__(self, data: Any = None):
        self.data = data

    @classmethod
    def parse(cls, raw: Union[bytes, str]) -> "JSONTree":
        """
        Parse a response body into a tree.

        Args:
            raw: Raw JSON document

        Returns:
            JSONTree: Wrapped document

        Raises:
            ParseError: If the body is not valid JSON
        """
        try:
            return cls(json.loads(raw))
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise ParseError(f"cannot parse json reply: {e}") from e

    def get(self, *segments: Segment, default: Any = None) -> Any:
        """
        Return the value at the given path, or default if it cannot be reached.

        Objects are navigated by key, arrays by integer index (an index may
        be given as a string of digits).
        """
        node = self.data
        for segment in segments:
            if isinstance(node, dict):
                if segment not in node:
                    return default
                node = node[segment]
            elif isinstance(node, list):
                index = _as_index(segment)
                if index is None or not -len(node) <= index < len(node):
                    return default
                node = node[index]
            else:
                return default
        return node

    def path(self, dotted: str, default: Any = None) -> Any:
        """Dot-delimited variant of get(), e.g. ``path("status.core1.name")``."""
        return self.get(*dotted.split("."), default=default)

    def as_int(self, *segments: Segment) -> int:
        """
        Read a number at the path and truncate it to int.

        Returns 0 when the path is absent or the value is not a finite
        number. Solr omits fields rather than sending explicit zeros.
        """
        value = self.get(*segments)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return int(value)

    def raw(self, *segments: Segment) -> str:
        """
        Return the JSON text of the value at the path.

        Strings keep their surrounding quotes; an absent path yields "null".
        """
        return json.dumps(self.get(*segments))

    def children(self, *segments: Segment) -> List["JSONTree"]:
        """Elements of the array (or values of the object) at the path."""
        node = self.get(*segments)
        if isinstance(node, list):
            return [JSONTree(item) for item in node]
        if isinstance(node, dict):
            return [JSONTree(item) for item in node.values()]
        return []

    def __repr__(self) -> str:
        return f"JSONTree({self.data!r})"


def _as_index(segment: Segment):
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment
    if isinstance(segment, str) and segment.isascii() and segment.isdigit():
        return int(segment)
    return None
