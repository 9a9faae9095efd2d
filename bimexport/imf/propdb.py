"""In-memory property database adapters.

Writers query element properties through two calls only:

- ``get_properties(dbid)`` returning a ``{"Category:Name": "value"}`` mapping
- ``find_property_recursive(dbid, keys)`` walking the element's ancestors

The classes here implement that surface for scenes whose properties were
extracted ahead of time, and for plain GlobalId lookup tables.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class PropertyDatabase:
    """Element properties keyed by dbid, with a child -> parent relation."""

    properties: Dict[int, Dict[str, str]] = field(default_factory=dict)
    parents: Dict[int, int] = field(default_factory=dict)

    def get_properties(self, dbid: int) -> Dict[str, str]:
        """Return the properties of one element (empty if unknown)."""
        return dict(self.properties.get(dbid, {}))

    def ancestors(self, dbid: int) -> Iterator[int]:
        """Yield the element itself followed by its ancestors, root last."""
        seen = set()
        current: Optional[int] = dbid
        while current is not None and current not in seen:
            seen.add(current)
            yield current
            current = self.parents.get(current)

    def find_property_recursive(self, dbid: int, keys: Sequence[str]) -> Optional[str]:
        """
        Find the first property value along the ancestor chain.

        Keys are tried in order; a key is looked up on the element and all of
        its ancestors before the next key is considered.

        Args:
            dbid: Element to start from
            keys: Candidate property keys in priority order

        Returns:
            The matched value, or None if no ancestor defines any key
        """
        for key in keys:
            for ancestor in self.ancestors(dbid):
                value = self.properties.get(ancestor, {}).get(key)
                if value:
                    return value
        return None


class GlobalIdTable:
    """GlobalId lookup loaded from a ``<dbid> <globalid>`` text file.

    Answers ``IFC:GLOBALID`` for the exact dbid and defers everything else to
    an optional fallback database.
    """

    KEY = "IFC:GLOBALID"

    def __init__(self, ids: Dict[int, str], fallback: Optional[Any] = None):
        self.ids = dict(ids)
        self.fallback = fallback

    @classmethod
    def from_lines(cls, lines: Iterable[str], fallback: Optional[Any] = None) -> "GlobalIdTable":
        ids: Dict[int, str] = {}
        for number, line in enumerate(lines, start=1):
            parts = line.split()
            if not parts:
                continue
            if len(parts) != 2:
                raise ValueError(f"Line {number}: expected '<dbid> <globalid>', got {line!r}")
            try:
                dbid = int(parts[0])
            except ValueError:
                raise ValueError(f"Line {number}: invalid dbid {parts[0]!r}") from None
            ids[dbid] = parts[1]
        return cls(ids, fallback=fallback)

    @classmethod
    def from_file(cls, path: str | Path, fallback: Optional[Any] = None) -> "GlobalIdTable":
        """Load a GlobalId table from disk."""
        with open(path, "r", encoding="utf-8") as f:
            table = cls.from_lines(f, fallback=fallback)
        logger.info(f"Loaded {len(table.ids)} global ids from {path}")
        return table

    def get_properties(self, dbid: int) -> Dict[str, str]:
        props = dict(self.fallback.get_properties(dbid)) if self.fallback is not None else {}
        if dbid in self.ids:
            props[self.KEY] = self.ids[dbid]
        return props

    def find_property_recursive(self, dbid: int, keys: Sequence[str]) -> Optional[str]:
        for key in keys:
            if key == self.KEY and self.ids.get(dbid):
                return self.ids[dbid]
            if self.fallback is not None:
                # Keep key precedence: the fallback only sees this key
                value = self.fallback.find_property_recursive(dbid, [key])
                if value:
                    return value
        return None
