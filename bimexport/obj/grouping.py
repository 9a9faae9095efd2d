"""Element classification and grouping by external identifier."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from bimexport.imf.types import NodeKind

logger = logging.getLogger(__name__)

OPENING_PROPERTY = "Element:IfcExportAs"
OPENING_VALUE = "IfcOpeningElement"

# Tried in order across the whole ancestor chain
GROUP_KEY_PROPERTIES = ["IFC:GLOBALID", "Element:IfcGUID"]

Groups = Dict[str, List[int]]


def _noop(message: str) -> None:
    pass


@dataclass
class ElementGroups:
    """Node indices grouped by GroupKey, split into regular and opening buckets."""

    regular: Groups = field(default_factory=dict)
    opening: Groups = field(default_factory=dict)

    @property
    def node_count(self) -> int:
        return sum(len(v) for v in self.regular.values()) + sum(
            len(v) for v in self.opening.values()
        )

    def is_empty(self) -> bool:
        return not self.regular and not self.opening


def is_opening(properties: Dict[str, str]) -> bool:
    """Check if element properties mark it as an IFC opening element."""
    return properties.get(OPENING_PROPERTY) == OPENING_VALUE


def group_key(dbid: int, propdb: Optional[Any] = None) -> str:
    """External identifier of an element, or ``dbid-<dbid>`` if it has none."""
    if propdb is not None:
        key = propdb.find_property_recursive(dbid, GROUP_KEY_PROPERTIES)
        if key:
            return key
    return f"dbid-{dbid}"


def classify_and_group(
    scene: Any,
    propdb: Optional[Any] = None,
    log: Callable[[str], None] = _noop,
) -> ElementGroups:
    """
    Bucket every object node of a scene by classification and GroupKey.

    Args:
        scene: Scene exposing node_count() and node()
        propdb: Optional property database
        log: Diagnostic callback

    Returns:
        ElementGroups with first-seen ordering of keys and node indices
    """
    groups = ElementGroups()

    for index in range(scene.node_count()):
        node = scene.node(index)

        if node.kind != NodeKind.OBJECT:
            message = f"Skipping node type {node.kind.value}"
            logger.debug(message)
            log(message)
            continue

        properties = propdb.get_properties(node.dbid) if propdb is not None else {}
        bucket = groups.opening if is_opening(properties) else groups.regular

        key = group_key(node.dbid, propdb)
        bucket.setdefault(key, []).append(index)

    logger.info(
        f"Grouped {groups.node_count} object nodes into {len(groups.regular)} regular "
        f"and {len(groups.opening)} opening groups"
    )
    return groups
