"""astgen/collect.py – Base-type discovery.

A *base type* is any identifier used as the target type of a node or
node-list member somewhere in the schema. Each distinct base type gets
exactly one dispatch method in the generated visitor.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Set, Tuple

from astgen.schema import NodeType

logger = logging.getLogger(__name__)

__all__ = ["collect_base_types"]


def collect_base_types(nodes: Iterable[NodeType]) -> Tuple[str, ...]:
    """Return the distinct reference-target types in first-seen order.

    Nodes are scanned in schema order and, within a node, members in
    declared order. Only ``NODE`` and ``NODE_LIST`` members count. A type
    that is referenced but never declared as any node's ``base`` is still
    returned.
    """
    ordered: List[str] = []
    seen: Set[str] = set()
    for node in nodes:
        for member in node.reference_members():
            if member.type not in seen:
                seen.add(member.type)
                ordered.append(member.type)
    logger.debug("collected %d base type(s)", len(ordered))
    return tuple(ordered)
