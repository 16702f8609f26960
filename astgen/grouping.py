"""astgen/grouping.py – Partition concrete nodes by declared base type.

Groups come out in the order their base key is first met while scanning
the schema; nodes inside a group keep schema order. Nodes without a
declared base have no dispatch parent and are left out.

The grouping is checked for well-formedness before it is handed to the
emitter. The outcome is a :class:`GroupingResult` which carries either
the groups or the :class:`~astgen.errors.ShapeError` describing what is
wrong; the caller decides whether to inspect it or ``unwrap()`` it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from astgen.errors import AstgenErrorCodes, ShapeError
from astgen.schema import NodeType

logger = logging.getLogger(__name__)

__all__ = [
    "NodeGroup",
    "GroupingResult",
    "group_nodes_by_base",
    "check_grouping",
]


@dataclass(frozen=True, slots=True)
class NodeGroup:
    """Concrete nodes sharing one declared base type."""

    base: str
    nodes: Tuple[NodeType, ...]

    def __iter__(self) -> Iterator[NodeType]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def names(self) -> Tuple[str, ...]:
        return tuple(node.name for node in self.nodes)


@dataclass(frozen=True)
class GroupingResult:
    """Outcome of :func:`group_nodes_by_base`."""

    groups: Tuple[NodeGroup, ...] = ()
    error: Optional[ShapeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Tuple[NodeGroup, ...]:
        """Return the groups, raising the carried :class:`ShapeError` if any."""
        if self.error is not None:
            raise self.error
        return self.groups

    def as_dict(self) -> Dict[str, List[str]]:
        """Base key → node names, in group order."""
        return {group.base: list(group.names()) for group in self.unwrap()}


def check_grouping(groups: object) -> Optional[ShapeError]:
    """Return a :class:`ShapeError` if *groups* is not well formed.

    A well-formed grouping is a tuple of :class:`NodeGroup` where each
    group has a non-empty string key, a non-empty tuple of
    :class:`NodeType` whose ``base`` equals the key, no key repeats and
    no node appears twice.
    """
    if not isinstance(groups, tuple):
        return ShapeError(f"grouping must be a tuple of groups, got {type(groups).__name__}")

    keys: Set[str] = set()
    placed: Set[str] = set()
    for index, group in enumerate(groups):
        if not isinstance(group, NodeGroup):
            return ShapeError(f"group #{index} is {type(group).__name__}, not a NodeGroup")
        if not isinstance(group.base, str) or not group.base:
            return ShapeError(f"group #{index} has no base key")
        if group.base in keys:
            return ShapeError(
                f"base {group.base!r} appears in more than one group",
                code=AstgenErrorCodes.DUPLICATE_GROUP,
            )
        keys.add(group.base)
        if not isinstance(group.nodes, tuple) or not group.nodes:
            return ShapeError(f"group {group.base!r} is not a non-empty tuple of nodes")
        for node in group.nodes:
            if not isinstance(node, NodeType):
                return ShapeError(
                    f"group {group.base!r} holds {type(node).__name__}, not a NodeType"
                )
            if node.base != group.base:
                return ShapeError(
                    f"node {node.name!r} with base {node.base!r} filed under {group.base!r}",
                    code=AstgenErrorCodes.MISPLACED_NODE,
                )
            if node.name in placed:
                return ShapeError(
                    f"node {node.name!r} appears more than once",
                    code=AstgenErrorCodes.MISPLACED_NODE,
                )
            placed.add(node.name)
    return None


def group_nodes_by_base(nodes: Iterable[NodeType]) -> GroupingResult:
    """Group *nodes* by their declared base, preserving schema order."""
    order: List[str] = []
    members: Dict[str, List[NodeType]] = {}
    for node in nodes:
        if node.base is None:
            continue
        if node.base not in members:
            order.append(node.base)
            members[node.base] = []
        members[node.base].append(node)

    groups = tuple(NodeGroup(base, tuple(members[base])) for base in order)
    error = check_grouping(groups)
    if error is not None:
        logger.debug("grouping rejected: %s", error.message)
        return GroupingResult(error=error)
    logger.debug(
        "grouped %d node(s) under %d base(s)",
        sum(len(group) for group in groups),
        len(groups),
    )
    return GroupingResult(groups=groups)
