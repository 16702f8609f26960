"""astgen/schema.py – In-memory AST schema model.

The schema is the ordered list of concrete node definitions that drives
generation. Loaders (:mod:`astgen.loader`) produce it; the analysis
passes and emitters only read it.

Design invariants
-----------------
* Every model object is a frozen dataclass (immutable after loading).
* Ordered collections are tuples, never lists, so schema order survives
  nesting untouched.
* Node names are unique across a schema. The generator trusts its
  input and does not re-check this.
* A base type referenced by a member need not be declared as a node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple


class MemberKind(Enum):
    """Shape of a node member.

    Only ``NODE`` and ``NODE_LIST`` members reference other AST nodes and
    take part in base-type discovery.
    """

    NODE = "node"
    NODE_LIST = "node-list"
    TOKEN = "token"
    ATTRIBUTE = "attribute"

    @property
    def is_reference(self) -> bool:
        return self in (MemberKind.NODE, MemberKind.NODE_LIST)

    @classmethod
    def from_tag(cls, tag: str) -> "MemberKind":
        """Look up a kind by its schema tag (``node``, ``node-list``, ...)."""
        for kind in cls:
            if kind.value == tag:
                return kind
        raise ValueError(f"unknown member kind {tag!r}")


@dataclass(frozen=True, slots=True)
class Member:
    """One declared member of a node type.

    ``type`` names the referenced node or base type for reference kinds;
    for tokens and attributes it is the declared C++ type, informational
    only. ``name`` is the field name used by the definition emitter.
    """

    kind: MemberKind
    type: str
    name: str = ""

    @property
    def is_reference(self) -> bool:
        return self.kind.is_reference


@dataclass(frozen=True, slots=True)
class NodeType:
    """One concrete AST node kind."""

    name: str
    base: Optional[str] = None
    members: Tuple[Member, ...] = ()

    def reference_members(self) -> Iterator[Member]:
        """Yield node and node-list members in declared order."""
        for member in self.members:
            if member.is_reference:
                yield member


@dataclass(frozen=True, slots=True)
class Schema:
    """Ordered sequence of node definitions plus where it came from."""

    nodes: Tuple[NodeType, ...] = ()
    source: str = field(default="<memory>", compare=False)

    @classmethod
    def of(cls, nodes: Sequence[NodeType], source: str = "<memory>") -> "Schema":
        return cls(nodes=tuple(nodes), source=source)

    def __iter__(self) -> Iterator[NodeType]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, name: str) -> Optional[NodeType]:
        """Return the node called *name*, or ``None``."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def names(self) -> Tuple[str, ...]:
        return tuple(node.name for node in self.nodes)
