"""
Node and edge types for the flow builder.

Wire shapes (as produced by to_dict / accepted by from_dict):

    node: {"id": "1", "type": "textNode",
           "position": {"x": 100, "y": 100},
           "data": {"text": "test message 1"}}
    edge: {"id": "e1-2", "source": "1", "target": "2"}

Node data is a closed set of kinds keyed by the node type tag. Only the
"textNode" kind exists today; a new kind registers its data class in
NODE_KINDS and its defaults in DEFAULT_NODE_DATA.
"""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Optional, Type
import uuid


TEXT_NODE = "textNode"


class UnknownNodeTypeError(ValueError):
    """Raised when node data is built for a type with no registered kind."""


@dataclass(frozen=True)
class Position:
    """A point in canvas-local coordinates (origin at the canvas top-left)."""
    x: float = 0
    y: float = 0

    def clamped(self) -> "Position":
        """Return this position with both axes clamped to be non-negative."""
        return Position(max(0, self.x), max(0, self.y))

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Position":
        return cls(raw.get("x", 0), raw.get("y", 0))


@dataclass(frozen=True)
class TextNodeData:
    """
    Payload of a "Send Message" node.

    Keys merged in that the kind does not declare are kept in `extra` so that
    a shallow merge never drops data.
    """
    kind: ClassVar[str] = TEXT_NODE

    text: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, partial: Dict[str, Any]) -> "TextNodeData":
        """Shallow-merge `partial` and return the new payload."""
        extra = dict(self.extra)
        extra.update({k: v for k, v in partial.items() if k != "text"})
        return replace(self, text=partial.get("text", self.text), extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, **self.extra}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TextNodeData":
        extra = {k: v for k, v in raw.items() if k != "text"}
        return cls(text=raw.get("text", ""), extra=extra)


NodeData = TextNodeData

NODE_KINDS: Dict[str, Type[NodeData]] = {
    TEXT_NODE: TextNodeData,
}

DEFAULT_NODE_DATA: Dict[str, Dict[str, Any]] = {
    TEXT_NODE: {"text": "New message"},
}


def is_known_node_type(node_type: Optional[str]) -> bool:
    return node_type in NODE_KINDS


def default_data_for(node_type: str) -> Dict[str, Any]:
    """Return a fresh copy of the default data for a node type."""
    if node_type not in DEFAULT_NODE_DATA:
        raise UnknownNodeTypeError(node_type)
    return dict(DEFAULT_NODE_DATA[node_type])


def make_node_data(node_type: str, raw: Optional[Dict[str, Any]] = None) -> NodeData:
    """Build the typed payload for `node_type` from a plain dict."""
    kind = NODE_KINDS.get(node_type)
    if kind is None:
        raise UnknownNodeTypeError(node_type)
    return kind.from_dict(raw or {})


def make_node_id() -> str:
    return f"node_{uuid.uuid4().hex[:12]}"


def make_edge_id(source: str, target: str) -> str:
    """Edge ids are derived from their endpoints, e.g. "e1-2"."""
    return f"e{source}-{target}"


@dataclass(frozen=True)
class FlowNode:
    id: str
    type: str
    position: Position
    data: NodeData

    @property
    def text(self) -> str:
        return self.data.text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "position": self.position.to_dict(),
            "data": self.data.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FlowNode":
        node_type = raw.get("type", TEXT_NODE)
        return cls(
            id=str(raw["id"]),
            type=node_type,
            position=Position.from_dict(raw.get("position") or {}),
            data=make_node_data(node_type, raw.get("data")),
        )


@dataclass(frozen=True)
class FlowEdge:
    id: str
    source: str
    target: str

    @classmethod
    def between(cls, source: str, target: str) -> "FlowEdge":
        return cls(id=make_edge_id(source, target), source=source, target=target)

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "source": self.source, "target": self.target}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FlowEdge":
        source, target = str(raw["source"]), str(raw["target"])
        return cls(id=raw.get("id") or make_edge_id(source, target), source=source, target=target)
