from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from google.protobuf import descriptor_pb2 as d2

from protoc_mson.kinds import NodeKind, node_kind
from protoc_mson.scope import Scope
from protoc_mson.text import normalize_indent


class ScopeCollisionError(Exception):
    """Raised when two distinct descriptors claim the same scope."""


@dataclass(eq=False)
class Symbol:
    """A named descriptor node together with its scope and comments."""

    scope: Scope
    node: object = field(repr=False)
    parent: Optional[Symbol] = field(default=None, repr=False)
    to_generate: bool = False
    leading_detached_comments: List[str] = field(default_factory=list)
    leading_comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)

    @property
    def kind(self) -> NodeKind:
        return node_kind(self.node)

    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    def is_message(self) -> bool:
        return self.kind == NodeKind.MESSAGE

    def is_enum(self) -> bool:
        return self.kind == NodeKind.ENUM

    def is_enum_value(self) -> bool:
        return self.kind == NodeKind.ENUM_VALUE

    def is_field(self) -> bool:
        return self.kind == NodeKind.FIELD

    def is_service(self) -> bool:
        return self.kind == NodeKind.SERVICE

    def is_method(self) -> bool:
        return self.kind == NodeKind.METHOD

    def add_comments(self, location: d2.SourceCodeInfo.Location) -> None:
        if location.leading_comments:
            self.leading_comments.append(normalize_indent(location.leading_comments))
        if location.trailing_comments:
            self.trailing_comments.append(normalize_indent(location.trailing_comments))
        for c in location.leading_detached_comments:
            self.leading_detached_comments.append(normalize_indent(c))

    def is_private(self) -> bool:
        return any(c.strip() == "private" for c in self.trailing_comments)

    def __str__(self) -> str:
        return str(self.scope)


class SymbolTable:
    """Symbols keyed by scope string and by descriptor identity."""

    def __init__(self):
        self.by_scope: Dict[str, Symbol] = {}
        self.by_node: Dict[int, Symbol] = {}

    def put(self, symbol: Symbol) -> None:
        key = str(symbol.scope)
        existing = self.by_scope.get(key)
        if existing is not None and existing.node is not symbol.node:
            # Several files may declare the same package.
            if not (existing.is_file() and symbol.is_file()):
                raise ScopeCollisionError(
                    f"Scope '{key}' is already taken by a {existing.kind.name.lower()} "
                    f"(new {symbol.kind.name.lower()})"
                )
        self.by_scope[key] = symbol
        self.by_node[id(symbol.node)] = symbol

    def remove(self, symbol: Symbol) -> None:
        """Drop a symbol from both maps. Removing an absent symbol does nothing."""
        key = str(symbol.scope)
        if self.by_scope.get(key) is symbol:
            del self.by_scope[key]
        if self.by_node.get(id(symbol.node)) is symbol:
            del self.by_node[id(symbol.node)]

    def get(self, scope) -> Optional[Symbol]:
        return self.by_scope.get(str(scope))

    def get_by_node(self, node) -> Optional[Symbol]:
        if node is None:
            return None
        symbol = self.by_node.get(id(node))
        if symbol is None or symbol.node is not node:
            return None
        return symbol

    def __contains__(self, scope) -> bool:
        return str(scope) in self.by_scope

    def __len__(self) -> int:
        return len(self.by_scope)

    def __iter__(self) -> Iterator[Symbol]:
        for key in sorted(self.by_scope):
            yield self.by_scope[key]
