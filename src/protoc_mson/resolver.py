"""Resolve field type names to symbols."""

from __future__ import annotations

from typing import Dict, Optional, Set

from google.protobuf import descriptor_pb2 as d2

from protoc_mson.kinds import NodeKind, node_kind
from protoc_mson.models import Symbol, SymbolTable
from protoc_mson.scope import parse_reference, resolve_within

_FD = d2.FieldDescriptorProto

SCALAR_TYPE_NAMES: Dict[int, str] = {
    _FD.TYPE_DOUBLE: "number",
    _FD.TYPE_FLOAT: "number",
    _FD.TYPE_INT64: "number",
    _FD.TYPE_UINT64: "number",
    _FD.TYPE_INT32: "number",
    _FD.TYPE_FIXED64: "number",
    _FD.TYPE_FIXED32: "number",
    _FD.TYPE_UINT32: "number",
    _FD.TYPE_SFIXED32: "number",
    _FD.TYPE_SFIXED64: "number",
    _FD.TYPE_SINT32: "number",
    _FD.TYPE_SINT64: "number",
    _FD.TYPE_BOOL: "boolean",
    _FD.TYPE_STRING: "string",
    _FD.TYPE_BYTES: "string",
    _FD.TYPE_MESSAGE: "object",
    _FD.TYPE_ENUM: "enum",
}


def _is_type(node) -> bool:
    return node_kind(node) in (NodeKind.MESSAGE, NodeKind.ENUM)


class UnhandledTypeError(Exception):
    """Raised for field types that have no MSON equivalent (e.g. groups)."""


class Resolver:
    """Turns type names found on fields into symbols of one table.

    ``root`` is what absolute names are resolved against: normally the whole
    CodeGeneratorRequest, so names pointing into imported files resolve to a
    descriptor that simply is not in ``table``.
    """

    def __init__(self, root, table: SymbolTable):
        self.root = root
        self.table = table

    def find(self, symbol: Optional[Symbol], type_name: str) -> Optional[Symbol]:
        if not type_name:
            return None

        scope, absolute = parse_reference(type_name)
        if absolute:
            return self.table.get_by_node(scope.resolve(self.root))

        # Innermost scope first, then each enclosing one. Only messages and
        # enums can be named by a field type.
        visited: Set[int] = set()
        current = symbol
        while current is not None:
            node = current.node
            found = resolve_within(node, scope, _is_type)
            if found is None:
                found = scope.resolve(node, _is_type)
            if found is not None:
                return self.table.get_by_node(found)
            visited.add(id(node))
            current = current.parent

        # Top-level declarations of files without a package have no symbol
        # of their own to climb to.
        for fi in self._files():
            if id(fi) in visited:
                continue
            found = scope.resolve(fi, _is_type)
            if found is not None:
                return self.table.get_by_node(found)
        return None

    def _files(self):
        kind = node_kind(self.root)
        if kind == NodeKind.REQUEST:
            return list(self.root.proto_file)
        if kind == NodeKind.FILE:
            return [self.root]
        return []

    @staticmethod
    def type_name_of(node) -> str:
        """Plain type label for a field whose type did not resolve."""
        if node_kind(node) != NodeKind.FIELD:
            return ""
        if node.type_name:
            return node.type_name[1:] if node.type_name.startswith(".") else node.type_name
        try:
            return SCALAR_TYPE_NAMES[node.type]
        except KeyError:
            name = _FD.Type.Name(node.type) if node.type in _FD.Type.values() else str(node.type)
            raise UnhandledTypeError(f"Unhandled type {name} on field '{node.name}'") from None
