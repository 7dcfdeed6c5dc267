"""Build a SymbolTable from a descriptor tree."""

from __future__ import annotations

from typing import Optional

from protoc_mson.kinds import NodeKind, node_kind, node_name
from protoc_mson.models import Symbol, SymbolTable
from protoc_mson.scope import Scope


def build_symbol_table(root, to_generate: bool = True) -> SymbolTable:
    """Index every message, enum, enum value and field under ``root``.

    ``root`` may be a CodeGeneratorRequest, in which case only files listed
    in ``file_to_generate`` keep the ``to_generate`` flag, a single file, or
    any named descriptor.
    """
    table = SymbolTable()
    kind = node_kind(root)
    if kind == NodeKind.REQUEST:
        _walk_request(table, to_generate, root)
    elif kind == NodeKind.FILE:
        _walk_file(table, to_generate, root)
    elif kind == NodeKind.MESSAGE:
        _walk_message(table, to_generate, None, Scope(), root)
    elif kind == NodeKind.ENUM:
        _walk_enum(table, to_generate, None, Scope(), root)
    elif node_name(root):
        _walk_leaf(table, to_generate, None, Scope(), root)
    return table


def _walk_request(table: SymbolTable, to_generate: bool, request) -> None:
    allowed = set(request.file_to_generate)
    for fi in request.proto_file:
        _walk_file(table, to_generate and fi.name in allowed, fi)


def _walk_file(table: SymbolTable, to_generate: bool, fi) -> None:
    scope = Scope()
    parent: Optional[Symbol] = None
    if fi.package:
        scope = Scope([fi.package])
        parent = Symbol(scope=scope, node=fi, to_generate=to_generate)
        table.put(parent)

    for d in fi.message_type:
        _walk_message(table, to_generate, parent, scope, d)
    for d in fi.enum_type:
        _walk_enum(table, to_generate, parent, scope, d)


def _walk_message(table, to_generate, parent, scope, d) -> None:
    scope = scope.with_(d.name)
    self = Symbol(scope=scope, node=d, parent=parent, to_generate=to_generate)
    table.put(self)

    for nd in d.nested_type:
        _walk_message(table, to_generate, self, scope, nd)
    for nd in d.enum_type:
        _walk_enum(table, to_generate, self, scope, nd)
    for nd in d.field:
        _walk_leaf(table, to_generate, self, scope, nd)


def _walk_enum(table, to_generate, parent, scope, d) -> None:
    scope = scope.with_(d.name)
    self = Symbol(scope=scope, node=d, parent=parent, to_generate=to_generate)
    table.put(self)

    for nd in d.value:
        _walk_leaf(table, to_generate, self, scope, nd)


def _walk_leaf(table, to_generate, parent, scope, d) -> None:
    table.put(Symbol(scope=scope.with_(d.name), node=d, parent=parent, to_generate=to_generate))
