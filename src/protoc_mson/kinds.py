"""Closed set of descriptor node kinds and the per-kind dispatch helpers."""

from __future__ import annotations

from enum import Enum, auto
from typing import Dict, Optional

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2


class NodeKind(Enum):
    FILE = auto()
    MESSAGE = auto()
    FIELD = auto()
    ONEOF = auto()
    ENUM = auto()
    ENUM_VALUE = auto()
    SERVICE = auto()
    METHOD = auto()

    # Containers without a name of their own
    OPTIONS = auto()
    EXTENSION_RANGE = auto()
    SOURCE_CODE_INFO = auto()

    REQUEST = auto()
    UNKNOWN = auto()


_KINDS: Dict[type, NodeKind] = {
    d2.FileDescriptorProto: NodeKind.FILE,
    d2.DescriptorProto: NodeKind.MESSAGE,
    d2.FieldDescriptorProto: NodeKind.FIELD,
    d2.OneofDescriptorProto: NodeKind.ONEOF,
    d2.EnumDescriptorProto: NodeKind.ENUM,
    d2.EnumValueDescriptorProto: NodeKind.ENUM_VALUE,
    d2.ServiceDescriptorProto: NodeKind.SERVICE,
    d2.MethodDescriptorProto: NodeKind.METHOD,
    d2.FileOptions: NodeKind.OPTIONS,
    d2.MessageOptions: NodeKind.OPTIONS,
    d2.FieldOptions: NodeKind.OPTIONS,
    d2.OneofOptions: NodeKind.OPTIONS,
    d2.EnumOptions: NodeKind.OPTIONS,
    d2.EnumValueOptions: NodeKind.OPTIONS,
    d2.ServiceOptions: NodeKind.OPTIONS,
    d2.MethodOptions: NodeKind.OPTIONS,
    d2.ExtensionRangeOptions: NodeKind.OPTIONS,
    d2.DescriptorProto.ExtensionRange: NodeKind.EXTENSION_RANGE,
    d2.SourceCodeInfo: NodeKind.SOURCE_CODE_INFO,
    plugin_pb2.CodeGeneratorRequest: NodeKind.REQUEST,
}

NAMED_KINDS = frozenset({
    NodeKind.MESSAGE,
    NodeKind.FIELD,
    NodeKind.ONEOF,
    NodeKind.ENUM,
    NodeKind.ENUM_VALUE,
    NodeKind.SERVICE,
    NodeKind.METHOD,
})

OPTIONS_SEGMENT = "<UninterpretedOptions>"


def node_kind(node) -> NodeKind:
    if node is None:
        return NodeKind.UNKNOWN
    return _KINDS.get(type(node), NodeKind.UNKNOWN)


def node_name(node) -> str:
    """Return the declared name of a named node, or "" for anything else."""
    if node_kind(node) in NAMED_KINDS:
        return node.name
    return ""


def scope_segment(node) -> Optional[str]:
    """Segment a node contributes to the scope of a source location.

    A file contributes its package (nothing when it has none), named nodes
    their name, options containers a fixed placeholder and anything else a
    placeholder carrying its class name.
    """
    kind = node_kind(node)
    if kind == NodeKind.FILE:
        return node.package or None
    if kind in NAMED_KINDS:
        return node.name
    if kind == NodeKind.OPTIONS:
        return OPTIONS_SEGMENT
    return f"<unknown:{type(node).__name__}>"


def is_documentable(node) -> bool:
    """Only named nodes (files included) carry documentation comments."""
    kind = node_kind(node)
    return kind == NodeKind.FILE or kind in NAMED_KINDS
