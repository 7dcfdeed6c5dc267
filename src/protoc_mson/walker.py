"""Map protoc source-location paths back to the descriptor node they address.

A ``SourceCodeInfo.Location.path`` is a run of field numbers, each followed
by an index when the field is repeated. Walking it from the file root with
the same per-kind field numbers protoc used lands on the annotated node.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, Union

from protoc_mson.kinds import NodeKind, node_kind, scope_segment
from protoc_mson.scope import Scope

# Marker for steps that consume a (number, index) pair but stay on the node.
_STAY = object()

# field number -> (attribute, indexed); unindexed steps consume one element.
_STEPS: Dict[NodeKind, Dict[int, Union[Tuple[str, bool], object]]] = {
    NodeKind.FILE: {
        4: ("message_type", True),
        5: ("enum_type", True),
        6: ("service", True),
        7: ("extension", True),
        8: ("options", False),
        9: ("source_code_info", False),
    },
    NodeKind.MESSAGE: {
        2: ("field", True),
        3: ("nested_type", True),
        4: ("enum_type", True),
        5: ("extension_range", True),
        6: ("extension", True),
        7: ("options", False),
        8: ("oneof_decl", True),
    },
    NodeKind.ENUM: {
        2: ("value", True),
        3: ("options", False),
    },
    NodeKind.ENUM_VALUE: {
        3: ("options", False),
    },
    NodeKind.SERVICE: {
        2: ("method", True),
        3: ("options", False),
    },
    NodeKind.METHOD: {
        4: ("options", False),
    },
    NodeKind.FIELD: {
        8: ("options", False),
    },
    NodeKind.OPTIONS: {
        999: _STAY,
    },
}


def get_by_location(fi, path: Sequence[int]) -> Tuple[Scope, object, List[int]]:
    """Walk ``path`` from the file ``fi``.

    Returns the scope accumulated along the way, the node the walk stopped
    on and whatever part of the path could not be followed. An empty
    remainder means the path was fully resolved.
    """
    node = fi
    scope = Scope()
    path = tuple(path)

    while True:
        segment = scope_segment(node)
        if segment is not None:
            scope = scope.with_(segment)

        if not path:
            return scope, node, []

        step = _STEPS.get(node_kind(node), {}).get(path[0])
        if step is None:
            return scope, node, list(path)

        if step is _STAY:
            path = path[2:]
            continue

        attr, indexed = step
        if not indexed:
            node = getattr(node, attr)
            path = path[1:]
            continue

        children = getattr(node, attr)
        if len(path) < 2 or not 0 <= path[1] < len(children):
            return scope, node, list(path)
        node = children[path[1]]
        path = path[2:]
