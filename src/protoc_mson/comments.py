"""Attach protoc source comments to symbols and prune private ones."""

from __future__ import annotations

import sys
from typing import List

from protoc_mson.kinds import is_documentable
from protoc_mson.models import SymbolTable
from protoc_mson.walker import get_by_location

PRIVATE_MARKER = "private"


def _has_comments(loc) -> bool:
    return bool(loc.leading_comments or loc.trailing_comments or len(loc.leading_detached_comments))


def attach_comments(table: SymbolTable, fi) -> List[str]:
    """Route every source location of ``fi`` to its symbol in ``table``.

    Symbols whose trailing comment reads ``private`` are removed from the
    table. Returns the scopes removed, in the order they were pruned.
    """
    pruned: List[str] = []
    for loc in fi.source_code_info.location:
        scope, node, trailing = get_by_location(fi, loc.path)
        if not is_documentable(node) or trailing:
            continue
        if not _has_comments(loc):
            continue

        symbol = table.get(scope)
        if symbol is None:
            continue
        symbol.add_comments(loc)

        if symbol.is_private():
            print(f"protoc-gen-mson: Removing message {scope} from scope", file=sys.stderr)
            table.remove(symbol)
            pruned.append(str(scope))
    return pruned
