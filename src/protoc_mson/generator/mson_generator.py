from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from protoc_mson.models import Symbol, SymbolTable
from protoc_mson.resolver import Resolver
from protoc_mson.text import join_comments

OUTPUT_SUFFIX = ".pb.apib"


def _get_template_env() -> Environment:
    template_dir = Path(__file__).parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
    )


def output_name(fi) -> str:
    """``foo/bar.proto`` -> ``bar.pb.apib``"""
    base = os.path.basename(fi.name)
    if base.endswith(".proto"):
        base = base[: -len(".proto")]
    return base + OUTPUT_SUFFIX


def _message_view(symbol: Symbol, table: SymbolTable, resolver: Resolver) -> Dict:
    fields = []
    for fd in symbol.node.field:
        fsym = table.get_by_node(fd)
        if fsym is None:
            # Pruned as private.
            continue
        found = resolver.find(symbol, fd.type_name)
        fields.append({
            "name": fd.name,
            "type": str(found.scope) if found is not None else resolver.type_name_of(fd),
            "comments": join_comments("\n    ", fsym.leading_comments, fsym.trailing_comments),
        })
    return {
        "kind": "message",
        "scope": str(symbol.scope),
        "comments": join_comments("\n", symbol.leading_comments, symbol.trailing_comments),
        "fields": fields,
    }


def _enum_view(symbol: Symbol, table: SymbolTable) -> Dict:
    return {
        "kind": "enum",
        "scope": str(symbol.scope),
        "comments": join_comments("\n", symbol.leading_comments, symbol.trailing_comments),
        "members": [v.name for v in symbol.node.value if table.get_by_node(v) is not None],
    }


def generate_mson(table: SymbolTable, resolver: Resolver) -> str:
    """Render every message and enum of ``table`` marked for generation."""
    items: List[Dict] = []
    for symbol in table:
        if not symbol.to_generate:
            continue
        if symbol.is_message():
            items.append(_message_view(symbol, table, resolver))
        elif symbol.is_enum():
            items.append(_enum_view(symbol, table))

    env = _get_template_env()
    template = env.get_template("message.apib.j2")
    return template.render(items=items)
