"""Dotted qualified names and their resolution against descriptor trees."""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from protoc_mson.kinds import NodeKind, node_kind

SEPARATOR = "."


class Scope:
    """An ordered sequence of name segments, e.g. ``pkg.Outer.Inner``.

    Segments may themselves contain the separator (a package such as
    ``foo.bar`` is kept as one segment), so two scopes compare equal when
    their dotted strings do.
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: Sequence[str] = ()):
        self._segments: Tuple[str, ...] = tuple(segments)

    def with_(self, *segments: str) -> Scope:
        return Scope(self._segments + segments)

    @property
    def segments(self) -> Tuple[str, ...]:
        return self._segments

    def __str__(self) -> str:
        return SEPARATOR.join(self._segments)

    def __repr__(self) -> str:
        return f"Scope({str(self)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __bool__(self) -> bool:
        return bool(self._segments)

    def resolve(self, root, accept: Optional[Callable[[object], bool]] = None):
        """Find the descriptor node this scope names, starting at ``root``.

        ``root`` may be a CodeGeneratorRequest (each file is tried in turn),
        a file, or any message/enum/service/field/value/method descriptor.
        Returns None when any segment fails to match. When ``accept`` is
        given, matches it rejects are skipped and the search goes on.
        """
        if node_kind(root) == NodeKind.REQUEST:
            for fi in root.proto_file:
                found = self.resolve(fi, accept)
                if found is not None:
                    return found
            return None
        return _resolve(root, self._segments, accept)


def _is_package_name(segment: str) -> bool:
    return all(ch.islower() or ch.isnumeric() or ch == "_" for ch in segment)


def parse_reference(text: str) -> Tuple[Scope, bool]:
    """Parse a type reference into a scope and whether it was absolute.

    Absolute references (``.pkg.sub.Type``) fold their leading run of
    package-looking segments into a single segment, matching how a file
    records its package.
    """
    if not text:
        return Scope(), False
    if text.startswith(SEPARATOR):
        return _parse_absolute(text[1:]), True
    return Scope(text.split(SEPARATOR)), False


def _parse_absolute(text: str) -> Scope:
    parts = text.split(SEPARATOR)
    pkg: List[str] = []
    for part in parts:
        if not _is_package_name(part):
            break
        pkg.append(part)

    segments: List[str] = []
    if pkg:
        segments.append(SEPARATOR.join(pkg))
    segments.extend(parts[len(pkg):])
    return Scope(segments)


# Containers searched, in order, once a node's own name has matched.
_CHILDREN = {
    NodeKind.FILE: ("message_type", "enum_type", "service", "extension"),
    NodeKind.MESSAGE: ("field", "nested_type", "enum_type", "extension"),
    NodeKind.ENUM: ("value",),
    NodeKind.SERVICE: ("method",),
    NodeKind.ENUM_VALUE: (),
    NodeKind.METHOD: (),
    NodeKind.FIELD: (),
}


def _accepted(node, accept):
    if accept is None or accept(node):
        return node
    return None


def _resolve(node, segments: Tuple[str, ...], accept=None):
    if not segments:
        return _accepted(node, accept)

    kind = node_kind(node)
    if kind not in _CHILDREN:
        return None

    if kind == NodeKind.FILE:
        if node.package:
            if node.package != segments[0]:
                return None
            segments = segments[1:]
    else:
        if node.name != segments[0]:
            return None
        segments = segments[1:]

    if not segments:
        return _accepted(node, accept)

    for attr in _CHILDREN[kind]:
        for child in getattr(node, attr):
            found = _resolve(child, segments, accept)
            if found is not None:
                return found
    return None


def resolve_within(node, scope: Scope, accept: Optional[Callable[[object], bool]] = None) -> Optional[object]:
    """Resolve ``scope`` as a name declared inside ``node``'s own scope."""
    kind = node_kind(node)
    if kind not in _CHILDREN:
        return None
    if kind == NodeKind.FILE:
        own = (node.package,) if node.package else ()
    else:
        own = (node.name,)
    return _resolve(node, own + scope.segments, accept)
