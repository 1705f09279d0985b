"""Depth-bounded resolution of indirect references in a PDF object graph.

Annotation arrays handed out by the source parser are full of indirect
references (``12 0 R``) that point back into the document's object table.
:func:`resolve` walks such a value and returns a copy in which every
reference within reach has been replaced by the object it points to.

Malformed documents with reference cycles are found in the wild, so the walk
carries a depth budget that is spent on every step. Once it runs out the node
is returned as-is; the result is then truncated rather than infinite.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping, Optional, Tuple

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NullObject,
    PdfObject,
    StreamObject,
)

LOGGER = logging.getLogger("pdf_merger.objects")

DEFAULT_MAX_DEPTH = 10

ObjectLookup = Callable[[int, int], Optional[PdfObject]]
ResolveCache = MutableMapping[Tuple[int, int, int], Any]


def resolve(
    node: Any,
    lookup: ObjectLookup,
    max_depth: int = DEFAULT_MAX_DEPTH,
    cache: Optional[ResolveCache] = None,
) -> Any:
    """Return ``node`` with indirect references replaced by their targets.

    Args:
        node: A raw value from the source parser.
        lookup: Object-table access, ``lookup(object_number, generation)``
            returning the stored object or ``None`` when it does not exist.
        max_depth: Remaining recursion budget. Every step into a reference,
            array element or dictionary value consumes one unit; at zero the
            node is returned unresolved.
        cache: Optional memo of resolved references keyed by
            ``(object_number, generation, max_depth)``. Pass the same mapping
            for every call against one document; annotations point back to
            their page and through it to the whole page tree, which would
            otherwise be rebuilt for every link.

    Containers are rebuilt, never modified in place, and keep their element
    and key order. A container reached through a reference is tagged with
    that reference as ``indirect_reference`` so callers can still tell which
    object it was. Streams are returned untouched. A reference to a missing
    object resolves to ``NullObject``.
    """

    if max_depth <= 0:
        return node

    if isinstance(node, IndirectObject):
        cache_key = (node.idnum, node.generation, max_depth)
        if cache is not None and cache_key in cache:
            return cache[cache_key]
        target = lookup(node.idnum, node.generation)
        if target is None:
            LOGGER.debug("Object %s %s R not found; resolving to null", node.idnum, node.generation)
            resolved = NullObject()
        else:
            resolved = resolve(target, lookup, max_depth - 1, cache)
            if resolved is not target and isinstance(resolved, (ArrayObject, DictionaryObject)):
                resolved.indirect_reference = node
        if cache is not None:
            cache[cache_key] = resolved
        return resolved

    if isinstance(node, StreamObject):
        return node

    if isinstance(node, DictionaryObject):
        result = DictionaryObject()
        for key, value in dict.items(node):
            result[key] = resolve(value, lookup, max_depth - 1, cache)
        return result

    if isinstance(node, ArrayObject):
        return ArrayObject(resolve(item, lookup, max_depth - 1, cache) for item in node)

    return node


def reference_of(node: Any) -> Optional[IndirectObject]:
    """Return the object reference ``node`` is or was resolved from, if any."""

    if isinstance(node, IndirectObject):
        return node
    if isinstance(node, (ArrayObject, DictionaryObject)):
        reference = getattr(node, "indirect_reference", None)
        if isinstance(reference, IndirectObject):
            return reference
    return None


__all__ = ["DEFAULT_MAX_DEPTH", "ObjectLookup", "ResolveCache", "resolve", "reference_of"]
