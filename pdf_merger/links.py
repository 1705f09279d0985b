"""Discovery of hyperlink annotations on source pages."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from pypdf.generic import ArrayObject, DictionaryObject, IndirectObject

from .backends.base import SourceDocument
from .objects import DEFAULT_MAX_DEPTH, reference_of, resolve
from .types import Link, LinkTarget, PageJumpTarget, PageRef, UriTarget

LOGGER = logging.getLogger("pdf_merger.links")

Reference = Union[IndirectObject, PageRef, Tuple[int, int]]


def find_page_number(reference: Reference, page_table: Sequence[PageRef]) -> Optional[int]:
    """Return the 1-based position of the page ``reference`` points at.

    The page table is scanned in order and the first entry whose object and
    generation numbers both match wins. ``None`` is returned when no page
    matches.
    """

    if isinstance(reference, IndirectObject):
        wanted = (reference.idnum, reference.generation)
    else:
        wanted = (reference[0], reference[1])

    for index, page in enumerate(page_table):
        if (page.object_number, page.generation) == wanted:
            return index + 1
    return None


def _rect(annotation: DictionaryObject) -> Optional[Tuple[float, float, float, float]]:
    rect = annotation.get("/Rect")
    if not isinstance(rect, ArrayObject) or len(rect) != 4:
        return None
    try:
        x, y, x2, y2 = (float(value) for value in rect)
    except (TypeError, ValueError):
        return None
    return x, y, x2 - x, -(y2 - y)


def _uri(value: Any) -> Optional[str]:
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    if not isinstance(value, str):
        return None
    uri = value.strip().replace("\\000", "").replace("\x00", "").strip()
    return uri or None


def _page_jump(destination: Any, page_table: Sequence[PageRef]) -> Optional[PageJumpTarget]:
    if not isinstance(destination, ArrayObject) or not destination:
        return None
    reference = reference_of(destination[0])
    if reference is None:
        return None
    page_number = find_page_number(reference, page_table)
    if page_number is None:
        LOGGER.debug("Link destination %s %s R is not a known page", reference.idnum, reference.generation)
        return None
    return PageJumpTarget(page_number)


def _target(annotation: DictionaryObject, page_table: Sequence[PageRef]) -> Optional[LinkTarget]:
    if "/A" in annotation:
        action = annotation.get("/A")
        if not isinstance(action, DictionaryObject):
            return None
        kind = action.get("/S")
        if kind == "/URI":
            uri = _uri(action.get("/URI"))
            return UriTarget(uri) if uri else None
        if kind == "/GoTo":
            return _page_jump(action.get("/D"), page_table)
        return None

    if "/Dest" in annotation:
        return _page_jump(annotation.get("/Dest"), page_table)
    return None


def extract_links_from_annotations(annotations: Any, page_table: Sequence[PageRef]) -> List[Link]:
    """Build :class:`Link` records from a resolved ``/Annots`` array.

    Only ``/Type /Annot /Subtype /Link`` dictionaries with a four-number
    ``/Rect`` are considered. A link points either at a URI (``/A`` with
    ``/S /URI``) or at a page of the same document (``/A`` with ``/S /GoTo``,
    or a bare ``/Dest`` array). Anything else, including empty URIs and
    destinations outside the page table, is skipped.
    """

    if not isinstance(annotations, ArrayObject):
        return []

    links: List[Link] = []
    for annotation in annotations:
        if not isinstance(annotation, DictionaryObject):
            continue
        if annotation.get("/Type") != "/Annot" or annotation.get("/Subtype") != "/Link":
            continue

        rect = _rect(annotation)
        if rect is None:
            LOGGER.debug("Skipping link annotation without a usable /Rect")
            continue

        target = _target(annotation, page_table)
        if target is None:
            continue

        x, y, w, h = rect
        links.append(Link(x=x, y=y, w=w, h=h, target=target))
    return links


def collect_page_links(
    document: SourceDocument,
    page_number: int,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[Link]:
    """Return the links found on page ``page_number`` of ``document``."""

    raw = document.raw_annotations(page_number)
    if raw is None:
        return []
    annotations = resolve(raw, document.resolve_object, max_depth, document.resolved)
    links = extract_links_from_annotations(annotations, document.page_table)
    LOGGER.debug("Found %d link(s) on page %d of %s", len(links), page_number, document.key)
    return links


__all__ = [
    "find_page_number",
    "extract_links_from_annotations",
    "collect_page_links",
]
