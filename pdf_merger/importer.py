"""Page import and link re-application for merge runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .backends.base import PDFBackend, SourceDocument, Template
from .config import MergeOptions
from .exceptions import PageImportError
from .links import collect_page_links
from .types import (
    Anchor,
    Link,
    MergeOutput,
    MergeState,
    OutputLink,
    OutputPage,
    UriTarget,
)

LOGGER = logging.getLogger("pdf_merger.importer")


@dataclass
class MergeBuild:
    """State of one merge run: the document under construction and its anchors.

    ``placements`` maps ``(document key, source page)`` to the 0-based output
    index of the first time that page was merged.
    """

    writer: Any
    scale: float
    output: MergeOutput = field(default_factory=MergeOutput)
    placements: Dict[Tuple[str, int], int] = field(default_factory=dict)
    state: MergeState = MergeState.BUILDING
    error: Optional[BaseException] = None

    def add_page(self, page: OutputPage) -> None:
        self.output.pages.append(page)
        self.placements.setdefault((page.source, page.source_page), page.number - 1)

    def new_anchor(self, document: str, source_page: int) -> Anchor:
        anchor = Anchor(
            handle=len(self.output.anchors) + 1,
            document=document,
            source_page=source_page,
        )
        self.output.anchors.append(anchor)
        return anchor

    def bind_anchors(self) -> int:
        """Bind every anchor to its page's output position; return how many stay unbound."""
        unbound = 0
        for anchor in self.output.anchors:
            anchor.output_page = self.placements.get((anchor.document, anchor.source_page))
            if anchor.output_page is None:
                unbound += 1
                LOGGER.warning(
                    "Link target page %d of %s is not part of the merge; link left inert",
                    anchor.source_page,
                    anchor.document,
                )
        return unbound


@dataclass
class ImportedPage:
    page: OutputPage
    template: Template
    links: List[Link]


class PageImporter:
    """Copies one source page at a time into a :class:`MergeBuild`."""

    def __init__(self, backend: PDFBackend, options: MergeOptions) -> None:
        self.backend = backend
        self.options = options

    def import_page(self, build: MergeBuild, document: SourceDocument, page_number: int) -> ImportedPage:
        """Stamp page ``page_number`` of ``document`` onto a new output page.

        Raises:
            PageNotFoundError: If the document has no such page.
            PageImportError: If the page content cannot be copied.
        """
        template = document.import_page(page_number, self.options.page_box)

        try:
            self.backend.stamp(build.writer, template)
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            LOGGER.error("Failed to import page %d of %s: %s", page_number, document.path, exc)
            raise PageImportError(
                f"Unable to import page {page_number} of {document.path}: {exc}"
            ) from exc

        page = OutputPage(
            number=build.output.page_count + 1,
            width=template.width,
            height=template.height,
            source=document.key,
            source_page=page_number,
        )
        build.add_page(page)
        LOGGER.debug(
            "Imported page %d of %s as output page %d (%.2f x %.2f pt)",
            page_number,
            document.path,
            page.number,
            page.width,
            page.height,
        )

        links = collect_page_links(document, page_number, max_depth=self.options.max_depth)
        return ImportedPage(page=page, template=template, links=links)


def transform_rect(
    link: Link,
    page_height: float,
    scale: float,
    *,
    left: float = 0.0,
    bottom: float = 0.0,
) -> Tuple[float, float, float, float]:
    """Map a source link rectangle to output units with a top-left origin."""
    x = link.x - left
    y = link.y - bottom
    return (
        x / scale,
        (page_height - y + link.h) / scale,
        link.w / scale,
        -link.h / scale,
    )


def apply_links(build: MergeBuild, imported: ImportedPage) -> List[OutputLink]:
    """Register the links found on a source page on its freshly created output page.

    Page jumps get a new anchor; it is bound to an output page only once the
    whole job is known (see :meth:`MergeBuild.bind_anchors`).
    """
    page = imported.page
    template = imported.template
    applied: List[OutputLink] = []
    for link in imported.links:
        x, y, w, h = transform_rect(
            link,
            page.height,
            build.scale,
            left=template.left,
            bottom=template.bottom,
        )
        if isinstance(link.target, UriTarget):
            output_link = OutputLink(x=x, y=y, w=w, h=h, uri=link.target.uri)
        else:
            anchor = build.new_anchor(page.source, link.target.page_number)
            output_link = OutputLink(x=x, y=y, w=w, h=h, anchor=anchor)
        page.links.append(output_link)
        applied.append(output_link)
    return applied


__all__ = ["MergeBuild", "ImportedPage", "PageImporter", "transform_rect", "apply_links"]
