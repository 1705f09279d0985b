"""Backend protocol for PDF operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple

from ..types import PageRef


@dataclass
class Template:
    """Imported page content ready to be stamped onto a new page.

    ``width`` and ``height`` are measured on the page box used for the
    import, whose lower-left corner sits at (``left``, ``bottom``) in source
    page space.
    """

    width: float
    height: float
    left: float = 0.0
    bottom: float = 0.0
    rotation: int = 0
    content: Any = None


@dataclass
class SourceDocument:
    """Represents a loaded source PDF with backend-specific helpers.

    ``resolved`` memoizes resolved objects by ``(object number, generation,
    depth)`` for the lifetime of the document.
    """

    key: str
    path: Path
    num_pages: int
    resolved: Dict[Tuple[int, int, int], Any] = field(default_factory=dict, init=False, repr=False)

    @property
    def page_table(self) -> Sequence[PageRef]:
        raise NotImplementedError

    def resolve_object(self, object_number: int, generation: int) -> Optional[Any]:
        raise NotImplementedError

    def raw_annotations(self, page_number: int) -> Optional[Any]:
        raise NotImplementedError

    def import_page(self, page_number: int, page_box: str = "/CropBox") -> Template:
        raise NotImplementedError

    def metadata(self) -> Mapping[str, str]:
        return {}

    def close(self) -> None:
        """Release the parsed document."""


class PDFBackend(Protocol):
    """Protocol defining backend operations for PDF reading/writing."""

    def load(self, pdf_path: str) -> SourceDocument:
        """Load a PDF file and return a backend document wrapper."""

    def new_writer(self) -> Any:
        """Return a backend writer instance."""

    def stamp(self, writer: Any, template: Template) -> Any:
        """Append a page sized to ``template`` and draw its content at 1:1 scale."""

    def add_link(
        self,
        writer: Any,
        page_index: int,
        rect: Tuple[float, float, float, float],
        *,
        uri: Optional[str] = None,
        target_page_index: Optional[int] = None,
    ) -> None:
        """Register a link annotation; with no target the region is inert."""

    def add_metadata(self, writer: Any, metadata: Mapping[str, str]) -> None:
        """Set document information on the writer."""

    def serialize(self, writer: Any) -> bytes:
        """Return the finished document as bytes."""
