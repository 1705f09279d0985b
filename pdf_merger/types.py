"""
Type definitions and dataclasses for PDF Merger.

This module defines data structures shared by the page parser, the link
extractor, the import engine and the output writer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

from .exceptions import InvalidPageSpecError


@dataclass(frozen=True)
class PageSelection:
    """
    Ordered selection of 1-based page numbers from one source document.

    ``pages`` is ``None`` for the "all pages" selection. Otherwise it is a
    non-empty tuple in output order; repeats are allowed.
    """
    pages: Optional[Tuple[int, ...]] = None

    def __post_init__(self) -> None:
        if self.pages is None:
            return
        if not self.pages:
            raise InvalidPageSpecError("Page selection cannot be empty.")
        for page in self.pages:
            if isinstance(page, bool) or not isinstance(page, int) or page < 1:
                raise InvalidPageSpecError(
                    f"Invalid page number: {page!r}. Page numbers must be >= 1."
                )

    @classmethod
    def all(cls) -> "PageSelection":
        return cls(None)

    @property
    def is_all(self) -> bool:
        return self.pages is None

    def expand(self, page_count: int) -> List[int]:
        """Return the concrete page list for a document with ``page_count`` pages."""
        if self.pages is None:
            return list(range(1, page_count + 1))
        return list(self.pages)

    def __str__(self) -> str:
        if self.pages is None:
            return "all"
        return ",".join(str(page) for page in self.pages)


class PageRef(NamedTuple):
    """Object identity of a page in its source document's page table."""
    object_number: int
    generation: int


@dataclass(frozen=True)
class UriTarget:
    """External link target."""
    uri: str


@dataclass(frozen=True)
class PageJumpTarget:
    """Internal link target, as a 1-based page index in the source document."""
    page_number: int


LinkTarget = Union[UriTarget, PageJumpTarget]


@dataclass(frozen=True)
class Link:
    """
    Hyperlink discovered on a source page.

    Attributes:
        x: Left edge in source page space
        y: Lower edge in source page space
        w: Width (``x2 - x``)
        h: Negated height (``-(y2 - y)``), flipped for top-left page origin
        target: Where the link points
    """
    x: float
    y: float
    w: float
    h: float
    target: LinkTarget


@dataclass
class Anchor:
    """
    Internal navigation target allocated in the output document.

    The anchor remembers which source page it stands for; ``output_page`` is
    filled in once the whole merge job is known.
    """
    handle: int
    document: str
    source_page: int
    output_page: Optional[int] = None

    @property
    def is_bound(self) -> bool:
        return self.output_page is not None


@dataclass
class OutputLink:
    """A link registered on an output page, in output-document units."""
    x: float
    y: float
    w: float
    h: float
    uri: Optional[str] = None
    anchor: Optional[Anchor] = None

    @property
    def is_inert(self) -> bool:
        return self.uri is None and (self.anchor is None or not self.anchor.is_bound)


@dataclass
class OutputPage:
    """
    A page of the merged document.

    Attributes:
        number: 1-based position in the output
        width: Page width in points
        height: Page height in points
        source: Key of the source document
        source_page: 1-based page number in the source document
        links: Links applied to this page
    """
    number: int
    width: float
    height: float
    source: str
    source_page: int
    links: List[OutputLink] = field(default_factory=list)


@dataclass
class MergeOutput:
    """Ordered output pages plus document-level metadata."""
    pages: List[OutputPage] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    anchors: List[Anchor] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def link_count(self) -> int:
        return sum(len(page.links) for page in self.pages)


class MergeState(Enum):
    EMPTY = "empty"
    BUILDING = "building"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class OutputMode(Enum):
    """Destination of the merged document."""

    FILE = "F"
    BUFFER = "S"
    INLINE = "I"
    DOWNLOAD = "D"

    @classmethod
    def from_value(cls, value: Union[str, "OutputMode"]) -> "OutputMode":
        """Map descriptive names (``file``, ``string``, ``browser``...) to a mode.

        Unknown names fall back to :attr:`INLINE`.
        """
        if isinstance(value, OutputMode):
            return value
        return _MODE_ALIASES.get(str(value).strip().lower(), cls.INLINE)

    @classmethod
    def is_known(cls, value: Union[str, "OutputMode"]) -> bool:
        return isinstance(value, OutputMode) or str(value).strip().lower() in _MODE_ALIASES


_MODE_ALIASES = {
    "file": OutputMode.FILE,
    "f": OutputMode.FILE,
    "string": OutputMode.BUFFER,
    "buffer": OutputMode.BUFFER,
    "bytes": OutputMode.BUFFER,
    "s": OutputMode.BUFFER,
    "browser": OutputMode.INLINE,
    "inline": OutputMode.INLINE,
    "i": OutputMode.INLINE,
    "download": OutputMode.DOWNLOAD,
    "d": OutputMode.DOWNLOAD,
}
