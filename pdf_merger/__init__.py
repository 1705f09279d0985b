"""
PDF Merger - Merge PDF files, or selected pages of them, keeping their links.

Pages are copied in the order requested. External URI links and internal
"go to page" links found on the copied pages are re-created in the merged
document; internal links follow their target page to wherever it landed.

Quick Start:
    >>> from pdf_merger import PDFMerger
    >>> merger = PDFMerger()
    >>> merger.add_document('a.pdf', '1,3,6, 12-16').add_document('b.pdf')
    >>> merger.merge('file', 'merged.pdf')

Main Classes:
    - PDFMerger: Collects documents and page selections, then merges them
    - MergeOptions: Units, page box, metadata and resolver settings

Exceptions:
    - PDFMergerException: Base exception
    - PDFFileNotFoundError: Source file does not exist
    - InvalidPageSpecError / InvalidRangeError: Malformed page selection
    - PageNotFoundError: Selected page missing from its document
    - NoDocumentsAddedError: Merge requested with nothing to merge
    - WriteFailureError: Output could not be written

For CLI usage, use the 'pdf-merger' command after installation.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple, Union

from pdf_merger.backends import PypdfBackend
from pdf_merger.config import MergeOptions
from pdf_merger.exceptions import (
    EncryptedPDFError,
    InvalidOptionError,
    InvalidPageSpecError,
    InvalidPDFError,
    InvalidRangeError,
    NoDocumentsAddedError,
    PageImportError,
    PageNotFoundError,
    PDFFileNotFoundError,
    PDFMergerException,
    WriteFailureError,
)
from pdf_merger.links import collect_page_links, extract_links_from_annotations, find_page_number
from pdf_merger.merger import MergeEntry, PDFMerger
from pdf_merger.objects import DEFAULT_MAX_DEPTH, resolve
from pdf_merger.pages import PageSpec, coerce_selection, parse_page_spec
from pdf_merger.types import (
    Link,
    MergeOutput,
    MergeState,
    OutputLink,
    OutputMode,
    OutputPage,
    PageJumpTarget,
    PageSelection,
    UriTarget,
)
from pdf_merger.utils import PathLike, ensure_path

__version__ = "1.0.0"
__author__ = "PDF Merger CLI Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "PDFMerger",
    "MergeEntry",
    "MergeOptions",
    # Data types
    "PageSelection",
    "Link",
    "UriTarget",
    "PageJumpTarget",
    "OutputLink",
    "OutputPage",
    "MergeOutput",
    "MergeState",
    "OutputMode",
    # Exceptions
    "PDFMergerException",
    "PDFFileNotFoundError",
    "InvalidPageSpecError",
    "InvalidRangeError",
    "PageNotFoundError",
    "NoDocumentsAddedError",
    "WriteFailureError",
    "InvalidPDFError",
    "EncryptedPDFError",
    "PageImportError",
    "InvalidOptionError",
    # Functions
    "parse_page_spec",
    "resolve",
    "extract_links_from_annotations",
    "find_page_number",
    "merge_documents",
    "extract_links",
    "DEFAULT_MAX_DEPTH",
    "__version__",
]


def merge_documents(
    entries: Iterable[Union[PathLike, Tuple[PathLike, PageSpec]]],
    output: PathLike,
    **options: object,
):
    """Merge ``entries`` into ``output`` and return the written path.

    Each entry is either a path (all pages) or a ``(path, pages)`` pair.
    Keyword arguments are passed to :class:`MergeOptions`.
    """

    merger = PDFMerger(MergeOptions.from_mapping(options))
    for entry in entries:
        if isinstance(entry, tuple):
            path, pages = entry
            merger.add_document(path, pages)
        else:
            merger.add_document(entry)
    return merger.merge(OutputMode.FILE, output)


def extract_links(
    path: PathLike,
    pages: PageSpec = "all",
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[Tuple[int, Link]]:
    """Return ``(page_number, link)`` pairs for the links on the selected pages of ``path``."""

    pdf_path = ensure_path(path)
    if not pdf_path.is_file():
        raise PDFFileNotFoundError(f"Could not locate PDF on '{path}'")
    selection = coerce_selection(pages)

    document = PypdfBackend().load(str(pdf_path))
    try:
        found: List[Tuple[int, Link]] = []
        for page_number in selection.expand(document.num_pages):
            for link in collect_page_links(document, page_number, max_depth=max_depth):
                found.append((page_number, link))
        return found
    finally:
        document.close()
