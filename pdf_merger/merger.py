"""Merge orchestration: ordered page selection from several source PDFs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from .backends import PypdfBackend
from .backends.base import PDFBackend, SourceDocument
from .config import MergeOptions
from .exceptions import NoDocumentsAddedError, PDFFileNotFoundError
from .importer import MergeBuild, PageImporter, apply_links
from .pages import PageSpec, coerce_selection
from .types import MergeOutput, MergeState, OutputMode, PageSelection
from .utils import PathLike, ensure_path
from .writer import MergeResult, OutputWriter

LOGGER = logging.getLogger("pdf_merger.merge")


@dataclass(frozen=True)
class MergeEntry:
    """One source document and the pages to take from it."""

    path: Path
    selection: PageSelection


class PDFMerger:
    """Merge PDFs, or selected pages of PDFs, into one document.

    Documents are merged in the order they are added, and pages in the
    order given, so pages ``12-14`` listed before ``1-5`` come first in the
    output. External and internal hyperlinks on the copied pages are kept;
    internal links are pointed at the target page's first position in the
    merged document.

    Example:
        >>> merger = PDFMerger()
        >>> merger.add_document("report.pdf", "1-3").add_document("appendix.pdf")
        >>> merger.merge("file", "combined.pdf")
    """

    def __init__(
        self,
        options: Optional[MergeOptions] = None,
        *,
        backend: Optional[PDFBackend] = None,
    ) -> None:
        self.options = options or MergeOptions()
        self.backend: PDFBackend = backend or PypdfBackend()
        self._entries: List[MergeEntry] = []
        self._build: Optional[MergeBuild] = None

    @property
    def entries(self) -> List[MergeEntry]:
        return list(self._entries)

    @property
    def state(self) -> MergeState:
        if self._build is not None:
            return self._build.state
        return MergeState.BUILDING if self._entries else MergeState.EMPTY

    @property
    def last_output(self) -> Optional[MergeOutput]:
        """Pages, links and metadata of the most recent merge run."""
        return self._build.output if self._build is not None else None

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._build.error if self._build is not None else None

    def add_document(self, path: PathLike, pages: PageSpec = "all") -> "PDFMerger":
        """Add a PDF to the merge. Pages are formatted like ``"1,3,6, 12-16"``.

        Raises:
            PDFFileNotFoundError: If ``path`` is not an existing file.
            InvalidPageSpecError: If ``pages`` is malformed.
            InvalidRangeError: If a range in ``pages`` runs backwards.
        """
        pdf_path = ensure_path(path)
        if not pdf_path.is_file():
            LOGGER.error("Could not locate PDF %s", path)
            raise PDFFileNotFoundError(f"Could not locate PDF on '{path}'")

        selection = coerce_selection(pages)
        self._entries.append(MergeEntry(path=pdf_path, selection=selection))
        if self._build is not None and self._build.state in (MergeState.DONE, MergeState.FAILED):
            self._build = None
        LOGGER.debug("Added %s (pages=%s)", pdf_path, selection)
        return self

    def _open(self, documents: Dict[Path, SourceDocument], path: Path) -> SourceDocument:
        document = documents.get(path)
        if document is None:
            LOGGER.debug("Opening source PDF %s", path)
            document = self.backend.load(str(path))
            documents[path] = document
        return document

    def merge(
        self,
        output_mode: Union[str, OutputMode] = OutputMode.FILE,
        destination: PathLike = "newfile.pdf",
    ) -> MergeResult:
        """Merge the added documents and emit the result.

        Args:
            output_mode: ``file``, ``string``/``buffer``, ``browser``/``inline``
                or ``download`` (or an :class:`OutputMode`).
            destination: Output path for ``file``; the suggested filename
                for the HTTP modes.

        Returns:
            The written path, the document bytes, or an HTTP response,
            depending on ``output_mode``.

        Raises:
            NoDocumentsAddedError: If no document was added.
            PageNotFoundError: If a selected page is missing; nothing is
                written.
            WriteFailureError: If the destination cannot accept the output.
        """
        if not self._entries:
            raise NoDocumentsAddedError("No PDFs to merge.")

        if not OutputMode.is_known(output_mode):
            LOGGER.warning("Unknown output mode %r; sending inline", output_mode)
        mode = OutputMode.from_value(output_mode)

        build = MergeBuild(writer=self.backend.new_writer(), scale=self.options.scale)
        self._build = build
        importer = PageImporter(self.backend, self.options)
        documents: Dict[Path, SourceDocument] = {}

        try:
            source_metadata = None
            for entry in self._entries:
                document = self._open(documents, entry.path)
                if source_metadata is None:
                    source_metadata = document.metadata()
                for page_number in entry.selection.expand(document.num_pages):
                    imported = importer.import_page(build, document, page_number)
                    apply_links(build, imported)

            build.state = MergeState.FINALIZING
            build.bind_anchors()
            build.output.metadata = self.options.metadata_for(source_metadata)
            result = OutputWriter(self.backend).write(build, mode, destination)
        except Exception as exc:
            build.state = MergeState.FAILED
            build.error = exc
            LOGGER.error("Merge failed: %s", exc)
            raise
        finally:
            for document in documents.values():
                document.close()

        build.state = MergeState.DONE
        LOGGER.info(
            "Merged %d page(s) from %d document(s) with %d link(s)",
            build.output.page_count,
            len(documents),
            build.output.link_count,
        )
        return result


__all__ = ["PDFMerger", "MergeEntry"]
