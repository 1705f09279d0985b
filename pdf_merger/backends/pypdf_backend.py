"""pypdf backend implementation for PDF Merger."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from pypdf.annotations import Link
from pypdf.errors import PdfReadError, PyPdfError
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NumberObject,
    RectangleObject,
)

from ..exceptions import EncryptedPDFError, InvalidPDFError, PageNotFoundError
from ..types import PageRef
from .base import PDFBackend, SourceDocument, Template

LOGGER = logging.getLogger("pdf_merger.backends")

PAGE_BOXES = {
    "/MediaBox": "mediabox",
    "/CropBox": "cropbox",
    "/BleedBox": "bleedbox",
    "/TrimBox": "trimbox",
    "/ArtBox": "artbox",
}

_METADATA_KEYS = ("/Title", "/Author", "/Subject", "/Keywords")

# Raised by pypdf while lazily parsing page objects of a malformed file.
_PAGE_READ_ERRORS = (PyPdfError, ValueError)


@dataclass
class PypdfDocument(SourceDocument):
    reader: PdfReader
    _page_table: Optional[Tuple[PageRef, ...]] = field(default=None, repr=False)

    @property
    def page_table(self) -> Tuple[PageRef, ...]:
        if self._page_table is None:
            refs = []
            for page in self.reader.pages:
                reference = page.indirect_reference
                if reference is None:  # pragma: no cover - pages read from a file are indirect
                    refs.append(PageRef(-1, -1))
                else:
                    refs.append(PageRef(reference.idnum, reference.generation))
            self._page_table = tuple(refs)
        return self._page_table

    def resolve_object(self, object_number: int, generation: int) -> Optional[Any]:
        try:
            return self.reader.get_object(IndirectObject(object_number, generation, self.reader))
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            LOGGER.debug("Unable to read object %s %s R from %s: %s", object_number, generation, self.path, exc)
            return None

    def _page(self, page_number: int) -> PageObject:
        if not 1 <= page_number <= self.num_pages:
            raise PageNotFoundError(
                f"Impossible to load page '{page_number}' in the PDF called '{self.path}'. "
                f"Check that the page exists (document has {self.num_pages} pages)."
            )
        try:
            return self.reader.pages[page_number - 1]
        except _PAGE_READ_ERRORS as exc:
            raise InvalidPDFError(
                f"Unable to read page {page_number} of {self.path}. Error: {exc}"
            ) from exc

    def raw_annotations(self, page_number: int) -> Optional[Any]:
        page = self._page(page_number)
        try:
            return page.get("/Annots")
        except _PAGE_READ_ERRORS as exc:
            LOGGER.error("Unreadable annotations on page %d of %s: %s", page_number, self.path, exc)
            raise InvalidPDFError(
                f"Unable to read annotations of page {page_number} of {self.path}. Error: {exc}"
            ) from exc

    def import_page(self, page_number: int, page_box: str = "/CropBox") -> Template:
        page = self._page(page_number)

        # The page's own annotations are re-created from extracted links, so
        # the stamped copy must not carry them.
        content = PageObject(self.reader)
        content.update({key: value for key, value in page.items() if key != "/Annots"})

        try:
            box = getattr(page, PAGE_BOXES[page_box])
            return Template(
                width=float(box.width),
                height=float(box.height),
                left=float(box.left),
                bottom=float(box.bottom),
                rotation=int(page.rotation),
                content=content,
            )
        except _PAGE_READ_ERRORS as exc:
            raise InvalidPDFError(
                f"Unable to read the {page_box} of page {page_number} of {self.path}. Error: {exc}"
            ) from exc

    def metadata(self) -> Dict[str, str]:
        metadata = self.reader.metadata
        if not metadata:
            return {}
        return {
            key: str(metadata[key])
            for key in _METADATA_KEYS
            if metadata.get(key) is not None and str(metadata[key]).strip()
        }

    def close(self) -> None:
        self.reader.close()


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, pdf_path: str) -> PypdfDocument:
        path = Path(pdf_path)
        if not path.exists() or not path.is_file():
            raise InvalidPDFError(f"PDF file not found: {pdf_path}")

        try:
            raw_bytes = path.read_bytes()
        except OSError as exc:
            raise InvalidPDFError(f"Unable to read PDF file: {pdf_path}. Error: {exc}") from exc

        try:
            reader = PdfReader(io.BytesIO(raw_bytes))
        except PdfReadError as exc:
            raise InvalidPDFError(f"Corrupted or invalid PDF file: {pdf_path}. Error: {exc}") from exc
        except Exception as exc:
            raise InvalidPDFError(f"Unexpected error reading PDF: {pdf_path}. Error: {exc}") from exc

        if reader.is_encrypted:
            LOGGER.debug("Attempting to decrypt encrypted PDF %s", path)
            try:
                decrypted = reader.decrypt("")
            except Exception as exc:  # pragma: no cover - decrypt errors vary
                raise EncryptedPDFError(f"Unable to decrypt encrypted PDF: {pdf_path}") from exc
            if decrypted == 0:
                raise EncryptedPDFError(f"Encrypted PDF requires a password: {pdf_path}")

        try:
            num_pages = len(reader.pages)
        except PdfReadError as exc:
            raise InvalidPDFError(f"Corrupted page tree in PDF: {pdf_path}. Error: {exc}") from exc
        if num_pages == 0:
            raise InvalidPDFError(f"PDF has no pages: {pdf_path}")

        return PypdfDocument(
            key=str(path.resolve()),
            path=path,
            num_pages=num_pages,
            reader=reader,
        )

    def new_writer(self) -> PdfWriter:
        return PdfWriter()

    def stamp(self, writer: PdfWriter, template: Template) -> PageObject:
        page = writer.add_blank_page(width=template.width, height=template.height)
        if template.content is not None:
            page.merge_transformed_page(
                template.content,
                Transformation().translate(-template.left, -template.bottom),
            )
        if template.rotation:
            page[NameObject("/Rotate")] = NumberObject(template.rotation)
        return page

    def add_link(
        self,
        writer: PdfWriter,
        page_index: int,
        rect: Tuple[float, float, float, float],
        *,
        uri: Optional[str] = None,
        target_page_index: Optional[int] = None,
    ) -> None:
        if uri is not None or target_page_index is not None:
            annotation = Link(rect=rect, url=uri, target_page_index=target_page_index)
        else:
            annotation = DictionaryObject(
                {
                    NameObject("/Type"): NameObject("/Annot"),
                    NameObject("/Subtype"): NameObject("/Link"),
                    NameObject("/Rect"): RectangleObject(rect),
                    NameObject("/Border"): ArrayObject([NumberObject(0)] * 3),
                }
            )
        writer.add_annotation(page_index, annotation)

    def add_metadata(self, writer: PdfWriter, metadata: Mapping[str, str]) -> None:
        if metadata:
            writer.add_metadata(dict(metadata))

    def serialize(self, writer: PdfWriter) -> bytes:
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()
