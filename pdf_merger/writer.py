"""Serialization of a finished merge to a file, a buffer or an HTTP response."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple, Union

from fastapi.responses import Response

from .backends.base import PDFBackend
from .exceptions import WriteFailureError
from .importer import MergeBuild
from .types import OutputLink, OutputMode
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdf_merger.writer")

MergeResult = Union[Path, bytes, Response]

DEFAULT_FILENAME = "newfile.pdf"


def to_pdf_rect(link: OutputLink, page_height: float, scale: float) -> Tuple[float, float, float, float]:
    """Convert a top-left-origin rectangle in output units back to PDF user space."""

    llx = link.x * scale
    ury = page_height - link.y * scale
    urx = llx + link.w * scale
    lly = ury - link.h * scale
    return (min(llx, urx), min(lly, ury), max(llx, urx), max(lly, ury))


def _filename(destination: PathLike) -> str:
    name = Path(str(destination)).name if destination else ""
    name = name.replace('"', "")
    return name or DEFAULT_FILENAME


def _write_atomic(output_path: Path, data: bytes) -> None:
    """Write ``data`` next to ``output_path`` and move it into place.

    The destination either keeps its previous content or receives the whole
    document; a failed write never leaves a truncated file behind.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", delete=False, dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp"
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(data)
        os.replace(temp_path, output_path)
    except OSError:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


class OutputWriter:
    """Finalizes a :class:`MergeBuild` and emits it to the requested destination."""

    def __init__(self, backend: PDFBackend) -> None:
        self.backend = backend

    def _apply_links(self, build: MergeBuild) -> None:
        for index, page in enumerate(build.output.pages):
            for link in page.links:
                rect = to_pdf_rect(link, page.height, build.scale)
                if link.uri is not None:
                    self.backend.add_link(build.writer, index, rect, uri=link.uri)
                elif link.anchor is not None and link.anchor.is_bound:
                    self.backend.add_link(
                        build.writer, index, rect, target_page_index=link.anchor.output_page
                    )
                else:
                    self.backend.add_link(build.writer, index, rect)

    def render(self, build: MergeBuild) -> bytes:
        """Return the merged document as bytes."""
        self._apply_links(build)
        self.backend.add_metadata(build.writer, build.output.metadata)
        try:
            return self.backend.serialize(build.writer)
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            LOGGER.error("Failed to serialize merged PDF: %s", exc)
            raise WriteFailureError(f"Failed to serialize merged PDF: {exc}") from exc

    def write(self, build: MergeBuild, mode: OutputMode, destination: PathLike) -> MergeResult:
        """Emit the merged document.

        ``FILE`` writes ``destination`` and returns its path, ``BUFFER``
        returns the bytes, ``INLINE`` and ``DOWNLOAD`` return an HTTP
        response whose ``Content-Disposition`` names ``destination``.
        """
        data = self.render(build)

        if mode is OutputMode.FILE:
            output_path = ensure_path(destination)
            try:
                _write_atomic(output_path, data)
            except OSError as exc:
                LOGGER.error("Failed to write merged PDF to %s: %s", output_path, exc)
                raise WriteFailureError(
                    f"Error outputting PDF to '{output_path}': {exc}"
                ) from exc
            return output_path

        if mode is OutputMode.BUFFER:
            return data

        disposition = "inline" if mode is OutputMode.INLINE else "attachment"
        return Response(
            content=data,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'{disposition}; filename="{_filename(destination)}"',
            },
        )


__all__ = ["OutputWriter", "MergeResult", "to_pdf_rect"]
