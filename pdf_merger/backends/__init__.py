"""Backend abstractions for PDF Merger."""

from .base import PDFBackend, SourceDocument, Template
from .pypdf_backend import PypdfBackend, PypdfDocument

__all__ = [
    "PDFBackend",
    "SourceDocument",
    "Template",
    "PypdfBackend",
    "PypdfDocument",
]
