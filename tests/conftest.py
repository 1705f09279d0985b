from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfWriter
from pypdf.annotations import Link, Text
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    NameObject,
    RectangleObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

URI_RECT = (100, 200, 300, 250)
DEST_RECT = (50, 50, 150, 80)
GOTO_RECT = (20, 700, 220, 730)
TARGET_URI = "https://example.com/docs?page=1"


def goto_link(writer: PdfWriter, rect: Sequence[float], target_index: int) -> DictionaryObject:
    """Link annotation with an explicit ``/A << /S /GoTo /D [...] >>`` action."""
    return DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Link"),
            NameObject("/Rect"): RectangleObject(rect),
            NameObject("/A"): DictionaryObject(
                {
                    NameObject("/S"): NameObject("/GoTo"),
                    NameObject("/D"): ArrayObject(
                        [writer.pages[target_index].indirect_reference, NameObject("/Fit")]
                    ),
                }
            ),
        }
    )


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(
        filename: str,
        pages: int = 1,
        title: str | None = None,
        widths: Sequence[float] | None = None,
    ) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        page_widths = list(widths) if widths is not None else [72] * pages
        for width in page_widths:
            writer.add_blank_page(width=width, height=72)
        if title is not None:
            writer.add_metadata({"/Title": title})
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def linked_pdf(tmp_path: Path) -> Path:
    """Three letter-sized pages.

    Page 1: URI link, plus a ``/Dest`` link to page 3.
    Page 2: ``/GoTo`` action link to page 1.
    Page 3: a text note and a link with an empty URI.
    """
    path = tmp_path / "linked.pdf"
    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=612, height=792)

    writer.add_annotation(0, Link(rect=URI_RECT, url=TARGET_URI))
    writer.add_annotation(0, Link(rect=DEST_RECT, target_page_index=2))
    writer.add_annotation(1, goto_link(writer, GOTO_RECT, 0))
    writer.add_annotation(2, Text(rect=(10, 10, 30, 30), text="note"))
    writer.add_annotation(2, Link(rect=(10, 40, 30, 60), url="   "))
    writer.add_metadata({"/Title": "Linked Source", "/Author": "Test Author"})

    with path.open("wb") as handle:
        writer.write(handle)
    return path
