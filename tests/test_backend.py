from __future__ import annotations

from dataclasses import fields
from pathlib import Path

import pytest
from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import RectangleObject

from pdf_merger import EncryptedPDFError, InvalidPDFError, PageNotFoundError, extract_links
from pdf_merger.backends import PypdfBackend, Template
from pdf_merger.links import collect_page_links


def test_load_reports_pages_and_page_table(pdf_factory) -> None:
    path = pdf_factory("three.pdf", pages=3, title="Three")

    document = PypdfBackend().load(str(path))
    try:
        assert document.num_pages == 3
        assert len(document.page_table) == 3
        assert len(set(document.page_table)) == 3
        assert document.metadata() == {"/Title": "Three"}
        assert document.key == str(path.resolve())
        assert [item.name for item in fields(document) if item.init] == [
            "key",
            "path",
            "num_pages",
            "reader",
            "_page_table",
        ]
        assert document.resolved == {}
    finally:
        document.close()


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InvalidPDFError):
        PypdfBackend().load(str(tmp_path / "missing.pdf"))


def test_load_rejects_garbage(tmp_path: Path) -> None:
    path = tmp_path / "garbage.pdf"
    path.write_bytes(b"this is not a pdf")

    with pytest.raises(InvalidPDFError):
        PypdfBackend().load(str(path))


def test_load_rejects_password_protected_pdf(tmp_path: Path) -> None:
    path = tmp_path / "locked.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.encrypt(user_password="secret", algorithm="RC4-128")
    with path.open("wb") as handle:
        writer.write(handle)

    with pytest.raises(EncryptedPDFError):
        PypdfBackend().load(str(path))


def test_import_page_out_of_range(pdf_factory) -> None:
    document = PypdfBackend().load(str(pdf_factory("one.pdf")))
    try:
        with pytest.raises(PageNotFoundError):
            document.import_page(2)
        with pytest.raises(PageNotFoundError):
            document.import_page(0)
    finally:
        document.close()


def test_import_page_measures_selected_box(tmp_path: Path) -> None:
    path = tmp_path / "cropped.pdf"
    writer = PdfWriter()
    page = writer.add_blank_page(width=300, height=400)
    page.cropbox = RectangleObject([50, 60, 250, 360])
    page.rotate(90)
    with path.open("wb") as handle:
        writer.write(handle)

    document = PypdfBackend().load(str(path))
    try:
        cropped = document.import_page(1)
        full = document.import_page(1, "/MediaBox")
    finally:
        document.close()

    assert (cropped.width, cropped.height, cropped.left, cropped.bottom) == (200, 300, 50, 60)
    assert (full.width, full.height, full.left, full.bottom) == (300, 400, 0, 0)
    assert cropped.rotation == 90
    assert "/Annots" not in cropped.content


def test_stamp_and_links_round_trip_through_writer(tmp_path: Path) -> None:
    backend = PypdfBackend()
    writer = backend.new_writer()

    backend.stamp(writer, Template(width=200, height=100))
    backend.stamp(writer, Template(width=200, height=100))
    backend.add_link(writer, 0, (10, 10, 50, 30), uri="https://a.test")
    backend.add_link(writer, 0, (10, 40, 50, 60), target_page_index=1)
    backend.add_link(writer, 1, (10, 10, 50, 30))
    backend.add_metadata(writer, {"/Title": "Stamped"})

    data = backend.serialize(writer)
    out = tmp_path / "stamped.pdf"
    out.write_bytes(data)
    reader = PdfReader(str(out))

    assert len(reader.pages) == 2
    assert reader.metadata.title == "Stamped"
    first = [annot.get_object() for annot in reader.pages[0]["/Annots"]]
    assert first[0]["/A"]["/URI"] == "https://a.test"
    assert first[1]["/Dest"][0].indirect_reference.idnum == reader.pages[1].indirect_reference.idnum
    inert = reader.pages[1]["/Annots"][0].get_object()
    assert inert["/Subtype"] == "/Link"
    assert "/A" not in inert and "/Dest" not in inert


def _break_annotations(monkeypatch) -> None:
    original = PageObject.get

    def get(self, key, default=None):
        if key == "/Annots":
            raise PdfReadError("Invalid /Annots entry")
        return original(self, key, default)

    monkeypatch.setattr(PageObject, "get", get)


def test_unreadable_annotations_raise_invalid_pdf(linked_pdf: Path, monkeypatch) -> None:
    document = PypdfBackend().load(str(linked_pdf))
    _break_annotations(monkeypatch)
    try:
        with pytest.raises(InvalidPDFError) as excinfo:
            document.raw_annotations(1)
    finally:
        document.close()

    assert "annotations of page 1" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, PdfReadError)


def test_extract_links_reports_unreadable_annotations(linked_pdf: Path, monkeypatch) -> None:
    _break_annotations(monkeypatch)

    with pytest.raises(InvalidPDFError):
        extract_links(linked_pdf)


def test_collected_links_fill_the_document_cache(linked_pdf: Path) -> None:
    document = PypdfBackend().load(str(linked_pdf))
    try:
        first = collect_page_links(document, 1)
        cached = len(document.resolved)
        second = collect_page_links(document, 1)
    finally:
        document.close()

    assert cached > 0
    assert len(document.resolved) == cached
    assert first == second
