from __future__ import annotations

import pytest

from pdf_merger.backends.base import Template
from pdf_merger.importer import ImportedPage, MergeBuild, apply_links, transform_rect
from pdf_merger.types import Link, OutputLink, OutputPage, PageJumpTarget, UriTarget
from pdf_merger.writer import to_pdf_rect

MM = 72 / 25.4


def _page(number: int, source: str = "a.pdf", source_page: int = 1, height: float = 792) -> OutputPage:
    return OutputPage(number=number, width=612, height=height, source=source, source_page=source_page)


def test_transform_rect_flips_origin_and_scales() -> None:
    link = Link(x=100, y=200, w=200, h=-50, target=UriTarget("https://a.test"))

    x, y, w, h = transform_rect(link, 792, 2.83)

    assert x == pytest.approx(100 / 2.83)
    assert y == pytest.approx((792 - 200 - 50) / 2.83)
    assert w == pytest.approx(200 / 2.83)
    assert h == pytest.approx(50 / 2.83)


def test_transform_rect_offsets_by_page_box_origin() -> None:
    link = Link(x=100, y=100, w=50, h=-20, target=UriTarget("https://a.test"))

    x, y, w, h = transform_rect(link, 200, 1.0, left=50, bottom=50)

    assert (x, y, w, h) == pytest.approx((50, 130, 50, 20))


def test_to_pdf_rect_recovers_source_rectangle() -> None:
    link = Link(x=100, y=200, w=200, h=-50, target=UriTarget("https://a.test"))
    x, y, w, h = transform_rect(link, 792, MM)

    rect = to_pdf_rect(OutputLink(x=x, y=y, w=w, h=h, uri="https://a.test"), 792, MM)

    assert rect == pytest.approx((100, 200, 300, 250))


def test_placements_remember_first_occurrence() -> None:
    build = MergeBuild(writer=None, scale=1.0)
    build.add_page(_page(1, source_page=3))
    build.add_page(_page(2, source_page=1))
    build.add_page(_page(3, source_page=3))

    assert build.placements[("a.pdf", 3)] == 0
    assert build.placements[("a.pdf", 1)] == 1


def test_bind_anchors_points_at_first_occurrence_and_counts_unbound() -> None:
    build = MergeBuild(writer=None, scale=1.0)
    build.add_page(_page(1, source_page=2))
    build.add_page(_page(2, source_page=1))
    build.add_page(_page(3, source_page=2))
    included = build.new_anchor("a.pdf", 2)
    excluded = build.new_anchor("a.pdf", 9)
    other_document = build.new_anchor("b.pdf", 1)

    unbound = build.bind_anchors()

    assert unbound == 2
    assert included.output_page == 0
    assert not excluded.is_bound
    assert not other_document.is_bound
    assert [anchor.handle for anchor in build.output.anchors] == [1, 2, 3]


def test_apply_links_allocates_one_anchor_per_page_jump() -> None:
    build = MergeBuild(writer=None, scale=1.0)
    page = _page(1)
    build.add_page(page)
    links = [
        Link(x=10, y=10, w=10, h=-10, target=UriTarget("https://a.test")),
        Link(x=10, y=30, w=10, h=-10, target=PageJumpTarget(1)),
        Link(x=10, y=50, w=10, h=-10, target=PageJumpTarget(1)),
    ]

    applied = apply_links(build, ImportedPage(page=page, template=Template(612, 792), links=links))

    assert [link.uri for link in applied] == ["https://a.test", None, None]
    assert applied[1].anchor is not applied[2].anchor
    assert len(build.output.anchors) == 2
    assert page.links == applied
    assert build.output.link_count == 3


def test_unbound_anchor_link_is_inert() -> None:
    build = MergeBuild(writer=None, scale=1.0)
    page = _page(1)
    build.add_page(page)
    apply_links(
        build,
        ImportedPage(
            page=page,
            template=Template(612, 792),
            links=[Link(x=0, y=0, w=5, h=-5, target=PageJumpTarget(4))],
        ),
    )

    build.bind_anchors()

    assert page.links[0].is_inert
