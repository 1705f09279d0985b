"""Page specification parsing for merge entries."""

from __future__ import annotations

import re
from typing import Iterable, Union

from .exceptions import InvalidPageSpecError, InvalidRangeError
from .types import PageSelection

ALL_PAGES = "all"

PageSpec = Union[str, Iterable[int], PageSelection, None]

_NUMBER = re.compile(r"[0-9]+")


def _page_number(value: str, token: str) -> int:
    if not _NUMBER.fullmatch(value):
        raise InvalidPageSpecError(
            f"Invalid page number '{value}' in '{token}'. Expected a positive integer."
        )
    number = int(value)
    if number < 1:
        raise InvalidPageSpecError(
            f"Invalid page number {number} in '{token}'. Page numbers must be >= 1."
        )
    return number


def parse_page_spec(page_spec: str) -> PageSelection:
    """Parse a page specification such as ``"1,3,6, 12-16"`` or ``"all"``.

    Tokens are expanded left to right and concatenated, so ``"12-16,1-5"``
    places pages 12 to 16 before pages 1 to 5. Repeated pages are kept.

    Raises:
        InvalidPageSpecError: If a token is not a positive integer or holds
            more than one hyphen.
        InvalidRangeError: If a ``start-end`` token has ``start > end``.
    """

    if page_spec is None:
        raise InvalidPageSpecError("Page specification cannot be empty")

    normalised = re.sub(r"\s+", "", str(page_spec))
    if not normalised:
        raise InvalidPageSpecError("Page specification cannot be empty")
    if normalised.lower() == ALL_PAGES:
        return PageSelection.all()

    pages: list[int] = []
    for token in normalised.split(","):
        bounds = token.split("-")
        if len(bounds) == 1:
            pages.append(_page_number(token, token))
        elif len(bounds) == 2:
            start = _page_number(bounds[0], token)
            end = _page_number(bounds[1], token)
            if start > end:
                raise InvalidRangeError(
                    f"Starting page, '{start}' is greater than ending page '{end}'."
                )
            pages.extend(range(start, end + 1))
        else:
            raise InvalidPageSpecError(
                f"Invalid page range format: '{token}'. Expected 'start-end'."
            )

    return PageSelection(tuple(pages))


def coerce_selection(pages: PageSpec) -> PageSelection:
    """Return a :class:`PageSelection` for a string, an iterable of ints or a selection."""

    if pages is None:
        return PageSelection.all()
    if isinstance(pages, PageSelection):
        return pages
    if isinstance(pages, str):
        return parse_page_spec(pages)
    if isinstance(pages, int):
        return PageSelection((pages,))
    return PageSelection(tuple(pages))


__all__ = ["ALL_PAGES", "PageSpec", "parse_page_spec", "coerce_selection"]
