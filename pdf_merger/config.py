"""Configuration for merge runs."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from .backends.pypdf_backend import PAGE_BOXES
from .exceptions import InvalidOptionError
from .objects import DEFAULT_MAX_DEPTH

# Points per user unit, as in FPDF.
UNIT_SCALES: Dict[str, float] = {
    "pt": 1.0,
    "mm": 72 / 25.4,
    "cm": 72 / 2.54,
    "in": 72.0,
}

DEFAULT_PRODUCER = "PDF Merger CLI"

_METADATA_KEY_MAP = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
}


def _normalise_box(value: str) -> str:
    text = str(value).strip()
    if not text.startswith("/"):
        text = "/" + text
    for box in PAGE_BOXES:
        if box.lower() == text.lower():
            return box
    raise InvalidOptionError(
        f"Unknown page box '{value}'. Expected one of: {', '.join(PAGE_BOXES)}."
    )


@dataclass(frozen=True)
class MergeOptions:
    """
    Options controlling a merge run.

    Attributes:
        unit: Output document unit; fixes the scale factor ``k``
        page_box: Page box used to size imported pages
        max_depth: Recursion budget when resolving annotation objects
        copy_metadata: Copy Title/Author/Subject/Keywords from the first source
        document_info: Explicit metadata, overriding copied metadata
        producer: ``/Producer`` written into the output
    """
    unit: str = "mm"
    page_box: str = "/CropBox"
    max_depth: int = DEFAULT_MAX_DEPTH
    copy_metadata: bool = True
    document_info: Optional[Mapping[str, Any]] = None
    producer: Optional[str] = DEFAULT_PRODUCER

    def __post_init__(self) -> None:
        unit = str(self.unit).strip().lower()
        if unit not in UNIT_SCALES:
            raise InvalidOptionError(
                f"Unknown unit '{self.unit}'. Expected one of: {', '.join(UNIT_SCALES)}."
            )
        object.__setattr__(self, "unit", unit)
        object.__setattr__(self, "page_box", _normalise_box(self.page_box))
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise InvalidOptionError(f"max_depth must be a positive integer, got {self.max_depth!r}.")

    @property
    def scale(self) -> float:
        """Points per output unit (``k``)."""
        return UNIT_SCALES[self.unit]

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]]) -> "MergeOptions":
        """Build options from a plain mapping, ignoring ``None`` values."""
        if not config:
            return cls()
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise InvalidOptionError(f"Unknown merge option(s): {', '.join(unknown)}.")
        return cls(**{key: value for key, value in config.items() if value is not None})

    def metadata_for(self, source_metadata: Optional[Mapping[str, str]]) -> Dict[str, str]:
        """Return the document information to write into the merged PDF."""
        metadata: Dict[str, str] = {}
        if self.document_info:
            for key, value in self.document_info.items():
                if value is None:
                    continue
                string_value = str(value).strip()
                if not string_value:
                    continue
                pdf_key = _METADATA_KEY_MAP.get(str(key).lower())
                if pdf_key is None:
                    pdf_key = key if str(key).startswith("/") else f"/{key}"
                metadata[pdf_key] = string_value
        elif self.copy_metadata and source_metadata:
            metadata.update(source_metadata)

        if self.producer:
            metadata.setdefault("/Producer", self.producer)
        return metadata


__all__ = ["MergeOptions", "UNIT_SCALES", "DEFAULT_PRODUCER"]
