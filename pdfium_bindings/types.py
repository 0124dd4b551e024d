"""
Type definitions and dataclasses for pdfium-bindings.

Field order on each record matches the order in which the producing native
call reports its values.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnnotationRect:
    """
    Rectangle of an annotation in page coordinates.

    The values are reported as-is; ``left < right`` and ``bottom < top`` are
    not enforced.
    """
    left: float
    bottom: float
    right: float
    top: float


@dataclass(frozen=True)
class CharBox:
    """Bounding box of a single character, in ``FPDFText_GetCharBox`` order."""
    left: float
    right: float
    bottom: float
    top: float


@dataclass(frozen=True)
class TextRange:
    """A run of characters on a text page."""
    start_index: int
    count: int


@dataclass(frozen=True)
class Annotation:
    """
    Snapshot of one annotation read from a page.

    Attributes:
        page: Zero-based page index
        index: Zero-based index of the annotation on its page
        subtype: Subtype name, e.g. ``"HIGHLIGHT"`` or ``"UNKNOWN_42"``
        subtype_code: Raw subtype value reported by PDFium
        rect: Annotation rectangle
        contents: Value of the ``/Contents`` key, empty if absent
    """
    page: int
    index: int
    subtype: str
    subtype_code: int
    rect: AnnotationRect
    contents: str = ""

    def __str__(self) -> str:
        return f"Annotation(page={self.page}, index={self.index}, subtype={self.subtype})"
