"""Capability table: the native PDFium operations the binding depends on."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ..marshal import Buffer, CharBoxBuffer, FSRectF, TextRangeBuffer

# Opaque native reference. Falsy values (``None`` for ctypes NULL) mean null.
NativeRef = Any


class PdfiumBackend(Protocol):
    """Protocol listing every PDFium function the binding calls.

    Variable-size getters (``get_annot_string_value``, ``get_text``,
    ``get_url``) take a destination buffer and its size in bytes. Called with
    ``buffer=None`` they return the required size in bytes; with a buffer they
    return the number of bytes written. Both sizes include the two-byte
    UTF-16 terminator.

    Fixed-shape getters fill the given structure and return a truthy value on
    success.
    """

    def supports(self, operation: str) -> bool:
        """Return whether the native symbol ``operation`` is available."""

    # Library lifecycle
    def init_library(self) -> None:
        """Initialise the native library for this process."""

    def destroy_library(self) -> None:
        """Release process-wide native state."""

    # Documents
    def get_last_error(self) -> int:
        """Return the last error code set by a failed load."""

    def load_document(self, path: bytes, password: Optional[bytes]) -> NativeRef:
        """Open a document from a file path."""

    def load_mem_document(self, data: bytes, password: Optional[bytes]) -> NativeRef:
        """Open a document from an in-memory buffer."""

    def close_document(self, document: NativeRef) -> None:
        """Release a document reference."""

    def get_page_count(self, document: NativeRef) -> int:
        """Return the number of pages in ``document``."""

    # Pages
    def load_page(self, document: NativeRef, index: int) -> NativeRef:
        """Load the zero-based page ``index``."""

    def close_page(self, page: NativeRef) -> None:
        """Release a page reference."""

    def get_page_width(self, page: NativeRef) -> float:
        """Return the page width in points."""

    def get_page_height(self, page: NativeRef) -> float:
        """Return the page height in points."""

    # Annotations
    def get_annot_count(self, page: NativeRef) -> int:
        """Return the number of annotations on ``page``."""

    def get_annot(self, page: NativeRef, index: int) -> NativeRef:
        """Return the annotation at ``index``."""

    def close_annot(self, annot: NativeRef) -> None:
        """Release an annotation reference."""

    def get_annot_subtype(self, annot: NativeRef) -> int:
        """Return the annotation subtype code."""

    def get_annot_rect(self, annot: NativeRef, rect: FSRectF) -> bool:
        """Fill ``rect`` with the annotation rectangle."""

    def annot_has_key(self, annot: NativeRef, key: bytes) -> bool:
        """Return whether the annotation dictionary has ``key``."""

    def get_annot_string_value(self, annot: NativeRef, key: bytes, buffer: Buffer, buflen: int) -> int:
        """Read the string value stored under ``key``."""

    # Text pages
    def load_text_page(self, page: NativeRef) -> NativeRef:
        """Prepare text information for ``page``."""

    def close_text_page(self, text_page: NativeRef) -> None:
        """Release a text page reference."""

    def count_chars(self, text_page: NativeRef) -> int:
        """Return the number of characters, or -1 on error."""

    def get_text(self, text_page: NativeRef, start_index: int, count: int, buffer: Buffer, buflen: int) -> int:
        """Read ``count`` characters starting at ``start_index``."""

    def get_char_box(self, text_page: NativeRef, index: int, box: CharBoxBuffer) -> bool:
        """Fill ``box`` with the bounding box of character ``index``."""

    def get_char_index_at_pos(
        self,
        text_page: NativeRef,
        x: float,
        y: float,
        x_tolerance: float,
        y_tolerance: float,
    ) -> int:
        """Return the character index at a position, or -1."""

    # Search
    def find_start(self, text_page: NativeRef, needle: Any, flags: int, start_index: int) -> NativeRef:
        """Start a search for the NUL-terminated UTF-16 ``needle``."""

    def find_next(self, search: NativeRef) -> bool:
        """Advance to the next match."""

    def find_prev(self, search: NativeRef) -> bool:
        """Step back to the previous match."""

    def get_search_result_index(self, search: NativeRef) -> int:
        """Return the start index of the current match."""

    def get_search_result_count(self, search: NativeRef) -> int:
        """Return the length of the current match."""

    def find_close(self, search: NativeRef) -> None:
        """Release a search reference."""

    # Web links
    def load_web_links(self, text_page: NativeRef) -> NativeRef:
        """Detect URL-like text on ``text_page``."""

    def close_web_links(self, links: NativeRef) -> None:
        """Release a web link reference."""

    def count_web_links(self, links: NativeRef) -> int:
        """Return the number of detected links."""

    def get_url(self, links: NativeRef, index: int, buffer: Buffer, buflen: int) -> int:
        """Read the URL of link ``index``."""

    def get_text_range(self, links: NativeRef, index: int, text_range: TextRangeBuffer) -> bool:
        """Fill ``text_range`` with the character range of link ``index``."""
