"""
Text extraction, search, selection and link detection on a page.

A :class:`TextPage` is derived from an open :class:`~pdfium_bindings.document.Page`.
Searches, selections and link sets derived from a text page must not be used
after the text page is closed.
"""

from __future__ import annotations

import logging
from typing import Optional

from .backends.base import PdfiumBackend
from .codes import error_message_for_code, search_flags
from .document import Page
from .exceptions import InvalidArgumentError, OperationError
from .handles import HandleKind, NativeHandle
from .marshal import CharBoxBuffer, TextRangeBuffer, encode_utf16, read_struct, read_utf16_string
from .types import CharBox, TextRange

LOGGER = logging.getLogger(__name__)

NO_MATCH_INDEX = -1


class TextPage:
    """Character-level access to the text of one page."""

    def __init__(self, backend: PdfiumBackend, handle: NativeHandle, page_index: Optional[int] = None) -> None:
        self.backend = backend
        self.handle = handle
        self.page_index = page_index

    @classmethod
    def load(cls, page: Optional[Page]) -> "TextPage":
        """Load the text layer of ``page``.

        Raises:
            OperationError: If ``page`` is missing or closed, or PDFium fails
        """
        if page is None or not page.is_open:
            raise OperationError("Invalid page handle")

        backend = page.backend
        ref = backend.load_text_page(page.handle.ref)
        if not ref:
            error_code = backend.get_last_error()
            raise OperationError(
                f"Failed to load text page: {error_message_for_code(error_code)}",
                error_code=error_code,
            )
        LOGGER.debug("Loaded text page for page %d", page.index)
        return cls(backend, NativeHandle(HandleKind.TEXT_PAGE, ref), page.index)

    def count_chars(self) -> int:
        count = self.backend.count_chars(self.handle.ref)
        if count < 0:
            raise OperationError("Failed to count characters on text page")
        return count

    def get_text(self, start_index: int = 0, count: Optional[int] = None) -> str:
        """
        Return ``count`` characters starting at ``start_index``.

        Args:
            start_index: Zero-based index of the first character
            count: Number of characters; defaults to the rest of the page

        Returns:
            The decoded text; ``""`` whenever ``count`` is 0

        Raises:
            InvalidArgumentError: If the range falls outside the page
        """
        char_count = self.count_chars()
        if start_index < 0:
            raise InvalidArgumentError(f"Invalid start_index: {start_index}")
        if count is None:
            if start_index > char_count:
                raise InvalidArgumentError(f"Invalid start_index: {start_index}")
            count = char_count - start_index

        if count < 0:
            raise InvalidArgumentError(f"Invalid count: {count}")
        if count == 0:
            return ""
        if start_index >= char_count:
            raise InvalidArgumentError(f"Invalid start_index: {start_index}")
        if start_index + count > char_count:
            raise InvalidArgumentError(f"Invalid count: {count}")

        ref = self.handle.ref
        return read_utf16_string(
            lambda buffer, size: self.backend.get_text(ref, start_index, count, buffer, size)
        )

    def get_char_box(self, char_index: int) -> CharBox:
        if char_index < 0 or char_index >= self.count_chars():
            raise InvalidArgumentError(f"Invalid character index: {char_index}")

        ref = self.handle.ref
        box = read_struct(
            lambda out: self.backend.get_char_box(ref, char_index, out),
            CharBoxBuffer,
            f"character box for index {char_index}",
        )
        return CharBox(left=box.left, right=box.right, bottom=box.bottom, top=box.top)

    def get_char_at_position(self, x: float, y: float, x_tolerance: float = 1.0, y_tolerance: float = 1.0) -> int:
        """Return the index of the character at ``(x, y)``, or -1 if none."""
        return self.backend.get_char_index_at_pos(self.handle.ref, x, y, x_tolerance, y_tolerance)

    def create_selection(self, start_index: int, count: int) -> "TextSelection":
        return TextSelection(self, start_index, count)

    def create_search(self, text: str, match_case: bool = False, match_whole_word: bool = False) -> "TextSearch":
        return TextSearch(self, text, match_case=match_case, match_whole_word=match_whole_word)

    def extract_links(self) -> "TextLink":
        return TextLink(self)

    def close(self) -> None:
        self.handle.release(self.backend.close_text_page)

    def __enter__(self) -> "TextPage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"TextPage(page_index={self.page_index}, state={self.handle.state.name})"


class TextSearch:
    """
    A search cursor over a text page.

    The current match lives in PDFium; every accessor queries it afresh.
    """

    def __init__(self, text_page: TextPage, text: str, *, match_case: bool = False, match_whole_word: bool = False) -> None:
        self.text_page = text_page
        self.backend = text_page.backend
        self._text = text
        self._match_case = match_case
        self._match_whole_word = match_whole_word
        self._needle = encode_utf16(text)

        flags = search_flags(match_case=match_case, match_whole_word=match_whole_word)
        ref = self.backend.find_start(text_page.handle.ref, self._needle, int(flags), 0)
        if not ref:
            raise OperationError("Failed to create text search")
        self.handle = NativeHandle(HandleKind.SEARCH, ref)

    @property
    def text(self) -> str:
        return self._text

    @property
    def match_case(self) -> bool:
        return self._match_case

    @property
    def match_whole_word(self) -> bool:
        return self._match_whole_word

    def find_next(self) -> bool:
        return bool(self.backend.find_next(self.handle.ref))

    def find_prev(self) -> bool:
        return bool(self.backend.find_prev(self.handle.ref))

    def get_match_index(self) -> int:
        """Start index of the current match.

        Depending on the PDFium build, "no match" reads as -1 or 0; check
        :meth:`get_match_count` as well.
        """
        return self.backend.get_search_result_index(self.handle.ref)

    def get_match_count(self) -> int:
        return self.backend.get_search_result_count(self.handle.ref)

    def get_selection(self) -> "TextSelection":
        index = self.get_match_index()
        count = self.get_match_count()
        if index <= NO_MATCH_INDEX or count <= 0:
            raise OperationError("No current match")
        return TextSelection(self.text_page, index, count)

    def close(self) -> None:
        self.handle.release(self.backend.find_close)

    def __enter__(self) -> "TextSearch":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"TextSearch(text={self._text!r}, state={self.handle.state.name})"


class TextSelection:
    """
    A range of characters on a text page.

    Selections hold no native resource. The range is validated once, at
    construction.
    """

    def __init__(self, text_page: TextPage, start_index: int, count: int) -> None:
        char_count = text_page.count_chars()
        if start_index < 0 or start_index >= char_count:
            raise InvalidArgumentError(f"Invalid start_index: {start_index}")
        if count < 0 or start_index + count > char_count:
            raise InvalidArgumentError(f"Invalid count: {count}")

        self.text_page = text_page
        self.start_index = start_index
        self.count = count
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise OperationError("Text selection has been closed")

    def get_text(self) -> str:
        self._ensure_open()
        return self.text_page.get_text(self.start_index, self.count)

    def count_rects(self) -> int:
        # Approximation: one rectangle per character. Characters sharing a
        # line are not merged.
        self._ensure_open()
        return self.count

    def get_rect(self, rect_index: int) -> CharBox:
        if rect_index < 0 or rect_index >= self.count_rects():
            raise InvalidArgumentError(f"Invalid rectangle index: {rect_index}")
        return self.text_page.get_char_box(self.start_index + rect_index)

    def to_range(self) -> TextRange:
        return TextRange(start_index=self.start_index, count=self.count)

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"TextSelection(start_index={self.start_index}, count={self.count})"


class TextLink:
    """Web links detected in the text of a page."""

    def __init__(self, text_page: TextPage) -> None:
        self.text_page = text_page
        self.backend = text_page.backend
        ref = self.backend.load_web_links(text_page.handle.ref)
        if not ref:
            raise OperationError("Failed to load web links")
        self.handle = NativeHandle(HandleKind.WEB_LINKS, ref)

    def count(self) -> int:
        return self.backend.count_web_links(self.handle.ref)

    def _check_index(self, link_index: int) -> None:
        if link_index < 0 or link_index >= self.count():
            raise InvalidArgumentError(f"Invalid link index: {link_index}")

    def get_url(self, link_index: int) -> str:
        """Return the URL of link ``link_index``, ``""`` if it has none."""
        self._check_index(link_index)
        ref = self.handle.ref
        return read_utf16_string(
            lambda buffer, size: self.backend.get_url(ref, link_index, buffer, size)
        )

    def get_text_range(self, link_index: int) -> TextRange:
        self._check_index(link_index)
        ref = self.handle.ref
        text_range = read_struct(
            lambda out: self.backend.get_text_range(ref, link_index, out),
            TextRangeBuffer,
            f"text range of link {link_index}",
        )
        return TextRange(start_index=text_range.start_index, count=text_range.count)

    def get_selection(self, link_index: int) -> TextSelection:
        text_range = self.get_text_range(link_index)
        return TextSelection(self.text_page, text_range.start_index, text_range.count)

    def close(self) -> None:
        self.handle.release(self.backend.close_web_links)

    def __enter__(self) -> "TextLink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"TextLink(state={self.handle.state.name})"


def load_text_page(page: Optional[Page]) -> TextPage:
    """Shorthand for :meth:`TextPage.load`."""
    return TextPage.load(page)


__all__ = ["TextLink", "TextPage", "TextSearch", "TextSelection", "load_text_page"]
