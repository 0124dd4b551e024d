"""PDF documents and the pages loaded from them."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from .backends.base import NativeRef, PdfiumBackend
from .codes import annotation_subtype_name, error_message_for_code
from .exceptions import DocumentLoadError, OperationError
from .handles import HandleKind, NativeHandle
from .library import get_backend
from .marshal import FSRectF, read_struct, read_utf16_string
from .types import Annotation, AnnotationRect

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

CONTENTS_KEY = b"Contents"


def _encode_password(password: Optional[str]) -> Optional[bytes]:
    return password.encode("utf-8") if password is not None else None


class Page:
    """A loaded page. The caller that obtained it must :meth:`close` it."""

    def __init__(self, backend: PdfiumBackend, handle: NativeHandle, index: int) -> None:
        self.backend = backend
        self.handle = handle
        self.index = index

    @property
    def is_open(self) -> bool:
        return self.handle.is_open

    @property
    def width(self) -> float:
        return self.backend.get_page_width(self.handle.ref)

    @property
    def height(self) -> float:
        return self.backend.get_page_height(self.handle.ref)

    def close(self) -> None:
        self.handle.release(self.backend.close_page)

    def __enter__(self) -> "Page":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Page(index={self.index}, state={self.handle.state.name})"


class Document:
    """
    A PDF document opened through PDFium.

    The document owns its native handle until :meth:`close`. Pages obtained
    with :meth:`load_page` belong to the caller; every other method releases
    the pages it loads before returning.

    PDFium is not thread-safe. Callers that share documents between threads
    must serialise every call into this package with their own lock.
    """

    def __init__(
        self,
        path: PathLike,
        password: Optional[str] = None,
        *,
        backend: Optional[PdfiumBackend] = None,
    ) -> None:
        self._setup(Path(path), password, backend, None)
        ref = self.backend.load_document(os.fsencode(self.path), _encode_password(password))
        self._handle = self._wrap_or_raise(ref)
        LOGGER.debug("Opened PDF document %s", self.path)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        password: Optional[str] = None,
        *,
        backend: Optional[PdfiumBackend] = None,
    ) -> "Document":
        """Open a document from an in-memory PDF.

        ``data`` is kept alive for as long as the document is open.
        """
        document = cls.__new__(cls)
        document._setup(None, password, backend, bytes(data))
        ref = document.backend.load_mem_document(document._data, _encode_password(password))
        document._handle = document._wrap_or_raise(ref)
        LOGGER.debug("Opened in-memory PDF document (%d bytes)", len(document._data))
        return document

    def _setup(
        self,
        path: Optional[Path],
        password: Optional[str],
        backend: Optional[PdfiumBackend],
        data: Optional[bytes],
    ) -> None:
        """Attribute setup shared by both constructors."""
        self.path = path
        self.password = password
        self.backend = backend or get_backend()
        self._data = data

    def _wrap_or_raise(self, ref: NativeRef) -> NativeHandle:
        if not ref:
            error_code = self.backend.get_last_error()
            raise DocumentLoadError(
                f"Failed to load PDF document: {error_message_for_code(error_code)}",
                error_code=error_code,
            )
        return NativeHandle(HandleKind.DOCUMENT, ref)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def handle(self) -> NativeHandle:
        return self._handle

    @property
    def closed(self) -> bool:
        return not self._handle.is_open

    def close(self) -> None:
        """Close the document. Never raises; closing twice is a no-op."""
        self._handle.release(self.backend.close_document)
        self._data = None

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        source = str(self.path) if self.path is not None else "<memory>"
        return f"Document(path={source!r}, state={self._handle.state.name})"

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def page_count(self) -> int:
        return self.backend.get_page_count(self._handle.ref)

    def load_page(self, page_index: int) -> Page:
        """Load the zero-based page ``page_index``.

        Raises:
            OperationError: If the document is closed or the page cannot be loaded
        """
        if self.closed:
            raise OperationError("Document handle is invalid or has been closed")

        ref = self.backend.load_page(self._handle.ref, page_index)
        if not ref:
            error_code = self.backend.get_last_error()
            raise OperationError(
                f"Failed to load page {page_index}: {error_message_for_code(error_code)}",
                error_code=error_code,
            )
        return Page(self.backend, NativeHandle(HandleKind.PAGE, ref), page_index)

    def dimensions(self) -> Tuple[float, float]:
        """Return ``(width, height)`` of the first page, in points."""
        return self.dimensions_for_page(0)

    def dimensions_for_page(self, page_index: int) -> Tuple[float, float]:
        with self.load_page(page_index) as page:
            return page.width, page.height

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------
    def annotations(self) -> List[Annotation]:
        """Return the annotations of every page, in page order."""
        result: List[Annotation] = []
        for page_index in range(self.page_count()):
            result.extend(self.annotations_by_page(page_index))
        return result

    def annotations_by_page(self, page_index: int) -> List[Annotation]:
        with self.load_page(page_index) as page:
            return self._read_annotations(page)

    def _read_annotations(self, page: Page) -> List[Annotation]:
        backend = self.backend
        result: List[Annotation] = []
        for annot_index in range(backend.get_annot_count(page.handle.ref)):
            ref = backend.get_annot(page.handle.ref, annot_index)
            if not ref:
                continue
            annot = NativeHandle(HandleKind.ANNOTATION, ref)
            try:
                result.append(self._read_annotation(annot.ref, page.index, annot_index))
            finally:
                annot.release(backend.close_annot)
        return result

    def _read_annotation(self, annot: Any, page_index: int, annot_index: int) -> Annotation:
        backend = self.backend
        subtype = backend.get_annot_subtype(annot)
        rect = read_struct(
            lambda out: backend.get_annot_rect(annot, out),
            FSRectF,
            f"rectangle of annotation {annot_index} on page {page_index}",
        )

        contents = ""
        if backend.annot_has_key(annot, CONTENTS_KEY):
            contents = read_utf16_string(
                lambda buffer, size: backend.get_annot_string_value(annot, CONTENTS_KEY, buffer, size)
            )

        return Annotation(
            page=page_index,
            index=annot_index,
            subtype=annotation_subtype_name(subtype),
            subtype_code=subtype,
            rect=AnnotationRect(left=rect.left, bottom=rect.bottom, right=rect.right, top=rect.top),
            contents=contents,
        )


def open_document(
    path: PathLike,
    password: Optional[str] = None,
    *,
    backend: Optional[PdfiumBackend] = None,
) -> Document:
    """Open ``path`` and return a :class:`Document`.

    Raises:
        DocumentLoadError: If PDFium cannot open the file
    """
    return Document(path, password, backend=backend)


__all__ = ["Document", "Page", "open_document"]
