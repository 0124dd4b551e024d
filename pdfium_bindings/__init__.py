"""
pdfium-bindings - Python bindings for the PDFium C API.

This library opens PDF documents through a PDFium shared library, queries page
geometry, enumerates annotations, and extracts, searches and selects text.
Native handles are owned by the wrapper objects and released explicitly.

Quick Start:
    >>> from pdfium_bindings import open_document, TextPage
    >>> with open_document('input.pdf') as document:
    ...     width, height = document.dimensions()
    ...     with document.load_page(0) as page, TextPage.load(page) as text_page:
    ...         text = text_page.get_text()

Main Classes:
    - Document: An open PDF document
    - Page: A loaded page, owned by the caller of Document.load_page
    - TextPage: Character-level text access for one page
    - TextSearch: Search cursor over a text page
    - TextSelection: A validated character range on a text page
    - TextLink: Web links detected in page text

Data Classes:
    - Annotation, AnnotationRect, CharBox, TextRange

Exceptions:
    - PdfiumError: Base exception
    - LibraryNotFoundError: PDFium shared library could not be loaded
    - DocumentLoadError: Document could not be opened
    - OperationError: A native call failed or a handle is closed
    - UnsupportedOperationError: Function absent from the PDFium build
    - InvalidArgumentError: Index or range out of bounds

The PDFium library is located through the PDFIUM_LIBRARY_PATH environment
variable, falling back to the platform's default library name.

Thread safety: PDFium is not thread-safe. The binding does no locking of its
own; callers using it from several threads must serialise every call with a
lock of their own.
"""

# Core classes
from pdfium_bindings.document import Document, Page, open_document
from pdfium_bindings.text import TextLink, TextPage, TextSearch, TextSelection, load_text_page

# Backends
from pdfium_bindings.backends import CtypesBackend, PdfiumBackend
from pdfium_bindings.library import get_backend, shutdown

# Data types
from pdfium_bindings.types import Annotation, AnnotationRect, CharBox, TextRange
from pdfium_bindings.codes import (
    AnnotationSubtype,
    ErrorCode,
    SearchFlags,
    annotation_subtype_name,
    error_message_for_code,
)

# Exceptions
from pdfium_bindings.exceptions import (
    PdfiumError,
    LibraryNotFoundError,
    DocumentLoadError,
    OperationError,
    UnsupportedOperationError,
    InvalidArgumentError,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Main classes
    "Document",
    "Page",
    "TextPage",
    "TextSearch",
    "TextSelection",
    "TextLink",
    "open_document",
    "load_text_page",
    # Backends
    "PdfiumBackend",
    "CtypesBackend",
    "get_backend",
    "shutdown",
    # Data types
    "Annotation",
    "AnnotationRect",
    "CharBox",
    "TextRange",
    "AnnotationSubtype",
    "ErrorCode",
    "SearchFlags",
    "annotation_subtype_name",
    "error_message_for_code",
    # Exceptions
    "PdfiumError",
    "LibraryNotFoundError",
    "DocumentLoadError",
    "OperationError",
    "UnsupportedOperationError",
    "InvalidArgumentError",
    # Version info
    "__version__",
]
