"""
Custom exceptions for pdfium-bindings.

This module defines all exceptions raised by the binding. Native failures
carry the decoded PDFium error code where one is available.
"""

from typing import Optional


class PdfiumError(Exception):
    """Base exception for all pdfium-bindings errors."""

    def __init__(self, message: str = "", error_code: Optional[int] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.error_code = error_code

    @property
    def default_message(self) -> str:
        return "An unknown PDFium error occurred."


class LibraryNotFoundError(PdfiumError):
    """Raised when the PDFium shared library cannot be located or loaded."""

    @property
    def default_message(self) -> str:
        return "PDFium library could not be loaded."


class DocumentLoadError(PdfiumError):
    """Raised when a PDF document cannot be opened."""

    @property
    def default_message(self) -> str:
        return "Failed to load PDF document."


class OperationError(PdfiumError):
    """Raised when a native call fails against a document, page or text handle."""

    @property
    def default_message(self) -> str:
        return "PDFium operation failed."


class UnsupportedOperationError(OperationError):
    """Raised when the loaded PDFium build lacks an optional function."""

    @property
    def default_message(self) -> str:
        return "Operation not supported by this PDFium library build."


class InvalidArgumentError(PdfiumError, ValueError):
    """Raised when a caller-supplied index or range is out of bounds."""

    @property
    def default_message(self) -> str:
        return "Invalid argument."
