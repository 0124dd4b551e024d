"""Backend abstractions for pdfium-bindings."""

from .base import NativeRef, PdfiumBackend
from .ctypes_backend import CtypesBackend

__all__ = [
    "CtypesBackend",
    "NativeRef",
    "PdfiumBackend",
]
