"""Process-wide PDFium backend.

The native library is initialised once, on first use, and destroyed once at
interpreter exit.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Optional

from .backends.base import PdfiumBackend
from .backends.ctypes_backend import CtypesBackend

LOGGER = logging.getLogger(__name__)

_backend: Optional[PdfiumBackend] = None
_lock = threading.Lock()


def get_backend(library_path: Optional[str] = None) -> PdfiumBackend:
    """Return the shared backend, loading and initialising it on first call.

    ``library_path`` only has an effect on the first call; without it the
    path comes from :func:`pdfium_bindings.config.library_path`.
    """
    global _backend
    if _backend is not None:
        if library_path:
            LOGGER.debug("PDFium already loaded; ignoring library path %s", library_path)
        return _backend

    with _lock:
        if _backend is None:
            backend = CtypesBackend(library_path)
            backend.init_library()
            atexit.register(shutdown)
            _backend = backend
            LOGGER.debug("Initialised PDFium library")
    return _backend


def shutdown() -> None:
    """Destroy the shared backend's native state. Safe to call repeatedly."""
    global _backend
    with _lock:
        backend, _backend = _backend, None
    if backend is None:
        return
    try:
        backend.destroy_library()
    except Exception as exc:
        LOGGER.warning("Error destroying PDFium library: %s", exc)
