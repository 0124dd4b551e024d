"""Location of the PDFium shared library."""

from __future__ import annotations

import os
import sys
from typing import Mapping, Optional

from .exceptions import LibraryNotFoundError

LIBRARY_PATH_ENV = "PDFIUM_LIBRARY_PATH"

DEFAULT_LIBRARY_NAMES = {
    "darwin": "libpdfium.dylib",
    "linux": "libpdfium.so",
    "windows": "pdfium.dll",
}


def platform_family(platform: Optional[str] = None) -> str:
    platform = platform or sys.platform
    if platform == "darwin":
        return "darwin"
    if platform.startswith("linux"):
        return "linux"
    if platform in ("win32", "cygwin"):
        return "windows"
    raise LibraryNotFoundError(f"Unsupported platform: {platform}")


def default_library_path(platform: Optional[str] = None) -> str:
    """Return the shared-library file name PDFium uses on ``platform``."""
    return DEFAULT_LIBRARY_NAMES[platform_family(platform)]


def library_path(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> str:
    """Return ``$PDFIUM_LIBRARY_PATH`` or the platform default."""
    environ = os.environ if environ is None else environ
    configured = environ.get(LIBRARY_PATH_ENV)
    if configured:
        return configured
    return default_library_path(platform)
