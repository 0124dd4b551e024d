"""ctypes implementation of the capability table over the PDFium shared library."""

from __future__ import annotations

import ctypes
import logging
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..config import LIBRARY_PATH_ENV, library_path as configured_library_path
from ..exceptions import LibraryNotFoundError, UnsupportedOperationError
from ..marshal import Buffer, CharBoxBuffer, FSRectF, TextRangeBuffer, field_pointer
from .base import NativeRef, PdfiumBackend

LOGGER = logging.getLogger(__name__)

Signature = Tuple[str, Sequence[Any], Any]

_p = ctypes.c_void_p
_int = ctypes.c_int
_ulong = ctypes.c_ulong
_double = ctypes.c_double

REQUIRED_FUNCTIONS: Tuple[Signature, ...] = (
    ("FPDF_InitLibrary", [], None),
    ("FPDF_DestroyLibrary", [], None),
    ("FPDF_GetLastError", [], _ulong),
    ("FPDF_LoadDocument", [ctypes.c_char_p, ctypes.c_char_p], _p),
    ("FPDF_LoadMemDocument", [_p, _int, ctypes.c_char_p], _p),
    ("FPDF_CloseDocument", [_p], None),
    ("FPDF_GetPageCount", [_p], _int),
    ("FPDF_LoadPage", [_p, _int], _p),
    ("FPDF_ClosePage", [_p], None),
    ("FPDF_GetPageWidth", [_p], _double),
    ("FPDF_GetPageHeight", [_p], _double),
)

# Out-parameters are declared as void pointers so that ``byref`` into a
# structure field can be passed directly.
OPTIONAL_FUNCTIONS: Tuple[Signature, ...] = (
    ("FPDFPage_GetAnnotCount", [_p], _int),
    ("FPDFPage_GetAnnot", [_p, _int], _p),
    ("FPDFPage_CloseAnnot", [_p], None),
    ("FPDFAnnot_GetSubtype", [_p], _int),
    ("FPDFAnnot_GetRect", [_p, ctypes.POINTER(FSRectF)], _int),
    ("FPDFAnnot_HasKey", [_p, ctypes.c_char_p], _int),
    ("FPDFAnnot_GetStringValue", [_p, ctypes.c_char_p, _p, _ulong], _ulong),
    ("FPDFText_LoadPage", [_p], _p),
    ("FPDFText_ClosePage", [_p], None),
    ("FPDFText_CountChars", [_p], _int),
    ("FPDFText_GetText", [_p, _int, _int, _p], _int),
    ("FPDFText_GetCharBox", [_p, _int, _p, _p, _p, _p], _int),
    ("FPDFText_GetCharIndexAtPos", [_p, _double, _double, _double, _double], _int),
    ("FPDFText_FindStart", [_p, ctypes.POINTER(ctypes.c_ushort), _ulong, _int], _p),
    ("FPDFText_FindNext", [_p], _int),
    ("FPDFText_FindPrev", [_p], _int),
    ("FPDFText_GetSchResultIndex", [_p], _int),
    ("FPDFText_GetSchCount", [_p], _int),
    ("FPDFText_FindClose", [_p], None),
    ("FPDFLink_LoadWebLinks", [_p], _p),
    ("FPDFLink_CloseWebLinks", [_p], None),
    ("FPDFLink_CountWebLinks", [_p], _int),
    ("FPDFLink_GetURL", [_p, _int, _p, _int], _int),
    ("FPDFLink_GetTextRange", [_p, _int, _p, _p], _int),
)


def _unsupported(name: str) -> Callable[..., Any]:
    def stub(*_args: Any) -> Any:
        raise UnsupportedOperationError(
            f"Function {name} is not available in your PDFium library"
        )

    return stub


class CtypesBackend(PdfiumBackend):
    """Backend that calls PDFium through :mod:`ctypes`.

    Optional functions missing from the loaded build are replaced with stubs
    raising :class:`UnsupportedOperationError`; which ones are present is
    decided once, here, and reported by :attr:`capabilities`.
    """

    def __init__(self, library_path: Optional[str] = None) -> None:
        self.library_path = library_path or configured_library_path()
        try:
            self._lib = ctypes.CDLL(self.library_path)
        except OSError as exc:
            raise LibraryNotFoundError(
                f"Failed to load PDFium library: {exc}. "
                f"Set {LIBRARY_PATH_ENV} environment variable to the correct path."
            ) from exc

        self._functions: Dict[str, Callable[..., Any]] = {}
        self.capabilities: Dict[str, bool] = {}
        self._initialized = False

        for name, argtypes, restype in REQUIRED_FUNCTIONS:
            if not self._bind(name, argtypes, restype):
                raise LibraryNotFoundError(
                    f"PDFium library at {self.library_path} does not export {name}"
                )

        missing = [
            name
            for name, argtypes, restype in OPTIONAL_FUNCTIONS
            if not self._bind(name, argtypes, restype)
        ]
        for name in missing:
            self._functions[name] = _unsupported(name)
        if missing:
            LOGGER.info("PDFium build lacks %d optional functions: %s", len(missing), ", ".join(missing))
        LOGGER.debug("Loaded PDFium library from %s", self.library_path)

    def _bind(self, name: str, argtypes: Sequence[Any], restype: Any) -> bool:
        try:
            func = getattr(self._lib, name)
        except AttributeError:
            self.capabilities[name] = False
            return False
        func.argtypes = list(argtypes)
        func.restype = restype
        self._functions[name] = func
        self.capabilities[name] = True
        return True

    def _call(self, name: str, *args: Any) -> Any:
        return self._functions[name](*args)

    def _require(self, name: str) -> None:
        if not self.capabilities.get(name, False):
            self._functions[name]()

    def supports(self, operation: str) -> bool:
        return self.capabilities.get(operation, False)

    # ------------------------------------------------------------------
    # Library lifecycle
    # ------------------------------------------------------------------
    def init_library(self) -> None:
        if self._initialized:
            return
        self._call("FPDF_InitLibrary")
        self._initialized = True

    def destroy_library(self) -> None:
        if not self._initialized:
            return
        self._initialized = False
        self._call("FPDF_DestroyLibrary")

    # ------------------------------------------------------------------
    # Documents and pages
    # ------------------------------------------------------------------
    def get_last_error(self) -> int:
        return int(self._call("FPDF_GetLastError"))

    def load_document(self, path: bytes, password: Optional[bytes]) -> NativeRef:
        return self._call("FPDF_LoadDocument", path, password)

    def load_mem_document(self, data: bytes, password: Optional[bytes]) -> NativeRef:
        return self._call("FPDF_LoadMemDocument", data, len(data), password)

    def close_document(self, document: NativeRef) -> None:
        self._call("FPDF_CloseDocument", document)

    def get_page_count(self, document: NativeRef) -> int:
        return self._call("FPDF_GetPageCount", document)

    def load_page(self, document: NativeRef, index: int) -> NativeRef:
        return self._call("FPDF_LoadPage", document, index)

    def close_page(self, page: NativeRef) -> None:
        self._call("FPDF_ClosePage", page)

    def get_page_width(self, page: NativeRef) -> float:
        return self._call("FPDF_GetPageWidth", page)

    def get_page_height(self, page: NativeRef) -> float:
        return self._call("FPDF_GetPageHeight", page)

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------
    def get_annot_count(self, page: NativeRef) -> int:
        return self._call("FPDFPage_GetAnnotCount", page)

    def get_annot(self, page: NativeRef, index: int) -> NativeRef:
        return self._call("FPDFPage_GetAnnot", page, index)

    def close_annot(self, annot: NativeRef) -> None:
        self._call("FPDFPage_CloseAnnot", annot)

    def get_annot_subtype(self, annot: NativeRef) -> int:
        return self._call("FPDFAnnot_GetSubtype", annot)

    def get_annot_rect(self, annot: NativeRef, rect: FSRectF) -> bool:
        return bool(self._call("FPDFAnnot_GetRect", annot, ctypes.byref(rect)))

    def annot_has_key(self, annot: NativeRef, key: bytes) -> bool:
        return bool(self._call("FPDFAnnot_HasKey", annot, key))

    def get_annot_string_value(self, annot: NativeRef, key: bytes, buffer: Buffer, buflen: int) -> int:
        return self._call("FPDFAnnot_GetStringValue", annot, key, buffer, buflen)

    # ------------------------------------------------------------------
    # Text pages
    # ------------------------------------------------------------------
    def load_text_page(self, page: NativeRef) -> NativeRef:
        return self._call("FPDFText_LoadPage", page)

    def close_text_page(self, text_page: NativeRef) -> None:
        self._call("FPDFText_ClosePage", text_page)

    def count_chars(self, text_page: NativeRef) -> int:
        return self._call("FPDFText_CountChars", text_page)

    def get_text(self, text_page: NativeRef, start_index: int, count: int, buffer: Buffer, buflen: int) -> int:
        # FPDFText_GetText has no probe mode and counts UTF-16 units; report
        # room for every requested unit plus the terminator.
        if buffer is None:
            self._require("FPDFText_GetText")
            return (count + 1) * 2
        if buflen < (count + 1) * 2:
            return 0
        return self._call("FPDFText_GetText", text_page, start_index, count, buffer) * 2

    def get_char_box(self, text_page: NativeRef, index: int, box: CharBoxBuffer) -> bool:
        return bool(
            self._call(
                "FPDFText_GetCharBox",
                text_page,
                index,
                field_pointer(box, "left"),
                field_pointer(box, "right"),
                field_pointer(box, "bottom"),
                field_pointer(box, "top"),
            )
        )

    def get_char_index_at_pos(
        self,
        text_page: NativeRef,
        x: float,
        y: float,
        x_tolerance: float,
        y_tolerance: float,
    ) -> int:
        return self._call("FPDFText_GetCharIndexAtPos", text_page, x, y, x_tolerance, y_tolerance)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def find_start(self, text_page: NativeRef, needle: Any, flags: int, start_index: int) -> NativeRef:
        return self._call("FPDFText_FindStart", text_page, needle, flags, start_index)

    def find_next(self, search: NativeRef) -> bool:
        return bool(self._call("FPDFText_FindNext", search))

    def find_prev(self, search: NativeRef) -> bool:
        return bool(self._call("FPDFText_FindPrev", search))

    def get_search_result_index(self, search: NativeRef) -> int:
        return self._call("FPDFText_GetSchResultIndex", search)

    def get_search_result_count(self, search: NativeRef) -> int:
        return self._call("FPDFText_GetSchCount", search)

    def find_close(self, search: NativeRef) -> None:
        self._call("FPDFText_FindClose", search)

    # ------------------------------------------------------------------
    # Web links
    # ------------------------------------------------------------------
    def load_web_links(self, text_page: NativeRef) -> NativeRef:
        return self._call("FPDFLink_LoadWebLinks", text_page)

    def close_web_links(self, links: NativeRef) -> None:
        self._call("FPDFLink_CloseWebLinks", links)

    def count_web_links(self, links: NativeRef) -> int:
        return self._call("FPDFLink_CountWebLinks", links)

    def get_url(self, links: NativeRef, index: int, buffer: Buffer, buflen: int) -> int:
        # FPDFLink_GetURL sizes in UTF-16 units.
        if buffer is None:
            return self._call("FPDFLink_GetURL", links, index, None, 0) * 2
        return self._call("FPDFLink_GetURL", links, index, buffer, buflen // 2) * 2

    def get_text_range(self, links: NativeRef, index: int, text_range: TextRangeBuffer) -> bool:
        return bool(
            self._call(
                "FPDFLink_GetTextRange",
                links,
                index,
                field_pointer(text_range, "start_index"),
                field_pointer(text_range, "count"),
            )
        )


__all__ = ["CtypesBackend", "OPTIONAL_FUNCTIONS", "REQUIRED_FUNCTIONS"]
