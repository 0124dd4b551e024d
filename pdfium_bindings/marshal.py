"""Buffer marshalling between PDFium and Python values.

PDFium reports variable-size values through a two-call protocol: a first call
with no destination returns the required size in bytes, a second call fills a
buffer of that size. Strings are UTF-16LE with a two-byte terminator.
"""

from __future__ import annotations

import ctypes
from typing import Callable, Optional, Type, TypeVar

from .exceptions import OperationError

UTF16_TERMINATOR_SIZE = 2

Buffer = Optional["ctypes.Array[ctypes.c_char]"]
SizedFetch = Callable[[Buffer, int], int]
StructT = TypeVar("StructT", bound=ctypes.Structure)


class FSRectF(ctypes.Structure):
    """``FS_RECTF`` as filled by ``FPDFAnnot_GetRect``."""

    _fields_ = [
        ("left", ctypes.c_float),
        ("top", ctypes.c_float),
        ("right", ctypes.c_float),
        ("bottom", ctypes.c_float),
    ]


class CharBoxBuffer(ctypes.Structure):
    """Out-parameters of ``FPDFText_GetCharBox`` in argument order."""

    _fields_ = [
        ("left", ctypes.c_double),
        ("right", ctypes.c_double),
        ("bottom", ctypes.c_double),
        ("top", ctypes.c_double),
    ]


class TextRangeBuffer(ctypes.Structure):
    """Out-parameters of ``FPDFLink_GetTextRange`` in argument order."""

    _fields_ = [
        ("start_index", ctypes.c_int),
        ("count", ctypes.c_int),
    ]


def field_pointer(struct: ctypes.Structure, name: str):
    """Return a ``byref`` pointer to field ``name`` of ``struct``."""
    return ctypes.byref(struct, getattr(type(struct), name).offset)


def read_sized_buffer(fetch: SizedFetch, terminator_size: int = UTF16_TERMINATOR_SIZE) -> bytes:
    """Run the two-call sizing protocol and return the raw bytes.

    The returned bytes include the terminator. A size at or below
    ``terminator_size`` on either call means the value is empty and yields
    ``b""``.
    """
    required = fetch(None, 0)
    if required <= terminator_size:
        return b""

    buffer = ctypes.create_string_buffer(required)
    written = fetch(buffer, required)
    if written <= terminator_size:
        return b""
    return buffer.raw[: min(written, required)]


def decode_utf16(raw: bytes) -> str:
    """Decode a terminated UTF-16LE buffer of ``len(raw)`` bytes.

    The buffer is read as ``len(raw) // 2 - 1`` code units; the last unit is
    the terminator.
    """
    units = len(raw) // 2 - 1
    if units <= 0:
        return ""
    return raw[: units * 2].decode("utf-16-le", errors="replace")


def read_utf16_string(fetch: SizedFetch) -> str:
    return decode_utf16(read_sized_buffer(fetch, UTF16_TERMINATOR_SIZE))


def encode_utf16(text: str) -> "ctypes.Array[ctypes.c_ushort]":
    """Encode ``text`` as a NUL-terminated array of UTF-16LE code units."""
    data = text.encode("utf-16-le")
    units = (ctypes.c_ushort * (len(data) // 2 + 1))()
    ctypes.memmove(units, data, len(data))
    return units


def read_struct(fill: Callable[[StructT], object], struct_type: Type[StructT], description: str) -> StructT:
    """Fill a fresh ``struct_type`` via ``fill``; a falsy result is an error."""
    out = struct_type()
    if not fill(out):
        raise OperationError(f"Failed to get {description}")
    return out
