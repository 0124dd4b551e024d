"""Numeric code tables used by PDFium and their human-readable names."""

from __future__ import annotations

from enum import IntEnum, IntFlag


class ErrorCode(IntEnum):
    """Values reported by ``FPDF_GetLastError``."""

    SUCCESS = 0
    UNKNOWN = 1
    FILE = 2
    FORMAT = 3
    PASSWORD = 4
    SECURITY = 5
    PAGE = 6


ERROR_MESSAGES = {
    ErrorCode.UNKNOWN: "Unknown error",
    ErrorCode.FILE: "File not found or could not be opened",
    ErrorCode.FORMAT: "File not in PDF format or corrupted",
    ErrorCode.PASSWORD: "Password required or incorrect password",
    ErrorCode.SECURITY: "Unsupported security scheme",
    ErrorCode.PAGE: "Page not found or content error",
}


class AnnotationSubtype(IntEnum):
    """Annotation subtypes reported by ``FPDFAnnot_GetSubtype``."""

    UNKNOWN = 0
    TEXT = 1
    LINK = 2
    FREETEXT = 3
    LINE = 4
    SQUARE = 5
    CIRCLE = 6
    POLYGON = 7
    POLYLINE = 8
    HIGHLIGHT = 9
    UNDERLINE = 10
    SQUIGGLY = 11
    STRIKEOUT = 12
    STAMP = 13
    CARET = 14
    INK = 15
    POPUP = 16
    FILEATTACHMENT = 17
    SOUND = 18
    MOVIE = 19
    WIDGET = 20
    SCREEN = 21
    PRINTERMARK = 22
    TRAPNET = 23
    WATERMARK = 24
    THREED = 25
    RICHMEDIA = 26
    XFAWIDGET = 27
    REDACT = 28


class SearchFlags(IntFlag):
    """Flags accepted by ``FPDFText_FindStart``."""

    NONE = 0
    MATCH_CASE = 1
    MATCH_WHOLE_WORD = 2


def error_message_for_code(code: int) -> str:
    """Return the description of a PDFium last-error ``code``.

    Codes outside the documented table (including ``0``) render as
    ``"Error code: <code>"``.
    """
    try:
        return ERROR_MESSAGES[ErrorCode(code)]
    except (KeyError, ValueError):
        return f"Error code: {code}"


def annotation_subtype_name(code: int) -> str:
    """Return the subtype name for ``code``, or ``UNKNOWN_<code>``."""
    try:
        return AnnotationSubtype(code).name
    except ValueError:
        return f"UNKNOWN_{code}"


def search_flags(match_case: bool = False, match_whole_word: bool = False) -> SearchFlags:
    flags = SearchFlags.NONE
    if match_case:
        flags |= SearchFlags.MATCH_CASE
    if match_whole_word:
        flags |= SearchFlags.MATCH_WHOLE_WORD
    return flags
