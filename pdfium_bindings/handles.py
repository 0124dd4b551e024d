"""Owned wrappers around opaque PDFium references."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from .exceptions import OperationError

LOGGER = logging.getLogger(__name__)


class HandleKind(Enum):
    DOCUMENT = "document"
    PAGE = "page"
    ANNOTATION = "annotation"
    TEXT_PAGE = "text page"
    SEARCH = "text search"
    WEB_LINKS = "web links"


class HandleState(Enum):
    OPEN = "open"
    CLOSED = "closed"


class NativeHandle:
    """A native reference owned by exactly one wrapper object.

    A handle is created open from a non-null reference and moves to
    ``CLOSED`` once, through :meth:`release`. After that :attr:`ref` raises
    :class:`OperationError`; the reference is never handed out again.
    """

    __slots__ = ("kind", "_ref", "_state")

    def __init__(self, kind: HandleKind, ref: Any) -> None:
        if not ref:
            raise OperationError(f"Cannot wrap a null {kind.value} handle")
        self.kind = kind
        self._ref = ref
        self._state = HandleState.OPEN

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is HandleState.OPEN

    @property
    def ref(self) -> Any:
        if self._state is HandleState.CLOSED:
            raise OperationError(
                f"{self.kind.value.capitalize()} handle is invalid or has been closed"
            )
        return self._ref

    def release(self, releaser: Callable[[Any], object]) -> None:
        """Pass the reference to ``releaser`` and mark the handle closed.

        Calling this on a closed handle does nothing. Errors raised by
        ``releaser`` are logged and suppressed.
        """
        if self._state is HandleState.CLOSED:
            return

        ref, self._ref = self._ref, None
        self._state = HandleState.CLOSED
        try:
            releaser(ref)
        except Exception as exc:
            LOGGER.warning("Error closing %s handle: %s", self.kind.value, exc)
        else:
            LOGGER.debug("Closed %s handle", self.kind.value)

    def __repr__(self) -> str:
        return f"NativeHandle(kind={self.kind.name}, state={self._state.name})"
