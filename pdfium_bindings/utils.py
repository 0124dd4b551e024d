"""Utility helpers for pdfium-bindings."""
from __future__ import annotations

import logging


def configure_logging(verbose: bool = False) -> None:
    """Configure package-wide logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_rect(left: float, bottom: float, right: float, top: float) -> str:
    """Format a rectangle for display, rounded to two decimals."""
    return f"left={left:.2f}, bottom={bottom:.2f}, right={right:.2f}, top={top:.2f}"
