"""Conversions between canvas pixels and centimetres."""

from __future__ import annotations

import math

from .constants import PX_PER_CM


def px_to_cm(px: float) -> float:
    if not math.isfinite(px):
        return 0.0
    return px / PX_PER_CM


def cm_to_px(cm: float) -> float:
    if not math.isfinite(cm):
        return 0.0
    return cm * PX_PER_CM


def format_cm(cm: float, decimals: int = 2) -> str:
    """Format ``cm`` as ``"12.50 cm"`` with ``decimals`` clamped to ``[0, 6]``."""

    safe_decimals = max(0, min(6, int(decimals)))
    safe = cm if math.isfinite(cm) else 0.0
    return f"{safe:.{safe_decimals}f} cm"


__all__ = ["px_to_cm", "cm_to_px", "format_cm"]
