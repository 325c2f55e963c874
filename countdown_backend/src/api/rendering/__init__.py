"""
Countdown image rendering: remaining-time breakdown, layout, Pillow renderer
and the ImageService that ties them together.
"""
from .breakdown import EXPIRED, Expired, TimeBreakdown, compute_breakdown
from .fonts import FontFace, FontSet, resolve_font_set
from .layout import Layout, compute_expired_layout, compute_layout
from .renderer import CountdownRenderer, RenderFailure
from .service import ImageService, get_image_service

__all__ = [
    "EXPIRED",
    "Expired",
    "TimeBreakdown",
    "compute_breakdown",
    "FontFace",
    "FontSet",
    "resolve_font_set",
    "Layout",
    "compute_layout",
    "compute_expired_layout",
    "CountdownRenderer",
    "RenderFailure",
    "ImageService",
    "get_image_service",
]
