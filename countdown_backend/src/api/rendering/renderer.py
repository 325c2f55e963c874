from __future__ import annotations

from io import BytesIO
from typing import List, Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw

from ..models import DEFAULT_BACKGROUND_COLOR, DEFAULT_TEXT_COLOR, CountdownEntity
from .breakdown import Expired, TimeBreakdown
from .fonts import FontSet
from .layout import TextPlacement, compute_expired_layout, compute_layout

BLOCK_LABELS = ("DAYS", "HRS", "MIN", "SEC")
EXPIRED_MESSAGE = "FINISHED"

RGB = Tuple[int, int, int]


class RenderFailure(Exception):
    """Rasterizing or encoding a countdown image failed."""


def _color(value: Optional[str], default: str) -> RGB:
    try:
        return ImageColor.getrgb(value or default)[:3]
    except ValueError:
        return ImageColor.getrgb(default)[:3]


def clean_title(title: Optional[str]) -> Optional[str]:
    """
    Collapse whitespace and drop control characters so the title draws as a
    single line. Returns None when nothing printable is left.
    """
    if not title:
        return None
    printable = "".join(ch if ch.isprintable() else " " for ch in title)
    collapsed = " ".join(printable.split())
    return collapsed.upper() or None


def format_value(value: int) -> str:
    """Zero-pad to two digits; wider values keep all their digits."""
    return f"{value:02d}"


def block_texts(breakdown: TimeBreakdown) -> List[Tuple[str, str]]:
    values = (breakdown.days, breakdown.hours, breakdown.minutes, breakdown.seconds)
    return [(format_value(v), label) for v, label in zip(values, BLOCK_LABELS)]


class CountdownRenderer:
    """
    Paints countdown images with Pillow and encodes them as PNG.

    Holds only the resolved fonts, so one instance can serve concurrent requests.
    """

    def __init__(self, fonts: FontSet) -> None:
        self.fonts = fonts

    def render(self, countdown: CountdownEntity, breakdown: Union[TimeBreakdown, Expired]) -> bytes:
        """
        Render `countdown` for an already computed breakdown.

        Raises:
            RenderFailure: if Pillow cannot draw or encode the image.
        """
        try:
            if isinstance(breakdown, Expired):
                image = self._draw_expired(countdown)
            else:
                image = self._draw_counting(countdown, breakdown)
            return self._to_png(image)
        except (OSError, ValueError) as e:
            raise RenderFailure(f"could not render countdown {countdown.get('id')}: {e}") from e

    def _canvas(self, countdown: CountdownEntity, width: int, height: int) -> Tuple[Image.Image, ImageDraw.ImageDraw]:
        background = _color(countdown["style"].background_color, DEFAULT_BACKGROUND_COLOR)
        image = Image.new("RGB", (width, height), background)
        return image, ImageDraw.Draw(image)

    def _draw_text(
        self,
        draw: ImageDraw.ImageDraw,
        text: str,
        placement: TextPlacement,
        fill: RGB,
        family: Optional[str],
    ) -> None:
        font, is_bold = self.fonts.font_with_weight(placement.font_size, bold=placement.bold, family=family)
        # No bold face available: thicken the strokes instead
        stroke = max(1, placement.font_size // 32) if placement.bold and not is_bold else 0
        draw.text(
            (placement.x, placement.y),
            text,
            fill=fill,
            font=font,
            anchor=placement.anchor,
            stroke_width=stroke,
            stroke_fill=fill,
        )

    def _draw_counting(self, countdown: CountdownEntity, breakdown: TimeBreakdown) -> Image.Image:
        style = countdown["style"]
        title = clean_title(countdown.get("title"))
        layout = compute_layout(title is not None, style.font_size)
        image, draw = self._canvas(countdown, layout.width, layout.height)
        fill = _color(style.text_color, DEFAULT_TEXT_COLOR)

        if title is not None and layout.title is not None:
            self._draw_text(draw, title, layout.title, fill, style.font_family)

        for block, (value, label) in zip(layout.blocks, block_texts(breakdown)):
            self._draw_text(draw, value, block.value, fill, style.font_family)
            self._draw_text(draw, label, block.label, fill, style.font_family)
        return image

    def _draw_expired(self, countdown: CountdownEntity) -> Image.Image:
        style = countdown["style"]
        title = clean_title(countdown.get("title"))
        layout = compute_expired_layout(title is not None)
        image, draw = self._canvas(countdown, layout.width, layout.height)
        fill = _color(style.text_color, DEFAULT_TEXT_COLOR)

        if title is not None and layout.title is not None:
            self._draw_text(draw, title, layout.title, fill, style.font_family)
        self._draw_text(draw, EXPIRED_MESSAGE, layout.message, fill, style.font_family)
        return image

    @staticmethod
    def _to_png(image: Image.Image) -> bytes:
        buf = BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()
