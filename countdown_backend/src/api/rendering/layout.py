from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

CANVAS_WIDTH = 1000
CANVAS_HEIGHT = 400

MIN_VALUE_FONT_SIZE = 64
MAX_VALUE_FONT_SIZE = 96
LABEL_FONT_SIZE = 16
TITLE_FONT_SIZE = 28
EXPIRED_FONT_SIZE = 64

TITLE_BAND_HEIGHT = 100
TITLE_TOP_Y = 40
EXPIRED_TITLE_Y = 150

BLOCK_COUNT = 4
BLOCK_GAP = 50
BLOCK_WIDTH = (CANVAS_WIDTH - BLOCK_GAP * (BLOCK_COUNT - 1)) / BLOCK_COUNT

# Value baseline sits above the band's vertical center, label below the value
VALUE_BASELINE_OFFSET = 30
LABEL_GAP = 20


@dataclass(frozen=True)
class TextPlacement:
    """
    Where to draw one piece of text.

    `anchor` uses Pillow's two-letter text anchors: 'ms' centers horizontally
    on a baseline, 'mt' hangs from the top edge, 'mm' centers both ways.
    """

    x: float
    y: float
    font_size: int
    anchor: str
    bold: bool = False


@dataclass(frozen=True)
class BlockPlacement:
    value: TextPlacement
    label: TextPlacement


@dataclass(frozen=True)
class Layout:
    """Pixel positions for the counting path."""

    width: int
    height: int
    value_font_size: int
    label_font_size: int
    title: Optional[TextPlacement]
    blocks: Tuple[BlockPlacement, ...]


@dataclass(frozen=True)
class ExpiredLayout:
    """Pixel positions for the expired path."""

    width: int
    height: int
    title: Optional[TextPlacement]
    message: TextPlacement


def clamp_font_size(requested: int) -> int:
    return max(MIN_VALUE_FONT_SIZE, min(requested, MAX_VALUE_FONT_SIZE))


def block_center_x(index: int) -> float:
    return (BLOCK_WIDTH + BLOCK_GAP) * index + BLOCK_WIDTH / 2


# PUBLIC_INTERFACE
def compute_layout(has_title: bool, requested_font_size: int) -> Layout:
    """
    Compute the counting-path layout on the fixed 1000x400 canvas.

    The value font size is clamped into 64..96 whatever was requested, so the
    four blocks always fit. A title reserves a 100px band at the top; without
    one the blocks center on the full height.
    """
    font_size = clamp_font_size(requested_font_size)
    top = TITLE_BAND_HEIGHT if has_title else 0
    center_y = top + (CANVAS_HEIGHT - top) / 2
    value_y = center_y - VALUE_BASELINE_OFFSET
    label_y = value_y + font_size + LABEL_GAP

    blocks = tuple(
        BlockPlacement(
            value=TextPlacement(x=block_center_x(i), y=value_y, font_size=font_size, anchor="ms", bold=True),
            label=TextPlacement(x=block_center_x(i), y=label_y, font_size=LABEL_FONT_SIZE, anchor="ms"),
        )
        for i in range(BLOCK_COUNT)
    )

    title = None
    if has_title:
        title = TextPlacement(x=CANVAS_WIDTH / 2, y=TITLE_TOP_Y, font_size=TITLE_FONT_SIZE, anchor="mt", bold=True)

    return Layout(
        width=CANVAS_WIDTH,
        height=CANVAS_HEIGHT,
        value_font_size=font_size,
        label_font_size=LABEL_FONT_SIZE,
        title=title,
        blocks=blocks,
    )


# PUBLIC_INTERFACE
def compute_expired_layout(has_title: bool) -> ExpiredLayout:
    """Layout for an expired countdown: optional title above a centered marker."""
    title = None
    if has_title:
        title = TextPlacement(
            x=CANVAS_WIDTH / 2, y=EXPIRED_TITLE_Y, font_size=TITLE_FONT_SIZE, anchor="mm", bold=True
        )
    message = TextPlacement(
        x=CANVAS_WIDTH / 2, y=CANVAS_HEIGHT / 2, font_size=EXPIRED_FONT_SIZE, anchor="mm", bold=True
    )
    return ExpiredLayout(width=CANVAS_WIDTH, height=CANVAS_HEIGHT, title=title, message=message)
