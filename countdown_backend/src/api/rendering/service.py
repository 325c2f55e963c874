from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional

from ..models import CountdownEntity
from ..settings import get_settings
from .breakdown import EXPIRED, compute_breakdown
from .fonts import resolve_font_set
from .renderer import CountdownRenderer

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class ImageService:
    """
    Turns a countdown into a PNG for the current instant.

    No results are cached: every call recomputes the remaining time and
    re-renders, so polling clients always see a fresh image.
    """

    media_type = "image/png"

    def __init__(self, renderer: CountdownRenderer, clock: Optional[Clock] = None) -> None:
        self.renderer = renderer
        self.clock = clock or utc_now

    def create_countdown_image(self, countdown: CountdownEntity) -> bytes:
        """
        Render `countdown` as PNG bytes.

        "Now" is sampled once so the expiry check and the breakdown agree.
        RenderFailure from the renderer propagates unchanged.
        """
        now = self.clock()
        breakdown = compute_breakdown(countdown["target_date"], now)
        if breakdown is EXPIRED:
            logger.debug("Countdown %s expired, rendering finished image", countdown["id"])
        return self.renderer.render(countdown, breakdown)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_image_service() -> ImageService:
    """
    Return the process-wide ImageService. Fonts are resolved on the first
    call, which main makes at import time.
    """
    settings = get_settings()
    fonts = resolve_font_set(settings.font_dir, settings.preferred_font_family)
    return ImageService(CountdownRenderer(fonts))
