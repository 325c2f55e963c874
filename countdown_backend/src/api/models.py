from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional, TypedDict

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_FONT_SIZE = 48
DEFAULT_FONT_FAMILY = "Arial"

MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 120

# Input keys accepted for each style field (wire name first)
_STYLE_KEYS = {
    "background_color": ("backgroundColor", "background_color"),
    "text_color": ("textColor", "text_color"),
    "font_size": ("fontSize", "font_size"),
    "font_family": ("fontFamily", "font_family"),
}

_MISSING = object()


def _lookup(raw: Mapping[str, Any], field: str) -> Any:
    for key in _STYLE_KEYS[field]:
        if key in raw:
            return raw[key]
    return _MISSING


def is_hex_color(value: Any) -> bool:
    """Return True for a '#RRGGBB' string."""
    return isinstance(value, str) and HEX_COLOR_RE.match(value) is not None


def is_utf8_text(value: str) -> bool:
    """False for strings the JSON store cannot write, such as lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _valid_font_size(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    if not (MIN_FONT_SIZE <= value <= MAX_FONT_SIZE):
        return None
    return int(value)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class StyleConfig:
    """
    Visual style of a countdown image.

    Instances reaching the renderer have been built through `from_input`, so
    colors are '#RRGGBB' strings and font_size lies within 12..120.
    """

    background_color: str = DEFAULT_BACKGROUND_COLOR
    text_color: str = DEFAULT_TEXT_COLOR
    font_size: int = DEFAULT_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY

    @classmethod
    def from_input(
        cls,
        raw: Optional[Mapping[str, Any]],
        base: Optional["StyleConfig"] = None,
    ) -> "StyleConfig":
        """
        Build a StyleConfig from loosely-typed input.

        Every key present in `raw` replaces the matching field of `base` when
        valid; invalid values and absent keys keep the `base` value. With no
        base (creation) the base is the default style, so bad input falls back
        to the defaults. On update the base is the stored style, so a bad edit
        preserves the existing value.
        """
        current = base or cls()
        if not raw:
            return current

        changes: dict = {}

        for field in ("background_color", "text_color"):
            value = _lookup(raw, field)
            if value is not _MISSING and is_hex_color(value):
                changes[field] = value

        size = _lookup(raw, "font_size")
        if size is not _MISSING:
            parsed = _valid_font_size(size)
            if parsed is not None:
                changes["font_size"] = parsed

        family = _lookup(raw, "font_family")
        if family is not _MISSING and isinstance(family, str) and family.strip() and is_utf8_text(family):
            changes["font_family"] = family.strip()

        return replace(current, **changes) if changes else current

    def to_dict(self) -> dict:
        return {
            "backgroundColor": self.background_color,
            "textColor": self.text_color,
            "fontSize": self.font_size,
            "fontFamily": self.font_family,
        }


# PUBLIC_INTERFACE
class CountdownEntity(TypedDict):
    """
    A countdown as held by the storage backends.

    Fields:
    - id: Opaque unique identifier
    - title: Optional display title (max 200 chars; None when blank)
    - target_date: Timezone-aware target instant
    - style: Validated StyleConfig
    - created_at: UTC creation timestamp
    - updated_at: UTC last update timestamp
    """

    id: str
    title: Optional[str]
    target_date: datetime
    style: StyleConfig
    created_at: datetime
    updated_at: datetime
