"""
Font resources for the countdown renderer.

Fonts are resolved once, at process start, into a FontSet that is handed to
the renderer. Nothing here registers fonts globally, so tests can pass
`FontSet.fallback()` and get Pillow's built-in font on every machine.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, Optional, Set, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = (".ttf", ".otf")

Font = ImageFont.FreeTypeFont


@dataclass(frozen=True)
class FontFace:
    """Font files (paths or names Pillow can find) for one family."""

    bold: Optional[str] = None
    regular: Optional[str] = None

    def pick(self, bold: bool) -> Optional[str]:
        if bold:
            return self.bold or self.regular
        return self.regular or self.bold


@lru_cache(maxsize=64)
def _load_truetype(path: str, size: int) -> Font:
    return ImageFont.truetype(path, size)


@lru_cache(maxsize=16)
def _load_default(size: int):
    # Pillow's bundled scalable font; needs Pillow >= 10.1 and FreeType
    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class FontSet:
    """
    Resolved font families, keyed by lowercase family name.

    `font()` never raises for a missing family or an unreadable file: it
    falls back to the preferred family, then to Pillow's default font.
    """

    families: Dict[str, FontFace] = field(default_factory=dict)
    preferred: Optional[str] = None
    # Paths that failed to load; they are not retried
    unreadable: Set[str] = field(default_factory=set, compare=False, repr=False)

    @classmethod
    def fallback(cls) -> "FontSet":
        """A font set with no registered families (built-in font only)."""
        return cls()

    def face_for(self, family: Optional[str] = None) -> Optional[FontFace]:
        for name in (family, self.preferred):
            if name and name.lower() in self.families:
                return self.families[name.lower()]
        return None

    def font(self, size: int, bold: bool = False, family: Optional[str] = None):
        return self.font_with_weight(size, bold=bold, family=family)[0]

    def font_with_weight(self, size: int, bold: bool = False, family: Optional[str] = None):
        """
        Return `(font, is_bold)` where `is_bold` tells whether a real bold
        face was loaded. The built-in font has no bold variant.
        """
        face = self.face_for(family)
        path = face.pick(bold) if face else None
        if path and path not in self.unreadable:
            try:
                return _load_truetype(path, size), bool(bold and path == face.bold)
            except OSError as e:
                self.unreadable.add(path)
                logger.warning("Could not load font %s (%s); using the built-in font", path, e)
        return _load_default(size), False


def _probe(candidates: Iterable[str]) -> Optional[str]:
    """Return the first candidate Pillow can open, or None."""
    for candidate in candidates:
        try:
            _load_truetype(candidate, 12)
        except OSError:
            continue
        return candidate
    return None


def _scan_font_dir(font_dir: str) -> Dict[str, FontFace]:
    """
    Register '<Family>-Bold.<ext>' and '<Family>-Regular.<ext>' (or '<Family>.<ext>')
    files found directly in `font_dir`.
    """
    found: Dict[str, Tuple[Optional[str], Optional[str], str]] = {}
    for entry in sorted(os.listdir(font_dir)):
        stem, ext = os.path.splitext(entry)
        if ext.lower() not in FONT_EXTENSIONS:
            continue
        path = os.path.join(font_dir, entry)
        family, sep, weight = stem.rpartition("-")
        if not sep:
            family, weight = stem, ""
        bold, regular, display = found.get(family.lower(), (None, None, family))
        if weight.lower() == "bold":
            bold = path
        elif weight.lower() in ("", "regular"):
            regular = path
        else:
            continue
        found[family.lower()] = (bold, regular, display)

    faces: Dict[str, FontFace] = {}
    for key, (bold, regular, display) in found.items():
        if _probe([p for p in (bold, regular) if p]) is None:
            logger.warning("Font files for %s in %s are unreadable, skipping", display, font_dir)
            continue
        faces[key] = FontFace(bold=bold, regular=regular)
        logger.info("Registered font family %s from %s", display, font_dir)
    return faces


# PUBLIC_INTERFACE
def resolve_font_set(font_dir: Optional[str] = None, preferred_family: Optional[str] = None) -> FontSet:
    """
    Build the FontSet used for rendering.

    Families are registered from `font_dir` when given. The preferred family,
    if not found there, is looked up among the system fonts Pillow can see.
    Every failure is logged and degrades to the built-in font.
    """
    families: Dict[str, FontFace] = {}

    if font_dir:
        try:
            families.update(_scan_font_dir(font_dir))
        except OSError as e:
            logger.warning("Could not read font directory %s: %s", font_dir, e)

    preferred = preferred_family.strip() if preferred_family else None
    if preferred and preferred.lower() not in families:
        bold = _probe([f"{preferred}-Bold.ttf", f"{preferred}-Bold.otf"])
        regular = _probe([f"{preferred}-Regular.ttf", f"{preferred}.ttf", f"{preferred}.otf"])
        if bold or regular:
            families[preferred.lower()] = FontFace(bold=bold, regular=regular)
            logger.info("Using system font family %s", preferred)
        else:
            logger.warning("Preferred font family %s not found; falling back to the built-in font", preferred)

    return FontSet(families=families, preferred=preferred)
