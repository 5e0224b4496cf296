from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .board import Icon

logger = logging.getLogger(__name__)

# Paths are relative to the static directory.
DEFAULT_IMAGE_MAP: Dict[Icon, str] = {
    'guitar': 'images/aj1.png',
    'piano': 'images/aj2.jpg',
    'drum': 'images/aj3.jpg',
    'sax': 'images/aj4.png',
    'note': 'images/aj5.jpg',
    'mic': 'images/aj6.png',
    'headphone': 'images/aj7.png',
    'vinyl': 'images/vinyl_record.png',
}

PLACEHOLDER_GLYPH = '\U0001F3B6'  # shown when an icon image is missing
BACK_GLYPH = '★'


@dataclass(frozen=True)
class CardFace:
    icon: Icon
    src: Optional[str]  # URL under /static, None when the image is unavailable
    glyph: Optional[str]  # fallback text when src is None


class AssetResolver:
    """Maps icons to displayable images, falling back to a glyph when the file is missing."""

    def __init__(self, static_dir: str, image_map: Optional[Mapping[Icon, str]] = None, url_prefix: str = '/static/') -> None:
        self.static_dir = static_dir
        self.image_map = dict(DEFAULT_IMAGE_MAP if image_map is None else image_map)
        self.url_prefix = url_prefix
        self._cache: Dict[Icon, CardFace] = {}

    def resolve(self, icon: Icon) -> CardFace:
        rel = self.image_map.get(icon)
        if rel is None:
            # Unmapped names come from clients; never cache them.
            return CardFace(icon=icon, src=None, glyph=PLACEHOLDER_GLYPH)
        face = self._cache.get(icon)
        if face is None:
            face = self._lookup(icon, rel)
            self._cache[icon] = face
        return face

    def _lookup(self, icon: Icon, rel: str) -> CardFace:
        path = os.path.join(self.static_dir, *rel.split('/'))
        if not os.path.isfile(path):
            logger.warning('Failed to load image for %s: %s', icon, path)
            return CardFace(icon=icon, src=None, glyph=PLACEHOLDER_GLYPH)
        return CardFace(icon=icon, src=self.url_prefix + rel, glyph=None)
