"""Windowed byte cache over the image sequence, plus Pillow decoding.

Loading is synchronous: bytes for the positions just ahead of the cursor
are read from disk after every advance, and anything outside the retention
window is dropped so only a few dozen files are ever resident.
"""

import io
import logging
from typing import Dict, List, Optional

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from constants import CACHE_AHEAD, CACHE_BEHIND, INITIAL_PRELOAD, PLACEHOLDER_SIZE, PRELOAD_AHEAD
from errors import ReadError

logger = logging.getLogger(__name__)


def read_image_bytes(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ReadError(path, e.strerror or str(e)) from e


def decode(data: bytes, hinted_extension: Optional[str] = None) -> Optional[Image.Image]:
    """Decode image bytes with Pillow. Returns None if the data cannot be decoded."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning("Cannot decode %s image: %s", hinted_extension or "unknown", e)
        return None


def placeholder(text: str, size=PLACEHOLDER_SIZE) -> Image.Image:
    """Create a dark placeholder image with centered text."""
    img = Image.new("RGB", size, (30, 30, 30))
    draw = ImageDraw.Draw(img)
    try:
        font = ImageFont.truetype("DejaVuSans.ttf", 24)
    except OSError:
        font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), text, font=font)
    tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
    x = (size[0] - tw) // 2
    y = (size[1] - th) // 2
    draw.text((x, y), text, fill=(150, 150, 150), font=font)
    return img


class WindowCache:
    def __init__(
        self,
        paths: List[str],
        preload_ahead: int = PRELOAD_AHEAD,
        keep_behind: int = CACHE_BEHIND,
        keep_ahead: int = CACHE_AHEAD,
    ):
        self.paths = paths
        self.preload_ahead = preload_ahead
        self.keep_behind = keep_behind
        self.keep_ahead = keep_ahead
        self._cache: Dict[int, bytes] = {}  # position -> file bytes

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, position: int) -> bool:
        return position in self._cache

    def positions(self) -> List[int]:
        return sorted(self._cache)

    def get(self, position: int) -> Optional[bytes]:
        return self._cache.get(position)

    def load(self, position: int) -> Optional[bytes]:
        """Return bytes for position, reading and caching them if needed."""
        data = self._cache.get(position)
        if data is not None:
            return data
        try:
            data = read_image_bytes(self.paths[position])
        except ReadError as e:
            logger.debug("%s", e)
            return None
        self._cache[position] = data
        return data

    def ensure_loaded(self, cursor: int):
        """Read every uncached position in [cursor, cursor + preload_ahead)."""
        end = min(cursor + self.preload_ahead, len(self.paths))
        for i in range(max(0, cursor), end):
            if i not in self._cache:
                self.load(i)

    def preload_initial(self, count: int = INITIAL_PRELOAD):
        for i in range(min(count, len(self.paths))):
            if i not in self._cache:
                self.load(i)

    def evict(self, cursor: int):
        """Drop every position outside [cursor - keep_behind, cursor + keep_ahead)."""
        start = max(0, cursor - self.keep_behind)
        end = min(cursor + self.keep_ahead, len(self.paths))
        stale = [i for i in self._cache if i < start or i >= end]
        for i in stale:
            del self._cache[i]
        if stale:
            logger.debug("Evicted %d cached images (window %d-%d)", len(stale), start, end)

    def discard(self, position: int):
        self._cache.pop(position, None)

    def clear(self):
        self._cache.clear()
