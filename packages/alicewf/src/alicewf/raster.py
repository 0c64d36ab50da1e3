from __future__ import annotations
from pathlib import Path

import numpy as np
from PIL import Image

from alicecodec import IoFailure
from .content import RasterContent

IMG_EXTS = {".png", ".jpg", ".jpeg", ".bmp", ".gif"}


def decode_rgba(path: str | Path) -> RasterContent:
    """Décode une image standard en RGBA8 (bloquant, CPU : à lancer dans un pool)."""
    try:
        with Image.open(path) as img:
            rgba = img.convert("RGBA")
    except (OSError, Image.DecompressionBombError) as e:  # UnidentifiedImageError inclus
        raise IoFailure(f"Failed to open image {path}: {e}") from e
    arr = np.asarray(rgba, dtype=np.uint8)
    if not arr.flags.c_contiguous:
        arr = np.ascontiguousarray(arr)
    arr.flags.writeable = False
    h, w = arr.shape[:2]
    return RasterContent(width=int(w), height=int(h), data=arr)
