from __future__ import annotations

"""Synthèse CPU (torch) des aperçus : fBm Perlin, fractales escape-time, profils 1D."""

from .noise import perlin2d, fbm
from .fractal import escape_time
from .utils import grid, profile_1d, to_u8

__all__ = ["perlin2d", "fbm", "escape_time", "grid", "profile_1d", "to_u8"]
