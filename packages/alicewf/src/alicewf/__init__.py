# packages/alicewf/src/alicewf/__init__.py
from __future__ import annotations

from .config import DecoderConfig
from .content import (
    DecodedKind,
    PerlinContent, PolynomialContent, SineWaveContent, FourierContent,
    FractalContent, RasterContent, ProceduralContent,
)
from .decoder import Decoder, DecoderState, content_from_payload
from .scene import SceneContent, load_json_scene

__all__ = [
    "DecoderConfig",
    "DecodedKind",
    "PerlinContent", "PolynomialContent", "SineWaveContent", "FourierContent",
    "FractalContent", "RasterContent", "ProceduralContent",
    "Decoder", "DecoderState", "content_from_payload",
    "SceneContent", "load_json_scene",
    # ni `preview` (torch) ni `cli` ici pour éviter les imports lourds au top-level
]

__version__ = "0.1.0"
