# packages/alicewf/src/alicewf/content.py
from __future__ import annotations

"""Modèle de rendu agnostique du format d'origine.

Tous les formats lus (.alice/.alz, .asp, images) sont normalisés vers l'une
de ces variantes avant d'atteindre la couche de rendu. Union fermée : tout
site de consommation doit traiter chaque variante (ou lever `TypeError`).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np

from alicecodec import FractalKind

__all__ = [
    "DecodedKind",
    "PerlinContent", "PolynomialContent", "SineWaveContent", "FourierContent",
    "FractalContent", "RasterContent", "ProceduralContent",
    "is_procedural",
]


class DecodedKind(Enum):
    NONE = "none"
    ALICE_ZIP = "alice_zip"     # .alice / .alz
    ASP_STREAM = "asp_stream"   # .asp
    ALICE_SDF = "alice_sdf"     # .asdf / .asdf.json / .json
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class PerlinContent:
    seed: int
    scale: float
    octaves: int
    persistence: float
    lacunarity: float


@dataclass(frozen=True)
class PolynomialContent:
    coefficients: Tuple[float, ...]


@dataclass(frozen=True)
class SineWaveContent:
    frequency: float
    amplitude: float
    phase: float


@dataclass(frozen=True)
class FourierContent:
    # (fréquence, amplitude, phase)
    coefficients: Tuple[Tuple[int, float, float], ...]


@dataclass(frozen=True)
class FractalContent:
    fractal_type: FractalKind
    max_iterations: int
    escape_radius: float
    center: Tuple[float, float]
    julia_c: Optional[Tuple[float, float]] = None


@dataclass(frozen=True, eq=False)
class RasterContent:
    """Image RGBA8 décodée.

    `data` est un tableau numpy (H, W, 4) en lecture seule, partagé par
    référence avec la boucle de rendu (jamais copié, jamais réécrit).
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if self.data.shape != (self.height, self.width, 4) or self.data.dtype != np.uint8:
            raise ValueError(f"raster buffer must be uint8 ({self.height}, {self.width}, 4), got "
                             f"{self.data.dtype} {self.data.shape}")
        if self.data.flags.writeable:
            self.data.flags.writeable = False

    @property
    def nbytes(self) -> int:
        return int(self.data.nbytes)


ProceduralContent = Union[
    PerlinContent, PolynomialContent, SineWaveContent, FourierContent, FractalContent, RasterContent,
]


def is_procedural(content: Optional[ProceduralContent]) -> bool:
    """Vrai pour tout contenu décrit par équations (zoom infini possible)."""
    if content is None or isinstance(content, RasterContent):
        return False
    if isinstance(content, (PerlinContent, PolynomialContent, SineWaveContent, FourierContent, FractalContent)):
        return True
    raise TypeError(f"unknown content variant: {type(content).__name__}")
