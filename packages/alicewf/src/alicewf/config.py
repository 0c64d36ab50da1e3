# packages/alicewf/src/alicewf/config.py
from __future__ import annotations
import os
from dataclasses import dataclass

__all__ = ["DecoderConfig"]


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """
    Configuration du `Decoder` et des CLIs.

    Champs
    ------
    image_workers : int, default=2
        Taille du pool de threads qui décode les images raster (travail CPU
        sorti de la boucle asyncio).
    preview_size : int, default=256
        Côté (pixels) des aperçus PNG écrits par `alice-decode --out`.
    preview_max_iter : int, default=256
        Plafond d'itérations pour l'aperçu des fractales (le fichier peut en
        demander plus ; l'aperçu CPU reste borné).

    ENV
    ---
    ALICE_IMAGE_WORKERS, ALICE_PREVIEW_SIZE, ALICE_PREVIEW_MAX_ITER
    """

    image_workers: int = 2
    preview_size: int = 256
    preview_max_iter: int = 256

    def __post_init__(self) -> None:
        if self.image_workers < 1:
            raise ValueError("DecoderConfig.image_workers must be >= 1")
        if self.preview_size < 1:
            raise ValueError("DecoderConfig.preview_size must be >= 1")
        if self.preview_max_iter < 1:
            raise ValueError("DecoderConfig.preview_max_iter must be >= 1")

    @staticmethod
    def from_env(**overrides) -> "DecoderConfig":
        def _envi(name: str, default: int) -> int:
            v = os.getenv(name)
            return int(v) if v is not None else default

        base = dict(
            image_workers=_envi("ALICE_IMAGE_WORKERS", 2),
            preview_size=_envi("ALICE_PREVIEW_SIZE", 256),
            preview_max_iter=_envi("ALICE_PREVIEW_MAX_ITER", 256),
        )
        base.update({k: v for k, v in overrides.items() if v is not None})
        return DecoderConfig(**base)
