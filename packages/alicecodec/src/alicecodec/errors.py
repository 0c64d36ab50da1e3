# packages/alicecodec/src/alicecodec/errors.py
from __future__ import annotations

"""Erreurs du codec ALICE et de l'orchestrateur de décodage.

Toutes les erreurs sont terminales pour l'opération qui les lève (aucun retry
interne). Les erreurs de format dérivent aussi de `ValueError`, les erreurs
d'E/S de `OSError`, pour rester attrapables par du code générique.
"""

__all__ = [
    "AliceError",
    "TooShort", "BadMagic", "UnknownContentType", "UnsupportedContentType",
    "PayloadTooShort", "InvalidEncoding", "MissingPayload",
    "UnsupportedFormat", "IoFailure",
]


class AliceError(Exception):
    """Base de toutes les erreurs ALICE."""


class TooShort(AliceError, ValueError):
    """Moins de 32 octets disponibles pour le header."""


class BadMagic(AliceError, ValueError):
    """Les 5 premiers octets ne valent pas b"ALICE"."""


class UnknownContentType(AliceError, ValueError):
    """Tag de contenu hors de l'énumération fermée."""

    def __init__(self, tag: int):
        super().__init__(f"Unknown content type: {tag}")
        self.tag = tag


class UnsupportedContentType(AliceError, ValueError):
    """Tag connu mais sans codec de payload (Polynomial, Fourier, ...)."""


class PayloadTooShort(AliceError, ValueError):
    pass


class InvalidEncoding(AliceError, ValueError):
    """Métadonnées non UTF-8."""


class MissingPayload(AliceError, ValueError):
    pass


class UnsupportedFormat(AliceError, ValueError):
    """Extension de fichier non prise en charge (vidéo, inconnue)."""


class IoFailure(AliceError, OSError):
    """Échec de lecture disque ou de décodage raster (cause chaînée via `from`)."""
