# packages/alicecodec/src/alicecodec/__init__.py
from __future__ import annotations

"""ALICE - codec du conteneur .alice (surface publique).

Header 32 octets, payloads typés (Linear Q16.16, Perlin, Fractal) et
métadonnées à plat. Aucun module lourd (torch) n'est importé ici.
"""

__version__ = "0.1.0"

from .errors import (
    AliceError, TooShort, BadMagic, UnknownContentType, UnsupportedContentType,
    PayloadTooShort, InvalidEncoding, MissingPayload, UnsupportedFormat, IoFailure,
)
from .container import (
    MAGIC, VERSION, HEADER_SIZE, ContentType, Header, parse_header,
    FractalKind, LinearPayload, PerlinPayload, FractalPayload, AlicePayload,
    Metadata, parse_metadata,
    AliceFile, ContainerBuilder,
    read_alice, write_alice, looks_like_alice,
)

__all__ = [
    "__version__",
    "AliceError", "TooShort", "BadMagic", "UnknownContentType", "UnsupportedContentType",
    "PayloadTooShort", "InvalidEncoding", "MissingPayload", "UnsupportedFormat", "IoFailure",
    "MAGIC", "VERSION", "HEADER_SIZE", "ContentType", "Header", "parse_header",
    "FractalKind", "LinearPayload", "PerlinPayload", "FractalPayload", "AlicePayload",
    "Metadata", "parse_metadata",
    "AliceFile", "ContainerBuilder",
    "read_alice", "write_alice", "looks_like_alice",
]
