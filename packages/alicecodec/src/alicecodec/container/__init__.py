# packages/alicecodec/src/alicecodec/container/__init__.py
from __future__ import annotations

# Header fixe 32 octets
from .header import MAGIC, VERSION, HEADER_SIZE, ContentType, Header, parse_header

# Payloads typés (Linear / Perlin / Fractal)
from .payload import (
    FractalKind, LinearPayload, PerlinPayload, FractalPayload, AlicePayload,
    parse_payload, to_q16, from_q16,
)

# Métadonnées à plat
from .metadata import METADATA_KEYS, Metadata, parse_metadata

# Conteneur complet + builder
from .file import AliceFile, ContainerBuilder

# E/S disque
from .io import read_alice, write_alice, looks_like_alice

__all__ = [
    "MAGIC", "VERSION", "HEADER_SIZE", "ContentType", "Header", "parse_header",
    "FractalKind", "LinearPayload", "PerlinPayload", "FractalPayload", "AlicePayload",
    "parse_payload", "to_q16", "from_q16",
    "METADATA_KEYS", "Metadata", "parse_metadata",
    "AliceFile", "ContainerBuilder",
    "read_alice", "write_alice", "looks_like_alice",
]
