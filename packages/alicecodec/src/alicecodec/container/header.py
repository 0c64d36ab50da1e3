# packages/alicecodec/src/alicecodec/container/header.py
from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from ..errors import BadMagic, TooShort, UnknownContentType

__all__ = [
    "MAGIC", "VERSION", "HEADER_SIZE", "HEADER_FMT",
    "ContentType", "Header", "parse_header",
]

MAGIC = b"ALICE"
VERSION = 1

# magic | version | content_type | flags | original_size | compressed_size | metadata_length | reserved
HEADER_FMT = "<5sBBBQQI4x"
HEADER_SIZE = struct.calcsize(HEADER_FMT)  # = 32 bytes


class ContentType(IntEnum):
    LINEAR = 0       # y = slope * x + intercept
    POLYNOMIAL = 1   # y = Σ coef[i] * x^i
    PERLIN = 2
    FRACTAL = 3
    FOURIER = 4
    VORONOI = 5
    SINE_WAVE = 6

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_tag(cls, tag: int) -> "ContentType":
        try:
            return cls(tag)
        except ValueError:
            raise UnknownContentType(tag) from None


_DISPLAY_NAMES = {
    ContentType.LINEAR: "Linear",
    ContentType.POLYNOMIAL: "Polynomial",
    ContentType.PERLIN: "Perlin Noise",
    ContentType.FRACTAL: "Fractal",
    ContentType.FOURIER: "Fourier Series",
    ContentType.VORONOI: "Voronoi",
    ContentType.SINE_WAVE: "Sine Wave",
}


@dataclass(frozen=True)
class Header:
    """Header fixe de 32 octets (little-endian, 4 octets réservés à zéro)."""
    content_type: ContentType
    original_size: int = 0
    compressed_size: int = 0
    metadata_length: int = 0
    version: int = VERSION
    flags: int = 0

    def to_bytes(self) -> bytes:
        return struct.pack(
            HEADER_FMT,
            MAGIC,
            self.version & 0xFF,
            int(self.content_type),
            self.flags & 0xFF,
            self.original_size,
            self.compressed_size,
            self.metadata_length,
        )

    def has_metadata(self) -> bool:
        return self.metadata_length > 0

    def compression_ratio(self) -> float:
        if self.compressed_size > 0:
            return self.original_size / self.compressed_size
        return 1.0


def parse_header(data: bytes) -> Header:
    """Parse les 32 premiers octets de `data`.

    Lève `TooShort` (< 32 octets), `BadMagic`, ou `UnknownContentType`.
    """
    if len(data) < HEADER_SIZE:
        raise TooShort(f"Header too short: {len(data)} bytes (need {HEADER_SIZE})")
    magic, version, tag, flags, original_size, compressed_size, meta_len = struct.unpack_from(
        HEADER_FMT, data, 0
    )
    if magic != MAGIC:
        raise BadMagic(f"Invalid magic: {magic!r} (expected {MAGIC!r})")
    return Header(
        content_type=ContentType.from_tag(tag),
        original_size=int(original_size),
        compressed_size=int(compressed_size),
        metadata_length=int(meta_len),
        version=int(version),
        flags=int(flags),
    )
