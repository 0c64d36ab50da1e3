# packages/alicecodec/src/alicecodec/container/file.py
from __future__ import annotations

"""
ALICE container (.alice) - "store equations, not pixels"
========================================================

Layout (little-endian)::

    offset 0   magic[5]            "ALICE"
    offset 5   version: u8
    offset 6   content_type: u8
    offset 7   flags: u8
    offset 8   original_size: u64
    offset 16  compressed_size: u64
    offset 24  metadata_length: u32
    offset 28  reserved[4]
    offset 32  payload[...]         length fixed by content_type
    offset 32+payload_len  metadata[metadata_length]   flat key/value text

The payload region is everything between the header and the trailing
metadata block, so legacy 8-byte Linear payloads parse the same way as
12-byte ones.

`original_size` written by the builder is either caller-supplied (e.g.
`sample_count * 4` for sensor data) or an *estimate* (`compressed_size * 100`)
used for display only. It is never a measured quantity.
"""

from dataclasses import dataclass, replace
from typing import Optional

from ..errors import MissingPayload, PayloadTooShort
from .header import HEADER_SIZE, VERSION, ContentType, Header, parse_header
from .metadata import Metadata, parse_metadata
from .payload import (
    AlicePayload,
    FractalKind,
    FractalPayload,
    LinearPayload,
    PerlinPayload,
    min_payload_size,
    parse_payload,
    payload_content_type,
)

__all__ = ["AliceFile", "ContainerBuilder", "ESTIMATED_RATIO"]

#: facteur d'estimation de `original_size` quand l'appelant ne le fournit pas
ESTIMATED_RATIO = 100


@dataclass(frozen=True)
class AliceFile:
    header: Header
    payload: AlicePayload
    metadata: Metadata = Metadata()

    @classmethod
    def parse(cls, data: bytes) -> "AliceFile":
        """Parse un conteneur complet (header → payload → métadonnées)."""
        data = bytes(data)
        header = parse_header(data)
        min_size = min_payload_size(header.content_type)  # UnsupportedContentType si pas de codec
        if header.metadata_length > len(data) - HEADER_SIZE - min_size:
            raise PayloadTooShort(
                f"metadata_length={header.metadata_length} leaves less than {min_size} payload bytes "
                f"(total={len(data)})"
            )
        payload_end = len(data) - header.metadata_length
        payload = parse_payload(header.content_type, data[HEADER_SIZE:payload_end])
        metadata = parse_metadata(data[payload_end:]) if header.has_metadata() else Metadata()
        return cls(header=header, payload=payload, metadata=metadata)

    def to_bytes(self) -> bytes:
        payload_bytes = self.payload.to_bytes()
        meta_bytes = self.metadata.to_bytes()
        header = replace(self.header, metadata_length=len(meta_bytes))
        return header.to_bytes() + payload_bytes + meta_bytes

    @property
    def content_type(self) -> ContentType:
        return self.header.content_type

    def equation_string(self) -> str:
        return self.payload.equation_string()

    def content_type_name(self) -> str:
        return self.header.content_type.display_name

    def compression_ratio(self) -> float:
        return self.header.compression_ratio()


class ContainerBuilder:
    """Assemble un `AliceFile` à partir d'entrées typées.

    Les setters sont chaînables::

        f = (ContainerBuilder.from_linear(32767, 163824115, 1000)
             .sensor_id("TEMP-001").unit("°C").build())
    """

    def __init__(self, content_type: ContentType):
        self._content_type = ContentType(content_type)
        self._original_size = 0
        self._payload: Optional[AlicePayload] = None
        self._metadata = Metadata()

    # --- factories ----------------------------------------------------------

    @classmethod
    def from_linear(cls, slope_q16: int, intercept_q16: int, sample_count: int) -> "ContainerBuilder":
        """Sortie d'un modèle linéaire embarqué (4 octets par échantillon d'origine)."""
        b = cls(ContentType.LINEAR)
        b._original_size = int(sample_count) * 4
        b._payload = LinearPayload(slope_q16, intercept_q16, sample_count)
        return b

    @classmethod
    def mandelbrot(cls, max_iterations: int, center_x: float, center_y: float) -> "ContainerBuilder":
        b = cls(ContentType.FRACTAL)
        b._payload = FractalPayload(FractalKind.MANDELBROT, max_iterations, 2.0, center_x, center_y, 0.0, 0.0)
        return b

    @classmethod
    def julia(cls, max_iterations: int, cx: float, cy: float) -> "ContainerBuilder":
        b = cls(ContentType.FRACTAL)
        b._payload = FractalPayload(FractalKind.JULIA, max_iterations, 2.0, 0.0, 0.0, cx, cy)
        return b

    @classmethod
    def perlin(cls, seed: int, scale: float, octaves: int) -> "ContainerBuilder":
        b = cls(ContentType.PERLIN)
        b._payload = PerlinPayload(seed, scale, octaves, 0.5, 2.0)
        return b

    # --- setters ------------------------------------------------------------

    def payload(self, payload: AlicePayload) -> "ContainerBuilder":
        self._payload = payload
        return self

    def original_size(self, n: int) -> "ContainerBuilder":
        self._original_size = int(n)
        return self

    def with_metadata(self, metadata: Metadata) -> "ContainerBuilder":
        self._metadata = metadata
        return self

    def sensor_id(self, value: str) -> "ContainerBuilder":
        self._metadata = self._metadata.with_field("sensor_id", value)
        return self

    def timestamp(self, value: str) -> "ContainerBuilder":
        self._metadata = self._metadata.with_field("timestamp", value)
        return self

    def location(self, value: str) -> "ContainerBuilder":
        self._metadata = self._metadata.with_field("location", value)
        return self

    def unit(self, value: str) -> "ContainerBuilder":
        self._metadata = self._metadata.with_field("unit", value)
        return self

    def description(self, value: str) -> "ContainerBuilder":
        self._metadata = self._metadata.with_field("description", value)
        return self

    # --- build --------------------------------------------------------------

    def build(self) -> AliceFile:
        if self._payload is None:
            raise MissingPayload("Payload not set")
        if payload_content_type(self._payload) != self._content_type:
            raise ValueError(
                f"payload is {payload_content_type(self._payload).display_name}, "
                f"builder expects {self._content_type.display_name}"
            )
        payload_bytes = self._payload.to_bytes()
        meta_bytes = self._metadata.to_bytes()
        compressed_size = HEADER_SIZE + len(payload_bytes) + len(meta_bytes)
        original_size = self._original_size if self._original_size > 0 else compressed_size * ESTIMATED_RATIO
        header = Header(
            content_type=self._content_type,
            original_size=original_size,
            compressed_size=compressed_size,
            metadata_length=len(meta_bytes),
            version=VERSION,
            flags=0,
        )
        return AliceFile(header=header, payload=self._payload, metadata=self._metadata)
