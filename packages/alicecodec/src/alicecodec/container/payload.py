# packages/alicecodec/src/alicecodec/container/payload.py
# -----------------------------------------------------------------------------
# Payloads typés du conteneur ALICE (un codec par type de contenu supporté)
# Linear (Q16.16), Perlin (fBm), Fractal (escape-time)
from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Type, Union

import numpy as np

from ..errors import PayloadTooShort, UnsupportedContentType
from .header import ContentType

__all__ = [
    "Q16_ONE", "to_q16", "from_q16", "wrap_i32",
    "FractalKind",
    "LinearPayload", "PerlinPayload", "FractalPayload", "AlicePayload",
    "parse_payload", "min_payload_size", "payload_content_type",
]

#: 1.0 en virgule fixe Q16.16
Q16_ONE = 1 << 16

_LE = "<"


def wrap_i32(v: int) -> int:
    """Réduit un entier Python en i32 (complément à deux, wrap-around)."""
    v &= 0xFFFFFFFF
    return v - (1 << 32) if v & 0x80000000 else v


def to_q16(value: float) -> int:
    """float → Q16.16, troncature vers zéro comme un cast `as i32` (saturant)."""
    v = float(np.float32(value) * np.float32(Q16_ONE))
    if v != v:  # NaN
        return 0
    if v >= (1 << 31) - 1:
        return (1 << 31) - 1
    if v <= -(1 << 31):
        return -(1 << 31)
    return int(v)


def from_q16(raw: int) -> float:
    """Q16.16 → float, calculé en précision f32."""
    return float(np.float32(raw) / np.float32(Q16_ONE))


def _f32(x: float) -> float:
    return float(np.float32(x))


def _check_range(name: str, v: int, lo: int, hi: int) -> None:
    if not (lo <= int(v) <= hi):
        raise ValueError(f"{name} out of range [{lo}, {hi}]: {v}")


class FractalKind(IntEnum):
    MANDELBROT = 0
    JULIA = 1
    BURNING_SHIP = 2
    TRICORN = 3


# -----------------------------------------------------------------------------
# Linear
# -----------------------------------------------------------------------------
_LINEAR_FMT = _LE + "iiI"
_LINEAR_LEGACY_SIZE = 8


@dataclass(frozen=True)
class LinearPayload:
    """Modèle linéaire `y = slope * x + intercept` en Q16.16.

    Deux tailles existent sur disque : 8 octets (ancien format, sans
    `sample_count`) et 12 octets. La sérialisation écrit toujours 12 octets.
    """
    slope_q16: int
    intercept_q16: int
    sample_count: int = 0

    SIZE = struct.calcsize(_LINEAR_FMT)  # = 12
    MIN_SIZE = _LINEAR_LEGACY_SIZE
    content_type = ContentType.LINEAR

    def __post_init__(self) -> None:
        _check_range("slope_q16", self.slope_q16, -(1 << 31), (1 << 31) - 1)
        _check_range("intercept_q16", self.intercept_q16, -(1 << 31), (1 << 31) - 1)
        _check_range("sample_count", self.sample_count, 0, 0xFFFFFFFF)

    @classmethod
    def parse(cls, data: bytes) -> "LinearPayload":
        if len(data) < cls.MIN_SIZE:
            raise PayloadTooShort(f"Linear payload too short: {len(data)} bytes (need {cls.MIN_SIZE})")
        slope, intercept = struct.unpack_from(_LE + "ii", data, 0)
        samples = struct.unpack_from(_LE + "I", data, 8)[0] if len(data) >= cls.SIZE else 0
        return cls(int(slope), int(intercept), int(samples))

    def to_bytes(self) -> bytes:
        return struct.pack(_LINEAR_FMT, self.slope_q16, self.intercept_q16, self.sample_count)

    @property
    def slope(self) -> float:
        return from_q16(self.slope_q16)

    @property
    def intercept(self) -> float:
        return from_q16(self.intercept_q16)

    def evaluate(self, x: int) -> float:
        # Le produit tient dans 64 bits ; seule la combinaison finale wrappe sur 32 bits.
        mx = wrap_i32(self.slope_q16 * wrap_i32(x))
        return wrap_i32(mx + self.intercept_q16) / float(Q16_ONE)

    def equation_string(self) -> str:
        slope, intercept = self.slope, self.intercept
        if abs(slope) < 0.0001:
            return f"y = {intercept:.4f}"
        if abs(intercept) < 0.0001:
            return f"y = {slope:.6f}x"
        if intercept >= 0.0:
            return f"y = {slope:.6f}x + {intercept:.4f}"
        return f"y = {slope:.6f}x - {abs(intercept):.4f}"


# -----------------------------------------------------------------------------
# Perlin
# -----------------------------------------------------------------------------
_PERLIN_FMT = _LE + "QfIff"


@dataclass(frozen=True)
class PerlinPayload:
    seed: int
    scale: float
    octaves: int
    persistence: float = 0.5
    lacunarity: float = 2.0

    SIZE = struct.calcsize(_PERLIN_FMT)  # = 24
    MIN_SIZE = SIZE
    content_type = ContentType.PERLIN

    def __post_init__(self) -> None:
        _check_range("seed", self.seed, 0, 0xFFFFFFFFFFFFFFFF)
        _check_range("octaves", self.octaves, 0, 0xFFFFFFFF)
        # les flottants sont stockés en f32 : on fige la précision dès la construction
        object.__setattr__(self, "scale", _f32(self.scale))
        object.__setattr__(self, "persistence", _f32(self.persistence))
        object.__setattr__(self, "lacunarity", _f32(self.lacunarity))

    @classmethod
    def parse(cls, data: bytes) -> "PerlinPayload":
        if len(data) < cls.SIZE:
            raise PayloadTooShort(f"Perlin payload too short: {len(data)} bytes (need {cls.SIZE})")
        seed, scale, octaves, persistence, lacunarity = struct.unpack_from(_PERLIN_FMT, data, 0)
        return cls(int(seed), float(scale), int(octaves), float(persistence), float(lacunarity))

    def to_bytes(self) -> bytes:
        return struct.pack(_PERLIN_FMT, self.seed, self.scale, self.octaves, self.persistence, self.lacunarity)

    def equation_string(self) -> str:
        return (
            f"FBM(seed={self.seed}, scale={self.scale:.2f}, octaves={self.octaves}, "
            f"persistence={self.persistence:.2f}, lacunarity={self.lacunarity:.2f})"
        )


# -----------------------------------------------------------------------------
# Fractal
# -----------------------------------------------------------------------------
# kind u8 | max_iterations u32 | escape_radius f32 | center x/y f64 | julia c x/y f64
_FRACTAL_FMT = _LE + "BIfdddd"

_FRACTAL_NAMES = {
    FractalKind.MANDELBROT: "Mandelbrot",
    FractalKind.JULIA: "Julia",
    FractalKind.BURNING_SHIP: "Burning Ship",
    FractalKind.TRICORN: "Tricorn",
}


@dataclass(frozen=True)
class FractalPayload:
    """Paramètres de fractale escape-time.

    `fractal_type` reste l'octet brut : un type inconnu se parse, il est
    seulement rendu comme "Unknown". Taille canonique : 41 octets.
    """
    fractal_type: int
    max_iterations: int
    escape_radius: float = 2.0
    center_x: float = 0.0
    center_y: float = 0.0
    julia_cx: float = 0.0
    julia_cy: float = 0.0

    SIZE = struct.calcsize(_FRACTAL_FMT)  # = 41
    MIN_SIZE = SIZE
    content_type = ContentType.FRACTAL

    def __post_init__(self) -> None:
        _check_range("fractal_type", self.fractal_type, 0, 0xFF)
        _check_range("max_iterations", self.max_iterations, 0, 0xFFFFFFFF)
        object.__setattr__(self, "escape_radius", _f32(self.escape_radius))

    @classmethod
    def parse(cls, data: bytes) -> "FractalPayload":
        if len(data) < cls.SIZE:
            raise PayloadTooShort(f"Fractal payload too short: {len(data)} bytes (need {cls.SIZE})")
        kind, iters, radius, cx, cy, jx, jy = struct.unpack_from(_FRACTAL_FMT, data, 0)
        return cls(int(kind), int(iters), float(radius), float(cx), float(cy), float(jx), float(jy))

    def to_bytes(self) -> bytes:
        return struct.pack(
            _FRACTAL_FMT,
            self.fractal_type, self.max_iterations, self.escape_radius,
            self.center_x, self.center_y, self.julia_cx, self.julia_cy,
        )

    @property
    def kind(self) -> FractalKind | None:
        try:
            return FractalKind(self.fractal_type)
        except ValueError:
            return None

    def fractal_name(self) -> str:
        kind = self.kind
        return _FRACTAL_NAMES[kind] if kind is not None else "Unknown"

    def equation_string(self) -> str:
        kind, n = self.kind, self.max_iterations
        if kind is FractalKind.MANDELBROT:
            return f"Mandelbrot: z = z² + c, iter={n}, center=({self.center_x:.6f}, {self.center_y:.6f})"
        if kind is FractalKind.JULIA:
            return f"Julia: z = z² + ({self.julia_cx:.4f}, {self.julia_cy:.4f}), iter={n}"
        if kind is FractalKind.BURNING_SHIP:
            return f"BurningShip: z = (|Re(z)| + i|Im(z)|)² + c, iter={n}"
        if kind is FractalKind.TRICORN:
            return f"Tricorn: z = conj(z)² + c, iter={n}"
        return "Unknown fractal"


# -----------------------------------------------------------------------------
# Union + dispatch par tag
# -----------------------------------------------------------------------------
AlicePayload = Union[LinearPayload, PerlinPayload, FractalPayload]

_CODECS: Dict[ContentType, Type] = {
    ContentType.LINEAR: LinearPayload,
    ContentType.PERLIN: PerlinPayload,
    ContentType.FRACTAL: FractalPayload,
}


def _codec_for(content_type: ContentType) -> Type:
    codec = _CODECS.get(content_type)
    if codec is None:
        raise UnsupportedContentType(f"Unsupported content type: {content_type.display_name}")
    return codec


def min_payload_size(content_type: ContentType) -> int:
    return _codec_for(content_type).MIN_SIZE


def parse_payload(content_type: ContentType, data: bytes) -> AlicePayload:
    """Parse la région payload selon le tag du header."""
    return _codec_for(content_type).parse(data)


def payload_content_type(payload: AlicePayload) -> ContentType:
    if isinstance(payload, (LinearPayload, PerlinPayload, FractalPayload)):
        return payload.content_type
    raise TypeError(f"not an ALICE payload: {type(payload).__name__}")
