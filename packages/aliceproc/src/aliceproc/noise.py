from __future__ import annotations

import math
import torch
from .rng import octave_seed, to_int64_signed

# ---------------------------------------------------------------------
# Constantes & helpers bitwise (tout en int64 signé, l'overflow wrappe)
# ---------------------------------------------------------------------

_C1 = to_int64_signed(0xBF58476D1CE4E5B9)
_C2 = to_int64_signed(0x94D049BB133111EB)
_GOLDEN64_I = to_int64_signed(0x9E3779B97F4A7C15)
_BASE_SEED_I = to_int64_signed(0x1234ABCD9876EF01)
# masque 53 bits pour une mantisse double
_M53 = (1 << 53) - 1


def _mix64(x: torch.Tensor) -> torch.Tensor:
    """SplitMix64 like mix, sur tenseur int64 (vectorisé)."""
    x = x ^ (x >> 30)
    x = x * _C1
    x = x ^ (x >> 27)
    x = x * _C2
    x = x ^ (x >> 31)
    return x


@torch.no_grad()
def _hash2(ix: torch.Tensor, iy: torch.Tensor, seed: int) -> torch.Tensor:
    """Hash 2D (ix,iy) + seed -> int64 pseudo-aléatoire stable."""
    s = to_int64_signed(seed) ^ _BASE_SEED_I
    h = _mix64(ix.to(torch.int64) ^ _GOLDEN64_I)
    return _mix64(h ^ (iy.to(torch.int64) + s))


@torch.no_grad()
def rand01(h: torch.Tensor) -> torch.Tensor:
    """int64 hash -> float64 uniforme dans [0,1)."""
    mant = (h >> 11) & _M53
    return mant.to(torch.float64) / float(1 << 53)


def _fade(t: torch.Tensor) -> torch.Tensor:  # 6t^5 - 15t^4 + 10t^3
    return t * t * t * (t * (t * 6 - 15) + 10)


@torch.no_grad()
def perlin2d(xx: torch.Tensor, yy: torch.Tensor, scale: float, seed: int) -> torch.Tensor:
    """Perlin 2D (gradient noise) sur une grille [-1,1], `scale` cellules par côté."""
    dtype = xx.dtype
    fx = (xx + 1.0) * (scale / 2.0)
    fy = (yy + 1.0) * (scale / 2.0)
    xi = torch.floor(fx).to(torch.int64)
    yi = torch.floor(fy).to(torch.int64)
    xf = fx - xi.to(dtype)
    yf = fy - yi.to(dtype)

    # gradients aux coins: angle ~ U[0, 2π)
    def dot(ix, iy, dx, dy):
        ang = rand01(_hash2(ix, iy, seed)) * (2.0 * math.pi)
        return torch.cos(ang).to(dtype) * dx + torch.sin(ang).to(dtype) * dy

    n00 = dot(xi, yi, xf, yf)
    n10 = dot(xi + 1, yi, xf - 1.0, yf)
    n01 = dot(xi, yi + 1, xf, yf - 1.0)
    n11 = dot(xi + 1, yi + 1, xf - 1.0, yf - 1.0)

    u = _fade(xf.clamp(0, 1))
    v = _fade(yf.clamp(0, 1))
    a = n00 + u * (n10 - n00)
    b = n01 + u * (n11 - n01)
    return (a + v * (b - a)).clamp(-1, 1)


@torch.no_grad()
def fbm(xx: torch.Tensor, yy: torch.Tensor, *, seed: int, scale: float, octaves: int,
        persistence: float, lacunarity: float, max_octaves: int = 16) -> torch.Tensor:
    """Fractal Brownian motion : somme d'octaves Perlin, normalisée dans [-1,1]."""
    n = max(1, min(int(octaves), max_octaves))
    val = torch.zeros_like(xx)
    amp, freq, total = 1.0, float(scale), 0.0
    for k in range(n):
        val = val + perlin2d(xx, yy, freq, octave_seed(seed, k)) * amp
        total += amp
        amp *= float(persistence)
        freq *= float(lacunarity)
    return (val / max(total, 1e-6)).clamp(-1, 1)
