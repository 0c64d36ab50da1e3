from __future__ import annotations

_MASK64 = 0xFFFFFFFFFFFFFFFF
_SIGNBIT = 1 << 63
_MOD64 = 1 << 64


def splitmix64(x: int) -> int:
    x &= _MASK64
    x = (x + 0x9E3779B97F4A7C15) & _MASK64
    z = x
    z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & _MASK64
    z = (z ^ (z >> 27)) * 0x94D049BB133111EB & _MASK64
    z ^= z >> 31
    return z & _MASK64


def octave_seed(seed: int, octave: int) -> int:
    """Seed dérivée par octave (u64), stable d'un run à l'autre."""
    return splitmix64((seed & _MASK64) ^ (octave * 0x9E3779B97F4A7C15 & _MASK64))


def to_int64_signed(u: int) -> int:
    """unsigned 64-bit -> signed int64 (two's complement), pour les tenseurs torch.int64."""
    u &= _MASK64
    return u - _MOD64 if (u & _SIGNBIT) else u
