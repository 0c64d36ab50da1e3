from __future__ import annotations
from typing import Optional, Tuple

import torch

# kinds alignés sur alicecodec.FractalKind (0..3)
MANDELBROT, JULIA, BURNING_SHIP, TRICORN = 0, 1, 2, 3


@torch.no_grad()
def escape_time(
    xx: torch.Tensor,
    yy: torch.Tensor,
    *,
    kind: int,
    max_iter: int,
    escape_radius: float = 2.0,
    center: Tuple[float, float] = (0.0, 0.0),
    julia_c: Optional[Tuple[float, float]] = None,
    span: float = 1.5,
) -> torch.Tensor:
    """Itérations d'échappement normalisées dans [-1,1] (1 = dans l'ensemble).

    - xx, yy : grilles [-1,1] (shape [h,w]), converties en float64
    - span   : demi-largeur de la vue dans le plan complexe
    """
    re = center[0] + xx.to(torch.float64) * span
    im = center[1] + yy.to(torch.float64) * span
    pix = torch.complex(re, im)
    if kind == JULIA:
        cx, cy = julia_c if julia_c is not None else (0.0, 0.0)
        z = pix
        c = torch.full_like(pix, complex(cx, cy))
    else:
        z = torch.zeros_like(pix)
        c = pix

    n_iter = max(1, int(max_iter))
    r2 = float(escape_radius) ** 2
    count = torch.full(pix.shape, n_iter, dtype=torch.int64)
    alive = torch.ones(pix.shape, dtype=torch.bool)
    for i in range(n_iter):
        if kind == BURNING_SHIP:
            zz = torch.complex(z.real.abs(), z.imag.abs())
        elif kind == TRICORN:
            zz = torch.complex(z.real, -z.imag)
        else:
            zz = z
        z = torch.where(alive, zz * zz + c, z)
        escaped = alive & ((z.real * z.real + z.imag * z.imag) > r2)
        count = torch.where(escaped, torch.full_like(count, i), count)
        alive = alive & ~escaped
        if not bool(alive.any()):
            break
    return (count.to(torch.float32) / float(n_iter)) * 2.0 - 1.0
