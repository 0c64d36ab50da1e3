from __future__ import annotations
import math
from typing import Tuple

import torch
import torch.nn.functional as F

from aliceproc import escape_time, fbm, grid, profile_1d

from .content import (
    FourierContent,
    FractalContent,
    PerlinContent,
    PolynomialContent,
    ProceduralContent,
    RasterContent,
    SineWaveContent,
)

__all__ = ["render_preview"]


@torch.no_grad()
def render_preview(content: ProceduralContent, size_hw: Tuple[int, int], *,
                   max_iter: int = 256) -> torch.Tensor:
    """Rendu CPU d'un aperçu luma [1,1,H,W] dans [-1,1].

    Ce n'est pas le pipeline GPU : juste de quoi vérifier visuellement un
    fichier depuis la ligne de commande.
    """
    h, w = int(size_hw[0]), int(size_hw[1])
    xx, yy = grid(h, w)

    if isinstance(content, PerlinContent):
        y = fbm(xx, yy, seed=content.seed, scale=content.scale, octaves=content.octaves,
                persistence=content.persistence, lacunarity=content.lacunarity)
    elif isinstance(content, FractalContent):
        y = escape_time(xx, yy, kind=int(content.fractal_type),
                        max_iter=min(int(content.max_iterations), int(max_iter)),
                        escape_radius=content.escape_radius,
                        center=content.center, julia_c=content.julia_c)
    elif isinstance(content, PolynomialContent):
        x = xx[0].to(torch.float64)
        vals = torch.zeros_like(x)
        for i, c in enumerate(content.coefficients):
            vals = vals + float(c) * x ** i
        y = profile_1d(vals, h)
    elif isinstance(content, SineWaveContent):
        x = xx[0].to(torch.float64)
        y = profile_1d(content.amplitude * torch.sin(2.0 * math.pi * content.frequency * x + content.phase), h)
    elif isinstance(content, FourierContent):
        x = xx[0].to(torch.float64)
        vals = torch.zeros_like(x)
        for k, amp, phase in content.coefficients:
            vals = vals + float(amp) * torch.sin(2.0 * math.pi * int(k) * x + float(phase))
        y = profile_1d(vals, h)
    elif isinstance(content, RasterContent):
        rgb = torch.from_numpy(content.data[..., :3].astype("float32"))
        luma = rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114
        luma = F.interpolate(luma[None, None], size=(h, w), mode="bilinear", align_corners=False)
        return (luma / 127.5 - 1.0).clamp(-1, 1)
    else:
        raise TypeError(f"unknown content variant: {type(content).__name__}")

    return y.to(torch.float32).clamp(-1, 1).unsqueeze(0).unsqueeze(0)
