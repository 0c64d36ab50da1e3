from __future__ import annotations
import numpy as np
import torch


def grid(h: int, w: int, *, device=None, dtype=torch.float32):
    yy, xx = torch.meshgrid(
        torch.linspace(-1, 1, h, device=device, dtype=dtype),
        torch.linspace(-1, 1, w, device=device, dtype=dtype),
        indexing="ij",
    )
    return xx, yy


def profile_1d(values: torch.Tensor, h: int) -> torch.Tensor:
    """Profil 1D [w] → image [h,w] (ligne répétée), normalisé dans [-1,1]."""
    peak = float(values.abs().max().item()) if values.numel() else 0.0
    v = values / peak if peak > 0 else values
    return v.clamp(-1, 1).unsqueeze(0).expand(h, -1).contiguous()


def to_u8(y: torch.Tensor) -> np.ndarray:
    """[1,1,H,W] dans [-1,1] → uint8 [H,W]."""
    arr = y[0, 0].clamp(-1, 1).detach().cpu().numpy()
    return ((arr + 1.0) * 127.5).astype(np.uint8)
