from __future__ import annotations
import os
from pathlib import Path

from .file import AliceFile
from .header import MAGIC


def read_alice(path: str | Path) -> AliceFile:
    """Read and parse a .alice file from disk."""
    return AliceFile.parse(Path(path).read_bytes())


def write_alice(path: str | Path, data: AliceFile | bytes) -> int:
    """Atomic write to target path (tmp + fsync + replace). Returns bytes written."""
    blob = data.to_bytes() if isinstance(data, AliceFile) else bytes(data)
    p = Path(path)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.parent.mkdir(parents=True, exist_ok=True)
    with open(tmp, "wb") as f:
        f.write(blob)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, p)
    return len(blob)


def looks_like_alice(path: str | Path) -> bool:
    try:
        with open(path, "rb") as f:
            return f.read(len(MAGIC)) == MAGIC
    except OSError:
        return False
