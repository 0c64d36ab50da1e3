# packages/alicewf/src/alicewf/decoder.py
from __future__ import annotations

"""
ALICE-View - orchestrateur de décodage
======================================

Détecte le type de fichier (extension puis magic), le décode, le normalise
vers le modèle de rendu (`alicewf.content`) puis **committe** l'état du
décodeur en une seule affectation.

Chemins d'exécution
-------------------
- Scènes 3-D (`.asdf`, `.asdf.json`, `.json`) : chemin **synchrone**, E/S
  bloquantes sur le thread appelant, aucune boucle asyncio requise.
- Tout le reste (`.alice`/`.alz`, `.asp`, images) : chemin **asynchrone**.
  Lecture disque déportée dans l'executor par défaut, décodage raster dans
  le pool de threads du décodeur. `load()` exécute la coroutine avec
  `asyncio.run` et bloque jusqu'au résultat.

Règle de commit
---------------
L'état (`DecoderState`, immuable) est remplacé en bloc, uniquement après un
chargement réussi. En cas d'erreur, l'exception remonte telle quelle et
l'état précédent reste intact : la boucle de rendu qui lit l'état à chaque
frame ne voit jamais un état à moitié mis à jour.

Un seul chargement à la fois ; le décodeur appartient au thread qui le
pilote (pas de verrou).
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

from alicecodec import (
    MAGIC,
    AliceFile,
    FractalKind,
    FractalPayload,
    IoFailure,
    LinearPayload,
    PerlinPayload,
    UnsupportedFormat,
)
from alicecodec.container.payload import AlicePayload

from .config import DecoderConfig
from .content import (
    DecodedKind,
    FractalContent,
    PerlinContent,
    ProceduralContent,
    is_procedural,
)
from .raster import IMG_EXTS, decode_rgba
from .scene import SceneContent, SceneLoader, is_scene_path, load_json_scene

log = logging.getLogger(__name__)

__all__ = [
    "DecoderState", "Decoder", "content_from_payload",
    "LEGACY_FRACTAL", "ASP_PLACEHOLDER",
]

ALICE_EXTS = {".alice", ".alz"}
ASP_EXTS = {".asp"}
VIDEO_EXTS = {".mp4", ".webm", ".avi", ".mov"}

# Ratios d'affichage (estimations, pas des mesures)
LEGACY_RATIO = 500
ASP_RATIO = 1000
SCENE_RATIO = 100

#: contenu de repli pour un .alice/.alz sans magic (blob hérité opaque)
LEGACY_FRACTAL = FractalContent(
    fractal_type=FractalKind.MANDELBROT,
    max_iterations=256,
    escape_radius=2.0,
    center=(-0.75, 0.0),
    julia_c=None,
)

#: le flux .asp n'est pas encore décodé : contenu Perlin de substitution
ASP_PLACEHOLDER = PerlinContent(seed=12345, scale=5.0, octaves=8, persistence=0.5, lacunarity=2.0)


@dataclass(frozen=True)
class DecoderState:
    content_type: DecodedKind = DecodedKind.NONE
    content: Optional[ProceduralContent] = None
    file_path: Optional[str] = None
    original_size: int = 0
    compressed_size: int = 0
    alice_file: Optional[AliceFile] = None
    sdf_content: Optional[SceneContent] = None


EMPTY_STATE = DecoderState()


def content_from_payload(payload: AlicePayload) -> ProceduralContent:
    """Payload .alice → modèle de rendu.

    Linear est volontairement réinterprété en Perlin (visualisation de
    données capteur) : seed = pente brute étendue en 64 bits non signés,
    scale = |pente| * 10 + 1 en f32, octaves 6, persistence 0.5,
    lacunarity 2.0. Ne pas "corriger" : les sorties attendues en dépendent.
    """
    if isinstance(payload, LinearPayload):
        scale = np.float32(abs(payload.slope)) * np.float32(10.0) + np.float32(1.0)
        return PerlinContent(
            seed=payload.slope_q16 & 0xFFFFFFFFFFFFFFFF,
            scale=float(scale),
            octaves=6,
            persistence=0.5,
            lacunarity=2.0,
        )
    if isinstance(payload, PerlinPayload):
        return PerlinContent(
            seed=payload.seed,
            scale=payload.scale,
            octaves=payload.octaves,
            persistence=payload.persistence,
            lacunarity=payload.lacunarity,
        )
    if isinstance(payload, FractalPayload):
        return FractalContent(
            fractal_type=payload.kind if payload.kind is not None else FractalKind.MANDELBROT,
            max_iterations=payload.max_iterations,
            escape_radius=payload.escape_radius,
            center=(payload.center_x, payload.center_y),
            julia_c=(payload.julia_cx, payload.julia_cy) if payload.kind is FractalKind.JULIA else None,
        )
    raise TypeError(f"not an ALICE payload: {type(payload).__name__}")


async def _read_bytes(p: Path) -> bytes:
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, p.read_bytes)
    except OSError as e:
        raise IoFailure(f"Failed to read file {p}: {e}") from e


async def _file_size(p: Path) -> int:
    loop = asyncio.get_running_loop()
    try:
        st = await loop.run_in_executor(None, p.stat)
    except OSError as e:
        raise IoFailure(f"Failed to read metadata {p}: {e}") from e
    return int(st.st_size)


class Decoder:
    """Décodeur mono-propriétaire (boucle de rendu / d'événements).

    >>> dec = Decoder()
    >>> dec.load("sensor.alice")        # bloquant
    >>> await dec.load_async("img.png")  # depuis une coroutine
    """

    def __init__(self, config: DecoderConfig | None = None, *,
                 scene_loader: SceneLoader | None = None,
                 worker_pool: ThreadPoolExecutor | None = None):
        self.config = config or DecoderConfig.from_env()
        self._scene_loader: SceneLoader = scene_loader or load_json_scene
        self._pool = worker_pool
        self._owns_pool = worker_pool is None
        self._state = EMPTY_STATE

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def content_type(self) -> DecodedKind:
        return self._state.content_type

    @property
    def content(self) -> Optional[ProceduralContent]:
        return self._state.content

    @property
    def file_path(self) -> Optional[str]:
        return self._state.file_path

    @property
    def original_size(self) -> int:
        return self._state.original_size

    @property
    def compressed_size(self) -> int:
        return self._state.compressed_size

    @property
    def alice_file(self) -> Optional[AliceFile]:
        return self._state.alice_file

    @property
    def sdf_content(self) -> Optional[SceneContent]:
        return self._state.sdf_content

    @property
    def compression_ratio(self) -> float:
        if self._state.compressed_size > 0:
            return self._state.original_size / self._state.compressed_size
        return 1.0

    @property
    def is_procedural(self) -> bool:
        return is_procedural(self._state.content)

    # ---------------------------------------------------------------- loading

    def load(self, path: str | Path) -> DecoderState:
        """Charge `path` en bloquant le thread appelant.

        Les scènes passent par le chemin synchrone ; le reste exécute
        `load_async` jusqu'au bout. À appeler hors d'une boucle asyncio.
        """
        path_str = str(path)
        if is_scene_path(path_str):
            return self._commit(self._load_scene_sync(path_str))
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.load_async(path_str))
        raise RuntimeError("Decoder.load() blocks; use `await Decoder.load_async(...)` inside an event loop")

    async def load_async(self, path: str | Path) -> DecoderState:
        path_str = str(path)
        p = Path(path_str)
        ext = p.suffix.lower()

        if is_scene_path(path_str):
            loop = asyncio.get_running_loop()
            state = await loop.run_in_executor(self._worker_pool(), self._load_scene_sync, path_str)
        elif ext in ALICE_EXTS:
            state = await self._load_alice(p, path_str)
        elif ext in ASP_EXTS:
            state = await self._load_asp(p, path_str)
        elif ext in IMG_EXTS:
            state = await self._load_image(p, path_str)
        elif ext in VIDEO_EXTS:
            raise UnsupportedFormat("Video playback not yet implemented")
        else:
            raise UnsupportedFormat(f"Unknown file format: {ext.lstrip('.') or '<none>'}")
        return self._commit(state)

    def _commit(self, state: DecoderState) -> DecoderState:
        self._state = state  # unique point de mutation
        return state

    def _load_scene_sync(self, path_str: str) -> DecoderState:
        p = Path(path_str)
        log.info("Loading scene file (sync): %s", p)
        scene = self._scene_loader(p)
        try:
            file_size = p.stat().st_size
        except OSError as e:
            raise IoFailure(f"Failed to read metadata {p}: {e}") from e
        log.info("Scene loaded: %d nodes, version %s", scene.node_count, scene.version)
        return DecoderState(
            content_type=DecodedKind.ALICE_SDF,
            content=None,
            file_path=path_str,
            original_size=file_size * SCENE_RATIO,
            compressed_size=file_size,
            sdf_content=scene,
        )

    async def _load_alice(self, p: Path, path_str: str) -> DecoderState:
        log.info("Loading ALICE file (async): %s", p)
        data = await _read_bytes(p)

        if data[:len(MAGIC)] == MAGIC:
            alice_file = AliceFile.parse(data)
            log.info("Parsed ALICE file: %s", alice_file.equation_string())
            return DecoderState(
                content_type=DecodedKind.ALICE_ZIP,
                content=content_from_payload(alice_file.payload),
                file_path=path_str,
                original_size=alice_file.header.original_size,
                compressed_size=alice_file.header.compressed_size,
                alice_file=alice_file,
            )

        # Pas de magic : blob hérité, taille connue mais contenu non introspectable
        size = len(data)
        log.warning("No ALICE magic in %s: showing default Mandelbrot for legacy content", p)
        return DecoderState(
            content_type=DecodedKind.ALICE_ZIP,
            content=LEGACY_FRACTAL,
            file_path=path_str,
            original_size=size * LEGACY_RATIO,
            compressed_size=size,
        )

    async def _load_asp(self, p: Path, path_str: str) -> DecoderState:
        log.info("Loading ASP stream (async): %s", p)
        size = await _file_size(p)
        log.warning("ASP stream parsing not implemented: returning placeholder Perlin content")
        return DecoderState(
            content_type=DecodedKind.ASP_STREAM,
            content=ASP_PLACEHOLDER,
            file_path=path_str,
            original_size=size * ASP_RATIO,
            compressed_size=size,
        )

    async def _load_image(self, p: Path, path_str: str) -> DecoderState:
        log.info("Loading image (async): %s", p)
        loop = asyncio.get_running_loop()
        raster = await loop.run_in_executor(self._worker_pool(), decode_rgba, p)
        size = await _file_size(p)
        log.info("Image decoded: %dx%d, %d bytes", raster.width, raster.height, raster.nbytes)
        return DecoderState(
            content_type=DecodedKind.IMAGE,
            content=raster,
            file_path=path_str,
            original_size=raster.width * raster.height * 4,
            compressed_size=size,
        )

    # ------------------------------------------------------------------- pool

    def _worker_pool(self) -> ThreadPoolExecutor:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.config.image_workers,
                                            thread_name_prefix="alice-decode")
        return self._pool

    def close(self) -> None:
        if self._pool is not None and self._owns_pool:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "Decoder":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
