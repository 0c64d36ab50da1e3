from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from alicecodec import IoFailure, UnsupportedFormat

log = logging.getLogger(__name__)

__all__ = ["SceneContent", "SceneLoader", "ShaderTranspiler", "is_scene_path", "load_json_scene"]

SCENE_SUFFIXES = (".asdf.json", ".asdf", ".json")


@dataclass(frozen=True)
class SceneContent:
    """3-D SDF scene as returned by a scene loader.

    The tree itself is opaque here: evaluation and shader generation belong
    to an external SDF library, reached through `to_shader`.
    """
    tree: Any
    node_count: int
    version: str = "0.1.0"

    def to_shader(self, transpiler: "ShaderTranspiler") -> str:
        src = transpiler(self.tree)
        log.info("Transpiled scene: %d nodes -> %d bytes of shader source", self.node_count, len(src))
        return src


SceneLoader = Callable[[Path], SceneContent]
ShaderTranspiler = Callable[[Any], str]


def is_scene_path(path: str | Path) -> bool:
    name = str(path).lower()
    return name.endswith(SCENE_SUFFIXES)


def _count_nodes(node: Any) -> int:
    if isinstance(node, dict):
        return 1 + sum(_count_nodes(v) for v in node.values())
    if isinstance(node, list):
        return sum(_count_nodes(v) for v in node)
    return 0


def load_json_scene(path: Path) -> SceneContent:
    """Default scene loader: JSON documents (`.asdf.json`, `.json`).

    Binary `.asdf` needs the SDF library's own loader, injected into the
    `Decoder`; without it the file is rejected.
    """
    path = Path(path)
    if not str(path).lower().endswith(".json"):
        raise UnsupportedFormat(f"Binary scene format needs an SDF loader: {path.name}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IoFailure(f"Failed to read scene {path}: {e}") from e
    doc = json.loads(text)
    tree = doc.get("root", doc) if isinstance(doc, dict) else doc
    version = str(doc.get("version", "0.1.0")) if isinstance(doc, dict) else "0.1.0"
    return SceneContent(tree=tree, node_count=_count_nodes(tree), version=version)
