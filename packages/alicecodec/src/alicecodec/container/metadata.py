from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Optional

from ..errors import InvalidEncoding

# Métadonnées "à plat" : cinq champs texte nommés, rien d'autre.
# Ce n'est PAS un codec JSON général (pas d'imbrication, tableaux, nombres ni
# séquences d'échappement) ; l'étendre impose de changer la version du format.

__all__ = ["METADATA_KEYS", "Metadata", "parse_metadata"]

METADATA_KEYS = ("sensor_id", "timestamp", "location", "unit", "description")


def _extract(text: str, key: str) -> Optional[str]:
    pattern = f'"{key}":"'
    start = text.find(pattern)
    if start < 0:
        return None
    i = start + len(pattern)
    while True:
        end = text.find('"', i)
        if end < 0:
            return None  # valeur non terminée → champ absent
        if end > 0 and text[end - 1] == "\\":
            i = end + 1
            continue
        return text[start + len(pattern):end]


def _check_value(key: str, value: Optional[str]) -> None:
    # Doit se relire à l'identique par `_extract` : pas de `"` nu, pas de `\` final.
    if value is None:
        return
    if value.endswith("\\"):
        raise ValueError(f"metadata {key} must not end with a backslash: {value!r}")
    i = value.find('"')
    while i >= 0:
        if i == 0 or value[i - 1] != "\\":
            raise ValueError(f"metadata {key} contains an unescaped quote: {value!r}")
        i = value.find('"', i + 1)


@dataclass(frozen=True)
class Metadata:
    sensor_id: Optional[str] = None
    timestamp: Optional[str] = None    # ISO 8601
    location: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None
    # texte brut lu sur disque (affichage seulement, jamais réécrit)
    raw: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        for k in METADATA_KEYS:
            _check_value(k, getattr(self, k))

    def is_empty(self) -> bool:
        return all(getattr(self, k) is None for k in METADATA_KEYS)

    def with_field(self, key: str, value: Optional[str]) -> "Metadata":
        if key not in METADATA_KEYS:
            raise KeyError(f"unknown metadata field: {key}")
        return replace(self, **{key: value})

    def to_dict(self) -> dict:
        return {k: getattr(self, k) for k in METADATA_KEYS if getattr(self, k) is not None}

    def to_bytes(self) -> bytes:
        parts = [f'"{k}":"{v}"' for k, v in self.to_dict().items()]
        return ("{" + ",".join(parts) + "}").encode("utf-8")


def parse_metadata(data: bytes) -> Metadata:
    """Extrait les cinq champs connus ; une clé absente ou mal formée → champ absent."""
    if not data:
        return Metadata()
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding(f"Invalid UTF-8 in metadata: {e}") from e
    values = {k: _extract(text, k) for k in METADATA_KEYS}
    return Metadata(**values, raw=text)
