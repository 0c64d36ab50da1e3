import pytest

from alicewf import DecoderConfig


def test_defaults(monkeypatch):
    for k in ("ALICE_IMAGE_WORKERS", "ALICE_PREVIEW_SIZE", "ALICE_PREVIEW_MAX_ITER"):
        monkeypatch.delenv(k, raising=False)
    cfg = DecoderConfig.from_env()
    assert cfg == DecoderConfig(image_workers=2, preview_size=256, preview_max_iter=256)


def test_env_and_overrides(monkeypatch):
    monkeypatch.setenv("ALICE_IMAGE_WORKERS", "4")
    monkeypatch.setenv("ALICE_PREVIEW_SIZE", "64")
    cfg = DecoderConfig.from_env(preview_size=None, preview_max_iter=32)
    assert cfg.image_workers == 4
    assert cfg.preview_size == 64
    assert cfg.preview_max_iter == 32


def test_validation():
    with pytest.raises(ValueError):
        DecoderConfig(image_workers=0)
    with pytest.raises(ValueError):
        DecoderConfig(preview_size=0)
