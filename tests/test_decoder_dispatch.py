import json
import logging
import numpy as np
import pytest
from PIL import Image

from alicecodec import (
    ContainerBuilder, FractalKind, Header, ContentType, IoFailure, TooShort, UnsupportedContentType,
    UnsupportedFormat, write_alice,
)
from alicewf import (
    Decoder, DecoderConfig, DecodedKind, FractalContent, PerlinContent, RasterContent, SceneContent,
)
from alicewf.decoder import ASP_PLACEHOLDER, LEGACY_FRACTAL

CFG = DecoderConfig(image_workers=1)


def _write(tmp_path, name, f):
    dst = tmp_path / name
    write_alice(dst, f)
    return dst


def test_fresh_decoder_is_empty():
    dec = Decoder(CFG)
    assert dec.content_type is DecodedKind.NONE
    assert dec.content is None and dec.file_path is None
    assert dec.original_size == 0 and dec.compressed_size == 0
    assert dec.compression_ratio == 1.0
    assert not dec.is_procedural


def test_linear_is_shown_as_perlin(tmp_path):
    f = ContainerBuilder.from_linear(32767, 163824115, 1000).sensor_id("TEMP-001").unit("°C").build()
    src = _write(tmp_path, "sensor.alice", f)
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content_type is DecodedKind.ALICE_ZIP
    assert dec.content == PerlinContent(seed=32767, scale=5.999847412109375, octaves=6,
                                        persistence=0.5, lacunarity=2.0)
    assert dec.file_path == str(src)
    assert dec.original_size == 4000
    assert dec.compressed_size == f.header.compressed_size
    assert dec.alice_file == f
    assert dec.is_procedural


def test_negative_slope_seed_is_sign_extended(tmp_path):
    src = _write(tmp_path, "neg.alz", ContainerBuilder.from_linear(-65536, 0, 10).build())
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content.seed == 2**64 - 65536
    assert dec.content.scale == 11.0


def test_perlin_passthrough(tmp_path):
    src = _write(tmp_path, "p.alice", ContainerBuilder.perlin(2**63 + 5, 3.5, 7).build())
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content == PerlinContent(seed=2**63 + 5, scale=3.5, octaves=7, persistence=0.5, lacunarity=2.0)


def test_fractal_passthrough(tmp_path):
    julia = _write(tmp_path, "j.alice", ContainerBuilder.julia(300, -0.7, 0.27).build())
    mandel = _write(tmp_path, "m.alice", ContainerBuilder.mandelbrot(128, -0.5, 0.25).build())
    with Decoder(CFG) as dec:
        dec.load(julia)
        assert dec.content == FractalContent(FractalKind.JULIA, 300, 2.0, (0.0, 0.0), (-0.7, 0.27))
        dec.load(mandel)
        assert dec.content == FractalContent(FractalKind.MANDELBROT, 128, 2.0, (-0.5, 0.25), None)


def test_legacy_blob_without_magic(tmp_path, caplog):
    src = tmp_path / "old.alz"
    src.write_bytes(b"LEGACYDATA" * 10)
    with caplog.at_level(logging.WARNING, logger="alicewf.decoder"):
        with Decoder(CFG) as dec:
            dec.load(src)
    assert dec.content_type is DecodedKind.ALICE_ZIP
    assert dec.content == LEGACY_FRACTAL
    assert dec.content.center == (-0.75, 0.0) and dec.content.max_iterations == 256
    assert dec.original_size == 50_000 and dec.compressed_size == 100
    assert dec.alice_file is None
    assert "legacy" in caplog.text


def test_asp_placeholder(tmp_path):
    src = tmp_path / "stream.asp"
    src.write_bytes(b"\x00" * 10)
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content_type is DecodedKind.ASP_STREAM
    assert dec.content == ASP_PLACEHOLDER
    assert dec.content == PerlinContent(seed=12345, scale=5.0, octaves=8, persistence=0.5, lacunarity=2.0)
    assert dec.original_size == 10_000 and dec.compressed_size == 10


def test_image_is_decoded_to_readonly_rgba(tmp_path):
    src = tmp_path / "pic.png"
    Image.new("RGB", (4, 3), (10, 20, 30)).save(src)
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content_type is DecodedKind.IMAGE
    raster = dec.content
    assert isinstance(raster, RasterContent)
    assert (raster.width, raster.height) == (4, 3)
    assert raster.data.shape == (3, 4, 4) and raster.data.dtype == np.uint8
    assert raster.data[0, 0].tolist() == [10, 20, 30, 255]
    assert not raster.data.flags.writeable
    assert dec.original_size == 48
    assert dec.compressed_size == src.stat().st_size
    assert not dec.is_procedural


def test_uppercase_extension(tmp_path):
    src = tmp_path / "PIC.PNG"
    Image.new("RGBA", (2, 2)).save(src, format="PNG")
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content_type is DecodedKind.IMAGE


def test_json_scene(tmp_path):
    src = tmp_path / "scene.asdf.json"
    doc = {"version": "0.2.0", "root": {"op": "union", "children": [{"shape": "sphere"}, {"shape": "box"}]}}
    src.write_text(json.dumps(doc), encoding="utf-8")
    with Decoder(CFG) as dec:
        dec.load(src)
    assert dec.content_type is DecodedKind.ALICE_SDF
    assert dec.content is None
    assert dec.sdf_content.node_count == 3
    assert dec.sdf_content.version == "0.2.0"
    size = src.stat().st_size
    assert dec.compressed_size == size and dec.original_size == size * 100


def test_binary_scene_needs_a_loader(tmp_path):
    src = tmp_path / "scene.asdf"
    src.write_bytes(b"\x00binary")
    with pytest.raises(UnsupportedFormat):
        Decoder(CFG).load(src)

    calls = []

    def loader(p):
        calls.append(p)
        return SceneContent(tree="opaque", node_count=7, version="1.0.0")

    with Decoder(CFG, scene_loader=loader) as dec:
        dec.load(src)
    assert calls and dec.sdf_content.node_count == 7
    assert dec.content_type is DecodedKind.ALICE_SDF


@pytest.mark.parametrize("name", ["clip.mp4", "clip.WEBM", "clip.avi", "clip.mov"])
def test_video_is_unsupported(tmp_path, name):
    with pytest.raises(UnsupportedFormat, match="Video"):
        Decoder(CFG).load(tmp_path / name)


@pytest.mark.parametrize("name", ["notes.txt", "noext"])
def test_unknown_extension(tmp_path, name):
    with pytest.raises(UnsupportedFormat, match="Unknown file format"):
        Decoder(CFG).load(tmp_path / name)


def test_failed_load_keeps_previous_state(tmp_path):
    good = _write(tmp_path, "good.alice", ContainerBuilder.perlin(1, 2.0, 3).build())
    corrupt = tmp_path / "corrupt.alice"
    corrupt.write_bytes(b"ALICE\x01")
    poly = tmp_path / "poly.alice"
    poly.write_bytes(Header(ContentType.POLYNOMIAL).to_bytes() + b"\x00" * 16)
    not_png = tmp_path / "fake.png"
    not_png.write_bytes(b"not an image")

    with Decoder(CFG) as dec:
        dec.load(good)
        before = dec.state
        with pytest.raises(TooShort):
            dec.load(corrupt)
        with pytest.raises(UnsupportedContentType):
            dec.load(poly)
        with pytest.raises(IoFailure):
            dec.load(tmp_path / "missing.alice")
        with pytest.raises(IoFailure):
            dec.load(not_png)
        with pytest.raises(IoFailure):
            dec.load(tmp_path / "missing.json")
        with pytest.raises(UnsupportedFormat):
            dec.load(tmp_path / "x.mp4")
        assert dec.state is before
        assert dec.file_path == str(good)


def test_failed_first_load_leaves_empty_state(tmp_path):
    dec = Decoder(CFG)
    with pytest.raises(IoFailure):
        dec.load(tmp_path / "missing.asp")
    assert dec.content_type is DecodedKind.NONE
    assert dec.content is None and dec.file_path is None


def test_io_failure_is_an_oserror(tmp_path):
    with pytest.raises(OSError):
        Decoder(CFG).load(tmp_path / "missing.alice")


def test_decompression_bomb_is_an_io_failure(tmp_path, monkeypatch):
    src = tmp_path / "big.png"
    Image.new("RGB", (100, 100)).save(src)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with Decoder(CFG) as dec:
        with pytest.raises(IoFailure) as ei:
            dec.load(src)
        assert isinstance(ei.value.__cause__, Image.DecompressionBombError)
        assert dec.content_type is DecodedKind.NONE
