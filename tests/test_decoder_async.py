import asyncio
import json
from concurrent.futures import ThreadPoolExecutor
import pytest
from PIL import Image

from alicecodec import ContainerBuilder, IoFailure, write_alice
from alicewf import Decoder, DecoderConfig, DecodedKind, PerlinContent


@pytest.mark.asyncio
async def test_load_async_alice(tmp_path):
    src = tmp_path / "p.alice"
    write_alice(src, ContainerBuilder.perlin(9, 4.0, 5).build())
    dec = Decoder(DecoderConfig(image_workers=1))
    try:
        state = await dec.load_async(src)
    finally:
        dec.close()
    assert state is dec.state
    assert dec.content == PerlinContent(seed=9, scale=4.0, octaves=5, persistence=0.5, lacunarity=2.0)


@pytest.mark.asyncio
async def test_load_async_image_and_scene(tmp_path):
    png = tmp_path / "a.png"
    Image.new("RGB", (5, 5), (255, 0, 0)).save(png)
    scene = tmp_path / "s.json"
    scene.write_text(json.dumps({"shape": "sphere"}), encoding="utf-8")
    with Decoder(DecoderConfig(image_workers=2)) as dec:
        await dec.load_async(png)
        assert dec.content_type is DecodedKind.IMAGE
        await dec.load_async(scene)
        assert dec.content_type is DecodedKind.ALICE_SDF
        assert dec.sdf_content.node_count == 1


@pytest.mark.asyncio
async def test_blocking_load_refused_inside_event_loop(tmp_path):
    src = tmp_path / "p.alice"
    write_alice(src, ContainerBuilder.perlin(1, 1.0, 1).build())
    dec = Decoder(DecoderConfig())
    with pytest.raises(RuntimeError, match="load_async"):
        dec.load(src)
    assert dec.content_type is DecodedKind.NONE


@pytest.mark.asyncio
async def test_scene_load_is_allowed_inside_event_loop(tmp_path):
    scene = tmp_path / "s.asdf.json"
    scene.write_text("{}", encoding="utf-8")
    dec = Decoder(DecoderConfig())
    dec.load(scene)
    assert dec.content_type is DecodedKind.ALICE_SDF


@pytest.mark.asyncio
async def test_async_failure_keeps_state(tmp_path):
    with Decoder(DecoderConfig()) as dec:
        with pytest.raises(IoFailure):
            await dec.load_async(tmp_path / "missing.png")
        assert dec.content_type is DecodedKind.NONE


@pytest.mark.asyncio
async def test_event_loop_stays_responsive_during_image_decode(tmp_path):
    png = tmp_path / "big.png"
    Image.new("RGB", (512, 512), (1, 2, 3)).save(png)
    ticks = 0

    async def ticker():
        nonlocal ticks
        while True:
            ticks += 1
            await asyncio.sleep(0)

    with Decoder(DecoderConfig(image_workers=1)) as dec:
        t = asyncio.create_task(ticker())
        await dec.load_async(png)
        t.cancel()
        with pytest.raises(asyncio.CancelledError):
            await t
    assert ticks > 0
    assert dec.content.width == 512


def test_injected_pool_is_not_shut_down(tmp_path):
    png = tmp_path / "a.png"
    Image.new("L", (3, 2), 128).save(png)
    pool = ThreadPoolExecutor(max_workers=1)
    try:
        with Decoder(DecoderConfig(), worker_pool=pool) as dec:
            dec.load(png)
            assert dec.content.data[0, 0].tolist() == [128, 128, 128, 255]
        assert pool.submit(lambda: 42).result() == 42
    finally:
        pool.shutdown()
