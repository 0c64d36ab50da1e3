import struct
import pytest

from alicecodec import ContentType, FractalKind, FractalPayload, PayloadTooShort, PerlinPayload, UnsupportedContentType
from alicecodec.container import parse_payload
from alicecodec.container.payload import min_payload_size, payload_content_type


def test_perlin_layout_24_bytes():
    p = PerlinPayload(2**64 - 1, 5.0, 6, 0.5, 2.0)
    b = p.to_bytes()
    assert len(b) == PerlinPayload.SIZE == 24
    assert struct.unpack("<QfIff", b) == (2**64 - 1, 5.0, 6, 0.5, 2.0)
    assert PerlinPayload.parse(b) == p


def test_perlin_floats_are_f32():
    p = PerlinPayload(1, 0.1, 3)
    assert p.scale != 0.1
    assert p.scale == pytest.approx(0.1, rel=1e-6)
    assert PerlinPayload.parse(p.to_bytes()) == p


def test_perlin_too_short():
    with pytest.raises(PayloadTooShort):
        PerlinPayload.parse(b"\x00" * 23)


def test_perlin_equation_string():
    s = PerlinPayload(42, 5.0, 6).equation_string()
    assert s == "FBM(seed=42, scale=5.00, octaves=6, persistence=0.50, lacunarity=2.00)"


def test_fractal_layout_41_bytes():
    p = FractalPayload(FractalKind.JULIA, 256, 2.0, 0.1, -0.2, -0.7, 0.27)
    b = p.to_bytes()
    assert len(b) == FractalPayload.SIZE == 41
    assert b[0] == 1
    assert struct.unpack_from("<I", b, 1)[0] == 256
    assert struct.unpack_from("<dd", b, 25) == (-0.7, 0.27)
    assert FractalPayload.parse(b) == p


def test_fractal_too_short():
    with pytest.raises(PayloadTooShort):
        FractalPayload.parse(b"\x00" * 40)


def test_fractal_equation_strings():
    m = FractalPayload(FractalKind.MANDELBROT, 256, 2.0, -0.75, 0.0)
    assert m.equation_string() == "Mandelbrot: z = z² + c, iter=256, center=(-0.750000, 0.000000)"
    j = FractalPayload(FractalKind.JULIA, 256, 2.0, 0.0, 0.0, -0.7, 0.27)
    assert j.equation_string() == "Julia: z = z² + (-0.7000, 0.2700), iter=256"
    assert FractalPayload(FractalKind.BURNING_SHIP, 64).equation_string().startswith("BurningShip:")
    assert FractalPayload(FractalKind.TRICORN, 64).equation_string() == "Tricorn: z = conj(z)² + c, iter=64"


def test_fractal_unknown_kind_still_parses():
    p = FractalPayload.parse(FractalPayload(9, 10).to_bytes())
    assert p.fractal_type == 9
    assert p.kind is None
    assert p.fractal_name() == "Unknown"
    assert p.equation_string() == "Unknown fractal"


def test_dispatch_by_content_type():
    assert min_payload_size(ContentType.LINEAR) == 8
    assert min_payload_size(ContentType.PERLIN) == 24
    assert min_payload_size(ContentType.FRACTAL) == 41
    p = parse_payload(ContentType.PERLIN, PerlinPayload(7, 2.0, 4).to_bytes())
    assert isinstance(p, PerlinPayload)
    assert payload_content_type(p) is ContentType.PERLIN
    for ct in (ContentType.POLYNOMIAL, ContentType.FOURIER, ContentType.VORONOI, ContentType.SINE_WAVE):
        with pytest.raises(UnsupportedContentType):
            parse_payload(ct, b"\x00" * 64)
