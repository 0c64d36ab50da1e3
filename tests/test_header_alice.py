import struct
import pytest

from alicecodec import (
    HEADER_SIZE, MAGIC, VERSION, BadMagic, ContentType, Header, TooShort,
    UnknownContentType, parse_header,
)


def test_header_is_32_bytes_little_endian():
    h = Header(ContentType.PERLIN, original_size=0x0102030405060708, compressed_size=77, metadata_length=9, flags=3)
    b = h.to_bytes()
    assert HEADER_SIZE == 32 and len(b) == 32
    assert b[:5] == MAGIC
    assert b[5] == VERSION and b[6] == 2 and b[7] == 3
    assert b[8:16] == bytes([8, 7, 6, 5, 4, 3, 2, 1])
    assert struct.unpack_from("<Q", b, 16)[0] == 77
    assert struct.unpack_from("<I", b, 24)[0] == 9
    assert b[28:32] == b"\x00\x00\x00\x00"


@pytest.mark.parametrize("ct", list(ContentType))
@pytest.mark.parametrize("sizes", [(0, 0, 0), (1, 2, 3), (2**64 - 1, 2**63, 2**32 - 1)])
def test_header_roundtrip_identity(ct, sizes):
    orig, comp, meta = sizes
    h = Header(ct, original_size=orig, compressed_size=comp, metadata_length=meta, version=VERSION, flags=255)
    assert parse_header(h.to_bytes()) == h


def test_header_too_short_for_every_length_below_32():
    full = Header(ContentType.LINEAR).to_bytes()
    for n in range(32):
        with pytest.raises(TooShort):
            parse_header(full[:n])


def test_header_bad_magic():
    b = bytearray(Header(ContentType.LINEAR).to_bytes())
    b[:5] = b"ALICX"
    with pytest.raises(BadMagic):
        parse_header(bytes(b))


def test_header_unknown_tag_is_reported():
    b = bytearray(Header(ContentType.LINEAR).to_bytes())
    b[6] = 99
    with pytest.raises(UnknownContentType) as ei:
        parse_header(bytes(b))
    assert ei.value.tag == 99
    # les erreurs de format restent des ValueError
    assert isinstance(ei.value, ValueError)


def test_header_ignores_trailing_bytes():
    h = Header(ContentType.FRACTAL, original_size=10, compressed_size=5)
    assert parse_header(h.to_bytes() + b"\xff" * 40) == h


def test_compression_ratio():
    assert Header(ContentType.LINEAR, original_size=4000, compressed_size=80).compression_ratio() == 50.0
    assert Header(ContentType.LINEAR, original_size=100, compressed_size=0).compression_ratio() == 1.0


def test_content_type_display_names():
    assert ContentType.LINEAR.display_name == "Linear"
    assert ContentType.PERLIN.display_name == "Perlin Noise"
    assert ContentType.FOURIER.display_name == "Fourier Series"
    assert ContentType.SINE_WAVE.display_name == "Sine Wave"
    assert ContentType.from_tag(3) is ContentType.FRACTAL
    with pytest.raises(UnknownContentType):
        ContentType.from_tag(7)
