import io

import pytest
from PIL import IcnsImagePlugin, Image

from icongen.models.errors import EncodeError, UnknownValueError
from icongen.models.size_tables import DEFAULT_TABLES
from icongen.services.icns_service import IcnsPacker, parse_ostype, read_icns_elements, rle_encode
from icongen.services.ico_service import IcoPacker, read_ico_sizes
from icongen.services.png_service import PngService

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _solid(size, color=(30, 60, 90, 255)):
    return Image.new("RGBA", (size, size), color)


def _quadrants(size):
    img = Image.new("RGBA", (size, size))
    half = size // 2
    for y in range(size):
        for x in range(size):
            if x < half and y < half:
                img.putpixel((x, y), (255, 0, 0, 255))
            elif x >= half and y < half:
                img.putpixel((x, y), (0, 255, 0, 200))
            elif x < half:
                img.putpixel((x, y), (0, 0, 255, 128))
            else:
                img.putpixel((x, y), (x * 7 % 256, y * 11 % 256, 3, 255))
    return img


def _rle_decode(data, length):
    out = bytearray()
    pos = 0
    while len(out) < length:
        control = data[pos]
        if control & 0x80:
            out.extend(bytes([data[pos + 1]]) * (control - 125))
            pos += 2
        else:
            out.extend(data[pos + 1 : pos + 2 + control])
            pos += control + 2
    return bytes(out), pos


# ---------- PNG ----------

def test_png_encode_is_valid_png():
    data = PngService().encode(_solid(10))
    assert data.startswith(PNG_SIGNATURE)
    assert Image.open(io.BytesIO(data)).size == (10, 10)


# ---------- ICO ----------

def test_ico_contains_exact_size_ladder():
    images = [_solid(size) for size in DEFAULT_TABLES.ico_sizes]
    data = IcoPacker().build(images)

    assert read_ico_sizes(data) == [16, 24, 32, 48, 64, 256]
    icon = Image.open(io.BytesIO(data))
    assert set(icon.ico.sizes()) == {(s, s) for s in (16, 24, 32, 48, 64, 256)}


def test_ico_compresses_only_the_256_frame():
    packer = IcoPacker()
    small = packer.encode_frame(_solid(16))
    large = packer.encode_frame(_solid(256))
    assert small.data.startswith(PNG_SIGNATURE)
    assert large.data.startswith(PNG_SIGNATURE)

    best_small = PngService().encode(_solid(16), compress_level=9)
    assert len(small.data) > len(best_small)
    assert len(large.data) < 256 * 256


def test_ico_frames_decode_back():
    data = IcoPacker().build([_solid(16, (1, 2, 3, 255)), _solid(256, (4, 5, 6, 255))])
    icon = Image.open(io.BytesIO(data))
    icon.size = (16, 16)
    icon.load()
    assert icon.convert("RGBA").getpixel((0, 0)) == (1, 2, 3, 255)


# ---------- ICNS ----------

def test_rle_runs_and_literals():
    for channel in (b"\x07" * 300, bytes(range(200)), b"ab" * 5 + b"c" * 131 + b"xyz"):
        encoded = rle_encode(channel)
        decoded, consumed = _rle_decode(encoded, len(channel))
        assert decoded == channel
        assert consumed == len(encoded)
    assert rle_encode(b"\x07" * 130) == bytes([255, 7])
    assert rle_encode(b"q") == bytes([0]) + b"q"


def test_icns_family_layout():
    entries = [(e.ostype, _solid(e.size)) for e in DEFAULT_TABLES.icns_entries]
    data = IcnsPacker().build(entries)

    assert data[:4] == b"icns"
    elements = read_icns_elements(data)
    codes = [code for code, _ in elements]
    assert codes == [
        "is32", "s8mk", "ic11", "il32", "l8mk", "ic12",
        "ic07", "ic13", "ic08", "ic14", "ic09", "ic10",
    ]
    payloads = dict(elements)
    assert len(payloads["s8mk"]) == 16 * 16
    assert len(payloads["l8mk"]) == 32 * 32
    for code in ("ic11", "ic12", "ic07", "ic13", "ic08", "ic14", "ic09", "ic10"):
        assert payloads[code].startswith(PNG_SIGNATURE)


def test_icns_legacy_rgb_reads_back_with_pillow():
    source = _quadrants(16)
    data = IcnsPacker().build([("is32", source), ("ic11", _solid(32))])

    family = IcnsImagePlugin.IcnsFile(io.BytesIO(data))
    restored = family.getimage((16, 16, 1)).convert("RGBA")
    assert restored.tobytes() == source.tobytes()


def test_icns_opens_with_pillow_at_largest_size():
    entries = [(e.ostype, _solid(e.size)) for e in DEFAULT_TABLES.icns_entries]
    icon = Image.open(io.BytesIO(IcnsPacker().build(entries)))
    assert icon.size == (1024, 1024)


def test_icns_rejects_unknown_type_codes():
    packer = IcnsPacker()
    with pytest.raises(UnknownValueError) as excinfo:
        packer.build([("abcd", _solid(16))])
    assert "abcd" in str(excinfo.value)
    assert "is32" in excinfo.value.valid

    for bad in ("ic1", "ic100", "", "ic0я"):
        with pytest.raises(UnknownValueError):
            parse_ostype(bad)


def test_icns_legacy_type_requires_its_size():
    with pytest.raises(EncodeError):
        IcnsPacker().build([("is32", _solid(32))])
