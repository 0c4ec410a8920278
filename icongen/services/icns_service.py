"""Семейство иконок macOS (ICNS): элементы `type(4) + length(4) + payload`.

Принципы:
- SRP: только упаковка уже отрендеренных растров в контейнер.
- Коды OSType проверяются до кодирования: неизвестный код прерывает всё семейство.
"""
from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from PIL import Image

from icongen.models.errors import EncodeError, UnknownValueError
from icongen.services.png_service import PngService

logger = logging.getLogger(__name__)

ICNS_MAGIC = b"icns"
HEADER_FORMAT = ">4sI"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

PNG_TYPES = frozenset(
    {"icp4", "icp5", "icp6", "ic04", "ic05", "ic07", "ic08", "ic09", "ic10", "ic11", "ic12", "ic13", "ic14"}
)
# RGB-коды старого формата: (код маски, обязательный размер, префикс данных)
RLE_TYPES: Dict[str, Tuple[str, int, bytes]] = {
    "is32": ("s8mk", 16, b""),
    "il32": ("l8mk", 32, b""),
    "ih32": ("h8mk", 48, b""),
    "it32": ("t8mk", 128, b"\x00\x00\x00\x00"),
}
KNOWN_TYPES = tuple(sorted(PNG_TYPES | set(RLE_TYPES)))


def parse_ostype(code: str) -> bytes:
    """Проверяет четырёхсимвольный код и возвращает его байты."""
    try:
        raw = code.encode("ascii")
    except (UnicodeEncodeError, AttributeError):
        raw = b""
    if len(raw) != 4 or (code not in PNG_TYPES and code not in RLE_TYPES):
        raise UnknownValueError("OSType", code, KNOWN_TYPES)
    return raw


def rle_encode(channel: bytes) -> bytes:
    """
    PackBits-подобное RLE для каналов is32/il32:
    - серия 3..130 одинаковых байтов -> (n + 125), байт
    - литерал 1..128 байтов -> (n - 1), байты
    """
    out = bytearray()
    literal = bytearray()

    def flush() -> None:
        if literal:
            out.append(len(literal) - 1)
            out.extend(literal)
            literal.clear()

    i, n = 0, len(channel)
    while i < n:
        run = 1
        while i + run < n and run < 130 and channel[i + run] == channel[i]:
            run += 1
        if run >= 3:
            flush()
            out.append(run + 125)
            out.append(channel[i])
            i += run
        else:
            literal.append(channel[i])
            i += 1
            if len(literal) == 128:
                flush()
    flush()
    return bytes(out)


def element(ostype: bytes, payload: bytes) -> bytes:
    return struct.pack(HEADER_FORMAT, ostype, len(payload) + HEADER_SIZE) + payload


class IcnsPacker:
    def __init__(self, png_service: PngService | None = None) -> None:
        self._png = png_service or PngService()

    def encode_entry(self, ostype: str, image: Image.Image) -> List[bytes]:
        """Возвращает один или два элемента (RGB + маска) для кода `ostype`."""
        raw = parse_ostype(ostype)
        if ostype in PNG_TYPES:
            return [element(raw, self._png.encode(image))]

        mask_type, expected, prefix = RLE_TYPES[ostype]
        if image.size != (expected, expected):
            raise EncodeError(f"{ostype} требует {expected}x{expected}, получено {image.width}x{image.height}")
        r, g, b, a = image.convert("RGBA").split()
        rgb = prefix + b"".join(rle_encode(band.tobytes()) for band in (r, g, b))
        return [element(raw, rgb), element(mask_type.encode("ascii"), a.tobytes())]

    def build(self, entries: Iterable[Tuple[str, Image.Image]]) -> bytes:
        body: List[bytes] = []
        for ostype, image in entries:
            body.extend(self.encode_entry(ostype, image))
            logger.debug("ICNS элемент %s (%dpx)", ostype, image.width)
        payload = b"".join(body)
        return struct.pack(HEADER_FORMAT, ICNS_MAGIC, len(payload) + HEADER_SIZE) + payload

    def write(self, entries: Iterable[Tuple[str, Image.Image]], path: Path) -> Path:
        data = self.build(entries)
        self._png.write_bytes(data, path)
        return path


def read_icns_elements(data: bytes) -> List[Tuple[str, bytes]]:
    """Разбирает семейство обратно в список (код, payload)."""
    magic, total = struct.unpack_from(HEADER_FORMAT, data, 0)
    if magic != ICNS_MAGIC or total != len(data):
        raise ValueError("Не ICNS-файл")
    out = []
    pos = HEADER_SIZE
    while pos < total:
        code, length = struct.unpack_from(HEADER_FORMAT, data, pos)
        out.append((code.decode("ascii"), data[pos + HEADER_SIZE : pos + length]))
        pos += length
    return out
