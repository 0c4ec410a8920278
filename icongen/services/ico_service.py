"""Упаковка многокадрового Windows ICO из PNG-кадров."""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from PIL import Image

from icongen.services.png_service import BEST_COMPRESSION, NO_COMPRESSION, PngService

logger = logging.getLogger(__name__)

ICONDIR_FORMAT = "<HHH"  # reserved, type (1 = icon), count
ICONDIRENTRY_FORMAT = "<BBBBHHII"
ICONDIR_SIZE = struct.calcsize(ICONDIR_FORMAT)
ICONDIRENTRY_SIZE = struct.calcsize(ICONDIRENTRY_FORMAT)
COMPRESSED_FRAME_SIZE = 256


@dataclass(frozen=True)
class IconContainerEntry:
    """Один упакованный кадр контейнера: размер, байты и тег типа."""
    size: int
    data: bytes
    type_tag: str = "png"


class IcoPacker:
    def __init__(self, png_service: PngService | None = None) -> None:
        self._png = png_service or PngService()

    def encode_frame(self, image: Image.Image) -> IconContainerEntry:
        """
        Кадр 256px сжимается максимально; меньшие кадры хранятся как PNG
        без сжатия (zlib level 0).
        """
        size = image.width
        level = BEST_COMPRESSION if size >= COMPRESSED_FRAME_SIZE else NO_COMPRESSION
        return IconContainerEntry(size=size, data=self._png.encode(image, compress_level=level))

    def pack(self, frames: Sequence[IconContainerEntry]) -> bytes:
        """Собирает ICONDIR + ICONDIRENTRY[] + данные кадров в одну строку байтов."""
        header = struct.pack(ICONDIR_FORMAT, 0, 1, len(frames))
        offset = ICONDIR_SIZE + ICONDIRENTRY_SIZE * len(frames)

        directory: List[bytes] = []
        for frame in frames:
            # 0 означает 256 в поле размера ICO
            dim = 0 if frame.size >= 256 else frame.size
            directory.append(
                struct.pack(ICONDIRENTRY_FORMAT, dim, dim, 0, 0, 1, 32, len(frame.data), offset)
            )
            offset += len(frame.data)

        return header + b"".join(directory) + b"".join(f.data for f in frames)

    def build(self, images: Iterable[Image.Image]) -> bytes:
        frames = [self.encode_frame(img) for img in images]
        for frame in frames:
            logger.debug("ICO кадр %dpx: %d байт", frame.size, len(frame.data))
        return self.pack(frames)

    def write(self, images: Iterable[Image.Image], path: Path) -> Path:
        """Кодирует все кадры в памяти и только затем пишет файл целиком."""
        data = self.build(images)
        self._png.write_bytes(data, path)
        return path


def read_ico_sizes(data: bytes) -> List[int]:
    """Читает каталог ICO и возвращает размеры кадров в порядке записи."""
    reserved, kind, count = struct.unpack_from(ICONDIR_FORMAT, data, 0)
    if reserved != 0 or kind != 1:
        raise ValueError("Не ICO-файл")
    sizes = []
    for i in range(count):
        width = struct.unpack_from(ICONDIRENTRY_FORMAT, data, ICONDIR_SIZE + i * ICONDIRENTRY_SIZE)[0]
        sizes.append(width or 256)
    return sizes
