"""Кодирование и запись одиночных PNG."""
from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image

from icongen.models.errors import EncodeError

logger = logging.getLogger(__name__)

BEST_COMPRESSION = 9
NO_COMPRESSION = 0


class PngService:
    def encode(self, image: Image.Image, compress_level: int = BEST_COMPRESSION) -> bytes:
        """Кодирует RGBA-растр в PNG.

        Pillow выбирает адаптивную фильтрацию строк для RGBA; `compress_level`
        задаёт уровень zlib (0 = хранение без сжатия, 9 = максимальное).

        Raises:
            EncodeError: если кодек отказал.
        """
        buffer = io.BytesIO()
        try:
            image.convert("RGBA").save(buffer, format="PNG", compress_level=compress_level)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Не удалось закодировать PNG {image.width}x{image.height}") from exc
        return buffer.getvalue()

    def write_bytes(self, data: bytes, path: Path) -> None:
        """Записывает готовые байты одним вызовом, создавая родительский каталог."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise EncodeError(f"Не удалось записать файл: {path}") from exc

    def save(self, image: Image.Image, path: Path) -> Path:
        """Кодирует с максимальным сжатием и записывает PNG на диск."""
        self.write_bytes(self.encode(image), path)
        logger.debug("Записан %s (%dx%d)", path, image.width, image.height)
        return path
