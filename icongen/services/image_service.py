"""Загрузка исходного изображения с диска и проверка квадратности.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- OCP: новые источники (байты, поток) добавляются отдельными методами.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from icongen.models.errors import SourceImageError
from icongen.models.image_model import SourceImage

logger = logging.getLogger(__name__)


class ImageService:
    def load_image(self, file_path: str | Path) -> SourceImage:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `SourceImage` c `PIL.Image.Image` в режиме RGBA.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            SourceImageError: если файл не распознан как изображение или не квадратный.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as opened:
                pil_image = opened.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            raise SourceImageError(f"Файл не является изображением: {path}") from exc

        source = self.from_image(pil_image, path=path)
        logger.debug("Загружено %s (%dx%d)", path, source.size, source.size)
        return source

    def from_image(
        self,
        pil_image: Image.Image,
        path: Optional[Path] = None,
    ) -> SourceImage:
        """Оборачивает готовый растр PIL, проверяя, что он квадратный."""
        width, height = pil_image.size
        if width != height:
            raise SourceImageError(
                f"Исходное изображение должно быть квадратным (ширина == высота), получено {width}x{height}"
            )
        if width == 0:
            raise SourceImageError("Исходное изображение пустое")
        if pil_image.mode != "RGBA":
            pil_image = pil_image.convert("RGBA")
        return SourceImage(path=path, pil_image=pil_image, size=width)
