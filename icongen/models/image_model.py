"""Модели растров: исходное изображение и производные варианты.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class SourceImage:
    """Неизменяемая модель исходного изображения.

    Fields:
        path: Путь к исходному файлу (None, если изображение создано в памяти).
        pil_image: Декодированное изображение PIL в режиме RGBA.
        size: Сторона квадрата, px.

    Изображение только читается: все варианты получаются ресемплингом в копии.
    """
    path: Optional[Path]
    pil_image: Image.Image
    size: int


@dataclass(frozen=True)
class RenderedVariant:
    """Производный RGBA-растр одного размера и путь, куда он будет записан.

    Fields:
        image: Растр (после ресемплинга и композитинга).
        relative_path: Путь файла относительно корня вывода.
    """
    image: Image.Image
    relative_path: Path
