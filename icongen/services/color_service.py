"""Разбор CSS-цветов в непрозрачный RGB."""
from __future__ import annotations

import logging
from typing import Tuple

from PIL import ImageColor

logger = logging.getLogger(__name__)

WHITE: Tuple[int, int, int] = (255, 255, 255)


def parse_color(value: str) -> Tuple[int, int, int]:
    """Разбирает цвет (`#fff`, `#1a1a2e`, `rgb(...)`, `hsl(...)`, имена CSS).

    Альфа-канал отбрасывается: цвет подложки всегда непрозрачный.
    При ошибке разбора возвращается белый.
    """
    try:
        rgb = ImageColor.getrgb(value.strip())
    except (ValueError, AttributeError):
        logger.warning("Не удалось разобрать цвет %r, используется белый", value)
        return WHITE
    return rgb[0], rgb[1], rgb[2]
