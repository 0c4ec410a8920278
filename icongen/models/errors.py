"""Типизированные ошибки генератора иконок."""
from __future__ import annotations

from typing import Iterable, Tuple


class IconGenError(Exception):
    """Базовая ошибка: любой сбой генерации, который видит вызывающий код."""


class SourceImageError(IconGenError, ValueError):
    """Исходное изображение не декодируется или не квадратное."""


class EncodeError(IconGenError):
    """Кодек отказался кодировать/декодировать данные или файл не записан."""


class ConfigError(IconGenError, ValueError):
    """Некорректный файл конфигурации или значение параметра."""


class CatalogError(IconGenError):
    """Манифест ссылается на файл, которого нет на диске."""


class UnknownValueError(IconGenError, ValueError):
    """Неизвестное значение из фиксированного набора (бейдж, OSType и т.п.)."""

    def __init__(self, kind: str, value: object, valid: Iterable[str]) -> None:
        self.kind = kind
        self.value = value
        self.valid: Tuple[str, ...] = tuple(valid)
        super().__init__(
            f"Неизвестное значение {kind}: {value!r}. Допустимые: {', '.join(self.valid)}"
        )
