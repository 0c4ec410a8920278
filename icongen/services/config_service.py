"""Загрузка параметров генерации из YAML-файла."""
from __future__ import annotations

import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import yaml

from icongen.models.errors import ConfigError
from icongen.models.options import GenerationOptions

logger = logging.getLogger(__name__)

_PATH_FIELDS = {"input_path", "output_dir", "badge_dir"}
_STR_FIELDS = {"adaptive_color", "ios_color", "badge"}
_NULLABLE_FIELDS = {"png_sizes", "badge_dir"}


def parse_sizes(value: Any) -> Tuple[int, ...]:
    """Разбирает список размеров: `"16,32"`, `[16, 32]` или одно число."""
    if isinstance(value, str):
        items: Iterable[Any] = [v for v in value.split(",") if v.strip()]
    elif isinstance(value, int) and not isinstance(value, bool):
        items = [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ConfigError(f"Некорректный список размеров: {value!r}")

    sizes = []
    for item in items:
        try:
            size = int(str(item).strip())
        except ValueError as exc:
            raise ConfigError(f"Размер должен быть целым числом: {item!r}") from exc
        if size <= 0:
            raise ConfigError(f"Размер должен быть положительным: {size}")
        sizes.append(size)
    if not sizes:
        raise ConfigError("Список размеров пуст")
    return tuple(sizes)


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        if name in _NULLABLE_FIELDS:
            return None
        raise ConfigError(f"{name} не может быть пустым")
    if name in _PATH_FIELDS:
        return Path(str(value)).expanduser()
    if name == "png_sizes":
        return parse_sizes(value)
    if name in _STR_FIELDS:
        return str(value)
    if name == "badge_angle":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"badge_angle должен быть числом: {value!r}")
        return float(value)
    if not isinstance(value, bool):
        raise ConfigError(f"{name} должен быть true/false: {value!r}")
    return value


def options_from_mapping(data: Mapping[str, Any], base: Optional[GenerationOptions] = None) -> GenerationOptions:
    """Строит `GenerationOptions` из словаря; ключи допускают `-` вместо `_`.

    Raises:
        ConfigError: неизвестный ключ, неверный тип или нет `input_path`.
    """
    known = {f.name for f in fields(GenerationOptions)}
    values: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")
        if key not in known:
            raise ConfigError(f"Неизвестный параметр конфигурации: {raw_key!r}. Допустимые: {', '.join(sorted(known))}")
        values[key] = _coerce(key, value)

    if base is not None:
        return replace(base, **values)
    if values.get("input_path") is None:
        raise ConfigError("В конфигурации не задан input_path")
    return GenerationOptions(**values)


def load_mapping(path: str | Path) -> Dict[str, Any]:
    """Читает YAML-файл и возвращает верхний словарь (пустой файл -> {})."""
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Файл конфигурации не найден: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Ошибка разбора YAML {config_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: ожидался словарь верхнего уровня")
    logger.debug("Загружена конфигурация %s (%d ключей)", config_path, len(data))
    return data


def load_options(path: str | Path, base: Optional[GenerationOptions] = None) -> GenerationOptions:
    return options_from_mapping(load_mapping(path), base=base)
