"""Модель Contents.json для asset catalog Apple (iOS и macOS).

Принципы:
- SRP: только структура документа и его сериализация в JSON.
- Порядок ключей совпадает с порядком объявления полей; отсутствующие
  необязательные поля не выводятся вовсе (никаких null).
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

CATALOG_VERSION = 1
CATALOG_AUTHOR = "icon-gen"


def _key(name: str) -> str:
    """Имя поля Python -> ключ Apple (`expected_size` -> `expected-size`)."""
    return name.replace("_", "-")


def _to_dict(obj: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if hasattr(value, "__dataclass_fields__"):
            value = _to_dict(value)
        elif isinstance(value, list):
            value = [_to_dict(v) if hasattr(v, "__dataclass_fields__") else v for v in value]
        out[_key(f.name)] = value
    return out


@dataclass
class ImageRecord:
    """Одна запись `images[]`: файл и атрибуты, по которым Xcode выбирает слот."""
    filename: Optional[str] = None
    idiom: Optional[str] = None
    scale: Optional[str] = None
    size: Optional[str] = None
    expected_size: Optional[str] = None
    role: Optional[str] = None
    subtype: Optional[str] = None
    folder: Optional[str] = None
    graphics_feature_set: Optional[str] = None
    memory: Optional[str] = None
    color_space: Optional[str] = None
    display_gamut: Optional[str] = None
    compression_type: Optional[str] = None
    language_direction: Optional[str] = None
    screen_width: Optional[str] = None
    template_rendering_intent: Optional[str] = None
    width_class: Optional[str] = None
    height_class: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)


@dataclass
class CatalogInfo:
    version: int = CATALOG_VERSION
    author: str = CATALOG_AUTHOR


@dataclass
class CatalogProperties:
    on_demand_resource_tags: Optional[List[str]] = None
    preserves_vector_representation: Optional[bool] = None


@dataclass
class AssetCatalogManifest:
    """Корневой документ Contents.json."""
    images: List[ImageRecord] = field(default_factory=list)
    info: CatalogInfo = field(default_factory=CatalogInfo)
    properties: Optional[CatalogProperties] = None

    def add_image(self, record: ImageRecord) -> None:
        self.images.append(record)

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2) + "\n"
