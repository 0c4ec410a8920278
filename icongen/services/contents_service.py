"""Построение и запись Contents.json для iOS и macOS.

Принципы:
- SRP: правила полей записей и запись документа; растры здесь не трогаются.
- Каждый каталог платформы получает свой документ, каталоги не объединяются.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from icongen.models.contents_model import AssetCatalogManifest, ImageRecord
from icongen.models.errors import CatalogError, EncodeError
from icongen.models.size_tables import IcnsEntry, SizeSpec

logger = logging.getLogger(__name__)

CONTENTS_FILENAME = "Contents.json"


def ios_record(spec: SizeSpec) -> ImageRecord:
    """Запись iOS-слота: idiom, роль и размеры берутся из `SizeSpec`."""
    return ImageRecord(
        filename=spec.filename,
        idiom=spec.idiom,
        scale=spec.scale_label,
        size=spec.size_label,
        expected_size=str(spec.pixel_size),
        role=spec.role,
        subtype=spec.subtype,
    )


def mac_record(entry: IcnsEntry, filename: str) -> ImageRecord:
    """Запись macOS-слота; все слоты ссылаются на собранный `icon.icns`."""
    return ImageRecord(
        filename=filename,
        idiom="mac",
        scale="2x" if entry.is_retina else "1x",
        size=entry.nominal_size,
        expected_size=str(entry.size),
        folder=".",
    )


class CatalogBuilder:
    """Накопитель записей для одного каталога вывода."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.manifest = AssetCatalogManifest()

    def add(self, record: ImageRecord) -> None:
        self.manifest.add_image(record)

    def missing_files(self) -> List[str]:
        """Имена файлов, которых нет в каталоге манифеста (с учётом `folder`)."""
        missing = []
        for record in self.manifest.images:
            if record.filename is None:
                continue
            folder = self.directory / (record.folder or ".")
            if not (folder / record.filename).is_file():
                missing.append(record.filename)
        return missing

    def write(self) -> Path:
        """Проверяет ссылки на файлы и пишет Contents.json.

        Raises:
            CatalogError: если запись ссылается на несуществующий файл.
            EncodeError: если файл не удалось записать.
        """
        missing = self.missing_files()
        if missing:
            raise CatalogError(
                f"{CONTENTS_FILENAME} в {self.directory} ссылается на отсутствующие файлы: {', '.join(missing)}"
            )
        path = self.directory / CONTENTS_FILENAME
        try:
            path.write_text(self.manifest.to_json(), encoding="utf-8")
        except OSError as exc:
            raise EncodeError(f"Не удалось записать {path}") from exc
        logger.debug("%s: %d записей", path, len(self.manifest.images))
        return path
