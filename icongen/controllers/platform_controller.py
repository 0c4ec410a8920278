"""Платформенные рецепты: таблица размеров -> растры -> упаковщики -> файлы.

SOLID:
- SRP: контроллер только упорядочивает вызовы; пиксельная математика в сервисах.
- DIP: таблицы размеров и сервисы передаются снаружи, по умолчанию `DEFAULT_TABLES`.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Sequence

from icongen.controllers.render_pipeline import RenderPipeline
from icongen.models.errors import EncodeError
from icongen.models.image_model import RenderedVariant
from icongen.models.size_tables import DEFAULT_TABLES, PlatformTables
from icongen.services.color_service import parse_color
from icongen.services.compositor_service import CompositorService
from icongen.services.contents_service import CatalogBuilder, ios_record, mac_record
from icongen.services.icns_service import IcnsPacker, parse_ostype
from icongen.services.ico_service import IcoPacker
from icongen.services.png_service import PngService

logger = logging.getLogger(__name__)

ICO_NAME = "icon.ico"
ICNS_NAME = "icon.icns"
ANDROID_DIR = "android"
ANYDPI_DIR = "mipmap-anydpi-v26"
IOS_DIR = "ios"
TAURI_DIR = "tauri-desktop"

ADAPTIVE_ICON_XML = """<?xml version="1.0" encoding="utf-8"?>
<adaptive-icon xmlns:android="http://schemas.android.com/apk/res/android">
    <background android:drawable="@mipmap/ic_launcher_background"/>
    <foreground android:drawable="@mipmap/ic_launcher_foreground"/>
</adaptive-icon>
"""


@dataclass
class PlatformController:
    """Набор рецептов для одного корня вывода.

    Ответственности:
    - Перечисление слотов каждой платформы по `PlatformTables`.
    - Получение растров через `RenderPipeline` и `CompositorService`.
    - Запись файлов через упаковщики и `CatalogBuilder`.
    """
    pipeline: RenderPipeline
    output_dir: Path
    tables: PlatformTables = DEFAULT_TABLES
    ios_color: str = "#ffffff"
    adaptive_color: str = "#ffffff"
    android_round: bool = True
    android_adaptive: bool = False

    compositor: CompositorService = field(default_factory=CompositorService)
    png: PngService = field(default_factory=PngService)
    ico: IcoPacker = field(default_factory=IcoPacker)
    icns: IcnsPacker = field(default_factory=IcnsPacker)
    # ICO/ICNS, собранные в корне вывода в этом запуске
    _containers: Dict[str, Path] = field(default_factory=dict, init=False, repr=False)

    # ---- Persist ----
    def _persist(self, variant: RenderedVariant) -> Path:
        path = self.png.save(variant.image, self.output_dir / variant.relative_path)
        logger.info("✓ %s", variant.relative_path.as_posix())
        return path

    # ---- Windows ----
    def generate_windows(self) -> List[Path]:
        path = self._write_ico(self.output_dir / ICO_NAME)
        self._containers[ICO_NAME] = path
        return [path]

    def _write_ico(self, path: Path) -> Path:
        logger.info("Генерация %s...", ICO_NAME)
        frames = [self.pipeline.render(size) for size in self.tables.ico_sizes]
        self.ico.write(frames, path)
        logger.info("✓ %s", ICO_NAME)
        return path

    # ---- macOS ----
    def generate_macos(self) -> List[Path]:
        icns_path = self._write_icns(self.output_dir / ICNS_NAME)
        self._containers[ICNS_NAME] = icns_path
        catalog = CatalogBuilder(self.output_dir)
        for entry in self.tables.icns_entries:
            catalog.add(mac_record(entry, ICNS_NAME))
        return [icns_path, catalog.write()]

    def _write_icns(self, path: Path) -> Path:
        logger.info("Генерация %s...", ICNS_NAME)
        # все коды проверяются до того, как что-либо будет отрендерено
        for entry in self.tables.icns_entries:
            parse_ostype(entry.ostype)
        entries = [(entry.ostype, self.pipeline.render(entry.size)) for entry in self.tables.icns_entries]
        self.icns.write(entries, path)
        logger.info("✓ %s", ICNS_NAME)
        return path

    # ---- Linux ----
    def generate_linux(self) -> List[Path]:
        logger.info("Генерация иконок Linux...")
        written = []
        for size in self.tables.linux_sizes:
            name = self.tables.linux_launcher_name if size == self.tables.linux_launcher_size else f"{size}x{size}.png"
            written.append(self._persist(RenderedVariant(self.pipeline.render(size), Path(name))))
        return written

    # ---- Custom sizes ----
    def generate_custom(self, sizes: Sequence[int]) -> List[Path]:
        logger.info("Генерация PNG заданных размеров...")
        return [
            self._persist(RenderedVariant(self.pipeline.render(size), Path(f"{size}x{size}.png")))
            for size in sizes
        ]

    # ---- Android ----
    def render_android(self) -> Iterator[RenderedVariant]:
        """Растры Android по одному, без записи: стандартные, круглые и adaptive-слои."""
        background = parse_color(self.adaptive_color)
        for density in self.tables.android_densities:
            folder = Path(ANDROID_DIR) / density.folder
            launcher = self.pipeline.render(density.launcher_size)
            yield RenderedVariant(launcher, folder / "ic_launcher.png")

            if self.android_round:
                rounded = self.compositor.circular_mask(launcher)
                yield RenderedVariant(rounded, folder / "ic_launcher_round.png")

            if self.android_adaptive:
                canvas_size = density.adaptive_size
                inner = max(1, round(canvas_size * self.tables.adaptive_safe_zone))
                canvas = self.compositor.transparent(canvas_size)
                foreground = self.compositor.overlay_centered(canvas, self.pipeline.render(inner))
                yield RenderedVariant(foreground, folder / "ic_launcher_foreground.png")
                yield RenderedVariant(self.compositor.solid(canvas_size, background), folder / "ic_launcher_background.png")

    def generate_android(self) -> List[Path]:
        logger.info("Генерация иконок Android...")
        written = [self._persist(v) for v in self.render_android()]
        if self.android_adaptive:
            anydpi = self.output_dir / ANDROID_DIR / ANYDPI_DIR
            for name in ("ic_launcher.xml", "ic_launcher_round.xml"):
                path = anydpi / name
                self.png.write_bytes(ADAPTIVE_ICON_XML.encode("utf-8"), path)
                logger.info("✓ %s/%s/%s", ANDROID_DIR, ANYDPI_DIR, name)
                written.append(path)
        return written

    # ---- iOS ----
    def render_ios(self) -> Iterator[RenderedVariant]:
        """Растры iOS-слотов по одному, уже залитые цветом подложки."""
        color = parse_color(self.ios_color)
        for spec in self.tables.ios_slots:
            image = self.compositor.composite_background(self.pipeline.render(spec.pixel_size), color)
            yield RenderedVariant(image, Path(IOS_DIR) / spec.filename)

    def generate_ios(self) -> List[Path]:
        logger.info("Генерация иконок iOS...")
        written = [self._persist(v) for v in self.render_ios()]
        catalog = CatalogBuilder(self.output_dir / IOS_DIR)
        for spec in self.tables.ios_slots:
            catalog.add(ios_record(spec))
        written.append(catalog.write())
        return written

    # ---- Tauri ----
    def generate_tauri(self) -> List[Path]:
        """PNG для папки иконок Tauri плюс копии ICO/ICNS.

        Копируются только контейнеры, собранные этим же запуском. Если ICO/ICNS
        этим запуском не собирались (файлы прошлых запусков не в счёт), они
        собираются прямо в каталог Tauri, без Contents.json.
        """
        logger.info("Генерация набора Tauri...")
        tauri_dir = self.output_dir / TAURI_DIR
        tauri_dir.mkdir(parents=True, exist_ok=True)
        written = [
            self._persist(RenderedVariant(self.pipeline.render(size), Path(TAURI_DIR) / name))
            for name, size in self.tables.tauri_pngs
        ]

        for name, writer in ((ICO_NAME, self._write_ico), (ICNS_NAME, self._write_icns)):
            produced = self._containers.get(name)
            target = tauri_dir / name
            if produced is not None:
                try:
                    shutil.copyfile(produced, target)
                except OSError as exc:
                    raise EncodeError(f"Не удалось скопировать {produced} в {target}") from exc
                logger.info("✓ %s/%s (копия)", TAURI_DIR, name)
            else:
                writer(target)
            written.append(target)
        return written
