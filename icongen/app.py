"""Верхний уровень: выбор платформ по флагам и запуск рецептов."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from icongen.controllers.platform_controller import PlatformController
from icongen.controllers.render_pipeline import RenderPipeline
from icongen.models.image_model import SourceImage
from icongen.models.options import GenerationOptions
from icongen.models.size_tables import DEFAULT_TABLES, PlatformTables
from icongen.services.badge_service import (
    BadgeService,
    BuiltinBadgeAssets,
    ChainedBadgeAssets,
    DirectoryBadgeAssets,
)
from icongen.services.image_service import ImageService

logger = logging.getLogger(__name__)

WINDOWS = "windows"
MACOS = "macos"
LINUX = "linux"
ANDROID = "android"
IOS = "ios"
TAURI = "tauri"
CUSTOM = "custom"

# порядок важен: Tauri копирует уже созданные ICO/ICNS
PLATFORM_ORDER: Tuple[str, ...] = (WINDOWS, MACOS, LINUX, ANDROID, IOS, TAURI)


def plan_targets(options: GenerationOptions) -> List[str]:
    """Чистая маршрутизация флагов в упорядоченный список рецептов.

    - Явный список `png_sizes` подавляет все платформенные рецепты.
    - Режимы «только» взаимоисключающие и проверяются по порядку.
    - Явные флаги платформ выбирают ровно эти платформы.
    - Без флагов генерируются все пять платформ (без набора Tauri).
    """
    if options.png_sizes:
        return [CUSTOM]
    if options.icns_only:
        return [MACOS]
    if options.ico_only:
        return [WINDOWS]
    if options.desktop_only:
        return [WINDOWS, MACOS, LINUX]
    if options.mobile_only:
        return [ANDROID, IOS]
    if options.has_platform_flags:
        return [name for name in PLATFORM_ORDER if getattr(options, name)]
    return [WINDOWS, MACOS, LINUX, ANDROID, IOS]


def build_badge_service(options: GenerationOptions) -> BadgeService:
    if options.badge_dir is not None:
        assets = ChainedBadgeAssets(DirectoryBadgeAssets(options.badge_dir), BuiltinBadgeAssets())
        return BadgeService(assets=assets)
    return BadgeService()


class IconGenerator:
    """Один запуск: загрузка исходника, проверка, выбор и выполнение рецептов."""

    def __init__(
        self,
        options: GenerationOptions,
        tables: PlatformTables = DEFAULT_TABLES,
        image_service: Optional[ImageService] = None,
    ) -> None:
        self.options = options
        self.tables = tables
        self._image_service = image_service or ImageService()

    def run(self, source: Optional[SourceImage] = None) -> Dict[str, List[Path]]:
        """Генерирует все выбранные цели и возвращает записанные файлы по рецептам.

        Исходник загружается и проверяется до создания каталога вывода:
        некорректный вход не оставляет ни одного файла.
        """
        opts = self.options
        if source is None:
            source = self._image_service.load_image(opts.input_path)
        else:
            source = self._image_service.from_image(source.pil_image, path=source.path)

        badges = build_badge_service(opts)
        if opts.dev_mode:
            badges.validate(opts.badge)

        targets = plan_targets(opts)
        logger.info("Цели: %s", ", ".join(targets))

        output_dir = Path(opts.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        pipeline = RenderPipeline(
            source=source,
            dev_mode=opts.dev_mode,
            badge=opts.badge,
            badge_angle=opts.badge_angle,
            badges=badges,
        )
        controller = PlatformController(
            pipeline=pipeline,
            output_dir=output_dir,
            tables=self.tables,
            ios_color=opts.ios_color,
            adaptive_color=opts.adaptive_color,
            android_round=opts.android_round,
            android_adaptive=opts.android_adaptive,
        )

        recipes = {
            WINDOWS: controller.generate_windows,
            MACOS: controller.generate_macos,
            LINUX: controller.generate_linux,
            ANDROID: controller.generate_android,
            IOS: controller.generate_ios,
            TAURI: controller.generate_tauri,
            CUSTOM: lambda: controller.generate_custom(opts.png_sizes or ()),
        }
        written: Dict[str, List[Path]] = {}
        for target in targets:
            written[target] = recipes[target]()
        logger.info("Готово: %d файлов в %s", sum(len(v) for v in written.values()), output_dir)
        return written
