"""Параметры генерации, которые заполняет CLI или файл конфигурации."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_BADGE = "banner"


@dataclass(frozen=True)
class GenerationOptions:
    """Неизменяемый набор уже проверенных флагов одного запуска.

    Fields:
        input_path: Путь к исходному квадратному PNG.
        output_dir: Корень вывода.
        png_sizes: Явный список размеров; подавляет все платформенные рецепты.
        ico_only / icns_only / desktop_only / mobile_only: взаимоисключающие режимы «только».
        windows / macos / linux / android / ios / tauri: явный выбор платформ.
        android_round: Круглые иконки Android (включены по умолчанию).
        android_adaptive: Adaptive-иконки Android (по запросу).
        adaptive_color: Цвет фона adaptive-слоя (CSS).
        ios_color: Цвет подложки iOS-иконок (CSS).
        dev_mode: Накладывать бейдж «разработка».
        badge: Идентификатор варианта бейджа.
        badge_angle: Поворот бейджа-картинки, градусы.
        badge_dir: Каталог с пользовательскими бейджами `<id>.png`.
    """
    input_path: Path
    output_dir: Path = Path("./icons")
    png_sizes: Optional[Tuple[int, ...]] = None
    ico_only: bool = False
    icns_only: bool = False
    desktop_only: bool = False
    mobile_only: bool = False
    windows: bool = False
    macos: bool = False
    linux: bool = False
    android: bool = False
    ios: bool = False
    tauri: bool = False
    android_round: bool = True
    android_adaptive: bool = False
    adaptive_color: str = "#ffffff"
    ios_color: str = "#ffffff"
    dev_mode: bool = False
    badge: str = DEFAULT_BADGE
    badge_angle: float = 0.0
    badge_dir: Optional[Path] = None

    @property
    def has_platform_flags(self) -> bool:
        return any((self.windows, self.macos, self.linux, self.android, self.ios, self.tauri))
