"""Статические таблицы размеров для всех платформ.

Принципы:
- SRP: только декларации размеров, имён и правил Apple для idiom/role.
- OCP: новый слот добавляется строкой в таблицу, оркестраторы не меняются.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


def format_points(value: float) -> str:
    """Форматирует размер в пунктах без хвостового `.0` (20 -> "20", 83.5 -> "83.5")."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def ios_idiom(base: float, pixel_size: int) -> str:
    """Семейство устройств слота iOS по базовому размеру."""
    if pixel_size == 1024:
        return "ios-marketing"
    if base in (20, 29, 40, 57, 60):
        return "iphone"
    if base in (76, 83.5):
        return "ipad"
    raise ValueError(f"Нет правила idiom для размера {format_points(base)}pt")


def ios_role(base: float, pixel_size: int) -> Optional[str]:
    """Роль иконки iOS; у маркетинговой иконки роли нет."""
    if pixel_size == 1024:
        return None
    roles = {
        20: "notificationCenter",
        29: "companionSettings",
        40: "spotlight",
        57: "appLauncher",
        60: "appLauncher",
        76: "appLauncher",
        83.5: "appLauncher",
    }
    return roles.get(base)


@dataclass(frozen=True)
class SizeSpec:
    """Запрос одного слота asset catalog: базовый размер в пунктах и множитель."""
    base: float
    scale: int
    idiom: str
    role: Optional[str] = None
    subtype: Optional[str] = None

    @property
    def pixel_size(self) -> int:
        return int(round(self.base * self.scale))

    @property
    def size_label(self) -> str:
        points = format_points(self.base)
        return f"{points}x{points}"

    @property
    def scale_label(self) -> str:
        return f"{self.scale}x"

    @property
    def filename(self) -> str:
        return f"AppIcon-{self.size_label}@{self.scale_label}.png"


@dataclass(frozen=True)
class IcnsEntry:
    """Элемент семейства ICNS: номинальное имя, размер в px и код OSType."""
    name: str
    size: int
    ostype: str

    @property
    def is_retina(self) -> bool:
        return self.name.endswith("@2x")

    @property
    def nominal_size(self) -> str:
        return self.name[: -len("@2x")] if self.is_retina else self.name


@dataclass(frozen=True)
class AndroidDensity:
    """Плотность Android: имя корзины, размер лаунчера и холст adaptive-иконки."""
    name: str
    launcher_size: int
    adaptive_size: int

    @property
    def folder(self) -> str:
        return f"mipmap-{self.name}"


def _ios_slots(ladder: Tuple[Tuple[float, Tuple[int, ...]], ...]) -> Tuple[SizeSpec, ...]:
    slots = []
    for base, scales in ladder:
        for scale in scales:
            pixel_size = int(round(base * scale))
            slots.append(
                SizeSpec(
                    base=base,
                    scale=scale,
                    idiom=ios_idiom(base, pixel_size),
                    role=ios_role(base, pixel_size),
                )
            )
    return tuple(slots)


IOS_LADDER: Tuple[Tuple[float, Tuple[int, ...]], ...] = (
    (20, (1, 2, 3)),
    (29, (1, 2, 3)),
    (40, (1, 2, 3)),
    (57, (1, 2)),  # legacy iPhone launcher
    (60, (2, 3)),
    (76, (1, 2)),
    (83.5, (2,)),  # iPad Pro, 167 px
    (1024, (1,)),
)


@dataclass(frozen=True)
class PlatformTables:
    """Все таблицы размеров, загружаются один раз и передаются оркестраторам."""
    ico_sizes: Tuple[int, ...] = (16, 24, 32, 48, 64, 256)
    icns_entries: Tuple[IcnsEntry, ...] = (
        IcnsEntry("16x16", 16, "is32"),
        IcnsEntry("16x16@2x", 32, "ic11"),
        IcnsEntry("32x32", 32, "il32"),
        IcnsEntry("32x32@2x", 64, "ic12"),
        IcnsEntry("128x128", 128, "ic07"),
        IcnsEntry("128x128@2x", 256, "ic13"),
        IcnsEntry("256x256", 256, "ic08"),
        IcnsEntry("256x256@2x", 512, "ic14"),
        IcnsEntry("512x512", 512, "ic09"),
        IcnsEntry("512x512@2x", 1024, "ic10"),
    )
    linux_sizes: Tuple[int, ...] = (32, 64, 128, 256, 512)
    linux_launcher_size: int = 512
    linux_launcher_name: str = "icon.png"
    android_densities: Tuple[AndroidDensity, ...] = (
        AndroidDensity("mdpi", 48, 108),
        AndroidDensity("hdpi", 72, 162),
        AndroidDensity("xhdpi", 96, 216),
        AndroidDensity("xxhdpi", 144, 324),
        AndroidDensity("xxxhdpi", 192, 432),
    )
    adaptive_safe_zone: float = 0.66
    ios_slots: Tuple[SizeSpec, ...] = field(default_factory=lambda: _ios_slots(IOS_LADDER))
    # (имя файла, размер в px)
    tauri_pngs: Tuple[Tuple[str, int], ...] = (
        ("32x32.png", 32),
        ("128x128.png", 128),
        ("128x128@2x.png", 256),
    )


DEFAULT_TABLES = PlatformTables()
