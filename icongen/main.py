"""Точка входа: разбор аргументов, настройка логирования, запуск генератора."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from icongen.app import IconGenerator
from icongen.models.errors import ConfigError, IconGenError
from icongen.models.options import DEFAULT_BADGE, GenerationOptions
from icongen.services.config_service import load_mapping, options_from_mapping, parse_sizes

logger = logging.getLogger(__name__)

_BOOL_FLAGS = (
    "ico_only", "icns_only", "desktop_only", "mobile_only",
    "windows", "macos", "linux", "android", "ios", "tauri",
    "android_adaptive", "dev_mode",
)


def setup_logging(verbose: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # повторный вызов не дублирует вывод
    if any(h.get_name() == "icongen" for h in root.handlers):
        return
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console_handler.set_name("icongen")
    root.addHandler(console_handler)


def _sizes_arg(value: str) -> tuple:
    try:
        return parse_sizes(value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icongen",
        description="Генерация иконок для Windows, macOS, Linux, Android и iOS из одного квадратного PNG.",
    )
    parser.add_argument("input", nargs="?", type=Path, help="Исходная квадратная иконка (PNG с прозрачностью)")
    parser.add_argument("-o", "--output", type=Path, help="Каталог вывода (по умолчанию ./icons)")
    parser.add_argument("-p", "--png", type=_sizes_arg, metavar="SIZES",
                        help="Только PNG заданных размеров через запятую, например 16,32,64")
    parser.add_argument("-c", "--config", type=Path, help="YAML-файл с параметрами")

    only = parser.add_mutually_exclusive_group()
    only.add_argument("--ico-only", action="store_true", default=None, help="Только ICO (Windows)")
    only.add_argument("--icns-only", action="store_true", default=None, help="Только ICNS (macOS)")
    only.add_argument("--desktop-only", action="store_true", default=None, help="Только Windows, macOS и Linux")
    only.add_argument("--mobile-only", action="store_true", default=None, help="Только Android и iOS")

    for name in ("windows", "macos", "linux", "android", "ios", "tauri"):
        parser.add_argument(f"--{name}", action="store_true", default=None, help=f"Иконки для {name}")

    parser.add_argument("--ios-color", help="Цвет подложки iOS (CSS), по умолчанию #ffffff")
    parser.add_argument("--no-android-round", dest="android_round", action="store_false", default=None,
                        help="Не генерировать круглые иконки Android")
    parser.add_argument("--android-adaptive", action="store_true", default=None,
                        help="Генерировать adaptive-иконки Android")
    parser.add_argument("--adaptive-color", help="Цвет фона adaptive-иконки (CSS)")
    parser.add_argument("--dev-mode", action="store_true", default=None, help="Наложить бейдж разработки")
    parser.add_argument("--badge", help=f"Вариант бейджа (по умолчанию {DEFAULT_BADGE})")
    parser.add_argument("--badge-angle", type=float, help="Поворот бейджа-картинки, градусы")
    parser.add_argument("--badge-dir", type=Path, help="Каталог с пользовательскими бейджами <id>.png")
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог")
    return parser


def options_from_args(args: argparse.Namespace) -> GenerationOptions:
    """Собирает параметры: значения файла конфигурации, поверх них флаги CLI."""
    file_values: Dict[str, Any] = load_mapping(args.config) if args.config else {}

    cli_values: Dict[str, Any] = {
        "input_path": args.input,
        "output_dir": args.output,
        "png_sizes": args.png,
        "ios_color": args.ios_color,
        "adaptive_color": args.adaptive_color,
        "android_round": args.android_round,
        "badge": args.badge,
        "badge_angle": args.badge_angle,
        "badge_dir": args.badge_dir,
    }
    for name in _BOOL_FLAGS:
        cli_values[name] = getattr(args, name)

    options = options_from_mapping(file_values, base=GenerationOptions(input_path=Path()))
    overrides = {k: v for k, v in cli_values.items() if v is not None}
    options = replace(options, **overrides)
    if options.input_path == Path():
        raise ConfigError("Не задан исходный файл (аргумент INPUT или input_path в конфигурации)")
    return options


def main(argv: Optional[List[str]] = None) -> int:
    """Запускает генерацию; 0 при успехе, 1 при ошибке генерации."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        options = options_from_args(args)
        IconGenerator(options).run()
    except (IconGenError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
