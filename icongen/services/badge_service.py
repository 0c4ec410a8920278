"""Бейдж «разработка»: полупрозрачная лента или декоративная картинка.

Принципы:
- SRP: сервис только накладывает бейдж; пиксельная математика в `CompositorService`.
- OCP: картинки бейджей приходят из `BadgeAssetProvider` (id -> PNG-байты),
  новый вариант добавляется без изменений компоновщика.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

import numpy as np
from PIL import Image, ImageDraw, UnidentifiedImageError

from icongen.models.errors import EncodeError, UnknownValueError
from icongen.models.options import DEFAULT_BADGE
from icongen.services.compositor_service import CompositorService

logger = logging.getLogger(__name__)

RIBBON_COLOR: Tuple[int, int, int] = (220, 38, 38)
RIBBON_ALPHA = 0.85
HATCH_COLOR: Tuple[int, int, int] = (255, 255, 255)
HATCH_ALPHA = 0.18


class BadgeAssetProvider(Protocol):
    def available(self) -> Tuple[str, ...]:
        ...

    def get(self, badge_id: str) -> Optional[bytes]:
        """PNG-байты бейджа или None, если такого идентификатора нет."""
        ...


def _draw_bug(body: Tuple[int, int, int], spots: bool) -> Image.Image:
    # 256x200: картинка намеренно не квадратная
    img = Image.new("RGBA", (256, 200), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    black = (20, 20, 20, 255)
    for y in (70, 100, 130):
        draw.line((40, y, 216, y + 10), fill=black, width=8)
        draw.line((40, y + 10, 216, y), fill=black, width=8)
    draw.ellipse((96, 8, 160, 60), fill=black)
    draw.line((112, 16, 92, 0), fill=black, width=5)
    draw.line((144, 16, 164, 0), fill=black, width=5)
    draw.ellipse((58, 36, 198, 192), fill=body + (255,), outline=black, width=6)
    draw.line((128, 40, 128, 190), fill=black, width=5)
    if spots:
        for cx, cy in ((96, 90), (160, 90), (100, 145), (156, 145)):
            draw.ellipse((cx - 13, cy - 13, cx + 13, cy + 13), fill=black)
    return img


class BuiltinBadgeAssets:
    """Встроенные декоративные бейджи, рисуются через ImageDraw и отдаются как PNG."""

    _painters = {
        "bug": lambda: _draw_bug((214, 40, 40), spots=True),
        "beetle": lambda: _draw_bug((46, 160, 67), spots=False),
    }

    def __init__(self) -> None:
        self._cache: Dict[str, bytes] = {}

    def available(self) -> Tuple[str, ...]:
        return tuple(self._painters)

    def get(self, badge_id: str) -> Optional[bytes]:
        painter = self._painters.get(badge_id)
        if painter is None:
            return None
        if badge_id not in self._cache:
            buffer = io.BytesIO()
            painter().save(buffer, format="PNG")
            self._cache[badge_id] = buffer.getvalue()
        return self._cache[badge_id]


class DirectoryBadgeAssets:
    """Пользовательские бейджи: файлы `<id>.png` в каталоге."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def available(self) -> Tuple[str, ...]:
        if not self.directory.is_dir():
            return ()
        return tuple(sorted(p.stem for p in self.directory.glob("*.png")))

    def get(self, badge_id: str) -> Optional[bytes]:
        path = self.directory / f"{badge_id}.png"
        if not path.is_file():
            return None
        return path.read_bytes()


class ChainedBadgeAssets:
    """Ищет бейдж у поставщиков по очереди; первый найденный выигрывает."""

    def __init__(self, *providers: BadgeAssetProvider) -> None:
        self._providers = providers

    def available(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for provider in self._providers:
            for badge_id in provider.available():
                seen.setdefault(badge_id, None)
        return tuple(seen)

    def get(self, badge_id: str) -> Optional[bytes]:
        for provider in self._providers:
            data = provider.get(badge_id)
            if data is not None:
                return data
        return None


class BadgeService:
    def __init__(
        self,
        assets: BadgeAssetProvider | None = None,
        compositor: CompositorService | None = None,
    ) -> None:
        self._assets = assets or BuiltinBadgeAssets()
        self._compositor = compositor or CompositorService()

    def variants(self) -> Tuple[str, ...]:
        return (DEFAULT_BADGE,) + tuple(v for v in self._assets.available() if v != DEFAULT_BADGE)

    def validate(self, badge_id: str) -> None:
        """Проверяет идентификатор заранее, до записи каких-либо файлов."""
        if badge_id != DEFAULT_BADGE and badge_id not in self._assets.available():
            raise UnknownValueError("бейджа", badge_id, self.variants())

    def apply(self, image: Image.Image, badge_id: str = DEFAULT_BADGE, angle: float = 0.0) -> Image.Image:
        """Накладывает выбранный бейдж и возвращает новый растр."""
        if badge_id == DEFAULT_BADGE:
            return self.apply_banner(image)
        return self.apply_image_badge(image, badge_id, angle)

    # ---------- (a) лента со штриховкой ----------
    def apply_banner(self, image: Image.Image) -> Image.Image:
        """
        Полупрозрачная красная лента на нижней четверти высоты и диагональная
        белая штриховка поверх неё.
        """
        w, h = image.size
        band_h = max(1, h // 4)
        y0 = h - band_h
        stripe = max(2, h // 32)

        overlay = np.zeros((h, w, 4), dtype=np.float64)
        overlay[y0:, :, :3] = np.asarray(RIBBON_COLOR, dtype=np.float64) / 255.0
        overlay[y0:, :, 3] = RIBBON_ALPHA
        ribbon = self._compositor.from_float_array(overlay)
        out = self._compositor.alpha_blend(ribbon, image)

        ys, xs = np.mgrid[0:h, 0:w]
        hatch_mask = (((xs + ys) // stripe) % 2 == 0) & (ys >= y0)
        hatch = np.zeros((h, w, 4), dtype=np.float64)
        hatch[hatch_mask, :3] = np.asarray(HATCH_COLOR, dtype=np.float64) / 255.0
        hatch[hatch_mask, 3] = HATCH_ALPHA
        return self._compositor.alpha_blend(self._compositor.from_float_array(hatch), out)

    # ---------- (b) картинка по центру ----------
    def load_asset(self, badge_id: str) -> Image.Image:
        data = self._assets.get(badge_id)
        if data is None:
            raise UnknownValueError("бейджа", badge_id, self.variants())
        try:
            with Image.open(io.BytesIO(data)) as opened:
                return opened.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            raise EncodeError(f"Повреждённая картинка бейджа {badge_id!r}") from exc

    def apply_image_badge(self, image: Image.Image, badge_id: str, angle: float = 0.0) -> Image.Image:
        """
        Бейдж вписывается в квадрат min(w, h) // 4 с сохранением пропорций,
        при необходимости поворачивается и кладётся по центру иконки.
        """
        badge = self.load_asset(badge_id)
        target = max(1, min(image.size) // 4)
        ratio = target / max(badge.size)
        new_size = (max(1, round(badge.width * ratio)), max(1, round(badge.height * ratio)))
        badge = badge.resize(new_size, Image.Resampling.LANCZOS)
        if angle:
            badge = self._compositor.rotate(badge, angle)
        logger.debug("Бейдж %s %dx%d, поворот %.1f°", badge_id, badge.width, badge.height, angle)
        return self._compositor.overlay_centered(image.convert("RGBA"), badge)
