"""Чистая стадия «получить растр»: ресемплинг и, в режиме разработки, бейдж.

Ничего не пишет на диск, поэтому компоновку можно тестировать без файлов.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image

from icongen.models.image_model import SourceImage
from icongen.models.options import DEFAULT_BADGE
from icongen.services.badge_service import BadgeService
from icongen.services.resample_service import ResampleService


@dataclass
class RenderPipeline:
    source: SourceImage
    dev_mode: bool = False
    badge: str = DEFAULT_BADGE
    badge_angle: float = 0.0
    resampler: ResampleService = field(default_factory=ResampleService)
    badges: BadgeService = field(default_factory=BadgeService)

    def render(self, size: int) -> Image.Image:
        """Квадрат `size x size` из исходника; с бейджем, если включён dev-режим."""
        image = self.resampler.resize(self.source, size)
        if self.dev_mode:
            image = self.badges.apply(image, self.badge, self.badge_angle)
        return image
