from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from PIL import Image


class CompositorService:
    """Попиксельные операции над RGBA-растрами (прямая, не premultiplied альфа)."""

    # ---------- Вспомогательные функции ----------
    def to_float_array(self, image: Image.Image) -> np.ndarray:
        """
        Возвращает numpy-массив float64 (H, W, 4) в диапазоне [0, 1].
        """
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return np.asarray(rgba, dtype=np.float64) / 255.0

    def from_float_array(self, arr: np.ndarray) -> Image.Image:
        out = np.clip(np.rint(arr * 255.0), 0, 255).astype(np.uint8)
        return Image.fromarray(out, mode="RGBA")

    def _blend_np(self, top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        """
        Формула «over» для прямой альфы:
        out_a = ta + ba*(1-ta)
        out_rgb = (t_rgb*ta + b_rgb*ba*(1-ta)) / out_a, если out_a > 0, иначе прозрачный чёрный.
        """
        ta = top[..., 3:4]
        ba = bottom[..., 3:4]
        out_a = ta + ba * (1.0 - ta)
        num = top[..., :3] * ta + bottom[..., :3] * ba * (1.0 - ta)
        # избегаем деления на ноль
        with np.errstate(divide="ignore", invalid="ignore"):
            out_rgb = np.where(out_a > 0, num / out_a, 0.0)
        return np.concatenate([out_rgb, out_a], axis=-1)

    # ---------- 1) Альфа-смешивание ----------
    def alpha_blend(self, top: Image.Image, bottom: Image.Image) -> Image.Image:
        """Накладывает `top` на `bottom` одинакового размера."""
        if top.size != bottom.size:
            raise ValueError(f"Размеры не совпадают: {top.size} и {bottom.size}")
        return self.from_float_array(self._blend_np(self.to_float_array(top), self.to_float_array(bottom)))

    # ---------- 2) Заливка фоном ----------
    def composite_background(self, foreground: Image.Image, color: Tuple[int, int, int]) -> Image.Image:
        """
        Непрозрачный результат: rgb = src_rgb*a + bg_rgb*(1-a), альфа = 255.
        Нужно для iOS, где иконки не могут быть прозрачными.
        """
        fg = self.to_float_array(foreground)
        a = fg[..., 3:4]
        bg = np.asarray(color, dtype=np.float64).reshape(1, 1, 3) / 255.0
        rgb = fg[..., :3] * a + bg * (1.0 - a)
        alpha = np.ones_like(a)
        return self.from_float_array(np.concatenate([rgb, alpha], axis=-1))

    def solid(self, size: int, color: Tuple[int, int, int]) -> Image.Image:
        """Квадрат `size x size`, залитый непрозрачным цветом."""
        return Image.new("RGBA", (size, size), (color[0], color[1], color[2], 255))

    def transparent(self, size: int) -> Image.Image:
        return Image.new("RGBA", (size, size), (0, 0, 0, 0))

    # ---------- 3) Круглая маска ----------
    def circular_mask(self, image: Image.Image) -> Image.Image:
        """
        Обнуляет альфу вне вписанной окружности; в полосе 1px у границы
        альфа линейно масштабируется (сглаживание края).
        """
        arr = np.asarray(image.convert("RGBA"), dtype=np.float64)
        h, w = arr.shape[:2]
        radius = min(w, h) / 2.0
        cx, cy = w / 2.0, h / 2.0
        # расстояние от центра пикселя до центра окружности
        ys, xs = np.mgrid[0:h, 0:w]
        dist = np.hypot(xs + 0.5 - cx, ys + 0.5 - cy)

        factor = np.ones_like(dist)
        edge = (dist > radius - 1.0) & (dist <= radius)
        factor[edge] = radius - dist[edge]
        factor[dist > radius] = 0.0

        arr[..., 3] = arr[..., 3] * factor
        out = np.clip(np.rint(arr), 0, 255).astype(np.uint8)
        return Image.fromarray(out, mode="RGBA")

    # ---------- 4) Наложение по центру ----------
    def overlay_centered(
        self,
        canvas: Image.Image,
        top: Image.Image,
        offset: Tuple[int, int] = (0, 0),
    ) -> Image.Image:
        """
        Кладёт `top` на `canvas` со смещением ((W-w)/2, (H-h)/2) + offset,
        с альфа-смешиванием. Части за пределами холста отбрасываются.
        """
        W, H = canvas.size
        w, h = top.size
        x0 = (W - w) // 2 + offset[0]
        y0 = (H - h) // 2 + offset[1]

        # пересечение области вставки с холстом
        left, top_y = max(0, x0), max(0, y0)
        right, bottom_y = min(W, x0 + w), min(H, y0 + h)
        base = self.to_float_array(canvas)
        if right <= left or bottom_y <= top_y:
            return self.from_float_array(base)

        src = self.to_float_array(top)[top_y - y0 : bottom_y - y0, left - x0 : right - x0]
        region = base[top_y:bottom_y, left:right]
        base[top_y:bottom_y, left:right] = self._blend_np(src, region)
        return self.from_float_array(base)

    # ---------- 5) Поворот ----------
    def rotate(self, image: Image.Image, degrees: float) -> Image.Image:
        """
        Поворот вокруг центра с ближайшим соседом, размер сохраняется.
        Для каждого пикселя результата берётся обратно повёрнутая координата
        источника; если она вне границ, пиксель остаётся прозрачным.
        """
        src = np.asarray(image.convert("RGBA"), dtype=np.uint8)
        h, w = src.shape[:2]
        theta = math.radians(degrees)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        cx, cy = w / 2.0, h / 2.0

        ys, xs = np.mgrid[0:h, 0:w]
        dx = xs + 0.5 - cx
        dy = ys + 0.5 - cy
        sx = np.floor(cos_t * dx + sin_t * dy + cx).astype(np.int64)
        sy = np.floor(-sin_t * dx + cos_t * dy + cy).astype(np.int64)

        inside = (sx >= 0) & (sx < w) & (sy >= 0) & (sy < h)
        out = np.zeros_like(src)
        out[inside] = src[sy[inside], sx[inside]]
        return Image.fromarray(out, mode="RGBA")
