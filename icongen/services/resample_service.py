from __future__ import annotations

from PIL import Image

from icongen.models.image_model import SourceImage


class ResampleService:
    def resize(self, source: SourceImage | Image.Image, size: int) -> Image.Image:
        """
        Детерминированный ресемплинг в квадрат `size x size` фильтром Ланцоша.
        Исходник не изменяется; результат всегда RGBA.
        """
        if size <= 0:
            raise ValueError(f"Размер должен быть положительным: {size}")
        image = source.pil_image if isinstance(source, SourceImage) else source
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        if image.size == (size, size):
            return image.copy()
        return image.resize((size, size), Image.Resampling.LANCZOS)
