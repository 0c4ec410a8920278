import io
import shutil
import tempfile
import unittest
from pathlib import Path

import pytest
from PIL import Image

from icongen.models.errors import EncodeError, UnknownValueError
from icongen.services.badge_service import (
    BadgeService,
    BuiltinBadgeAssets,
    ChainedBadgeAssets,
    DirectoryBadgeAssets,
)


def _solid(size, color=(50, 100, 150, 255)):
    return Image.new("RGBA", (size, size), color)


def test_banner_marks_bottom_quarter_red():
    img = _solid(128)
    out = BadgeService().apply(img)
    width, height = out.size
    pixel = out.getpixel((width // 2, height - height // 8))
    assert pixel[0] >= 100
    assert pixel[3] > 0


def test_banner_leaves_top_untouched():
    out = BadgeService().apply_banner(_solid(128))
    assert out.getpixel((64, 10)) == (50, 100, 150, 255)


def test_banner_samples_across_ribbon_are_red():
    out = BadgeService().apply_banner(_solid(256, (100, 150, 200, 255)))
    y = 256 - 256 // 8
    for i in range(10):
        x = 256 * i // 10 + 256 // 20
        pixel = out.getpixel((x, y))
        assert pixel[0] > 100 and pixel[0] > pixel[1] and pixel[0] > pixel[2]


def test_banner_has_hatch_pattern():
    out = BadgeService().apply_banner(_solid(128))
    row = {out.getpixel((x, 120)) for x in range(128)}
    assert len(row) == 2


def test_banner_on_small_and_transparent_images():
    small = BadgeService().apply_banner(_solid(32))
    assert small.size == (32, 32)

    clear = BadgeService().apply_banner(_solid(64, (0, 0, 0, 0)))
    assert clear.getpixel((32, 60))[3] > 0
    assert clear.getpixel((32, 5)) == (0, 0, 0, 0)


@pytest.mark.parametrize("badge_id", ["bug", "beetle"])
def test_image_badge_is_centered(badge_id):
    out = BadgeService().apply(_solid(128, (0, 0, 0, 0)), badge_id)
    assert out.size == (128, 128)
    assert out.getpixel((64, 64))[3] > 0
    assert out.getpixel((0, 0)) == (0, 0, 0, 0)
    # бейдж вписан в четверть стороны
    bbox = out.getbbox()
    assert bbox[2] - bbox[0] <= 32
    assert bbox[3] - bbox[1] <= 32


def test_image_badge_rotation_keeps_center():
    out = BadgeService().apply(_solid(128, (0, 0, 0, 0)), "bug", angle=90)
    assert out.getpixel((64, 64))[3] > 0


def test_unknown_badge_names_valid_set():
    service = BadgeService()
    with pytest.raises(UnknownValueError) as excinfo:
        service.validate("unicorn")
    assert "unicorn" in str(excinfo.value)
    assert "banner" in excinfo.value.valid
    assert "bug" in excinfo.value.valid


def test_corrupt_badge_asset_raises_encode_error():
    class BrokenAssets:
        def available(self):
            return ("broken",)

        def get(self, badge_id):
            return b"definitely not a png"

    with pytest.raises(EncodeError):
        BadgeService(assets=BrokenAssets()).apply(_solid(64), "broken")


def test_builtin_assets_are_png_bytes():
    assets = BuiltinBadgeAssets()
    data = assets.get("bug")
    assert data.startswith(b"\x89PNG")
    assert assets.get("bug") is data
    assert assets.get("missing") is None


class TestDirectoryBadgeAssets(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        star = Image.new("RGBA", (40, 20), (255, 215, 0, 255))
        star.save(self.test_dir / "star.png")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_lists_user_badges(self):
        assets = DirectoryBadgeAssets(self.test_dir)
        self.assertEqual(assets.available(), ("star",))
        self.assertIsNone(assets.get("bug"))

    def test_chained_provider_prefers_first(self):
        assets = ChainedBadgeAssets(DirectoryBadgeAssets(self.test_dir), BuiltinBadgeAssets())
        service = BadgeService(assets=assets)
        self.assertIn("star", service.variants())
        self.assertIn("bug", service.variants())

        out = service.apply(_solid(80, (0, 0, 0, 0)), "star")
        self.assertEqual(out.getpixel((40, 40)), (255, 215, 0, 255))
        # 40x20 -> 20x10 при стороне 80
        self.assertEqual(out.getbbox(), (30, 35, 50, 45))

    def test_missing_directory_has_no_badges(self):
        assets = DirectoryBadgeAssets(self.test_dir / "nope")
        self.assertEqual(assets.available(), ())
