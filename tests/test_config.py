import shutil
import tempfile
import unittest
from pathlib import Path

import pytest
import yaml
from PIL import Image

from icongen.main import build_parser, main, options_from_args
from icongen.models.errors import ConfigError
from icongen.services.config_service import load_mapping, load_options, options_from_mapping, parse_sizes


@pytest.mark.parametrize(
    "value, expected",
    [
        ("16,32,64", (16, 32, 64)),
        (" 16 , 32 ", (16, 32)),
        ([24, "48"], (24, 48)),
        (128, (128,)),
    ],
)
def test_parse_sizes(value, expected):
    assert parse_sizes(value) == expected


@pytest.mark.parametrize("value", ["", "16,abc", "0", "-4", 3.5, True])
def test_parse_sizes_rejects_bad_values(value):
    with pytest.raises(ConfigError):
        parse_sizes(value)


def test_mapping_accepts_dashed_keys():
    options = options_from_mapping({"input-path": "a.png", "ios-color": "#000000", "android_round": False})
    assert options.input_path == Path("a.png")
    assert options.ios_color == "#000000"
    assert options.android_round is False


def test_mapping_rejects_unknown_key():
    with pytest.raises(ConfigError) as excinfo:
        options_from_mapping({"input_path": "a.png", "colour": "red"})
    assert "colour" in str(excinfo.value)


def test_mapping_rejects_wrong_types():
    with pytest.raises(ConfigError):
        options_from_mapping({"input_path": "a.png", "dev_mode": "yes please"})
    with pytest.raises(ConfigError):
        options_from_mapping({"input_path": "a.png", "badge_angle": "left"})


def test_mapping_rejects_empty_required_values():
    for key in ("output_dir", "ios_color", "dev_mode", "badge_angle"):
        with pytest.raises(ConfigError) as excinfo:
            options_from_mapping({"input_path": "a.png", key: None})
        assert key in str(excinfo.value)


def test_mapping_allows_empty_optional_values():
    options = options_from_mapping({"input_path": "a.png", "png_sizes": None, "badge_dir": None})
    assert options.png_sizes is None
    assert options.badge_dir is None


def test_mapping_requires_input():
    with pytest.raises(ConfigError):
        options_from_mapping({"ios": True})


class TestConfigFiles(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.icon = self.test_dir / "icon.png"
        Image.new("RGBA", (64, 64), (20, 40, 60, 255)).save(self.icon)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def write_config(self, data):
        path = self.test_dir / "icongen.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    def test_load_options_from_yaml(self):
        path = self.write_config({"input_path": str(self.icon), "png_sizes": "16,32", "dev_mode": True})
        options = load_options(path)
        self.assertEqual(options.png_sizes, (16, 32))
        self.assertTrue(options.dev_mode)

    def test_empty_and_missing_files(self):
        empty = self.test_dir / "empty.yaml"
        empty.write_text("", encoding="utf-8")
        self.assertEqual(load_mapping(empty), {})
        with self.assertRaises(ConfigError):
            load_mapping(self.test_dir / "nope.yaml")

    def test_non_mapping_yaml_is_rejected(self):
        path = self.test_dir / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with self.assertRaises(ConfigError):
            load_mapping(path)

    def test_cli_flags_override_config(self):
        path = self.write_config({"input_path": str(self.icon), "ios_color": "#111111", "linux": True})
        args = build_parser().parse_args(["-c", str(path), "--ios-color", "#222222", "--ios"])
        options = options_from_args(args)
        self.assertEqual(options.ios_color, "#222222")
        self.assertTrue(options.linux)
        self.assertTrue(options.ios)
        self.assertTrue(options.android_round)

    def test_cli_without_input_is_an_error(self):
        with self.assertRaises(ConfigError):
            options_from_args(build_parser().parse_args(["--ios"]))

    def test_main_writes_custom_png(self):
        out = self.test_dir / "out"
        code = main([str(self.icon), "-o", str(out), "--png", "32"])
        self.assertEqual(code, 0)
        with Image.open(out / "32x32.png") as img:
            self.assertEqual(img.size, (32, 32))

    def test_main_reports_non_square_input(self):
        wide = self.test_dir / "wide.png"
        Image.new("RGBA", (100, 200)).save(wide)
        out = self.test_dir / "out"
        self.assertEqual(main([str(wide), "-o", str(out)]), 1)
        self.assertFalse(out.exists())

    def test_main_reports_empty_config_value(self):
        path = self.test_dir / "icongen.yaml"
        path.write_text("output_dir:\n", encoding="utf-8")
        self.assertEqual(main([str(self.icon), "-c", str(path), "--png", "16"]), 1)

    def test_main_reports_missing_input(self):
        self.assertEqual(main([str(self.test_dir / "absent.png"), "-o", str(self.test_dir / "out")]), 1)

    def test_only_flags_are_mutually_exclusive(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(["icon.png", "--ico-only", "--icns-only"])
