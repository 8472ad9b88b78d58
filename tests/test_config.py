from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from makepdf import config
from makepdf.pipeline.color import Color
from makepdf.pipeline.styles import DashPattern, LineCapStyle


class ParseSizeTests(unittest.TestCase):
    def test_units(self) -> None:
        self.assertEqual(config.parse_size("210x297mm"), (210.0, 297.0))
        width, height = config.parse_size("2x3in")
        self.assertAlmostEqual(width, 50.8)
        self.assertAlmostEqual(height, 76.2)
        width, height = config.parse_size("300x600px", dpi=300)
        self.assertAlmostEqual(width, 25.4)
        self.assertAlmostEqual(height, 50.8)

    def test_invalid_sizes(self) -> None:
        for value in ("210x297cm", "210mm", "axbmm", "0x10mm", "-1x10mm", "1x2x3mm"):
            with self.assertRaises(ValueError, msg=value):
                config.parse_size(value)
        with self.assertRaises(ValueError):
            config.parse_size("10x10px", dpi=0)


class PageConfigTests(unittest.TestCase):
    def test_default_size_round_trips_to_pixels(self) -> None:
        page = config.PageConfig()
        self.assertEqual(page.to_px_size_string(), "1404x1872px")
        self.assertEqual(config.to_px_size_string(page), "1404x1872px")

    def test_set_dimensions_uses_page_dpi(self) -> None:
        page = config.PageConfig(dpi=100)
        page.set_dimensions("100x200px")
        self.assertAlmostEqual(page.width, 25.4)
        self.assertEqual(page.to_px_size_string(), "100x200px")
        self.assertEqual(page.bounds().to_coords(), (0.0, 0.0, page.width, page.height))


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.base = Path(self.temp_dir.name)

    def _write(self, data) -> Path:
        path = self.base / "makepdf.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_load_applies_overrides(self) -> None:
        path = self._write(
            {
                "page": {"dpi": 100, "dimensions": "200x100px", "fill_color": "#FF0000", "cap_style": "butt"},
                "planner": {"year": "2025", "weekly": {"enabled": False}, "daily": False},
                "script": "makepdf:planner",
                "title": "Plans",
            }
        )
        loaded = config.load_config(path)
        self.assertEqual(loaded.page.dpi, 100.0)
        self.assertAlmostEqual(loaded.page.width, 50.8)
        self.assertEqual(loaded.page.fill_color, Color(1.0, 0.0, 0.0))
        self.assertEqual(loaded.page.cap_style, LineCapStyle.BUTT)
        self.assertEqual(loaded.planner.year, 2025)
        self.assertTrue(loaded.planner.monthly.enabled)
        self.assertFalse(loaded.planner.weekly.enabled)
        self.assertFalse(loaded.planner.daily.enabled)
        self.assertEqual(loaded.script, "makepdf:planner")
        self.assertEqual(loaded.title, "Plans")

    def test_unknown_keys_rejected(self) -> None:
        with self.assertRaises(ValueError):
            config.load_config(self._write({"pages": {}}))
        with self.assertRaises(ValueError):
            config.load_config(self._write({"page": {"colour": "#000000"}}))
        with self.assertRaises(ValueError):
            config.load_config(self._write({"planner": {"quarterly": True}}))

    def test_missing_and_malformed_files(self) -> None:
        with self.assertRaises(FileNotFoundError):
            config.load_config(self.base / "missing.json")
        broken = self.base / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            config.load_config(broken)


class NormalizeConfigTests(unittest.TestCase):
    def test_coerces_script_values(self) -> None:
        pdf_config = config.PdfConfig()
        pdf_config.page.font_size = "9"
        pdf_config.page.outline_color = [0, 0, 255]
        pdf_config.page.dash_pattern = "dashed:2"
        pdf_config.page.join_style = "miter"
        pdf_config.page.font = ""
        pdf_config.planner.year = "2030"
        pdf_config.planner.daily = False

        config.normalize_config(pdf_config)

        self.assertEqual(pdf_config.page.font_size, 9.0)
        self.assertEqual(pdf_config.page.outline_color, Color(0.0, 0.0, 1.0))
        self.assertEqual(pdf_config.page.dash_pattern, DashPattern(dash_1=2))
        self.assertIsNone(pdf_config.page.font)
        self.assertEqual(pdf_config.planner.year, 2030)
        self.assertFalse(pdf_config.planner.daily.enabled)

    def test_rejects_non_positive_sizes(self) -> None:
        pdf_config = config.PdfConfig()
        pdf_config.page.width = 0
        with self.assertRaises(ValueError):
            config.normalize_config(pdf_config)

    def test_rejects_bad_color(self) -> None:
        pdf_config = config.PdfConfig()
        pdf_config.page.fill_color = "blue"
        with self.assertRaises(ValueError):
            config.normalize_config(pdf_config)


if __name__ == "__main__":
    unittest.main()
