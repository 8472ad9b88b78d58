from __future__ import annotations

from pathlib import Path
import shutil
import tempfile
import unittest

from makepdf import config
from makepdf.errors import FontParseError
from makepdf.pipeline.fonts import FontRegistry


class FontRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.font_dir = Path(self.temp_dir.name) / "fonts"
        self.font_dir.mkdir()
        self.font_path = self.font_dir / "Vera.ttf"
        shutil.copy(config.BUILTIN_FONT_PATH, self.font_path)
        self.registry = FontRegistry()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_same_path_returns_same_id(self) -> None:
        first = self.registry.add_from_path(self.font_path)
        second = self.registry.add_from_path(self.font_dir / ".." / "fonts" / "Vera.ttf")
        self.assertEqual(first, second)
        self.assertEqual(self.registry.ids(), [first])
        self.assertEqual(self.registry.path(first), self.font_path.resolve())

    def test_bytes_are_never_cached(self) -> None:
        data = self.font_path.read_bytes()
        first = self.registry.add_from_bytes(data)
        second = self.registry.add_from_bytes(data)
        self.assertNotEqual(first, second)
        self.assertIsNone(self.registry.path(first))

    def test_builtin_font_is_loaded_once(self) -> None:
        first = self.registry.add_builtin_font()
        self.assertEqual(self.registry.add_builtin_font(), first)
        self.assertIsNone(self.registry.path(first))

    def test_fallback_swap_returns_previous(self) -> None:
        builtin = self.registry.add_builtin_font()
        custom = self.registry.add_from_path(self.font_path)
        self.assertIsNone(self.registry.add_font_as_fallback(builtin))
        self.assertEqual(self.registry.add_font_as_fallback(custom), builtin)
        self.assertEqual(self.registry.fallback_font_id(), custom)

    def test_missing_and_invalid_files(self) -> None:
        with self.assertRaises(FileNotFoundError):
            self.registry.add_from_path(self.font_dir / "missing.ttf")
        bogus = self.font_dir / "bogus.ttf"
        bogus.write_bytes(b"not a font")
        with self.assertRaises(FontParseError):
            self.registry.add_from_path(bogus)

    def test_attach_is_idempotent(self) -> None:
        font_id = self.registry.add_from_path(self.font_path)
        self.assertIsNone(self.registry.get_font_doc_ref(font_id))
        self.assertTrue(self.registry.add_font_to_doc(font_id))
        handle = self.registry.get_font_doc_ref(font_id)
        self.assertTrue(handle.startswith("MakePdf-"))
        self.assertTrue(self.registry.add_font_to_doc(font_id))
        self.assertEqual(self.registry.get_font_doc_ref(font_id), handle)

    def test_unknown_ids(self) -> None:
        self.assertFalse(self.registry.add_font_to_doc(12345))
        self.assertIsNone(self.registry.get_font_face(12345))
        self.assertIsNone(self.registry.get_font_doc_ref(12345))


if __name__ == "__main__":
    unittest.main()
