"""
Tests for x11_colors — X11 rgb.txt parsing and the bundled colour table.

Tests cover:
- pack_rgb() component packing
- parse_color_table() comments, blank lines, multi-word names, errors
- ColorTable read-only mapping and case/underscore-insensitive lookup
- load_color_table() bundled data and caching
"""

import unittest

import pytest

import g213cols.x11_colors as x11
from g213cols.x11_colors import (
    ColorTable,
    load_color_table,
    normalize_name,
    pack_rgb,
    parse_color_table,
)

SAMPLE = """\
! $Xorg: rgb.txt sample $
255 250 250\t\tsnow
240 248 255\t\talice blue
240 248 255\t\tAliceBlue

# not a colour
199  21 133\t\tmedium violet red
199  21 133\t\tMediumVioletRed
"""


class TestPackRgb(unittest.TestCase):

    def test_components(self):
        self.assertEqual(pack_rgb(0xF0, 0xF8, 0xFF), 0xF0F8FF)

    def test_black_and_white(self):
        self.assertEqual(pack_rgb(0, 0, 0), 0)
        self.assertEqual(pack_rgb(255, 255, 255), 0xFFFFFF)


class TestNormalizeName(unittest.TestCase):

    def test_lowercases_and_replaces_underscores(self):
        self.assertEqual(normalize_name("ALICE_Blue"), "alice blue")


# =========================================================================
# Parsing
# =========================================================================

class TestParseColorTable(unittest.TestCase):

    def setUp(self):
        self.table = parse_color_table(SAMPLE)

    def test_skips_comments_and_blank_lines(self):
        self.assertEqual(len(self.table), 5)

    def test_single_word_name(self):
        self.assertEqual(self.table["snow"], 0xFFFAFA)

    def test_spaced_and_joined_names_are_separate_keys(self):
        self.assertIn("alice blue", self.table)
        self.assertIn("aliceblue", self.table)
        self.assertEqual(self.table["alice blue"], self.table["aliceblue"])

    def test_three_word_name(self):
        self.assertEqual(self.table["medium violet red"], 0xC71585)

    def test_names_keep_source_order(self):
        self.assertEqual(self.table.names()[:2], ["snow", "alice blue"])

    def test_missing_name_raises(self):
        with self.assertRaises(ValueError):
            parse_color_table("255 0 0\n")

    def test_non_numeric_component_raises(self):
        with self.assertRaisesRegex(ValueError, "line 1"):
            parse_color_table("255 x 0 red\n")

    def test_component_out_of_range_raises(self):
        with self.assertRaises(ValueError):
            parse_color_table("256 0 0 red\n")


class TestColorTable(unittest.TestCase):

    def setUp(self):
        self.table = ColorTable({"alice blue": 0xF0F8FF, "aliceblue": 0xF0F8FF})

    def test_lookup_case_insensitive(self):
        self.assertEqual(self.table.lookup("ALICE blue"), 0xF0F8FF)
        self.assertEqual(self.table.lookup("AlicEBLUE"), 0xF0F8FF)

    def test_lookup_underscores(self):
        self.assertEqual(self.table.lookup("alice_BLUE"), 0xF0F8FF)

    def test_lookup_unknown_is_none(self):
        self.assertIsNone(self.table.lookup("bluuuuu"))
        self.assertIsNone(self.table.lookup("blue uuu"))

    def test_read_only(self):
        with self.assertRaises(TypeError):
            self.table["red"] = 0xFF0000  # type: ignore[index]

    def test_source_dict_changes_do_not_leak(self):
        entries = {"red": 0xFF0000}
        table = ColorTable(entries)
        entries["green"] = 0x00FF00
        self.assertNotIn("green", table)


# =========================================================================
# Bundled table
# =========================================================================

@pytest.fixture
def fresh_cache():
    """Reset the module-level table cache around a test."""
    original = x11._COLOR_TABLE
    x11._COLOR_TABLE = None
    yield
    x11._COLOR_TABLE = original


class TestBundledTable:

    def test_number_of_colours(self):
        assert len(load_color_table()) == 752

    @pytest.mark.parametrize("name,value", [
        ("snow", 0xFFFAFA),
        ("white", 0xFFFFFF),
        ("black", 0x000000),
        ("red", 0xFF0000),
        ("green", 0x00FF00),
        ("blue", 0x0000FF),
        ("aliceblue", 0xF0F8FF),
        ("alice blue", 0xF0F8FF),
        ("mediumvioletred", 0xC71585),
        ("light goldenrod yellow", 0xFAFAD2),
        ("gray50", 0x7F7F7F),
        ("grey100", 0xFFFFFF),
        ("lightgreen", 0x90EE90),
    ])
    def test_known_colours(self, name, value):
        assert load_color_table()[name] == value

    def test_keys_are_lowercase(self):
        assert all(name == name.lower() for name in load_color_table())

    def test_first_and_last_entries(self):
        names = load_color_table().names()
        assert names[0] == "snow"
        assert names[-1] == "lightgreen"

    def test_loaded_once(self, fresh_cache):
        first = load_color_table()
        assert load_color_table() is first

    def test_reads_bundled_file(self, fresh_cache):
        table = load_color_table()
        assert x11._COLOR_TABLE is table
        assert x11.RGB_TXT_PATH.endswith("rgb.txt")
