"""Tests for faction color resolution."""

import re

from territory.utils.color import (
    color_for_faction,
    css_color_to_hex,
    hash_string_to_hue,
    hsl_to_hex,
    normalize_faction_key,
)


def test_hash_string_to_hue_known_values():
    assert hash_string_to_hue("") == 0
    assert hash_string_to_hue("a") == 97
    # 97 * 31 + 98 = 3105
    assert hash_string_to_hue("ab") == 3105 % 360


def test_hash_string_to_hue_wraps_32_bit():
    hue = hash_string_to_hue("JournalEntry.aVeryLongFactionIdentifier0123456789")
    assert 0 <= hue < 360
    assert hue == hash_string_to_hue("JournalEntry.aVeryLongFactionIdentifier0123456789")


def test_hsl_to_hex_primaries():
    assert hsl_to_hex(0, 100, 50) == "#ff0000"
    assert hsl_to_hex(120, 100, 50) == "#00ff00"
    assert hsl_to_hex(240, 100, 50) == "#0000ff"
    assert hsl_to_hex(0, 0, 100) == "#ffffff"
    assert hsl_to_hex(0, 0, 0) == "#000000"


def test_css_color_to_hex():
    assert css_color_to_hex("#abc") == "#aabbcc"
    assert css_color_to_hex("ABCDEF") == "#abcdef"
    assert css_color_to_hex(" #FF0000 ") == "#ff0000"
    assert css_color_to_hex("red") is None
    assert css_color_to_hex(None) is None
    assert css_color_to_hex("") is None


def test_normalize_faction_key():
    assert normalize_faction_key("@UUID[JournalEntry.abc]{Empire}") == "JournalEntry.abc"
    assert normalize_faction_key("  rebels ") == "rebels"
    assert normalize_faction_key("") == "neutral"
    assert normalize_faction_key(None) == "neutral"


def test_color_for_faction_is_stable_hex():
    color = color_for_faction("empire")
    assert re.fullmatch(r"#[0-9a-f]{6}", color)
    assert color == color_for_faction("empire")


def test_color_for_faction_override():
    assert color_for_faction("empire", {"empire": "#0f0"}) == "#00ff00"
    assert color_for_faction("empire", {"empire": "nope"}) == color_for_faction("empire")
    assert color_for_faction("empire", {"rebels": "#000"}) == color_for_faction("empire")


def test_color_for_non_string_faction():
    assert re.fullmatch(r"#[0-9a-f]{6}", color_for_faction(7))
