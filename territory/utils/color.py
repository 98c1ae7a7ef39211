"""Faction display colors. No engine imports."""

from __future__ import annotations

import math
import re
from collections.abc import Hashable, Mapping

_UUID_LINK = re.compile(r"@UUID\[(.+?)\]")
_HEX6 = re.compile(r"^[0-9a-fA-F]{6}$")
_HEX3 = re.compile(r"^[0-9a-fA-F]{3}$")

# Fallback palette position for hashed colors
FACTION_SATURATION = 65
FACTION_LIGHTNESS = 50


def normalize_faction_key(raw: object) -> str:
    """Strip whitespace and unwrap ``@UUID[...]`` links. Empty keys become "neutral"."""
    text = str(raw if raw is not None else "").strip()
    if not text:
        return "neutral"
    match = _UUID_LINK.search(text)
    key = (match.group(1) if match else text).strip()
    return key or "neutral"


def hash_string_to_hue(text: str) -> int:
    """Stable hue in [0, 360) from a 32-bit ``h * 31 + c`` hash over UTF-16 code units."""
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h) % 360


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """HSL (degrees, percent, percent) to ``#rrggbb``."""
    sat = s / 100
    lig = l / 100
    c = (1 - abs(2 * lig - 1)) * sat
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = lig - c / 2

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    def to255(v: float) -> int:
        return max(0, min(255, math.floor((v + m) * 255 + 0.5)))

    return f"#{to255(r):02x}{to255(g):02x}{to255(b):02x}"


def css_color_to_hex(color: object) -> str | None:
    """Normalize ``#rgb`` / ``#rrggbb`` (hash optional) to ``#rrggbb``; None if unparseable."""
    text = str(color if color is not None else "").strip()
    if not text:
        return None
    digits = text[1:] if text.startswith("#") else text
    if _HEX6.match(digits):
        return f"#{digits.lower()}"
    if _HEX3.match(digits):
        return "#" + "".join(ch * 2 for ch in digits.lower())
    return None


def color_for_faction(
    faction_id: Hashable,
    overrides: Mapping[Hashable, str] | None = None,
) -> str:
    """Explicit override color if valid, otherwise a hue hashed from the faction key."""
    if overrides:
        override = css_color_to_hex(overrides.get(faction_id))
        if override is not None:
            return override
    key = normalize_faction_key(faction_id)
    return hsl_to_hex(hash_string_to_hue(key), FACTION_SATURATION, FACTION_LIGHTNESS)
