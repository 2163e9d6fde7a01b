from __future__ import annotations

import re
from typing import Tuple

from colorcorner.engine.errors import InvalidColorError


Color = Tuple[int, int, int]

_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


def parse_hex_color(value: object) -> Color:
    if not isinstance(value, str) or _HEX_COLOR.fullmatch(value) is None:
        raise InvalidColorError(value)
    return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))


def to_hex(color: Color) -> str:
    r, g, b = color[:3]
    return f"#{r:02X}{g:02X}{b:02X}"
