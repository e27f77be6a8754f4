import re
import logging
from typing import Tuple, Union

logger = logging.getLogger(__name__)

# A fully resolved, render-ready RGBA color.
ColorRGBA = Tuple[float, float, float, float]

_RGBA_FUNC = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*"
    r"(?:,\s*([\d.]+)\s*)?\)$"
)


def parse_color(value: Union[str, Tuple, list]) -> ColorRGBA:
    """
    Resolves a color into an RGBA tuple of floats in [0, 1].

    Accepts '#rgb', '#rrggbb', '#rrggbbaa', 'rgb(r, g, b)',
    'rgba(r, g, b, a)' with 0-255 channels and a 0-1 alpha, or a
    3/4-sequence of floats. Raises ValueError for anything else.
    """
    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4):
            raise ValueError(f"Color sequence must have 3 or 4 items: {value}")
        channels = [float(c) for c in value]
        if len(channels) == 3:
            channels.append(1.0)
        r, g, b, a = channels
        return r, g, b, a

    text = str(value).strip().lower()
    if text.startswith("#"):
        digits = text[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) == 6:
            digits += "ff"
        if len(digits) != 8:
            raise ValueError(f"Invalid hex color: {value!r}")
        try:
            ints = [int(digits[i:i + 2], 16) for i in range(0, 8, 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color: {value!r}")
        r, g, b, a = (c / 255.0 for c in ints)
        return r, g, b, a

    match = _RGBA_FUNC.match(text)
    if match:
        r, g, b = (float(match.group(i)) / 255.0 for i in (1, 2, 3))
        alpha = match.group(4)
        a = float(alpha) if alpha is not None else 1.0
        return r, g, b, a

    raise ValueError(f"Unrecognized color format: {value!r}")


def to_hex(color: ColorRGBA) -> str:
    """Formats an RGBA tuple as '#rrggbbaa'."""
    return "#" + "".join(
        f"{round(max(0.0, min(c, 1.0)) * 255):02x}" for c in color
    )
