"""Color space conversions and color distances.

All functions work on single colors expressed as 0-255 integer channels.
Hex strings are always emitted lowercase (``#rrggbb``).
"""
import math
import re
from typing import Optional, Tuple

# D65 standard illuminant white point
D65 = {"x": 95.047, "y": 100.0, "z": 108.883}

HEX_PATTERN = re.compile(r"#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")

# Largest possible Euclidean distance between two RGB colors
MAX_RGB_DISTANCE = math.sqrt(3) * 255


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounding up.

    Python's built-in ``round`` uses banker's rounding, which would make
    12.5 -> 12; HSL and position values must round 12.5 -> 13.
    """
    return int(math.floor(value + 0.5))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB channels to a lowercase ``#rrggbb`` string.

    Raises:
        ValueError: if any channel is outside 0-255
    """
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"RGB channel out of range: {channel}")
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_rgb(hex_code) -> Optional[Tuple[int, int, int]]:
    """Parse ``#rrggbb`` or ``rrggbb`` (any case).

    Returns:
        (r, g, b) tuple, or None if the input is not a valid 6-digit hex color
    """
    if not isinstance(hex_code, str):
        return None
    match = HEX_PATTERN.fullmatch(hex_code)
    if match is None:
        return None
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """Convert sRGB to HSL.

    Returns:
        (h, s, l) with h in degrees 0-359 and s, l as percentages 0-100
    """
    r_n, g_n, b_n = r / 255.0, g / 255.0, b / 255.0
    c_max = max(r_n, g_n, b_n)
    c_min = min(r_n, g_n, b_n)
    lightness = (c_max + c_min) / 2
    hue = 0.0
    saturation = 0.0

    if c_max != c_min:
        d = c_max - c_min
        if lightness > 0.5:
            saturation = d / (2 - c_max - c_min)
        else:
            saturation = d / (c_max + c_min)

        if c_max == r_n:
            hue = (g_n - b_n) / d + (6 if g_n < b_n else 0)
        elif c_max == g_n:
            hue = (b_n - r_n) / d + 2
        else:
            hue = (r_n - g_n) / d + 4
        hue /= 6

    return (
        round_half_up(hue * 360) % 360,
        round_half_up(saturation * 100),
        round_half_up(lightness * 100),
    )


def srgb_to_linear(v: int) -> float:
    """Convert sRGB value [0-255] to linear RGB [0-1]."""
    v_norm = v / 255.0
    if v_norm <= 0.04045:
        return v_norm / 12.92
    return ((v_norm + 0.055) / 1.055) ** 2.4


def linear_rgb_to_xyz(r: float, g: float, b: float) -> dict:
    """Convert linear RGB to CIE XYZ (D65), scaled 0-100."""
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.072175
    z = r * 0.0193339 + g * 0.119192  + b * 0.9503041
    return {"x": x * 100, "y": y * 100, "z": z * 100}


def xyz_to_lab(x: float, y: float, z: float) -> dict:
    """Convert CIE XYZ to CIELAB using the D65 white point."""
    def f(t):
        if t > 0.008856:
            return t ** (1/3)
        return 7.787 * t + 16/116

    fx = f(x / D65["x"])
    fy = f(y / D65["y"])
    fz = f(z / D65["z"])

    return {
        "l": 116 * fy - 16,
        "a": 500 * (fx - fy),
        "b": 200 * (fy - fz)
    }


def rgb_to_lab(r: int, g: int, b: int) -> dict:
    """Convert sRGB to CIELAB.

    Complete pipeline: sRGB -> linear RGB -> XYZ -> Lab

    Returns:
        dict with l, a, b components
    """
    xyz = linear_rgb_to_xyz(srgb_to_linear(r), srgb_to_linear(g), srgb_to_linear(b))
    return xyz_to_lab(xyz["x"], xyz["y"], xyz["z"])


def delta_e_cie76(lab1: dict, lab2: dict) -> float:
    """CIE76 color difference: Euclidean distance in Lab."""
    return math.sqrt(
        (lab1["l"] - lab2["l"]) ** 2 +
        (lab1["a"] - lab2["a"]) ** 2 +
        (lab1["b"] - lab2["b"]) ** 2
    )


def rgb_distance(rgb1: Tuple[int, int, int], rgb2: Tuple[int, int, int]) -> float:
    """Euclidean distance in RGB space, 0 to sqrt(3)*255."""
    return math.sqrt(sum((c1 - c2) ** 2 for c1, c2 in zip(rgb1, rgb2)))


def relative_luminance(r: float, g: float, b: float) -> float:
    """Perceived brightness on the 0-255 scale (Rec. 601 weights)."""
    return 0.299 * r + 0.587 * g + 0.114 * b
