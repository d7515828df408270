"""Coarse color naming.

A deterministic channel-dominance heuristic. It only labels colors for
display; palette matching never looks at these names.
"""

ACHROMATIC_SPREAD = 30
BLACK_MAX = 50
WHITE_MIN = 200

COLOR_NAMES_AR = {
    "Red": "أحمر",
    "Orange": "برتقالي",
    "Yellow": "أصفر",
    "Green": "أخضر",
    "Blue": "أزرق",
    "Purple": "بنفسجي",
    "Pink": "وردي",
    "Brown": "بني",
    "Black": "أسود",
    "White": "أبيض",
    "Gray": "رمادي",
    "Mixed": "مختلط",
}


def color_name(r: int, g: int, b: int) -> str:
    """Classify an RGB color into one of a dozen coarse names."""
    c_max = max(r, g, b)
    c_min = min(r, g, b)

    if c_max - c_min < ACHROMATIC_SPREAD:
        if c_max < BLACK_MAX:
            return "Black"
        if c_max > WHITE_MIN:
            return "White"
        return "Gray"

    if r > g and r > b:
        return "Orange" if g > 100 else "Red"
    if g > r and g > b:
        return "Green"
    if b > r and b > g:
        return "Blue"

    # Two channels tied for the top
    if r > 150 and g > 150 and b < 100:
        return "Yellow"
    if r > 150 and b > 150:
        return "Purple"
    if r > 150 and g > 100 and b > 100:
        return "Pink"
    if r < 150 and g < 100 and b < 100:
        return "Brown"
    return "Mixed"


def localized_color_name(name: str, language: str = "en") -> str:
    if language == "ar":
        return COLOR_NAMES_AR.get(name, name)
    return name
