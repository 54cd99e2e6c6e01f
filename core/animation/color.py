"""
8-bit Colour Math

Integer helpers shared by the renderers:
- hsv_to_rgb(): sector-based HSV -> RGB approximation on the 0-255 scale
- blend(): linear mix of two colours by a 0-255 amount
- hue360_to_hue8(): degrees -> 0-255 hue
- map_range(): integer range mapping with truncation toward zero
- qadd8() / qsub8(): saturating 8-bit add/subtract
"""

from .types import RGB


def map_range(x: int, in_min: int, in_max: int, out_min: int, out_max: int) -> int:
    """Map x from one integer range to another, truncating toward zero."""
    num = (x - in_min) * (out_max - out_min)
    den = in_max - in_min
    q = abs(num) // abs(den)
    if (num < 0) != (den < 0):
        q = -q
    return q + out_min


def hue360_to_hue8(hue_degrees: int) -> int:
    """Convert a hue in degrees to the 0-255 hue scale."""
    return map_range(int(hue_degrees) % 360, 0, 360, 0, 255)


def qadd8(a: int, b: int) -> int:
    """Saturating add, clamped to 255"""
    return min(255, a + b)


def qsub8(a: int, b: int) -> int:
    """Saturating subtract, clamped to 0"""
    return max(0, a - b)


def hsv_to_rgb(h: int, s: int, v: int) -> RGB:
    """
    Convert 8-bit HSV to RGB.

    The hue circle is split into six sectors of ~43 steps. The largest
    output component always equals v, which the tests rely on.
    """
    h = int(h) % 256
    s = max(0, min(255, int(s)))
    v = max(0, min(255, int(v)))

    if s == 0:
        return RGB(v, v, v)

    region = min(h // 43, 5)
    remainder = (h - region * 43) * 6

    p = (v * (255 - s)) >> 8
    q = (v * (255 - ((s * remainder) >> 8))) >> 8
    t = (v * (255 - ((s * (255 - remainder)) >> 8))) >> 8

    if region == 0:
        return RGB(v, t, p)
    elif region == 1:
        return RGB(q, v, p)
    elif region == 2:
        return RGB(p, v, t)
    elif region == 3:
        return RGB(p, q, v)
    elif region == 4:
        return RGB(t, p, v)
    else:
        return RGB(v, p, q)


def blend(a: RGB, b: RGB, amount: int) -> RGB:
    """
    Mix two colours. amount 0 returns a, 255 returns b exactly.
    """
    amount = max(0, min(255, int(amount)))
    inv = 255 - amount
    return RGB(
        (a.r * inv + b.r * amount) // 255,
        (a.g * inv + b.g * amount) // 255,
        (a.b * inv + b.b * amount) // 255,
    )
