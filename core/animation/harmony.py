"""
Colour Harmony - Hue offset tables and harmony colour selection

A harmony is a fixed set of hue offsets (degrees) applied to a channel's
primary hue. Offset 0 is always the primary hue, which by convention is
desaturated to white; every other hue is fully saturated.

Tables:
    MONOCHROMATIC         {0}
    COMPLEMENTARY         {0, 180}
    SPLIT_COMPLEMENTARY   {0, 150, 210}
    TRIADIC               {0, 120, 240}
    SQUARE                {0, 90, 180, 270}
    TETRADIC              {0, 60, 180, 240}

Functions:
    generate_spread: Bounded, roughly normal hue jitter (6-sample mean)
    pick_color: Random harmony colour for an actor (runner, raindrop)
    black_or_white: Alternative actor colour picker (monochromatic runner)
    primary_percent: Share of twinkle pixels given to the primary hue
    partition_counts: Pixel counts per harmony hue
    assign_pixel_colors: Shuffled per-pixel (hue, saturation) assignment
"""

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from .color import hue360_to_hue8
from .types import ANGLE_WIDTH, HSV, PRIMARY_HUE_SAT


# Primary hue share of twinkle pixels, linear in channel brightness
PRIMARY_PERCENT_MIN = 0.05   # brightness 0
PRIMARY_PERCENT_MAX = 0.95   # brightness 100

SPREAD_SAMPLES = 6


# ============================================================
# Harmony Tables
# ============================================================

@dataclass(frozen=True)
class HarmonyTable:
    """Named set of hue offsets from the primary hue."""
    name: str
    offsets: Tuple[int, ...]

    def __post_init__(self):
        if not self.offsets:
            raise ValueError(f"Harmony '{self.name}' must have at least one offset")
        object.__setattr__(self, 'offsets', tuple(int(o) for o in self.offsets))

    def __len__(self) -> int:
        return len(self.offsets)

    def hue_for(self, primary_hue: int, index: int) -> int:
        """Hue in degrees of the index-th harmony member"""
        return (primary_hue + self.offsets[index] + 360) % 360

    def saturation_for(self, index: int) -> int:
        return PRIMARY_HUE_SAT if self.offsets[index] == 0 else 255


MONOCHROMATIC = HarmonyTable("monochromatic", (0,))
COMPLEMENTARY = HarmonyTable("complementary", (0, 180))
SPLIT_COMPLEMENTARY = HarmonyTable("split_complementary", (0, 150, 210))
TRIADIC = HarmonyTable("triadic", (0, 120, 240))
SQUARE = HarmonyTable("square", (0, 90, 180, 270))
TETRADIC = HarmonyTable("tetradic", (0, 60, 180, 240))

HARMONY_TABLES: Dict[str, HarmonyTable] = {
    t.name: t for t in (
        MONOCHROMATIC, COMPLEMENTARY, SPLIT_COMPLEMENTARY, TRIADIC, SQUARE, TETRADIC,
    )
}


# ============================================================
# Spread and Colour Picking
# ============================================================

def generate_spread(rng: random.Random, width: int = ANGLE_WIDTH) -> int:
    """
    Analogous spread offset in [-width/2, +width/2].

    Mean of six uniform draws over [0, width] (Irwin-Hall), shifted to
    be centred on zero.
    """
    total = 0
    for _ in range(SPREAD_SAMPLES):
        total += rng.randint(0, width)
    return total // SPREAD_SAMPLES - width // 2


def pick_color(rng: random.Random, primary_hue: int, table: HarmonyTable,
               width: int = ANGLE_WIDTH) -> HSV:
    """Pick one harmony member at random and jitter its hue."""
    idx = rng.randrange(len(table))
    hue360 = table.hue_for(primary_hue, idx)
    hue360 = (hue360 + generate_spread(rng, width) + 360) % 360
    return HSV(hue360_to_hue8(hue360), table.saturation_for(idx), 255)


def black_or_white(rng: random.Random, primary_hue: int, table: HarmonyTable,
                   width: int = ANGLE_WIDTH) -> HSV:
    """50/50 black or white, ignoring the harmony entirely."""
    if rng.randrange(2) == 0:
        return HSV(0, 0, 0)
    return HSV(0, 0, 255)


# Signature shared by actor colour strategies
ColorPicker = Callable[[random.Random, int, HarmonyTable], HSV]


# ============================================================
# Twinkle Pixel Partitioning
# ============================================================

def primary_percent(brightness: int) -> float:
    """Fraction of pixels for the primary hue (5% at 0, 95% at 100)."""
    brightness = max(0, min(100, brightness))
    return PRIMARY_PERCENT_MIN + (brightness / 100.0) * (PRIMARY_PERCENT_MAX - PRIMARY_PERCENT_MIN)


def partition_counts(num_pixels: int, num_hues: int, percent: float) -> List[int]:
    """
    Split num_pixels among harmony hues.

    Returns [primary, secondary_1, ...]. Secondaries share the remainder
    evenly; leftovers from integer division go to the primary, so the
    counts always sum to num_pixels.
    """
    if num_hues < 1:
        raise ValueError("num_hues must be at least 1")
    if num_hues == 1:
        return [num_pixels]

    primary = min(num_pixels, max(0, int(num_pixels * percent + 0.5)))
    secondary = (num_pixels - primary) // (num_hues - 1)
    primary += num_pixels - (primary + secondary * (num_hues - 1))
    return [primary] + [secondary] * (num_hues - 1)


def assign_pixel_colors(rng: random.Random, num_pixels: int, primary_hue: int,
                        table: HarmonyTable, brightness: int,
                        width: int = ANGLE_WIDTH) -> List[Tuple[int, int]]:
    """
    Build a shuffled list of (hue8, sat8) pairs, one per pixel.

    Pixels are filled group by group, each with its own spread jitter,
    then Fisher-Yates shuffled so every group is scattered along the strip.
    """
    counts = partition_counts(num_pixels, len(table), primary_percent(brightness))
    colors: List[Tuple[int, int]] = []
    for idx, count in enumerate(counts):
        hue360 = table.hue_for(primary_hue, idx)
        sat = table.saturation_for(idx)
        for _ in range(count):
            jittered = (hue360 + generate_spread(rng, width) + 360) % 360
            colors.append((hue360_to_hue8(jittered), sat))

    for i in range(len(colors) - 1, 0, -1):
        j = rng.randint(0, i)
        colors[i], colors[j] = colors[j], colors[i]
    return colors
