"""
Markov Undulation Layer - per-pixel "breathing" base glow

Every pixel of every channel runs two independent bounded random walks:

- Hue offset: +/-ANGLE_WIDTH/2 around the channel hue, step 1.
  Momentum: 60% continue, 20% stop, 20% reverse.
- Brightness: BASE_BRIGHTNESS..MAX_BRIGHTNESS, step 2.
  Biased upward; at the top there is a small chance per frame to knock
  the pixel to 0 for one frame (a filament flicker-out).

At a wall, the next direction is redrawn as if the pixel had been moving
away from it, so pixels never stay pinned.

Runner and rain effects hold one of these and draw their actors on top.
"""

import random
from typing import List

from .color import hsv_to_rgb, hue360_to_hue8
from .types import ANGLE_WIDTH, NUM_CHANNELS, RGB


BASE_BRIGHTNESS = 40
MAX_BRIGHTNESS = 220
BRIGHTNESS_STEP = 2
BRIGHTNESS_KNOCK_ZERO_PCT = 5


# ============================================================
# Transition Functions
# ============================================================

def markov_transition(rng: random.Random, current_dir: int) -> int:
    """
    Symmetric transition with momentum. Returns -1, 0 or +1.

    From rest: 33% down, 34% stay, 33% up.
    Moving: 60% continue, 20% stop, 20% reverse.
    """
    roll = rng.randrange(100)

    if current_dir == 0:
        if roll < 33:
            return -1
        if roll < 67:
            return 0
        return 1
    elif current_dir > 0:
        if roll < 60:
            return 1
        if roll < 80:
            return 0
        return -1
    else:
        if roll < 60:
            return -1
        if roll < 80:
            return 0
        return 1


def markov_transition_brightness_biased(rng: random.Random, current_dir: int) -> int:
    """
    Upward-biased transition. Returns -1, 0 or +1.

    From rest: 60% up, 20% stay, 20% down.
    Moving up: 70% continue, 15% stay, 15% reverse.
    Moving down: 40% continue, 30% stay, 30% reverse.
    """
    roll = rng.randrange(100)

    if current_dir == 0:
        if roll < 60:
            return 1
        if roll < 80:
            return 0
        return -1
    elif current_dir > 0:
        if roll < 70:
            return 1
        if roll < 85:
            return 0
        return -1
    else:
        if roll < 40:
            return -1
        if roll < 70:
            return 0
        return 1


# ============================================================
# Undulation Layer
# ============================================================

class MarkovUndulationLayer:
    """
    Base-layer state for all channels.

    Attributes:
        hue_offset: [channel][pixel] offset from the channel hue in degrees
        hue_dir: [channel][pixel] last hue step direction
        brightness: [channel][pixel] current base brightness (0-255)
        bright_dir: [channel][pixel] last brightness step direction
    """

    def __init__(
        self,
        num_leds: int,
        rng: random.Random,
        num_channels: int = NUM_CHANNELS,
        base_brightness: int = BASE_BRIGHTNESS,
        max_brightness: int = MAX_BRIGHTNESS,
        angle_width: int = ANGLE_WIDTH,
        knock_zero_pct: int = BRIGHTNESS_KNOCK_ZERO_PCT,
    ):
        if base_brightness > max_brightness:
            raise ValueError("base_brightness must not exceed max_brightness")
        self.num_leds = num_leds
        self.num_channels = num_channels
        self.base_brightness = base_brightness
        self.max_brightness = max_brightness
        self.half_width = angle_width // 2
        self.knock_zero_pct = knock_zero_pct
        self._rng = rng

        self.hue_offset: List[List[int]] = []
        self.hue_dir: List[List[int]] = []
        self.brightness: List[List[int]] = []
        self.bright_dir: List[List[int]] = []
        self.reset()

    def reset(self):
        """Every pixel back to zero offset, base brightness, at rest."""
        n = self.num_leds
        self.hue_offset = [[0] * n for _ in range(self.num_channels)]
        self.hue_dir = [[0] * n for _ in range(self.num_channels)]
        self.brightness = [[self.base_brightness] * n for _ in range(self.num_channels)]
        self.bright_dir = [[0] * n for _ in range(self.num_channels)]

    def update(self):
        """Advance both walks one step for every pixel."""
        for ch in range(self.num_channels):
            self._update_channel(ch)

    def _update_channel(self, ch: int):
        rng = self._rng
        half = self.half_width
        lo = self.base_brightness
        hi = self.max_brightness
        offsets = self.hue_offset[ch]
        hue_dirs = self.hue_dir[ch]
        levels = self.brightness[ch]
        bright_dirs = self.bright_dir[ch]

        for i in range(self.num_leds):
            # Hue walk
            next_dir = markov_transition(rng, hue_dirs[i])
            if offsets[i] >= half and next_dir > 0:
                next_dir = markov_transition(rng, -1)
            elif offsets[i] <= -half and next_dir < 0:
                next_dir = markov_transition(rng, 1)
            hue_dirs[i] = next_dir
            offsets[i] = max(-half, min(half, offsets[i] + next_dir))

            # Brightness walk
            next_dir = markov_transition_brightness_biased(rng, bright_dirs[i])
            if levels[i] >= hi and next_dir > 0:
                if rng.randrange(100) < self.knock_zero_pct:
                    levels[i] = 0
                    bright_dirs[i] = 0
                    continue
                next_dir = markov_transition_brightness_biased(rng, -1)
            elif levels[i] <= lo and next_dir < 0:
                next_dir = markov_transition_brightness_biased(rng, 1)
            bright_dirs[i] = next_dir
            levels[i] = max(lo, min(hi, levels[i] + next_dir * BRIGHTNESS_STEP))

    def final_hue(self, channel: int, index: int, channel_hue: int) -> int:
        """Channel hue plus this pixel's offset, in degrees."""
        return (channel_hue + self.hue_offset[channel][index] + 360) % 360

    def base_color(self, channel: int, index: int, channel_hue: int) -> RGB:
        """Rendered base-layer colour of one pixel (fully saturated)."""
        hue8 = hue360_to_hue8(self.final_hue(channel, index, channel_hue))
        return hsv_to_rgb(hue8, 255, self.brightness[channel][index])
