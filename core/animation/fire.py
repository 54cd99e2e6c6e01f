"""
Fire Effect (hue-based)

Flickering flames from a heat map that rises up the strip, coloured with
each channel's own hue instead of a fixed red/orange palette.

Each frame, per channel:
    1. Cool every pixel by a random amount (less on longer strips)
    2. Diffuse heat upward: pixel i becomes (h[i-1] + 2*h[i-2]) / 3
    3. Occasionally ignite a spark among the bottom 7 pixels

Heat -> colour, three bands:
    0-85:    black -> saturated hue     (V ramps up, S = 255)
    86-170:  saturated hue              (V = 255, S = 255)
    171-255: saturated hue -> white     (V = 255, S ramps down)
"""

import random
from typing import List, Optional

from .color import hsv_to_rgb, hue360_to_hue8, map_range, qadd8
from .effect import OverlayEffect
from .types import FRAME_MS, NUM_CHANNELS, RGB, StripBuffers


COOLING = 55           # higher = faster cooling
SPARKING = 120         # chance of a spark per frame, out of 255
SPARK_ZONE = 7         # sparks land in the bottom pixels
SPARK_MIN_HEAT = 160
SPARK_MAX_HEAT = 255   # exclusive


def heat_to_color(temperature: int, hue8: int) -> RGB:
    """Map heat (0-255) to a colour of the given 8-bit hue."""
    if temperature < 86:
        value = map_range(temperature, 0, 85, 0, 255)
        saturation = 255
    elif temperature < 171:
        value = 255
        saturation = 255
    else:
        value = 255
        saturation = map_range(temperature, 171, 255, 255, 0)
    return hsv_to_rgb(hue8, saturation, value)


class FireEffect(OverlayEffect):
    """
    Per-channel heat simulation.

    Attributes:
        heat: [channel][pixel] heat value 0-255
    """

    name = "Fire"

    def __init__(
        self,
        num_leds: int,
        rng: Optional[random.Random] = None,
        num_channels: int = NUM_CHANNELS,
        frame_ms: int = FRAME_MS,
    ):
        super().__init__(num_leds, rng, num_channels, frame_ms)
        self.heat: List[List[int]] = []
        self.reset()

    def reset(self):
        super().reset()
        self.heat = [[0] * self.num_leds for _ in range(self.num_channels)]

    def step(self):
        for ch in range(self.num_channels):
            self._simulate(self.heat[ch])

    def _simulate(self, heat: List[int]):
        rng = self.rng
        n = self.num_leds

        max_cooldown = (COOLING * 10) // n + 2
        for i in range(n):
            heat[i] = max(0, heat[i] - rng.randrange(max_cooldown))

        for i in range(n - 1, 1, -1):
            heat[i] = (heat[i - 1] + heat[i - 2] + heat[i - 2]) // 3

        if rng.randrange(255) < SPARKING:
            pos = rng.randrange(min(SPARK_ZONE, n))
            heat[pos] = qadd8(heat[pos], rng.randrange(SPARK_MIN_HEAT, SPARK_MAX_HEAT))

    def render(self, buffers: StripBuffers):
        count = min(self.num_leds, buffers.num_leds)
        for ch in range(min(self.num_channels, len(buffers))):
            strip = buffers[ch]
            hue8 = hue360_to_hue8(self.channel_hues[ch])
            heat = self.heat[ch]
            for i in range(count):
                strip[i] = heat_to_color(heat[i], hue8)

    def get_status(self) -> dict:
        status = super().get_status()
        status['peak_heat'] = [max(h) if h else 0 for h in self.heat]
        return status
