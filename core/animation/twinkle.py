"""
Twinkle Effects

Random pixels fade in and out at different rates, creating a sparkling
effect. Each pixel has a current and a target brightness; every frame a
few pixels get a new target and all pixels fade toward theirs by a fixed
step, never overshooting.

Two variants:

- TwinkleEffect (monochromatic): channel hue with a fresh analogous
  spread per pixel on every render.
- HarmonyTwinkleEffect: pixels are shared among the harmony's hues. The
  primary hue gets 5-95% of the strip depending on channel brightness,
  the rest is split evenly among the secondary hues, and the assignment
  is shuffled along the strip. It is only recomputed when the channel's
  hue or brightness changes.
"""

import random
from typing import List, Optional, Tuple

from .color import hsv_to_rgb, hue360_to_hue8, qadd8, qsub8
from .effect import OverlayEffect
from .harmony import HarmonyTable, assign_pixel_colors, generate_spread
from .types import FRAME_MS, NUM_CHANNELS, StripBuffers


TWINKLE_BASE_BRIGHTNESS = 20
TWINKLE_MAX_BRIGHTNESS = 255


class TwinkleEffect(OverlayEffect):
    """
    Monochromatic twinkle: channel hue +/- spread at full saturation.

    Attributes:
        current_brightness: [channel][pixel] rendered brightness
        target_brightness: [channel][pixel] brightness being faded toward
    """

    name = "Monochromatic Twinkle"

    TWINKLE_DENSITY = 8      # 1/density chance per frame per pixel
    FADE_SPEED = 15          # brightness step per frame
    BASE_BRIGHTNESS = TWINKLE_BASE_BRIGHTNESS
    MAX_BRIGHTNESS = TWINKLE_MAX_BRIGHTNESS

    def __init__(
        self,
        num_leds: int,
        rng: Optional[random.Random] = None,
        num_channels: int = NUM_CHANNELS,
        frame_ms: int = FRAME_MS,
    ):
        super().__init__(num_leds, rng, num_channels, frame_ms)
        self.current_brightness: List[List[int]] = []
        self.target_brightness: List[List[int]] = []
        self.reset()

    def reset(self):
        super().reset()
        n = self.num_leds
        self.current_brightness = [[self.BASE_BRIGHTNESS] * n for _ in range(self.num_channels)]
        self.target_brightness = [[self.BASE_BRIGHTNESS] * n for _ in range(self.num_channels)]

    def _new_target(self) -> int:
        return self.rng.randint(self.BASE_BRIGHTNESS, self.MAX_BRIGHTNESS)

    def step(self):
        rng = self.rng
        for ch in range(self.num_channels):
            current = self.current_brightness[ch]
            target = self.target_brightness[ch]
            for i in range(self.num_leds):
                if rng.randrange(self.TWINKLE_DENSITY) == 0:
                    target[i] = self._new_target()

                if current[i] < target[i]:
                    current[i] = min(qadd8(current[i], self.FADE_SPEED), target[i])
                elif current[i] > target[i]:
                    current[i] = max(qsub8(current[i], self.FADE_SPEED), target[i])

    def render(self, buffers: StripBuffers):
        count = min(self.num_leds, buffers.num_leds)
        for ch in range(min(self.num_channels, len(buffers))):
            strip = buffers[ch]
            base_hue = self.channel_hues[ch]
            levels = self.current_brightness[ch]
            for i in range(count):
                hue360 = (base_hue + generate_spread(self.rng) + 360) % 360
                strip[i] = hsv_to_rgb(hue360_to_hue8(hue360), 255, levels[i])


class HarmonyTwinkleEffect(TwinkleEffect):
    """
    Harmony twinkle with pre-assigned, shuffled per-pixel colours.

    Attributes:
        pixel_colors: [channel][pixel] (hue8, sat8) assignment
    """

    TWINKLE_DENSITY = 16
    FADE_SPEED = 8

    def __init__(
        self,
        harmony: HarmonyTable,
        num_leds: int,
        rng: Optional[random.Random] = None,
        name: Optional[str] = None,
        num_channels: int = NUM_CHANNELS,
        frame_ms: int = FRAME_MS,
    ):
        self.harmony = harmony
        if name:
            self.name = name
        self.pixel_colors: List[List[Tuple[int, int]]] = []
        super().__init__(num_leds, rng, num_channels, frame_ms)

    def reset(self):
        super().reset()
        self.pixel_colors = [[(0, 0)] * self.num_leds for _ in range(self.num_channels)]

    def begin(self):
        self.reset()
        for ch in range(self.num_channels):
            self.assign_pixel_colors(ch)

    def set_channel_hues(self, *hues: int):
        previous = list(self.channel_hues)
        super().set_channel_hues(*hues)
        for ch in range(self.num_channels):
            if self.channel_hues[ch] != previous[ch]:
                self.assign_pixel_colors(ch)

    def set_channel_brightnesses(self, *brightnesses: int):
        previous = list(self.channel_brightnesses)
        super().set_channel_brightnesses(*brightnesses)
        for ch in range(self.num_channels):
            if self.channel_brightnesses[ch] != previous[ch]:
                self.assign_pixel_colors(ch)

    def assign_pixel_colors(self, channel: int):
        """Repartition and reshuffle one channel's pixel colours."""
        self.pixel_colors[channel] = assign_pixel_colors(
            self.rng,
            self.num_leds,
            self.channel_hues[channel],
            self.harmony,
            self.channel_brightnesses[channel],
        )

    def _new_target(self) -> int:
        # Cubic skew toward the bright end of the range
        r = self.rng.randrange(1000) / 1000.0
        r = 1.0 - (1.0 - r) ** 3
        return self.BASE_BRIGHTNESS + int(r * (self.MAX_BRIGHTNESS - self.BASE_BRIGHTNESS))

    def render(self, buffers: StripBuffers):
        count = min(self.num_leds, buffers.num_leds)
        for ch in range(min(self.num_channels, len(buffers))):
            strip = buffers[ch]
            colors = self.pixel_colors[ch]
            levels = self.current_brightness[ch]
            for i in range(count):
                hue8, sat8 = colors[i]
                strip[i] = hsv_to_rgb(hue8, sat8, levels[i])
