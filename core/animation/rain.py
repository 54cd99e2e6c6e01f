"""
Rain Effect

Base layer: Markov undulation around the channel hue.

Raindrop layer: stationary drops appear at random, non-colliding
positions and fade out over RAINDROP_MAX_FRAMES frames.
    - Length: RAINDROP_LENGTH pixels centred on the spawn position
    - Count: 18 (brightness 0) down to 6 (brightness 100)
    - Blend: Gaussian whose variance widens 0.1 -> 10.0 over the drop's
      life, multiplied by a linear fade (1 - progress), so a drop starts
      as a sharp bright point and dissolves outward

Spawn positions are searched up to MAX_SPAWN_ATTEMPTS times per frame;
if none keeps RAINDROP_LENGTH distance from every live drop, spawning is
simply skipped this frame.
"""

import random
from typing import List, Optional

from .color import blend
from .effect import OverlayEffect
from .gaussian import gaussian_weight, to_blend_amount
from .harmony import ColorPicker, HarmonyTable, pick_color
from .markov import MarkovUndulationLayer
from .pool import Raindrop, SlotPool
from .types import FRAME_MS, NUM_CHANNELS, StripBuffers


RAINDROP_LENGTH = 11             # must be odd
RAINDROP_MAX_FRAMES = 30         # 1.5s at 20fps
MIN_GAUSSIAN_VARIANCE = 0.1
MAX_GAUSSIAN_VARIANCE = 10.0
MIN_RAINDROPS = 6                # at brightness 100
MAX_RAINDROPS = 18               # at brightness 0
MAX_RAINDROP_SLOTS = 18
MAX_SPAWN_ATTEMPTS = 10


def max_raindrops_for(brightness: int) -> int:
    """Allowed concurrent raindrops for a brightness percent."""
    return MAX_RAINDROPS - (brightness * (MAX_RAINDROPS - MIN_RAINDROPS)) // 100


def raindrop_blend(distance: int, frame: int) -> int:
    """
    0-255 blend amount for a pixel `distance` away from a drop's centre
    on lifecycle frame `frame`.
    """
    progress = frame / float(RAINDROP_MAX_FRAMES)
    variance = MIN_GAUSSIAN_VARIANCE + progress * (MAX_GAUSSIAN_VARIANCE - MIN_GAUSSIAN_VARIANCE)
    return to_blend_amount(gaussian_weight(distance, variance) * (1.0 - progress))


class RainEffect(OverlayEffect):
    """
    Harmony raindrops over a breathing base.

    Attributes:
        harmony: HarmonyTable the drop colours are drawn from
        color_picker: Strategy choosing each drop's colour
        base: MarkovUndulationLayer under the drops
        raindrops: Per-channel SlotPool of Raindrop actors
        frames_since_spawn: Per-channel spawn ramp counter
    """

    def __init__(
        self,
        harmony: HarmonyTable,
        num_leds: int,
        rng: Optional[random.Random] = None,
        name: str = "Rain",
        color_picker: ColorPicker = pick_color,
        num_channels: int = NUM_CHANNELS,
        frame_ms: int = FRAME_MS,
    ):
        super().__init__(num_leds, rng, num_channels, frame_ms)
        self.name = name
        self.harmony = harmony
        self.color_picker = color_picker
        self.base = MarkovUndulationLayer(num_leds, self.rng, num_channels=num_channels)
        self.raindrops: List[SlotPool[Raindrop]] = [
            SlotPool(MAX_RAINDROP_SLOTS, Raindrop) for _ in range(num_channels)
        ]
        self.frames_since_spawn: List[int] = [0] * num_channels
        self.reset()

    def reset(self):
        super().reset()
        self.base.reset()
        for pool in self.raindrops:
            for drop in pool:
                drop.reset()
        self.frames_since_spawn = [0] * self.num_channels

    def step(self):
        self.base.update()
        for ch in range(self.num_channels):
            self._update_raindrops(ch)

    # ─────────────────────────────────────────────────────────
    # Spawning
    # ─────────────────────────────────────────────────────────

    def check_collision(self, channel: int, pos: int) -> bool:
        """True if pos is closer than RAINDROP_LENGTH to any live drop."""
        for drop in self.raindrops[channel].active():
            if abs(pos - drop.center_pos) < RAINDROP_LENGTH:
                return True
        return False

    def find_spawn_position(self, channel: int) -> Optional[int]:
        """Random collision-free centre, or None after MAX_SPAWN_ATTEMPTS."""
        for _ in range(MAX_SPAWN_ATTEMPTS):
            candidate = self.rng.randrange(self.num_leds)
            if not self.check_collision(channel, candidate):
                return candidate
        return None

    def _update_raindrops(self, ch: int):
        pool = self.raindrops[ch]

        for drop in pool.active():
            drop.current_frame += 1
            if drop.current_frame >= RAINDROP_MAX_FRAMES:
                pool.release(drop)

        self.frames_since_spawn[ch] += 1
        allowed = max_raindrops_for(self.channel_brightnesses[ch])
        if pool.active_count >= allowed:
            return

        interval = max(1, (self.num_leds + RAINDROP_LENGTH) // allowed)
        chance = min(100, (self.frames_since_spawn[ch] * 100) // interval)
        if self.rng.randrange(100) >= chance:
            return

        pos = self.find_spawn_position(ch)
        if pos is None:
            return
        drop = pool.acquire()
        if drop is None:
            return
        drop.center_pos = pos
        drop.current_frame = 0
        drop.color = self.color_picker(self.rng, self.channel_hues[ch], self.harmony)
        self.frames_since_spawn[ch] = 0

    # ─────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────

    def render(self, buffers: StripBuffers):
        count = min(self.num_leds, buffers.num_leds)
        half = RAINDROP_LENGTH // 2
        for ch in range(min(self.num_channels, len(buffers))):
            strip = buffers[ch]
            hue = self.channel_hues[ch]
            active = list(self.raindrops[ch].active())
            for i in range(count):
                color = self.base.base_color(ch, i, hue)
                for drop in active:
                    if drop.center_pos - half <= i <= drop.center_pos + half:
                        amount = raindrop_blend(i - drop.center_pos, drop.current_frame)
                        color = blend(color, drop.color.to_rgb(), amount)
                        break
                strip[i] = color

    def get_status(self) -> dict:
        status = super().get_status()
        status['harmony'] = self.harmony.name
        status['active_raindrops'] = [pool.active_count for pool in self.raindrops]
        return status
