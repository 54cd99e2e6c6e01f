"""
Overlay Effect Interface

Every animation implements the same small interface so the engine can
drive any of them without knowing which one is active:

    begin()          - start from a clean state
    update(delta_ms) - accumulate time, step once per frame, report frame
    render(buffers)  - write the current frame into the strip buffers
    reset()          - reinitialise all per-pixel and per-actor state
    name             - display name

Frame pacing never sleeps: elapsed time is accumulated and one frame is
stepped when FRAME_MS is reached, subtracting (not zeroing) the threshold
so the frame rate does not drift.
"""

import random
from abc import ABC, abstractmethod
from typing import List, Optional

from .types import FRAME_MS, NUM_CHANNELS, StripBuffers


# Hues used until the engine pushes real channel state (R, G, B, white)
DEFAULT_CHANNEL_HUES = (0, 120, 240, 0)
DEFAULT_CHANNEL_BRIGHTNESS = 100


class OverlayEffect(ABC):
    """
    Base class holding channel state and frame timing.

    Subclasses implement step(), render() and reset(); they hold any
    shared machinery (Markov layer, harmony table, pools) by composition.
    """

    name = "Effect"

    def __init__(
        self,
        num_leds: int,
        rng: Optional[random.Random] = None,
        num_channels: int = NUM_CHANNELS,
        frame_ms: int = FRAME_MS,
    ):
        self.num_leds = num_leds
        self.num_channels = num_channels
        self.frame_ms = frame_ms
        self.rng = rng if rng is not None else random.Random()

        self.channel_hues: List[int] = [
            DEFAULT_CHANNEL_HUES[ch % len(DEFAULT_CHANNEL_HUES)] for ch in range(num_channels)
        ]
        self.channel_brightnesses: List[int] = [DEFAULT_CHANNEL_BRIGHTNESS] * num_channels
        self.frame_accumulator = 0
        self.frame_count = 0

    # ─────────────────────────────────────────────────────────
    # Channel State
    # ─────────────────────────────────────────────────────────

    def set_channel_hues(self, *hues: int):
        """Set every channel's hue in degrees (wraps modulo 360)."""
        for ch, hue in enumerate(hues[:self.num_channels]):
            self.channel_hues[ch] = int(hue) % 360

    def set_channel_brightnesses(self, *brightnesses: int):
        """Set every channel's brightness percent (clamped to 0-100)."""
        for ch, level in enumerate(brightnesses[:self.num_channels]):
            self.channel_brightnesses[ch] = max(0, min(100, int(level)))

    # ─────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────

    def begin(self):
        self.reset()

    def update(self, delta_ms: int) -> bool:
        """
        Advance the clock by delta_ms.

        Returns True when a frame boundary was crossed and a render is due.
        """
        self.frame_accumulator += delta_ms
        if self.frame_accumulator >= self.frame_ms:
            self.frame_accumulator -= self.frame_ms
            self.step()
            self.frame_count += 1
            return True
        return False

    def reset(self):
        self.frame_accumulator = 0
        self.frame_count = 0

    @abstractmethod
    def step(self):
        """Advance animation state by exactly one frame."""

    @abstractmethod
    def render(self, buffers: StripBuffers):
        """Write the current frame into every channel of buffers."""

    def get_status(self) -> dict:
        return {
            'name': self.name,
            'frame_count': self.frame_count,
            'channel_hues': list(self.channel_hues),
            'channel_brightnesses': list(self.channel_brightnesses),
        }
