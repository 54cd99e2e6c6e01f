"""
Runner Effect

Base layer: Markov undulation around the channel hue.

Runner layer: windows of RUNNER_LENGTH pixels travel from pixel 0 to the
end of the strip at one pixel per frame, each with a fixed harmony
colour, blended into the base layer through a Gaussian curve so they have
soft leading and trailing edges.

Runner count falls with brightness: up to 6 at brightness 0, 1 at 100.
A new runner may only enter once pixel 0 is clear of the previous one's
window; the spawn chance then ramps from 0 to 100% over the target
interval (strip_length + RUNNER_LENGTH) / max_runners frames.
"""

import random
from typing import List, Optional

from .color import blend
from .effect import OverlayEffect
from .gaussian import GaussianBlendTable
from .harmony import ColorPicker, HarmonyTable, pick_color
from .markov import MarkovUndulationLayer
from .pool import Runner, SlotPool
from .types import FRAME_MS, NUM_CHANNELS, StripBuffers


RUNNER_LENGTH = 30
GAUSSIAN_VARIANCE = 2.5
MIN_RUNNERS = 1          # at brightness 100
MAX_RUNNERS = 6          # at brightness 0
MAX_RUNNER_SLOTS = 6


def max_runners_for(brightness: int) -> int:
    """Allowed concurrent runners for a brightness percent."""
    return MAX_RUNNERS - (brightness * (MAX_RUNNERS - MIN_RUNNERS)) // 100


class RunnerEffect(OverlayEffect):
    """
    Harmony runners over a breathing base.

    Attributes:
        harmony: HarmonyTable the runner colours are drawn from
        color_picker: Strategy choosing each runner's colour
        base: MarkovUndulationLayer under the runners
        runners: Per-channel SlotPool of Runner actors
        frames_since_spawn: Per-channel spawn ramp counter
    """

    def __init__(
        self,
        harmony: HarmonyTable,
        num_leds: int,
        rng: Optional[random.Random] = None,
        name: str = "Runner",
        color_picker: ColorPicker = pick_color,
        num_channels: int = NUM_CHANNELS,
        frame_ms: int = FRAME_MS,
    ):
        super().__init__(num_leds, rng, num_channels, frame_ms)
        self.name = name
        self.harmony = harmony
        self.color_picker = color_picker
        self.blend_table = GaussianBlendTable(RUNNER_LENGTH, GAUSSIAN_VARIANCE)
        self.base = MarkovUndulationLayer(num_leds, self.rng, num_channels=num_channels)
        self.runners: List[SlotPool[Runner]] = [
            SlotPool(MAX_RUNNER_SLOTS, Runner) for _ in range(num_channels)
        ]
        self.frames_since_spawn: List[int] = [0] * num_channels
        self.reset()

    def reset(self):
        super().reset()
        self.blend_table.compute(GAUSSIAN_VARIANCE)
        self.base.reset()
        for pool in self.runners:
            for runner in pool:
                runner.reset(RUNNER_LENGTH)
        self.frames_since_spawn = [0] * self.num_channels

    def step(self):
        self.base.update()
        for ch in range(self.num_channels):
            self._update_runners(ch)

    def _update_runners(self, ch: int):
        pool = self.runners[ch]

        for runner in pool.active():
            runner.head_pos += 1
            if runner.head_pos >= self.num_leds + RUNNER_LENGTH:
                pool.release(runner)

        pixel0_clear = all(r.head_pos >= RUNNER_LENGTH for r in pool.active())
        if not pixel0_clear:
            self.frames_since_spawn[ch] = 0
            return

        self.frames_since_spawn[ch] += 1
        allowed = max_runners_for(self.channel_brightnesses[ch])
        if pool.active_count >= allowed:
            return

        interval = max(1, (self.num_leds + RUNNER_LENGTH) // allowed)
        chance = min(100, (self.frames_since_spawn[ch] * 100) // interval)
        if self.rng.randrange(100) >= chance:
            return

        runner = pool.acquire()
        if runner is None:
            return
        runner.head_pos = 0
        runner.color = self.color_picker(self.rng, self.channel_hues[ch], self.harmony)
        self.frames_since_spawn[ch] = 0

    def render(self, buffers: StripBuffers):
        count = min(self.num_leds, buffers.num_leds)
        for ch in range(min(self.num_channels, len(buffers))):
            strip = buffers[ch]
            hue = self.channel_hues[ch]
            active = list(self.runners[ch].active())
            for i in range(count):
                color = self.base.base_color(ch, i, hue)
                for runner in active:
                    tail = runner.head_pos - RUNNER_LENGTH + 1
                    if tail <= i <= runner.head_pos:
                        color = blend(color, runner.color.to_rgb(), self.blend_table[i - tail])
                        break
                strip[i] = color

    def get_status(self) -> dict:
        status = super().get_status()
        status['harmony'] = self.harmony.name
        status['active_runners'] = [pool.active_count for pool in self.runners]
        return status
