"""
Animation Engine - mode selection and dispatch for ambient animations

The engine holds one instance of every effect and drives whichever one
is selected. It coordinates with the channel owners so that only one
party paints a strip at a time:

    set_mode(new)
        leaving an animation: restore the buffers captured on entry,
                              hand the strips back to the channel owners
        entering an animation: owners yield, buffers are captured, the
                               latest hue/brightness is pushed, begin()

    tick(delta_ms)
        effect.update(); on a frame boundary re-push hue/brightness
        (live changes apply without restarting), render, then black out
        any channel whose owner is powered off

Start-up is two-phase: the engine is constructed (and loads the saved
mode) before the channel owners exist; set_channel_services() then
re-enters the saved mode.

Usage:
    engine = AnimationEngine(buffers, JsonModeStore(path))
    engine.set_channel_services(channels)
    engine.set_mode(ModeId.TRIADIC_RAIN)
    while True:
        engine.tick(elapsed_ms)
"""

import logging
import random
from typing import Dict, List, Optional, Sequence

from .channel import ChannelOwner
from .effect import DEFAULT_CHANNEL_BRIGHTNESS, DEFAULT_CHANNEL_HUES, OverlayEffect
from .fire import FireEffect
from .harmony import (
    COMPLEMENTARY, MONOCHROMATIC, SPLIT_COMPLEMENTARY, SQUARE, TETRADIC, TRIADIC,
    black_or_white,
)
from .rain import RainEffect
from .runner import RunnerEffect
from .storage import ModeStore
from .twinkle import HarmonyTwinkleEffect, TwinkleEffect
from .types import BLACK, FRAME_MS, MODE_COUNT, MODE_NAMES, ModeId, StripBuffers

logger = logging.getLogger(__name__)


def build_effects(num_leds: int, rng: random.Random, num_channels: int,
                  frame_ms: int = FRAME_MS) -> Dict[ModeId, OverlayEffect]:
    """One effect instance per animation mode."""
    common = dict(rng=rng, num_channels=num_channels, frame_ms=frame_ms)

    def runner(mode, table, **kwargs):
        return RunnerEffect(table, num_leds, name=MODE_NAMES[mode], **common, **kwargs)

    def twinkle(mode, table):
        return HarmonyTwinkleEffect(table, num_leds, name=MODE_NAMES[mode], **common)

    def rain(mode, table):
        return RainEffect(table, num_leds, name=MODE_NAMES[mode], **common)

    return {
        ModeId.MONOCHROMATIC_RUNNER: runner(ModeId.MONOCHROMATIC_RUNNER, MONOCHROMATIC,
                                            color_picker=black_or_white),
        ModeId.COMPLEMENTARY_RUNNER: runner(ModeId.COMPLEMENTARY_RUNNER, COMPLEMENTARY),
        ModeId.SPLIT_COMPLEMENTARY_RUNNER: runner(ModeId.SPLIT_COMPLEMENTARY_RUNNER, SPLIT_COMPLEMENTARY),
        ModeId.TRIADIC_RUNNER: runner(ModeId.TRIADIC_RUNNER, TRIADIC),
        ModeId.SQUARE_RUNNER: runner(ModeId.SQUARE_RUNNER, SQUARE),
        ModeId.MONOCHROMATIC_TWINKLE: TwinkleEffect(num_leds, **common),
        ModeId.COMPLEMENTARY_TWINKLE: twinkle(ModeId.COMPLEMENTARY_TWINKLE, COMPLEMENTARY),
        ModeId.SPLIT_COMPLEMENTARY_TWINKLE: twinkle(ModeId.SPLIT_COMPLEMENTARY_TWINKLE, SPLIT_COMPLEMENTARY),
        ModeId.TRIADIC_TWINKLE: twinkle(ModeId.TRIADIC_TWINKLE, TRIADIC),
        ModeId.SQUARE_TWINKLE: twinkle(ModeId.SQUARE_TWINKLE, SQUARE),
        ModeId.TETRADIC_TWINKLE: twinkle(ModeId.TETRADIC_TWINKLE, TETRADIC),
        ModeId.MONOCHROMATIC_RAIN: rain(ModeId.MONOCHROMATIC_RAIN, MONOCHROMATIC),
        ModeId.COMPLEMENTARY_RAIN: rain(ModeId.COMPLEMENTARY_RAIN, COMPLEMENTARY),
        ModeId.SPLIT_COMPLEMENTARY_RAIN: rain(ModeId.SPLIT_COMPLEMENTARY_RAIN, SPLIT_COMPLEMENTARY),
        ModeId.TRIADIC_RAIN: rain(ModeId.TRIADIC_RAIN, TRIADIC),
        ModeId.SQUARE_RAIN: rain(ModeId.SQUARE_RAIN, SQUARE),
        ModeId.FIRE: FireEffect(num_leds, **common),
    }


class AnimationEngine:
    """
    Coordinates ambient animations across all channels.

    Attributes:
        buffers: StripBuffers the effects render into
        effects: ModeId -> OverlayEffect instances
    """

    def __init__(
        self,
        buffers: StripBuffers,
        mode_store: Optional[ModeStore] = None,
        rng: Optional[random.Random] = None,
        frame_ms: int = FRAME_MS,
    ):
        self.buffers = buffers
        self._store = mode_store
        self._rng = rng if rng is not None else random.Random()
        self.effects = build_effects(buffers.num_leds, self._rng, len(buffers), frame_ms)

        self._owners: List[ChannelOwner] = []
        self._current_mode = ModeId.NONE
        self._snapshot = None

        n = len(buffers)
        self._hues: List[int] = [DEFAULT_CHANNEL_HUES[ch % len(DEFAULT_CHANNEL_HUES)] for ch in range(n)]
        self._brightnesses: List[int] = [DEFAULT_CHANNEL_BRIGHTNESS] * n

        self._load_mode()

    # ─────────────────────────────────────────────────────────
    # Wiring
    # ─────────────────────────────────────────────────────────

    def set_channel_services(self, owners: Sequence[ChannelOwner]):
        """
        Attach the channel owners and re-enter any restored mode.

        Called once the owners exist (second phase of start-up).
        """
        if len(owners) != len(self.buffers):
            raise ValueError(
                f"Expected {len(self.buffers)} channel owners, got {len(owners)}"
            )
        self._owners = list(owners)

        if self._current_mode != ModeId.NONE:
            saved = self._current_mode
            logger.info(f"Restoring saved animation: {self.get_mode_name(saved)}")
            self._current_mode = ModeId.NONE
            self.set_mode(saved)

    # ─────────────────────────────────────────────────────────
    # Mode Selection
    # ─────────────────────────────────────────────────────────

    def set_mode(self, mode):
        """
        Switch animation mode.

        Raises:
            ValueError: mode is not a known ModeId value
        """
        mode = ModeId(mode)

        if self._current_mode != ModeId.NONE:
            self._stop_current()

        self._current_mode = mode
        self._save_mode()

        if mode != ModeId.NONE:
            self._start_current()

        logger.info(f"Animation mode: {self.get_mode_name(mode)}")

    def cycle_mode(self) -> ModeId:
        """Advance to the next mode (wrapping back to NONE)."""
        self.set_mode((int(self._current_mode) + 1) % MODE_COUNT)
        return self._current_mode

    def get_current_mode(self) -> ModeId:
        return self._current_mode

    def is_active(self) -> bool:
        return self._current_mode != ModeId.NONE

    @property
    def current_effect(self) -> Optional[OverlayEffect]:
        return self.effects.get(self._current_mode)

    @staticmethod
    def get_mode_name(mode) -> str:
        try:
            return MODE_NAMES[ModeId(mode)]
        except ValueError:
            return "Unknown"

    # ─────────────────────────────────────────────────────────
    # Channel State
    # ─────────────────────────────────────────────────────────

    def set_channel_hues(self, *hues: int):
        for ch, hue in enumerate(hues[:len(self._hues)]):
            self._hues[ch] = int(hue) % 360
        effect = self.current_effect
        if effect is not None:
            effect.set_channel_hues(*self._hues)

    def set_channel_brightnesses(self, *brightnesses: int):
        for ch, level in enumerate(brightnesses[:len(self._brightnesses)]):
            self._brightnesses[ch] = max(0, min(100, int(level)))
        effect = self.current_effect
        if effect is not None:
            effect.set_channel_brightnesses(*self._brightnesses)

    def _refresh_channel_state(self):
        """Pull the owners' desired state (if attached) into the effect."""
        if self._owners:
            self._hues = [owner.desired.hue % 360 for owner in self._owners]
            self._brightnesses = [max(0, min(100, owner.desired.brightness)) for owner in self._owners]
        effect = self.current_effect
        if effect is not None:
            effect.set_channel_hues(*self._hues)
            effect.set_channel_brightnesses(*self._brightnesses)

    # ─────────────────────────────────────────────────────────
    # Frame Pump
    # ─────────────────────────────────────────────────────────

    def tick(self, delta_ms: int) -> bool:
        """
        Advance the active animation by delta_ms.

        Returns True when a frame was rendered into the buffers.
        """
        effect = self.current_effect
        if effect is None:
            return False

        if not effect.update(delta_ms):
            return False

        self._refresh_channel_state()
        effect.render(self.buffers)
        self.buffers.mark_changed()
        self._apply_power()
        return True

    def _apply_power(self):
        for ch, owner in enumerate(self._owners):
            if not owner.desired.power:
                self.buffers.fill(ch, BLACK)

    # ─────────────────────────────────────────────────────────
    # Start / Stop
    # ─────────────────────────────────────────────────────────

    def _start_current(self):
        for owner in self._owners:
            owner.yield_to_animation()

        self._snapshot = self.buffers.snapshot()

        effect = self.current_effect
        self._refresh_channel_state()
        effect.begin()

    def _stop_current(self):
        if self._snapshot is not None:
            self.buffers.restore(self._snapshot)
            self._snapshot = None

        for owner in self._owners:
            owner.resume_from_animation()

    # ─────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────

    def _load_mode(self):
        if self._store is None:
            return
        saved = self._store.load_selected_mode()
        if saved is None:
            return
        if not 0 <= saved < MODE_COUNT:
            logger.warning(f"Ignoring saved animation mode {saved} (out of range)")
            return
        self._current_mode = ModeId(saved)
        logger.info(f"Loaded animation mode: {self.get_mode_name(saved)}")

    def _save_mode(self):
        if self._store is None:
            return
        self._store.save_selected_mode(int(self._current_mode))

    def clear_storage(self):
        """Forget the saved mode (factory reset)."""
        if self._store is not None:
            self._store.clear()

    # ─────────────────────────────────────────────────────────
    # Status
    # ─────────────────────────────────────────────────────────

    def get_status(self) -> dict:
        effect = self.current_effect
        return {
            'mode': int(self._current_mode),
            'mode_key': self._current_mode.name.lower(),
            'mode_name': self.get_mode_name(self._current_mode),
            'active': self.is_active(),
            'num_leds': self.buffers.num_leds,
            'channel_hues': list(self._hues),
            'channel_brightnesses': list(self._brightnesses),
            'owners_attached': bool(self._owners),
            'effect': effect.get_status() if effect is not None else None,
        }


def list_modes() -> List[dict]:
    """All modes as {id, key, name} for menus and the REST layer."""
    return [
        {'id': int(mode), 'key': mode.name.lower(), 'name': MODE_NAMES[mode]}
        for mode in ModeId
    ]
