"""
Tests for the Animation Engine

Tests validate:
1. Mode switch round trip restores the strip buffers exactly
2. Channel owners yield on entry and resume on exit
3. Powered-off channels render black while animating
4. Live hue/brightness changes reach the running effect
5. Two-phase start-up: saved mode is applied once owners attach
6. Invalid saved modes are ignored; invalid requested modes raise
7. cycle_mode wraps back to manual
8. Every mode renders a frame

Run with: pytest tests/test_animation_engine.py -v
"""

import logging
import random

import pytest

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.animation import (
    BLACK,
    FRAME_MS,
    MODE_COUNT,
    AnimationEngine,
    ChannelState,
    MemoryModeStore,
    ModeId,
    RGB,
    StripBuffers,
    create_channels,
    list_modes,
)

NUM_LEDS = 40


class FakeOwner:
    """Minimal channel owner that records hand-over calls."""

    def __init__(self, state):
        self.desired = state
        self.calls = []

    def yield_to_animation(self):
        self.calls.append('yield')

    def resume_from_animation(self):
        self.calls.append('resume')


@pytest.fixture
def buffers():
    return StripBuffers(NUM_LEDS)


@pytest.fixture
def store():
    return MemoryModeStore()


@pytest.fixture
def channels(buffers):
    channels = create_channels(buffers)
    for channel in channels:
        channel.update(power=True)
    return channels


@pytest.fixture
def engine(buffers, store, channels):
    engine = AnimationEngine(buffers, store, rng=random.Random(42))
    engine.set_channel_services(channels)
    return engine


def _run_frames(engine, frames):
    for _ in range(frames):
        engine.tick(FRAME_MS)


# ============================================================
# MODE SWITCHING
# ============================================================

class TestModeSwitching:

    def test_starts_in_manual(self, engine):
        assert engine.get_current_mode() == ModeId.NONE
        assert not engine.is_active()
        assert engine.get_mode_name(engine.get_current_mode()) == "Manual"

    @pytest.mark.parametrize("mode", [
        ModeId.TRIADIC_RUNNER, ModeId.COMPLEMENTARY_TWINKLE, ModeId.SQUARE_RAIN, ModeId.FIRE,
    ])
    def test_round_trip_restores_buffers_exactly(self, engine, buffers, mode):
        strips = list(buffers)
        before = buffers.snapshot()

        engine.set_mode(mode)
        _run_frames(engine, 40)
        assert buffers.snapshot() != before

        engine.set_mode(ModeId.NONE)
        assert buffers.snapshot() == before
        assert all(a is b for a, b in zip(buffers, strips))

    def test_switching_between_animations_restores_manual_state(self, engine, buffers):
        before = buffers.snapshot()
        engine.set_mode(ModeId.TRIADIC_RAIN)
        _run_frames(engine, 10)
        engine.set_mode(ModeId.FIRE)
        _run_frames(engine, 10)
        engine.set_mode(ModeId.NONE)
        assert buffers.snapshot() == before

    def test_owners_yield_and_resume(self, buffers, store):
        owners = [FakeOwner(ChannelState(power=True)) for _ in range(4)]
        engine = AnimationEngine(buffers, store, rng=random.Random(1))
        engine.set_channel_services(owners)

        engine.set_mode(ModeId.SQUARE_TWINKLE)
        assert all(o.calls == ['yield'] for o in owners)

        engine.set_mode(ModeId.TRIADIC_RUNNER)
        assert all(o.calls == ['yield', 'resume', 'yield'] for o in owners)

        engine.set_mode(ModeId.NONE)
        assert all(o.calls[-1] == 'resume' for o in owners)

    def test_invalid_mode_raises(self, engine):
        with pytest.raises(ValueError):
            engine.set_mode(MODE_COUNT)
        assert engine.get_current_mode() == ModeId.NONE

    def test_cycle_wraps(self, engine):
        assert engine.cycle_mode() == ModeId.MONOCHROMATIC_RUNNER
        engine.set_mode(ModeId.FIRE)
        assert engine.cycle_mode() == ModeId.NONE

    @pytest.mark.parametrize("mode", [m for m in ModeId if m != ModeId.NONE])
    def test_every_mode_renders(self, engine, buffers, mode):
        engine.set_mode(mode)
        assert engine.tick(FRAME_MS) is True
        assert engine.get_status()['effect']['name'] == engine.get_mode_name(mode)
        for strip in buffers:
            assert len(strip) == NUM_LEDS
            assert all(isinstance(p, RGB) for p in strip)

    def test_list_modes(self):
        modes = list_modes()
        assert len(modes) == MODE_COUNT
        assert modes[0] == {'id': 0, 'key': 'none', 'name': 'Manual'}
        assert modes[-1]['key'] == 'fire'


# ============================================================
# FRAME PUMP BEHAVIOUR
# ============================================================

class TestTick:

    def test_inactive_tick_does_nothing(self, engine, buffers):
        before = buffers.snapshot()
        assert engine.tick(1000) is False
        assert buffers.snapshot() == before

    def test_tick_renders_on_frame_boundary(self, engine):
        engine.set_mode(ModeId.FIRE)
        assert engine.tick(FRAME_MS - 1) is False
        assert engine.tick(1) is True

    def test_powered_off_channel_is_black(self, engine, channels, buffers):
        channels[1].update(power=False)
        engine.set_mode(ModeId.TRIADIC_TWINKLE)
        _run_frames(engine, 5)
        assert all(p == BLACK for p in buffers[1])
        assert any(p != BLACK for p in buffers[0])

    def test_live_channel_changes_reach_effect(self, engine, channels):
        engine.set_mode(ModeId.COMPLEMENTARY_RUNNER)
        channels[2].update(hue=200, brightness=10)
        engine.tick(FRAME_MS)
        effect = engine.current_effect
        assert effect.channel_hues[2] == 200
        assert effect.channel_brightnesses[2] == 10

    def test_entering_mode_pushes_owner_state(self, engine, channels):
        channels[0].update(hue=33)
        engine.set_mode(ModeId.FIRE)
        assert engine.current_effect.channel_hues[0] == 33

    def test_cached_state_without_owners(self, buffers):
        engine = AnimationEngine(buffers, rng=random.Random(3))
        engine.set_channel_hues(10, 20, 30, 400)
        engine.set_channel_brightnesses(5, 50, 150, -5)
        engine.set_mode(ModeId.FIRE)
        assert engine.current_effect.channel_hues == [10, 20, 30, 40]
        assert engine.current_effect.channel_brightnesses == [5, 50, 100, 0]
        assert engine.tick(FRAME_MS) is True

    def test_update_while_animating_applied_on_exit(self, engine, channels, buffers):
        engine.set_mode(ModeId.FIRE)
        channels[3].update(power=False)
        engine.set_mode(ModeId.NONE)
        assert all(p == BLACK for p in buffers[3])


# ============================================================
# PERSISTENCE AND START-UP
# ============================================================

class TestPersistence:

    def test_mode_is_saved(self, engine, store):
        engine.set_mode(ModeId.TRIADIC_RAIN)
        assert store.load_selected_mode() == int(ModeId.TRIADIC_RAIN)

    def test_two_phase_startup(self, buffers):
        store = MemoryModeStore(int(ModeId.SQUARE_RUNNER))
        engine = AnimationEngine(buffers, store, rng=random.Random(4))
        assert engine.get_current_mode() == ModeId.SQUARE_RUNNER
        assert engine.tick(FRAME_MS) is True

        channels = create_channels(buffers)
        assert not any(c.animating for c in channels)
        engine.set_channel_services(channels)
        assert all(c.animating for c in channels)
        assert engine.get_current_mode() == ModeId.SQUARE_RUNNER

    def test_out_of_range_saved_mode_ignored(self, buffers, caplog):
        store = MemoryModeStore(99)
        with caplog.at_level(logging.WARNING):
            engine = AnimationEngine(buffers, store)
        assert engine.get_current_mode() == ModeId.NONE
        assert "out of range" in caplog.text

    def test_wrong_owner_count(self, buffers):
        engine = AnimationEngine(buffers)
        with pytest.raises(ValueError):
            engine.set_channel_services([])

    def test_clear_storage(self, engine, store):
        engine.set_mode(ModeId.FIRE)
        engine.clear_storage()
        assert store.load_selected_mode() is None
        assert engine.get_current_mode() == ModeId.FIRE

    def test_status(self, engine):
        engine.set_mode(ModeId.TETRADIC_TWINKLE)
        status = engine.get_status()
        assert status['mode'] == 11
        assert status['mode_key'] == 'tetradic_twinkle'
        assert status['active'] is True
        assert status['owners_attached'] is True
        assert status['effect']['name'] == "Tetradic Twinkle"
