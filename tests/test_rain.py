"""
Tests for the Rain Effect

Tests validate:
1. Raindrop cap follows channel brightness (18 at 0, 6 at 100)
2. Live raindrops never overlap (centres >= RAINDROP_LENGTH apart)
3. Raindrops expire after RAINDROP_MAX_FRAMES
4. Spawn search gives up silently when no position is free
5. Blend curve starts sharp and fades out

Run with: pytest tests/test_rain.py -v
"""

import random

import pytest

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.animation.harmony import COMPLEMENTARY, SQUARE
from core.animation.rain import (
    MAX_RAINDROPS,
    MIN_RAINDROPS,
    RAINDROP_LENGTH,
    RAINDROP_MAX_FRAMES,
    RainEffect,
    max_raindrops_for,
    raindrop_blend,
)
from core.animation.types import HSV, RGB, StripBuffers

NUM_LEDS = 200


def _frames(effect, count):
    for _ in range(count):
        effect.update(effect.frame_ms)
        yield effect


# ============================================================
# COUNTS AND SPACING
# ============================================================

class TestRaindropCount:

    def test_max_raindrops_for_brightness(self):
        assert max_raindrops_for(0) == MAX_RAINDROPS == 18
        assert max_raindrops_for(100) == MIN_RAINDROPS == 6
        assert max_raindrops_for(50) == 12

    @pytest.mark.parametrize("brightness", [0, 50, 100])
    def test_cap_respected(self, brightness):
        effect = RainEffect(SQUARE, NUM_LEDS, random.Random(brightness + 1))
        effect.set_channel_brightnesses(*([brightness] * 4))
        effect.begin()
        peak = 0
        for _ in _frames(effect, 800):
            for pool in effect.raindrops:
                assert pool.active_count <= max_raindrops_for(brightness)
                peak = max(peak, pool.active_count)
        assert peak >= 2

    def test_spacing_invariant(self):
        effect = RainEffect(COMPLEMENTARY, NUM_LEDS, random.Random(11))
        effect.set_channel_brightnesses(0, 0, 0, 0)
        effect.begin()
        for _ in _frames(effect, 800):
            for pool in effect.raindrops:
                centres = sorted(d.center_pos for d in pool.active())
                for a, b in zip(centres, centres[1:]):
                    assert b - a >= RAINDROP_LENGTH
                assert all(0 <= c < NUM_LEDS for c in centres)

    def test_raindrops_expire(self):
        effect = RainEffect(COMPLEMENTARY, NUM_LEDS, random.Random(12))
        effect.begin()
        for _ in _frames(effect, 500):
            for pool in effect.raindrops:
                for drop in pool.active():
                    assert 0 <= drop.current_frame < RAINDROP_MAX_FRAMES


# ============================================================
# SPAWN SEARCH
# ============================================================

class TestSpawnSearch:

    def test_collision_check(self):
        effect = RainEffect(COMPLEMENTARY, NUM_LEDS, random.Random(13))
        drop = effect.raindrops[0].acquire()
        drop.center_pos = 100
        assert effect.check_collision(0, 95)
        assert effect.check_collision(0, 110)
        assert not effect.check_collision(0, 111)
        assert not effect.check_collision(0, 89)
        assert not effect.check_collision(1, 100)

    def test_no_free_position_returns_none(self):
        effect = RainEffect(COMPLEMENTARY, RAINDROP_LENGTH, random.Random(14))
        drop = effect.raindrops[0].acquire()
        drop.center_pos = RAINDROP_LENGTH // 2
        assert effect.find_spawn_position(0) is None

    def test_finds_free_position(self):
        effect = RainEffect(COMPLEMENTARY, NUM_LEDS, random.Random(15))
        pos = effect.find_spawn_position(0)
        assert pos is not None
        assert 0 <= pos < NUM_LEDS


# ============================================================
# BLEND AND RENDER
# ============================================================

class TestRaindropRender:

    def test_blend_starts_sharp(self):
        assert raindrop_blend(0, 0) == 255
        assert raindrop_blend(3, 0) == 0

    def test_blend_fades_out(self):
        assert raindrop_blend(0, RAINDROP_MAX_FRAMES - 1) < raindrop_blend(0, 10)
        assert raindrop_blend(0, RAINDROP_MAX_FRAMES) == 0

    def test_blend_widens(self):
        assert raindrop_blend(3, 15) > raindrop_blend(3, 1)

    def test_drop_drawn_over_base(self):
        buffers = StripBuffers(NUM_LEDS)
        effect = RainEffect(COMPLEMENTARY, NUM_LEDS, random.Random(16))
        effect.begin()
        drop = effect.raindrops[0].acquire()
        drop.center_pos = 50
        drop.current_frame = 0
        drop.color = HSV(0, 0, 255)
        effect.render(buffers)

        hue = effect.channel_hues[0]
        assert buffers[0][50] == RGB(255, 255, 255)
        assert buffers[0][53] == effect.base.base_color(0, 53, hue)
        assert buffers[0][80] == effect.base.base_color(0, 80, hue)

    def test_status(self):
        effect = RainEffect(SQUARE, NUM_LEDS, name="Square Rain")
        status = effect.get_status()
        assert status['name'] == "Square Rain"
        assert status['harmony'] == "square"
        assert status['active_raindrops'] == [0, 0, 0, 0]
