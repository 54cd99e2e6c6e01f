"""
Tests for Animation Configuration

Run with: pytest tests/test_config.py -v
"""

import pytest

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.animation.config import DEFAULT_STATE_FILE, AnimationConfig


class TestAnimationConfig:

    def test_defaults(self):
        config = AnimationConfig()
        assert config.num_leds == 200
        assert config.num_channels == 4
        assert config.frame_ms == 50
        assert config.pump_interval_ms == 10
        assert config.state_file == DEFAULT_STATE_FILE
        assert config.default_hues == (0, 90, 180, 270)
        assert config.default_brightness == 80

    @pytest.mark.parametrize("kwargs", [
        {"num_leds": 0},
        {"num_leds": 201},
        {"num_channels": 3},
        {"frame_ms": 0},
        {"pump_interval_ms": -1},
        {"default_hues": ()},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            AnimationConfig(**kwargs)

    def test_normalises_hues_and_brightness(self):
        config = AnimationConfig(default_hues=(370, -10), default_brightness=150)
        assert config.default_hues == (10, 350)
        assert config.default_brightness == 100

    def test_from_env(self):
        config = AnimationConfig.from_env({
            'SPUTTER_NUM_LEDS': '120',
            'SPUTTER_FRAME_MS': '40',
            'SPUTTER_PUMP_INTERVAL_MS': '5',
            'SPUTTER_STATE_FILE': '/tmp/sputter.json',
        })
        assert config.num_leds == 120
        assert config.frame_ms == 40
        assert config.pump_interval_ms == 5
        assert config.state_file == '/tmp/sputter.json'

    def test_from_env_empty_state_file_disables_persistence(self):
        config = AnimationConfig.from_env({'SPUTTER_STATE_FILE': ''})
        assert config.state_file is None

    def test_from_env_defaults(self):
        assert AnimationConfig.from_env({}) == AnimationConfig()

    def test_from_env_invalid(self):
        with pytest.raises(ValueError):
            AnimationConfig.from_env({'SPUTTER_NUM_LEDS': '500'})

    def test_to_dict(self):
        data = AnimationConfig(num_leds=30, state_file=None).to_dict()
        assert data['num_leds'] == 30
        assert data['state_file'] is None
        assert data['default_hues'] == [0, 90, 180, 270]
