"""
Animation Configuration

All parameters have defaults matching the reference hardware
(4 channels x 200 WS2811 pixels, 20 fps) and can be overridden per
instance or from the environment:

    SPUTTER_NUM_LEDS          pixels per strip (1-200)
    SPUTTER_FRAME_MS          animation frame length in ms
    SPUTTER_PUMP_INTERVAL_MS  how often the frame pump ticks the engine
    SPUTTER_STATE_FILE        JSON file remembering the selected mode
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .types import FRAME_MS, MAX_LEDS, NUM_CHANNELS


DEFAULT_STATE_FILE = os.path.join(os.path.expanduser('~'), '.sputter', 'animation.json')


@dataclass
class AnimationConfig:
    """
    Engine and wiring configuration.

    Raises ValueError from __post_init__ when a value is out of range.
    """
    num_leds: int = MAX_LEDS
    num_channels: int = NUM_CHANNELS
    frame_ms: int = FRAME_MS
    pump_interval_ms: int = 10
    state_file: Optional[str] = DEFAULT_STATE_FILE
    default_hues: Tuple[int, ...] = field(default_factory=lambda: (0, 90, 180, 270))
    default_brightness: int = 80

    def __post_init__(self):
        """Validate configuration"""
        if self.num_leds < 1 or self.num_leds > MAX_LEDS:
            raise ValueError(f"num_leds must be 1-{MAX_LEDS}, got {self.num_leds}")
        if self.num_channels != NUM_CHANNELS:
            raise ValueError(f"num_channels must be {NUM_CHANNELS}, got {self.num_channels}")
        if self.frame_ms <= 0:
            raise ValueError(f"frame_ms must be positive, got {self.frame_ms}")
        if self.pump_interval_ms <= 0:
            raise ValueError(f"pump_interval_ms must be positive, got {self.pump_interval_ms}")
        if not self.default_hues:
            raise ValueError("default_hues must not be empty")
        self.default_hues = tuple(int(h) % 360 for h in self.default_hues)
        self.default_brightness = max(0, min(100, int(self.default_brightness)))

    @classmethod
    def from_env(cls, environ=None) -> 'AnimationConfig':
        """Build a config from SPUTTER_* environment variables."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get('SPUTTER_NUM_LEDS'):
            kwargs['num_leds'] = int(env['SPUTTER_NUM_LEDS'])
        if env.get('SPUTTER_FRAME_MS'):
            kwargs['frame_ms'] = int(env['SPUTTER_FRAME_MS'])
        if env.get('SPUTTER_PUMP_INTERVAL_MS'):
            kwargs['pump_interval_ms'] = int(env['SPUTTER_PUMP_INTERVAL_MS'])
        if 'SPUTTER_STATE_FILE' in env:
            kwargs['state_file'] = env['SPUTTER_STATE_FILE'] or None
        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Export configuration as dictionary"""
        return {
            'num_leds': self.num_leds,
            'num_channels': self.num_channels,
            'frame_ms': self.frame_ms,
            'pump_interval_ms': self.pump_interval_ms,
            'state_file': self.state_file,
            'default_hues': list(self.default_hues),
            'default_brightness': self.default_brightness,
        }
