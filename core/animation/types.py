"""
Animation Type Definitions - Colours, Modes and Strip Buffers

This module contains the data containers shared by every animation.
Apart from value clamping they carry no business logic.

Classes:
    RGB: Immutable 8-bit RGB pixel value
    HSV: Immutable 8-bit HSV colour (FastLED-style 0-255 hue)
    ChannelState: Desired hue/saturation/brightness/power of one channel
    ModeId: Persistable animation mode identifiers
    StripBuffers: Four fixed-length pixel buffers (one per channel)

Constants:
    NUM_CHANNELS, MAX_LEDS, FRAME_MS, ANGLE_WIDTH, PRIMARY_HUE_SAT
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, List, Sequence


# ============================================================
# Engine Constants
# ============================================================

NUM_CHANNELS = 4
MAX_LEDS = 200              # Hardware maximum per strip
FRAME_MS = 50               # 20 fps animation frame
ANGLE_WIDTH = 10            # Analogous spread (+/-5 degrees around a hue)
PRIMARY_HUE_SAT = 0         # Primary harmony hue is rendered as white


def _clamp8(value: int) -> int:
    return max(0, min(255, int(value)))


# ============================================================
# Colour Values
# ============================================================

@dataclass(frozen=True)
class RGB:
    """
    Single pixel colour. All values are 0-255.

    Frozen so that buffer snapshots can share instances safely.
    """
    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self):
        """Clamp values to valid range"""
        object.__setattr__(self, 'r', _clamp8(self.r))
        object.__setattr__(self, 'g', _clamp8(self.g))
        object.__setattr__(self, 'b', _clamp8(self.b))

    def to_tuple(self):
        return (self.r, self.g, self.b)

    @property
    def is_black(self) -> bool:
        return self.r == 0 and self.g == 0 and self.b == 0


BLACK = RGB(0, 0, 0)


@dataclass(frozen=True)
class HSV:
    """HSV colour with all components on the 0-255 scale."""
    h: int = 0
    s: int = 255
    v: int = 255

    def __post_init__(self):
        object.__setattr__(self, 'h', int(self.h) % 256)
        object.__setattr__(self, 's', _clamp8(self.s))
        object.__setattr__(self, 'v', _clamp8(self.v))

    def to_rgb(self) -> RGB:
        # Imported lazily: color.py depends on this module
        from .color import hsv_to_rgb
        return hsv_to_rgb(self.h, self.s, self.v)


# ============================================================
# Channel State (owned by the channel service, read by engine)
# ============================================================

@dataclass
class ChannelState:
    """
    Desired state of one LED channel as supplied by its owner.

    hue: 0-359 degrees (wraps)
    saturation: 0-100 percent
    brightness: 0-100 percent
    power: on/off
    """
    hue: int = 0
    saturation: int = 100
    brightness: int = 100
    power: bool = False

    def __post_init__(self):
        self.hue = int(self.hue) % 360
        self.saturation = max(0, min(100, int(self.saturation)))
        self.brightness = max(0, min(100, int(self.brightness)))
        self.power = bool(self.power)

    def to_dict(self) -> dict:
        return {
            'hue': self.hue,
            'saturation': self.saturation,
            'brightness': self.brightness,
            'power': self.power,
        }


# ============================================================
# Animation Modes
# ============================================================

class ModeId(IntEnum):
    """
    Animation modes. Values are persisted, so existing numbers must
    never be reordered; new modes are appended.
    """
    NONE = 0
    MONOCHROMATIC_RUNNER = 1
    COMPLEMENTARY_RUNNER = 2
    SPLIT_COMPLEMENTARY_RUNNER = 3
    TRIADIC_RUNNER = 4
    SQUARE_RUNNER = 5
    MONOCHROMATIC_TWINKLE = 6
    COMPLEMENTARY_TWINKLE = 7
    SPLIT_COMPLEMENTARY_TWINKLE = 8
    TRIADIC_TWINKLE = 9
    SQUARE_TWINKLE = 10
    TETRADIC_TWINKLE = 11
    MONOCHROMATIC_RAIN = 12
    COMPLEMENTARY_RAIN = 13
    SPLIT_COMPLEMENTARY_RAIN = 14
    TRIADIC_RAIN = 15
    SQUARE_RAIN = 16
    FIRE = 17


MODE_COUNT = len(ModeId)

MODE_NAMES: Dict[ModeId, str] = {
    ModeId.NONE: "Manual",
    ModeId.MONOCHROMATIC_RUNNER: "Monochromatic Runner",
    ModeId.COMPLEMENTARY_RUNNER: "Complementary Runner",
    ModeId.SPLIT_COMPLEMENTARY_RUNNER: "Split-Complementary Runner",
    ModeId.TRIADIC_RUNNER: "Triadic Runner",
    ModeId.SQUARE_RUNNER: "Square Runner",
    ModeId.MONOCHROMATIC_TWINKLE: "Monochromatic Twinkle",
    ModeId.COMPLEMENTARY_TWINKLE: "Complementary Twinkle",
    ModeId.SPLIT_COMPLEMENTARY_TWINKLE: "Split-Complementary Twinkle",
    ModeId.TRIADIC_TWINKLE: "Triadic Twinkle",
    ModeId.SQUARE_TWINKLE: "Square Twinkle",
    ModeId.TETRADIC_TWINKLE: "Tetradic Twinkle",
    ModeId.MONOCHROMATIC_RAIN: "Monochromatic Rain",
    ModeId.COMPLEMENTARY_RAIN: "Complementary Rain",
    ModeId.SPLIT_COMPLEMENTARY_RAIN: "Split-Complementary Rain",
    ModeId.TRIADIC_RAIN: "Triadic Rain",
    ModeId.SQUARE_RAIN: "Square Rain",
    ModeId.FIRE: "Fire",
}


# ============================================================
# Strip Buffers
# ============================================================

class StripBuffers:
    """
    Pixel buffers for every channel.

    Each channel is a fixed-length list of RGB values, index 0 being
    the physical start of the strip. Lists are mutated in place and
    never resized, so references handed to the output layer stay valid.
    """

    def __init__(self, num_leds: int = MAX_LEDS, num_channels: int = NUM_CHANNELS):
        if num_leds < 1 or num_leds > MAX_LEDS:
            raise ValueError(f"num_leds must be 1-{MAX_LEDS}, got {num_leds}")
        if num_channels < 1:
            raise ValueError(f"num_channels must be positive, got {num_channels}")
        self._num_leds = num_leds
        self._channels: List[List[RGB]] = [
            [BLACK] * num_leds for _ in range(num_channels)
        ]
        self._changed = False

    @property
    def num_leds(self) -> int:
        return self._num_leds

    @property
    def num_channels(self) -> int:
        return len(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def __getitem__(self, channel: int) -> List[RGB]:
        return self._channels[channel]

    def __iter__(self) -> Iterator[List[RGB]]:
        return iter(self._channels)

    def fill(self, channel: int, color: RGB):
        """Fill one channel with a solid colour"""
        strip = self._channels[channel]
        for i in range(self._num_leds):
            strip[i] = color
        self._changed = True

    def mark_changed(self):
        self._changed = True

    def take_changes(self) -> bool:
        """True if the buffers were written since the last call"""
        changed = self._changed
        self._changed = False
        return changed

    def snapshot(self) -> List[List[RGB]]:
        """Copy of every channel's current contents"""
        return [list(strip) for strip in self._channels]

    def restore(self, snapshot: Sequence[Sequence[RGB]]):
        """Write a snapshot back into the existing lists"""
        if len(snapshot) != len(self._channels):
            raise ValueError("Snapshot channel count does not match buffers")
        for strip, saved in zip(self._channels, snapshot):
            strip[:] = saved
        self._changed = True

    def to_dict(self) -> dict:
        return {
            'num_leds': self._num_leds,
            'channels': [
                [p.to_tuple() for p in strip] for strip in self._channels
            ],
        }
