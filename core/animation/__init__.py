"""
Sputter Animation Module - ambient animations for 4-channel LED strips

Renders slowly evolving, colour-harmonious patterns into four pixel
buffers at 20 fps. Each animation combines a per-pixel Markov base layer
with an overlay effect (twinkle, runner, rain or fire).

Key Components:
- AnimationEngine: Mode selection, hand-over with channel owners, persistence
- OverlayEffect: Interface implemented by every animation
- MarkovUndulationLayer: Per-pixel hue/brightness random walks
- HarmonyTable: Colour-harmony offset tables and colour pickers
- FramePump: Background thread that ticks the engine

Usage:
    from core.animation import AnimationEngine, StripBuffers, ModeId, create_channels

    buffers = StripBuffers(num_leds=200)
    engine = AnimationEngine(buffers, JsonModeStore(path))
    engine.set_channel_services(create_channels(buffers))
    engine.set_mode(ModeId.COMPLEMENTARY_TWINKLE)
    engine.tick(50)

Version: 0.1.0
"""

from .types import (
    NUM_CHANNELS,
    MAX_LEDS,
    FRAME_MS,
    RGB,
    HSV,
    BLACK,
    ChannelState,
    ModeId,
    MODE_COUNT,
    MODE_NAMES,
    StripBuffers,
)

from .color import hsv_to_rgb, hue360_to_hue8, blend
from .harmony import (
    HarmonyTable,
    HARMONY_TABLES,
    MONOCHROMATIC,
    COMPLEMENTARY,
    SPLIT_COMPLEMENTARY,
    TRIADIC,
    SQUARE,
    TETRADIC,
    generate_spread,
    pick_color,
    black_or_white,
)
from .gaussian import GaussianBlendTable
from .pool import SlotPool, Runner, Raindrop
from .markov import MarkovUndulationLayer
from .effect import OverlayEffect
from .twinkle import TwinkleEffect, HarmonyTwinkleEffect
from .runner import RunnerEffect
from .rain import RainEffect
from .fire import FireEffect
from .storage import ModeStore, MemoryModeStore, JsonModeStore
from .channel import ChannelOwner, LedChannel, create_channels
from .config import AnimationConfig
from .manager import AnimationEngine, build_effects, list_modes
from .pump import FramePump

__all__ = [
    # Types
    "NUM_CHANNELS",
    "MAX_LEDS",
    "FRAME_MS",
    "RGB",
    "HSV",
    "BLACK",
    "ChannelState",
    "ModeId",
    "MODE_COUNT",
    "MODE_NAMES",
    "StripBuffers",
    # Colour
    "hsv_to_rgb",
    "hue360_to_hue8",
    "blend",
    "HarmonyTable",
    "HARMONY_TABLES",
    "MONOCHROMATIC",
    "COMPLEMENTARY",
    "SPLIT_COMPLEMENTARY",
    "TRIADIC",
    "SQUARE",
    "TETRADIC",
    "generate_spread",
    "pick_color",
    "black_or_white",
    # Building blocks
    "GaussianBlendTable",
    "SlotPool",
    "Runner",
    "Raindrop",
    "MarkovUndulationLayer",
    # Effects
    "OverlayEffect",
    "TwinkleEffect",
    "HarmonyTwinkleEffect",
    "RunnerEffect",
    "RainEffect",
    "FireEffect",
    # Collaborators
    "ModeStore",
    "MemoryModeStore",
    "JsonModeStore",
    "ChannelOwner",
    "LedChannel",
    "create_channels",
    "AnimationConfig",
    # Engine
    "AnimationEngine",
    "build_effects",
    "list_modes",
    "FramePump",
]

__version__ = "0.1.0"
