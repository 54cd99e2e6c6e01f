"""
LED Channel Service - owner of one strip's desired state

The smart-home layer talks to a LedChannel: it sets hue, saturation,
brightness and power. While no animation is running the channel paints
its strip with a solid colour. When the engine takes over it calls
yield_to_animation() and the channel stops painting until
resume_from_animation().

Any object providing `desired`, `yield_to_animation()` and
`resume_from_animation()` can stand in for a LedChannel (ChannelOwner).
"""

import logging
from typing import List, Optional, Protocol

from .color import hsv_to_rgb, hue360_to_hue8, map_range
from .types import BLACK, ChannelState, StripBuffers

logger = logging.getLogger(__name__)


class ChannelOwner(Protocol):
    """Channel-ownership collaborator consumed by the AnimationEngine."""

    desired: ChannelState

    def yield_to_animation(self) -> None:
        ...

    def resume_from_animation(self) -> None:
        ...


class LedChannel:
    """
    Desired state and manual-mode painter for one channel.

    Attributes:
        number: 1-based channel number (for logs / API)
        desired: Latest ChannelState requested by the controller
        animating: True while the animation engine owns the strip
    """

    def __init__(self, number: int, buffers: StripBuffers, index: int,
                 state: Optional[ChannelState] = None):
        self.number = number
        self._buffers = buffers
        self._index = index
        self.desired = state if state is not None else ChannelState()
        self.animating = False
        self._stale = False

    def update(self, hue: Optional[int] = None, saturation: Optional[int] = None,
               brightness: Optional[int] = None, power: Optional[bool] = None) -> ChannelState:
        """Apply a partial update; unspecified fields keep their value."""
        current = self.desired
        self.desired = ChannelState(
            hue=current.hue if hue is None else hue,
            saturation=current.saturation if saturation is None else saturation,
            brightness=current.brightness if brightness is None else brightness,
            power=current.power if power is None else power,
        )
        logger.debug(f"Channel {self.number} updated: {self.desired.to_dict()}")
        if self.animating:
            self._stale = True
        else:
            self.paint()
        return self.desired

    def paint(self):
        """Fill the strip with the desired solid colour (black when off)."""
        state = self.desired
        if not state.power:
            self._buffers.fill(self._index, BLACK)
            return
        color = hsv_to_rgb(
            hue360_to_hue8(state.hue),
            map_range(state.saturation, 0, 100, 0, 255),
            map_range(state.brightness, 0, 100, 0, 255),
        )
        self._buffers.fill(self._index, color)

    def yield_to_animation(self):
        self.animating = True

    def resume_from_animation(self):
        """Take the strip back; repaint only if the state changed meanwhile."""
        self.animating = False
        if self._stale:
            self._stale = False
            self.paint()

    def to_dict(self) -> dict:
        data = self.desired.to_dict()
        data['channel'] = self.number
        data['animating'] = self.animating
        return data


def create_channels(buffers: StripBuffers, default_hues=(0, 90, 180, 270),
                    default_brightness: int = 80) -> List[LedChannel]:
    """One LedChannel per buffer, hues spaced around the colour wheel."""
    channels = []
    for index in range(len(buffers)):
        hue = default_hues[index % len(default_hues)]
        state = ChannelState(hue=hue, saturation=100, brightness=default_brightness, power=False)
        channels.append(LedChannel(index + 1, buffers, index, state))
    return channels
