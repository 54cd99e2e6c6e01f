"""
Actor Pool - fixed-capacity slot map for transient animation actors

Runners and raindrops live in a pool allocated once per channel. Slots
are reused; acquiring from a full pool returns None instead of growing,
so the number of active actors can never exceed the capacity.

Usage:
    pool = SlotPool(6, Runner)
    runner = pool.acquire()      # None when every slot is busy
    if runner is not None:
        runner.head_pos = 0
    ...
    pool.release(runner)
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from .types import HSV


# ============================================================
# Actors
# ============================================================

@dataclass
class Runner:
    """Contiguous window travelling from pixel 0 toward the strip end."""
    head_pos: int = 0
    color: HSV = field(default_factory=lambda: HSV(0, 0, 0))
    active: bool = False

    def reset(self, length: int):
        self.head_pos = -length
        self.color = HSV(0, 0, 0)
        self.active = False


@dataclass
class Raindrop:
    """Stationary drop fading out over a fixed number of frames."""
    center_pos: int = 0
    current_frame: int = 0
    color: HSV = field(default_factory=lambda: HSV(0, 0, 0))
    active: bool = False

    def reset(self):
        self.center_pos = 0
        self.current_frame = 0
        self.color = HSV(0, 0, 0)
        self.active = False


# ============================================================
# Slot Pool
# ============================================================

T = TypeVar('T')


class SlotPool(Generic[T]):
    """
    Fixed set of preallocated slots, each with an `active` flag.

    Attributes:
        capacity: Maximum number of simultaneously active actors
    """

    def __init__(self, capacity: int, factory: Callable[[], T]):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._slots: List[T] = [factory() for _ in range(capacity)]

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[T]:
        """All slots, active or not, in slot order"""
        return iter(self._slots)

    def active(self) -> Iterator[T]:
        """Active slots in slot order"""
        return (slot for slot in self._slots if slot.active)

    @property
    def active_count(self) -> int:
        return sum(1 for slot in self._slots if slot.active)

    @property
    def is_full(self) -> bool:
        return all(slot.active for slot in self._slots)

    def acquire(self) -> Optional[T]:
        """Activate and return the first free slot, or None if full."""
        for slot in self._slots:
            if not slot.active:
                slot.active = True
                return slot
        return None

    def release(self, slot: T):
        slot.active = False
