"""Injected randomness, clocks and opaque identifiers.

Every generator in the simulation draws from a single ``RandomSource`` so a
seeded ``random.Random`` replays a run exactly.
"""

from __future__ import annotations

import random
import string
from datetime import datetime, timezone
from typing import Callable, Protocol, Sequence, TypeVar

T = TypeVar("T")

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


class RandomSource(Protocol):
    """Subset of ``random.Random`` used by the simulation."""

    def random(self) -> float:
        ...

    def uniform(self, a: float, b: float) -> float:
        ...

    def choice(self, seq: Sequence[T]) -> T:
        ...

    def randint(self, a: int, b: int) -> int:
        ...


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_rng(seed: int | None = None) -> random.Random:
    return random.Random(seed)


def new_id(prefix: str, rng: RandomSource, clock: Clock = utc_now) -> str:
    """Return ``"<prefix>-<millis>-<suffix>"`` with a 9 char base-36 suffix."""
    millis = int(clock().timestamp() * 1000)
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{prefix}-{millis}-{suffix}"
