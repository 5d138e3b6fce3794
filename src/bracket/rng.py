"""
The engine's single source of randomness.

Every random choice (opponent sampling, pairing order, CPU match outcomes)
goes through a random.Random instance handed in by the caller. Tests pass a
seeded one; the host passes an entropy-seeded one.
"""
import random
from typing import Optional


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Return a generator seeded with `seed`, or from OS entropy when None."""
    return random.Random(seed)
