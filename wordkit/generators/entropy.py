#!/usr/bin/env python3
"""
Entropy Module for Word Generation
==================================
Process-wide random source shared by every sampling step of the engine.

Features:
- Hardware-backed randomness by default (secrets.SystemRandom)
- Reproducible runs once a seed is set
- Cumulative-weight roulette selection used by the phoneme sampler,
  the template selector and the syllable count policy
"""

import os
import time
import random as _random
import secrets
import hashlib
from typing import List, Tuple, Optional, Any, Sequence


# =============================================================================
# Random Number Generator
# =============================================================================

class TrueRandom:
    """
    Random number generator with an optional deterministic mode.

    Without a seed it draws from the system entropy pool (hardware RNG if
    available). With a seed it switches to a Mersenne Twister so that a
    whole generation run can be replayed.
    """

    def __init__(self, seed: Optional[int] = None):
        self._seed = None
        self._rng = secrets.SystemRandom()
        self._entropy_pool = 0
        if seed is None:
            self._reseed()
        else:
            self.seed(seed)

    def _reseed(self):
        """Inject fresh entropy from multiple physical sources."""
        hw_entropy = int.from_bytes(os.urandom(8), 'big')
        time_entropy = time.time_ns()
        pid_entropy = os.getpid() << 48
        mem_entropy = id(object()) & 0xFFFFFFFF

        combined = hw_entropy ^ time_entropy ^ pid_entropy ^ mem_entropy
        entropy_bytes = hashlib.sha256(combined.to_bytes(32, 'big')).digest()
        self._entropy_pool = int.from_bytes(entropy_bytes[:8], 'big')

    def seed(self, value: Optional[int]) -> None:
        """Switch to a reproducible stream, or back to system entropy with None."""
        self._seed = value
        if value is None:
            self._rng = secrets.SystemRandom()
            self._reseed()
        else:
            self._rng = _random.Random(value)

    @property
    def seeded(self) -> bool:
        return self._seed is not None

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence) -> Any:
        """Return a random element from non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return self._rng.choice(seq)

    def chance(self, probability: float) -> bool:
        """True with the given probability (clamped to [0, 1])."""
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self._rng.random() < probability

    def weighted_choice(self, items: List[Tuple[Any, float]]) -> Any:
        """
        Choose from items with weights.

        Args:
            items: List of (item, weight) tuples

        Returns:
            Randomly selected item based on weights
        """
        if not items:
            raise IndexError("Cannot choose from empty sequence")

        total = sum(w for _, w in items)
        r = self.random() * total

        cumulative = 0.0
        for item, weight in items:
            if weight <= 0:
                continue
            cumulative += weight
            if r <= cumulative:
                return item

        positive = [item for item, weight in items if weight > 0]
        return positive[-1] if positive else items[-1][0]  # Float rounding


# Global instance
_true_random = TrueRandom()


def get_rng() -> TrueRandom:
    """Get the global random number generator."""
    return _true_random


def set_seed(value: Optional[int]) -> None:
    """Seed the global generator (None restores system entropy)."""
    _true_random.seed(value)


__all__ = [
    'TrueRandom',
    'get_rng',
    'set_seed',
]
