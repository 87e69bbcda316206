"""
Case profile pool - the fixed set of profiles behind randomized case scenes.
"""

from __future__ import annotations

import random
from typing import Iterable, Iterator

from docket.models.scenario import CaseProfile


class CaseProfilePool:
    """A fixed, ordered pool of CaseProfile records.

    Selection takes the random source as an argument so callers (and tests)
    decide seeding; the pool itself holds no random state.

    Example:
        >>> pool = CaseProfilePool(scenario.cases)
        >>> profile = pool.draw(random.Random(42))
    """

    def __init__(self, profiles: Iterable[CaseProfile]):
        self._profiles: tuple[CaseProfile, ...] = tuple(profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[CaseProfile]:
        return iter(self._profiles)

    def draw(self, rng: random.Random) -> CaseProfile:
        """Select one profile uniformly at random.

        Args:
            rng: Random source used for the selection

        Returns:
            The selected CaseProfile

        Raises:
            ValueError: If the pool is empty
        """
        if not self._profiles:
            raise ValueError("Cannot draw from an empty case profile pool")
        return rng.choice(self._profiles)
