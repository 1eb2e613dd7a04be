import logging
import random
from typing import Mapping, Optional


class WeightedSelectorService:
    """
    Cumulative-distribution (inverse) sampling over a participant -> weight map.

    Raw weights (balances, stakes, reputations) are normalised by their
    positive total first, so the fallback is only hit on float rounding or
    when nothing carries weight. Iteration follows the mapping order.
    """

    def __init__(self, rng: Optional[random.Random] = None, logger: logging.Logger | None = None):
        """
        :param rng: Random source; pass a seeded `random.Random` for reproducible draws.
        :param logger: Optional logger.
        """
        self._rng = rng or random.Random()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def normalize(weights: Mapping[str, float]) -> dict[str, float]:
        total = sum(w for w in weights.values() if w > 0)
        if total <= 0:
            return {}
        return {k: (w / total if w > 0 else 0.0) for k, w in weights.items()}

    @staticmethod
    def pick(weights: Mapping[str, float], r: float, fallback: str) -> str:
        """Deterministic core: first participant whose cumulative weight reaches `r`."""
        cumulative = 0.0
        for participant, weight in weights.items():
            cumulative += weight
            if r <= cumulative and weight > 0:
                return participant
        return fallback

    def select(self, weights: Mapping[str, float], fallback: str) -> str:
        """
        :param weights: Non-negative weights, need not sum to 1.
        :param fallback: Returned when the map is empty, all weights are zero,
                         or rounding leaves the draw above the cumulative sum.
        """
        normalized = self.normalize(weights)
        if not normalized:
            self._logger.debug("No positive weight among %s entries; using fallback", len(weights))
            return fallback
        return self.pick(normalized, self._rng.random(), fallback)
