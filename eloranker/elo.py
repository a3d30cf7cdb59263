"""Elo rating computations."""

import math
from collections.abc import Sequence


K_FACTOR = 32
DEFAULT_RATING = 1200


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return math.floor(value + 0.5)


class EloRank:
    """Elo rating system with a fixed K-factor."""

    def __init__(self, k_factor: int = K_FACTOR):
        """Initialize Elo rating system.

        Args:
            k_factor: K-factor for Elo calculation (default: 32)
        """
        self.k_factor = k_factor

    def get_expected(self, rating_a: float, rating_b: float) -> float:
        """Get expected score for player A against player B.

        Args:
            rating_a: Rating of player A
            rating_b: Rating of player B

        Returns:
            Expected score (0-1)
        """
        return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))

    def update_rating(
        self,
        current: float,
        expected: float,
        actual: float,
    ) -> int:
        """Update rating based on match result.

        Args:
            current: Current rating
            expected: Expected score (0-1)
            actual: Actual score (0 for loss, 0.5 for draw, 1 for win)

        Returns:
            New rating, rounded to an integer
        """
        return round_half_up(current + self.k_factor * (actual - expected))

    def initial_rating(self, existing: Sequence[float]) -> int:
        """Get the starting rating for a new player.

        Args:
            existing: Ratings of the players already registered

        Returns:
            DEFAULT_RATING when nobody is registered, otherwise the rounded mean
        """
        if not existing:
            return DEFAULT_RATING
        return round_half_up(sum(existing) / len(existing))


_default = EloRank()


def expected_score(rating_a: float, rating_b: float) -> float:
    """Expected score of A against B with the default system."""
    return _default.get_expected(rating_a, rating_b)


def new_rating(current: float, expected: float, actual: float) -> int:
    """New rating after a match with the default system."""
    return _default.update_rating(current, expected, actual)


def initial_rating(existing: Sequence[float]) -> int:
    """Starting rating for a new player with the default system."""
    return _default.initial_rating(existing)
