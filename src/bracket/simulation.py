"""
Win probability policy for CPU-vs-CPU matches.

level_win_rate_modifier sets how strongly a level advantage translates into
win rate. With the linear curve it is the number of percentage points gained
per level of difference; the logistic curve bends the same slope so large
gaps saturate smoothly. Both are clamped so no match is a foregone conclusion.
A negative modifier counts as 0, so a level advantage never hurts.
"""
import logging
import math
import random
from typing import Tuple

logger = logging.getLogger(__name__)

MIN_WIN_PROBABILITY = 0.05
MAX_WIN_PROBABILITY = 0.95

# Logistic slope chosen to match the linear curve near an even match
_LOGISTIC_SCALE = 25.0


def _clamp(probability: float) -> float:
    return max(MIN_WIN_PROBABILITY, min(MAX_WIN_PROBABILITY, probability))


def linear_win_probability(level_a: int, level_b: int, modifier: int) -> float:
    return _clamp(0.5 + (level_a - level_b) * max(modifier, 0) / 100.0)


def logistic_win_probability(level_a: int, level_b: int, modifier: int) -> float:
    x = (level_a - level_b) * max(modifier, 0) / _LOGISTIC_SCALE
    return _clamp(1.0 / (1.0 + math.exp(-x)))


_CURVES = {
    'linear': linear_win_probability,
    'logistic': logistic_win_probability,
}


def win_probability(level_a: int, level_b: int, modifier: int, curve: str = 'linear') -> float:
    """Probability that side A beats side B."""
    return _CURVES[curve](level_a, level_b, modifier)


def simulate_match(team_a: str, level_a: int, team_b: str, level_b: int,
                   modifier: int, rng: random.Random, curve: str = 'linear') -> Tuple[str, float]:
    """
    Decide a CPU match. Returns (winner, favoured side's win probability).

    The draw is made for the favoured side; on an even match side A is
    treated as favoured.
    """
    p_a = win_probability(level_a, level_b, modifier, curve)
    if p_a >= 0.5:
        favoured, underdog, p_favoured = team_a, team_b, p_a
    else:
        favoured, underdog, p_favoured = team_b, team_a, 1.0 - p_a

    winner = favoured if rng.random() < p_favoured else underdog
    logger.debug("CPU match %s vs %s: %s favoured at %.2f, %s wins",
                 team_a, team_b, favoured, p_favoured, winner)
    return winner, p_favoured
