"""
Opponent eligibility for a tournament configuration.
"""
from typing import Dict, Iterable, List

from bracket.config import TournamentConfig
from bracket.models import Opponent


def is_eligible(opponent: Opponent, config: TournamentConfig) -> bool:
    """Source allowed, opponent unlocked, and level within the tolerance window."""
    if opponent.source not in config.allowed_sources:
        return False
    if opponent.opponent_id not in config.unlocked_opponents:
        return False
    low, high = config.level_range
    return low <= opponent.level <= high


def eligible_opponents(config: TournamentConfig, catalog: Iterable[Opponent]) -> List[Opponent]:
    """Eligible opponents in catalog order."""
    config.validate()
    return [opponent for opponent in catalog if is_eligible(opponent, config)]


def count_and_list(config: TournamentConfig, catalog: Iterable[Opponent]) -> Dict:
    """
    Returns dict with:
    - eligible: set of eligible opponent identities
    - count: number of eligible opponents
    """
    eligible = {opponent.opponent_id for opponent in eligible_opponents(config, catalog)}
    return {'eligible': eligible, 'count': len(eligible)}
