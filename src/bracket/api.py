"""
Operations exposed to host applications.

The catalog is loaded once by the host and passed in; when no random source is
given an entropy-seeded one is created for the call.
"""
import random
from typing import Dict, Iterable, List, Optional

from bracket import builder, resolver
from bracket.config import TournamentConfig
from bracket.eligibility import count_and_list
from bracket.models import Opponent, Tournament
from bracket.rng import make_rng


def list_eligible(config: TournamentConfig, catalog: Iterable[Opponent]) -> Dict:
    return {'count': count_and_list(config, catalog)['count']}


def build_tournament(config: TournamentConfig, catalog: Iterable[Opponent],
                     rng: Optional[random.Random] = None) -> Tournament:
    return builder.build(config, catalog, rng or make_rng())


def apply_match_result(tournament: Tournament, round_index: int, match_index: int,
                       winner: str, rng: Optional[random.Random] = None) -> Tournament:
    return resolver.apply_result(tournament, round_index, match_index, winner, rng or make_rng())


def match_result_steps(tournament: Tournament, round_index: int, match_index: int,
                       winner: str, rng: Optional[random.Random] = None):
    """Like apply_match_result, but yields every intermediate tournament."""
    return resolver.resolution_steps(tournament, round_index, match_index, winner, rng or make_rng())


def get_opponent_catalog(catalog: Iterable[Opponent]) -> List[Opponent]:
    """Read-only view of the catalog."""
    return list(catalog)
