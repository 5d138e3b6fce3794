"""
Single elimination bracket construction.
"""
import logging
import math
import random
from typing import Iterable, List

from bracket.config import TournamentConfig
from bracket.eligibility import eligible_opponents
from bracket.errors import InsufficientOpponents
from bracket.models import BYE, Match, Opponent, PLAYER, Tournament
from bracket.resolver import advance_winner

logger = logging.getLogger(__name__)


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of teams."""
    if teams_in_round == 2:
        return "Final"
    elif teams_in_round == 4:
        return "Semifinal"
    elif teams_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {teams_in_round}"


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_teams <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_teams))


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_teams) - num_teams


def assign_byes(teams: List[str], num_byes: int) -> List[str]:
    """
    Pick the teams that skip round 1.

    Opponents absorb byes first, in reverse selection order (the last selected
    opponent gets the first bye). The Player only gets one when no opponent is
    left to take it.
    """
    candidates = [t for t in reversed(teams) if t != PLAYER]
    if PLAYER in teams:
        candidates.append(PLAYER)
    return candidates[:num_byes]


def allocate_rounds(bracket_size: int) -> List[List[Match]]:
    """Empty rounds, halving from bracket_size / 2 matches down to the final."""
    total_rounds = int(math.log2(bracket_size))
    rounds = []
    num_matches = bracket_size // 2
    for round_index in range(total_rounds):
        rounds.append([Match(round_index, i) for i in range(num_matches)])
        num_matches //= 2
    return rounds


def build(config: TournamentConfig, catalog: Iterable[Opponent], rng: random.Random) -> Tournament:
    """
    Build a fresh tournament for the Player and team_count - 1 sampled opponents.

    Round 1 holds bracket_size / 2 slots: the real pairings plus one
    (team, BYE) slot per bye, already decided and advanced into round 2.
    Slot order is shuffled, so every call lays the bracket out differently.
    """
    pool = eligible_opponents(config, catalog)
    required = config.required_opponents
    if len(pool) < required:
        raise InsufficientOpponents(required, len(pool))

    selected = rng.sample(pool, required)
    participants = {opponent.opponent_id: opponent for opponent in selected}
    teams = [PLAYER] + [opponent.opponent_id for opponent in selected]

    bracket_size = calculate_bracket_size(len(teams))
    bye_teams = assign_byes(teams, calculate_byes(len(teams)))

    playing = [t for t in teams if t not in bye_teams]
    rng.shuffle(playing)
    slots = [(playing[i], playing[i + 1]) for i in range(0, len(playing), 2)]
    slots.extend((team, BYE) for team in bye_teams)
    rng.shuffle(slots)

    rounds = allocate_rounds(bracket_size)
    for match, (team1, team2) in zip(rounds[0], slots):
        match.teams = [team1, team2]
        if team2 == BYE:
            match.is_bye = True
            match.winner = team1
            advance_winner(rounds, match)

    logger.debug("Built %d-team bracket (size %d), byes: %s",
                 len(teams), bracket_size, bye_teams)
    return Tournament(rounds=rounds, participants=participants,
                      bye_teams=bye_teams, config=config)
