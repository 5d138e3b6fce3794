"""
Match result application and cascading CPU resolution.

Every operation works on a deep copy of the tournament it is given: either
it returns a new, fully resolved tournament or it raises and the caller's
tournament is left exactly as it was.
"""
import logging
import random
from collections import deque
from typing import Iterator, List, Optional

from bracket.errors import InvalidWinner, MatchAlreadyDecided, OutOfRange, TerminalTournament
from bracket.models import Match, PLAYER, Tournament
from bracket.outcome import evaluate_status
from bracket.simulation import simulate_match

logger = logging.getLogger(__name__)


def advance_winner(rounds: List[List[Match]], match: Match) -> Optional[Match]:
    """
    Place the winner of `match` into its slot in the next round.

    Match m feeds match m // 2 of the next round, slot m % 2. Returns the
    destination match, or None when `match` is the final.
    """
    next_round = match.round_index + 1
    if next_round >= len(rounds):
        return None
    destination = rounds[next_round][match.match_index // 2]
    destination.teams[match.match_index % 2] = match.winner
    return destination


def validate_result(tournament: Tournament, round_index: int, match_index: int, winner: str) -> Match:
    """Check a result against the tournament without touching it."""
    if tournament.status.is_terminal:
        raise TerminalTournament(f"Tournament is over ({tournament.status!r})")

    match = tournament.get_match(round_index, match_index)
    if match is None:
        raise OutOfRange(f"No match at round {round_index}, match {match_index}")
    if match.is_decided:
        raise MatchAlreadyDecided(
            f"Match {round_index}-{match_index} already won by {match.winner}"
        )
    if not match.is_ready:
        raise InvalidWinner(
            f"Match {round_index}-{match_index} is still waiting for its teams: {match.teams}"
        )
    if winner not in match.teams:
        raise InvalidWinner(f"'{winner}' is not playing in match {round_index}-{match_index}")
    return match


def record_winner(tournament: Tournament, match: Match, winner: str) -> Optional[Match]:
    """
    Record, advance and re-evaluate status. Returns the destination match.

    Status only depends on the Player's matches and the final, so other CPU
    results leave it as it was.
    """
    match.winner = winner
    destination = advance_winner(tournament.rounds, match)
    if destination is None or match.involves(PLAYER):
        tournament.status = evaluate_status(tournament)
    return destination


def is_cpu_decidable(match: Match) -> bool:
    return match.is_ready and PLAYER not in match.teams


def pending_cpu_matches(tournament: Tournament) -> List[Match]:
    """CPU-vs-CPU matches that could be simulated right now, in bracket order."""
    return [m for m in tournament.iter_matches() if is_cpu_decidable(m)]


def cascade(tournament: Tournament, rng: random.Random) -> Iterator[Match]:
    """
    Simulate CPU matches until nothing is left to decide or the tournament ends.

    Decides in place and yields each match right after its winner is recorded.
    """
    config = tournament.config
    queue = deque(pending_cpu_matches(tournament))
    while queue and not tournament.status.is_terminal:
        match = queue.popleft()
        if not is_cpu_decidable(match):
            continue
        team1, team2 = match.teams
        winner, _ = simulate_match(
            team1, tournament.level_of(team1),
            team2, tournament.level_of(team2),
            config.level_win_rate_modifier, rng, config.win_curve,
        )
        destination = record_winner(tournament, match, winner)
        if destination is not None and is_cpu_decidable(destination):
            queue.append(destination)
        yield match


def resolution_steps(tournament: Tournament, round_index: int, match_index: int,
                     winner: str, rng: random.Random) -> Iterator[Tournament]:
    """
    Apply a result and return the sequence of intermediate tournaments.

    The result is validated before this returns, so a bad call raises here
    rather than on first iteration. The first snapshot holds the submitted
    result, each following one a single CPU decision; the last is the settled
    tournament. Calling again with an identically seeded rng reproduces it.
    """
    validate_result(tournament, round_index, match_index, winner)

    def steps():
        working = _record_submitted(tournament, round_index, match_index, winner)
        yield working.copy()
        for _ in cascade(working, rng):
            yield working.copy()

    return steps()


def apply_result(tournament: Tournament, round_index: int, match_index: int,
                 winner: str, rng: random.Random) -> Tournament:
    """Apply a result and return the settled tournament."""
    validate_result(tournament, round_index, match_index, winner)
    working = _record_submitted(tournament, round_index, match_index, winner)
    for _ in cascade(working, rng):
        pass
    return working


def _record_submitted(tournament: Tournament, round_index: int, match_index: int,
                      winner: str) -> Tournament:
    working = tournament.copy()
    match = working.get_match(round_index, match_index)
    record_winner(working, match, winner)
    logger.debug("Recorded %s as winner of %d-%d", winner, round_index, match_index)
    return working
