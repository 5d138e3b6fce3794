"""
Tournament lifecycle status.
"""
from typing import Optional

from bracket.models import Match, PLAYER, Status, Tournament


def last_player_match(tournament: Tournament) -> Optional[Match]:
    """The Player's decided match in the latest round, if any."""
    latest = None
    for match in tournament.iter_matches():
        if match.is_decided and match.involves(PLAYER):
            latest = match
    return latest


def evaluate_status(tournament: Tournament) -> Status:
    """
    Derive the status from the bracket.

    A terminal status is kept as is. Elimination wins over a decided final, so
    a player who loses the final is eliminated rather than watching a CPU
    champion being crowned.
    """
    if tournament.status.is_terminal:
        return tournament.status

    player_match = last_player_match(tournament)
    if player_match is not None and player_match.winner != PLAYER:
        return Status.player_eliminated()
    if tournament.final.is_decided:
        return Status.crowned(tournament.final.winner)
    return Status.in_progress()
