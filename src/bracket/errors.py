"""
Exceptions raised by the tournament engine.
"""


class TournamentError(Exception):
    """Base class for every engine failure."""
    kind = 'tournament_error'


class InvalidConfiguration(TournamentError):
    """Settings are malformed or contradictory."""
    kind = 'invalid_configuration'


class InsufficientOpponents(TournamentError):
    """Not enough eligible opponents to fill the bracket."""
    kind = 'insufficient_opponents'

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough eligible opponents: {required} required, {available} available"
        )


class TerminalTournament(TournamentError):
    """The tournament already finished; no further results are accepted."""
    kind = 'terminal_tournament'


class OutOfRange(TournamentError):
    """Round or match index does not address an existing match."""
    kind = 'out_of_range'


class MatchAlreadyDecided(TournamentError):
    kind = 'match_already_decided'


class InvalidWinner(TournamentError):
    """Winner is not one of the match's two occupants."""
    kind = 'invalid_winner'


class CatalogError(TournamentError):
    """Opponent catalog file is missing or malformed."""
    kind = 'catalog_error'
