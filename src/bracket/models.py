import copy
import re
from typing import Dict, List, Optional

from bracket.config import TournamentConfig

PLAYER = 'Player'
BYE = 'BYE'
RESERVED_IDS = {PLAYER, BYE}

IN_PROGRESS = 'in_progress'
PLAYER_ELIMINATED = 'player_eliminated'
CHAMPION = 'champion'

_SERIES_PATTERN = re.compile(r'\((.*?)\)')


def series_from_name(name: str) -> Optional[str]:
    """Extract the series tag from a name such as 'Raimon (IE1)'."""
    match = _SERIES_PATTERN.search(name)
    return match.group(1) if match else None


class Opponent:
    def __init__(self, opponent_id, name, level, source, series=None, difficulty='Normal'):
        self.opponent_id = opponent_id
        self.name = name
        self.level = level
        self.source = source
        self.series = series if series is not None else series_from_name(name)
        self.difficulty = difficulty

    def to_dict(self) -> Dict:
        return {
            'id': self.opponent_id,
            'name': self.name,
            'level': self.level,
            'source': self.source,
            'series': self.series,
            'difficulty': self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Opponent':
        return cls(
            opponent_id=data['id'],
            name=data['name'],
            level=data['level'],
            source=data['source'],
            series=data.get('series'),
            difficulty=data.get('difficulty', 'Normal'),
        )

    def __eq__(self, other):
        return isinstance(other, Opponent) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(self.opponent_id)

    def __repr__(self):
        return f"Opponent(id={self.opponent_id}, level={self.level}, source={self.source})"


class Match:
    """
    One bracket match.

    teams holds the two slot occupants: a team identity, BYE, or None while
    the slot waits for an earlier round's winner.
    """

    def __init__(self, round_index, match_index, teams=None, winner=None, is_bye=False):
        self.round_index = round_index
        self.match_index = match_index
        self.teams = list(teams) if teams else [None, None]
        self.winner = winner
        self.is_bye = is_bye

    @property
    def is_decided(self) -> bool:
        return self.winner is not None

    @property
    def is_ready(self) -> bool:
        """Both occupants are real teams and no result is recorded yet."""
        return (self.winner is None
                and all(t is not None and t != BYE for t in self.teams))

    def involves(self, team: str) -> bool:
        return team in self.teams

    def to_dict(self) -> Dict:
        return {
            'round_index': self.round_index,
            'match_index': self.match_index,
            'teams': list(self.teams),
            'winner': self.winner,
            'is_bye': self.is_bye,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Match':
        return cls(
            round_index=data['round_index'],
            match_index=data['match_index'],
            teams=data.get('teams'),
            winner=data.get('winner'),
            is_bye=data.get('is_bye', False),
        )

    def __repr__(self):
        return (f"Match(r={self.round_index}, m={self.match_index}, "
                f"teams={self.teams}, winner={self.winner})")


class Status:
    def __init__(self, state=IN_PROGRESS, champion=None):
        self.state = state
        self.champion = champion

    @classmethod
    def in_progress(cls) -> 'Status':
        return cls(IN_PROGRESS)

    @classmethod
    def player_eliminated(cls) -> 'Status':
        return cls(PLAYER_ELIMINATED)

    @classmethod
    def crowned(cls, champion: str) -> 'Status':
        return cls(CHAMPION, champion)

    @property
    def is_terminal(self) -> bool:
        return self.state != IN_PROGRESS

    def to_dict(self) -> Dict:
        return {'state': self.state, 'champion': self.champion}

    @classmethod
    def from_dict(cls, data: Dict) -> 'Status':
        return cls(data.get('state', IN_PROGRESS), data.get('champion'))

    def __eq__(self, other):
        return (isinstance(other, Status)
                and self.state == other.state and self.champion == other.champion)

    def __repr__(self):
        if self.state == CHAMPION:
            return f"Status(champion={self.champion})"
        return f"Status({self.state})"


class Tournament:
    def __init__(self, rounds, participants, bye_teams, config, status=None):
        self.rounds: List[List[Match]] = rounds
        self.participants: Dict[str, Opponent] = participants
        self.bye_teams: List[str] = bye_teams
        self.config: TournamentConfig = config
        self.status: Status = status if status is not None else Status.in_progress()

    @property
    def final(self) -> Match:
        return self.rounds[-1][0]

    @property
    def team_ids(self) -> List[str]:
        """Player first, then opponents in selection order."""
        return [PLAYER] + list(self.participants.keys())

    def get_match(self, round_index: int, match_index: int) -> Optional[Match]:
        if not 0 <= round_index < len(self.rounds):
            return None
        matches = self.rounds[round_index]
        if not 0 <= match_index < len(matches):
            return None
        return matches[match_index]

    def iter_matches(self):
        for round_matches in self.rounds:
            yield from round_matches

    def level_of(self, team: str) -> int:
        if team == PLAYER:
            return self.config.player_level
        return self.participants[team].level

    def copy(self) -> 'Tournament':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict:
        return {
            'rounds': [[m.to_dict() for m in matches] for matches in self.rounds],
            'participants': {k: v.to_dict() for k, v in self.participants.items()},
            'bye_teams': list(self.bye_teams),
            'status': self.status.to_dict(),
            'config': self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tournament':
        return cls(
            rounds=[[Match.from_dict(m) for m in matches] for matches in data['rounds']],
            participants={k: Opponent.from_dict(v) for k, v in data['participants'].items()},
            bye_teams=list(data.get('bye_teams', [])),
            config=TournamentConfig.from_dict(data['config']),
            status=Status.from_dict(data.get('status', {})),
        )

    def __eq__(self, other):
        return isinstance(other, Tournament) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Tournament(teams={len(self.team_ids)}, rounds={len(self.rounds)}, "
                f"status={self.status})")
