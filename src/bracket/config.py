"""
Tournament configuration.

A configuration arrives as a plain dict (JSON body, YAML settings file or CLI
arguments) and is coerced into a TournamentConfig. Both the current key names
and the older ones (player_team_level, a single level_tolerance) are accepted.
"""
from typing import Dict, Iterable, Optional

from bracket.errors import InvalidConfiguration

WIN_CURVES = ('linear', 'logistic')


class TournamentConfig:
    def __init__(self, player_level, team_count, level_tolerance_lower=0,
                 level_tolerance_upper=0, level_win_rate_modifier=0,
                 allowed_sources: Iterable[str] = (), unlocked_opponents: Iterable[str] = (),
                 win_curve='linear'):
        self.player_level = player_level
        self.team_count = team_count
        self.level_tolerance_lower = level_tolerance_lower
        self.level_tolerance_upper = level_tolerance_upper
        self.level_win_rate_modifier = level_win_rate_modifier
        self.allowed_sources = frozenset(allowed_sources)
        self.unlocked_opponents = frozenset(unlocked_opponents)
        self.win_curve = win_curve

    @property
    def required_opponents(self) -> int:
        return self.team_count - 1

    @property
    def level_range(self):
        """Inclusive (min, max) opponent level."""
        return (self.player_level - self.level_tolerance_lower,
                self.player_level + self.level_tolerance_upper)

    def validate(self):
        """Raise InvalidConfiguration if the settings cannot describe a tournament."""
        if self.level_tolerance_lower < 0 or self.level_tolerance_upper < 0:
            raise InvalidConfiguration(
                f"Level tolerance must be non-negative "
                f"(lower={self.level_tolerance_lower}, upper={self.level_tolerance_upper})"
            )
        if self.level_win_rate_modifier < 0:
            raise InvalidConfiguration(
                f"level_win_rate_modifier must be non-negative, got {self.level_win_rate_modifier}"
            )
        if self.team_count < 2:
            raise InvalidConfiguration(f"team_count must be at least 2, got {self.team_count}")
        if self.win_curve not in WIN_CURVES:
            raise InvalidConfiguration(
                f"Unknown win_curve '{self.win_curve}', expected one of {', '.join(WIN_CURVES)}"
            )
        return self

    @classmethod
    def from_dict(cls, data: Dict, defaults: Optional[Dict] = None) -> 'TournamentConfig':
        """Build and validate a configuration from a dict, filling gaps from defaults."""
        given = {k: v for k, v in (data or {}).items() if v is not None}
        if 'player_team_level' in given:
            given.setdefault('player_level', given['player_team_level'])
        if 'level_tolerance' in given:
            given.setdefault('level_tolerance_lower', given['level_tolerance'])
            given.setdefault('level_tolerance_upper', given['level_tolerance'])

        merged = dict(defaults or {})
        merged.update(given)

        for key in ('player_level', 'team_count'):
            if key not in merged:
                raise InvalidConfiguration(f"Missing required setting '{key}'")

        try:
            config = cls(
                player_level=int(merged['player_level']),
                team_count=int(merged['team_count']),
                level_tolerance_lower=int(merged.get('level_tolerance_lower', 0)),
                level_tolerance_upper=int(merged.get('level_tolerance_upper', 0)),
                level_win_rate_modifier=int(merged.get('level_win_rate_modifier', 0)),
                allowed_sources=_as_str_set(merged.get('allowed_sources', ())),
                unlocked_opponents=_as_str_set(merged.get('unlocked_opponents', ())),
                win_curve=str(merged.get('win_curve', 'linear')),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"Malformed setting: {e}") from e
        return config.validate()

    def to_dict(self) -> Dict:
        return {
            'player_level': self.player_level,
            'team_count': self.team_count,
            'level_tolerance_lower': self.level_tolerance_lower,
            'level_tolerance_upper': self.level_tolerance_upper,
            'level_win_rate_modifier': self.level_win_rate_modifier,
            'allowed_sources': sorted(self.allowed_sources),
            'unlocked_opponents': sorted(self.unlocked_opponents),
            'win_curve': self.win_curve,
        }

    def __eq__(self, other):
        return isinstance(other, TournamentConfig) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"TournamentConfig(player_level={self.player_level}, team_count={self.team_count}, "
                f"tolerance=-{self.level_tolerance_lower}/+{self.level_tolerance_upper})")


def _as_str_set(value):
    if isinstance(value, str):
        raise TypeError(f"expected a list of names, got string '{value}'")
    return {str(v) for v in value}
