"""
Unit tests for the data models (Opponent, Match, Status, Tournament).
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.builder import allocate_rounds
from bracket.config import TournamentConfig
from bracket.models import (
    Opponent, Match, Status, Tournament, PLAYER, BYE, series_from_name,
    IN_PROGRESS, PLAYER_ELIMINATED, CHAMPION,
)


class TestOpponent:
    """Tests for the Opponent model."""

    def test_series_derived_from_name(self):
        """Test that the series defaults to the parenthesised part of the name."""
        opponent = Opponent('raimon', 'Raimon (IE1)', 25, 'Story')
        assert opponent.series == 'IE1'
        assert opponent.difficulty == 'Normal'

    def test_explicit_series_wins(self):
        """Test that an explicit series is kept."""
        opponent = Opponent('raimon', 'Raimon (IE1)', 25, 'Story', series='Movie')
        assert opponent.series == 'Movie'

    def test_name_without_series(self):
        """Test a name with no parentheses has no series."""
        assert series_from_name('Raimon') is None

    def test_round_trip(self):
        """Test dict conversion keeps every field."""
        opponent = Opponent('teikoku', 'Teikoku (IE1)', 32, 'Story', difficulty='Hard')
        assert Opponent.from_dict(opponent.to_dict()) == opponent

    def test_repr(self):
        """Test opponent string representation."""
        repr_str = repr(Opponent('teikoku', 'Teikoku (IE1)', 32, 'Story'))
        assert 'teikoku' in repr_str
        assert '32' in repr_str


class TestMatch:
    """Tests for the Match model."""

    def test_new_match_is_empty(self):
        """Test a fresh match waits for both teams."""
        match = Match(1, 0)
        assert match.teams == [None, None]
        assert not match.is_decided
        assert not match.is_ready

    def test_ready_match(self):
        """Test a match with two real teams and no winner is ready."""
        match = Match(0, 0, teams=[PLAYER, 'A'])
        assert match.is_ready
        assert match.involves(PLAYER)

    def test_bye_match_is_never_ready(self):
        """Test a BYE occupant keeps the match from being playable."""
        match = Match(0, 0, teams=['A', BYE])
        assert not match.is_ready

    def test_decided_match_is_not_ready(self):
        """Test a match with a winner is no longer ready."""
        match = Match(0, 0, teams=[PLAYER, 'A'], winner='A')
        assert match.is_decided
        assert not match.is_ready


class TestStatus:
    """Tests for the Status model."""

    def test_in_progress_is_not_terminal(self):
        assert not Status.in_progress().is_terminal

    def test_terminal_states(self):
        """Test elimination and championship are terminal."""
        assert Status.player_eliminated().is_terminal
        assert Status.crowned(PLAYER).is_terminal

    def test_serialization(self):
        """Test status dicts use opaque state identifiers."""
        assert Status.in_progress().to_dict() == {'state': IN_PROGRESS, 'champion': None}
        assert Status.player_eliminated().to_dict()['state'] == PLAYER_ELIMINATED
        assert Status.crowned('A').to_dict() == {'state': CHAMPION, 'champion': 'A'}
        assert Status.from_dict(Status.crowned('A').to_dict()) == Status.crowned('A')


class TestTournament:
    """Tests for the Tournament aggregate."""

    @pytest.fixture
    def tournament(self):
        rounds = allocate_rounds(4)
        rounds[0][0].teams = [PLAYER, 'A']
        rounds[0][1].teams = ['B', 'C']
        participants = {name: Opponent(name, name, 30 + i, 'Story') for i, name in enumerate('ABC')}
        config = TournamentConfig(30, 4, 5, 5, 5, {'Story'}, set('ABC'))
        return Tournament(rounds, participants, [], config)

    def test_get_match_in_range(self, tournament):
        assert tournament.get_match(0, 1).teams == ['B', 'C']

    def test_get_match_out_of_range(self, tournament):
        """Test that bad indices return None instead of raising."""
        assert tournament.get_match(2, 0) is None
        assert tournament.get_match(1, 1) is None
        assert tournament.get_match(-1, 0) is None

    def test_levels(self, tournament):
        """Test the Player's level comes from the configuration."""
        assert tournament.level_of(PLAYER) == 30
        assert tournament.level_of('C') == 32

    def test_team_ids_put_player_first(self, tournament):
        assert tournament.team_ids == [PLAYER, 'A', 'B', 'C']

    def test_copy_is_independent(self, tournament):
        """Test that mutating a copy leaves the original untouched."""
        clone = tournament.copy()
        clone.rounds[0][0].winner = PLAYER
        assert tournament.rounds[0][0].winner is None
        assert clone != tournament

    def test_round_trip(self, tournament):
        """Test dict conversion reproduces an equal tournament."""
        restored = Tournament.from_dict(tournament.to_dict())
        assert restored == tournament
        assert restored.final.round_index == 1
