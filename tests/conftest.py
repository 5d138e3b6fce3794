"""
Shared pytest fixtures for tournament engine tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the bracket property sweeps
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.config import TournamentConfig
from bracket.models import Opponent
from bracket.rng import make_rng


@pytest.fixture
def sample_catalog():
    """
    Ten opponents. With player level 30 and tolerance 5/5, seven Story and one
    Tournament opponent are in range; Zeus and Genesis are not.
    """
    return [
        Opponent('Raimon (IE1)', 'Raimon (IE1)', 28, 'Story'),
        Opponent('Occult (IE1)', 'Occult (IE1)', 30, 'Story'),
        Opponent('Wild (IE1)', 'Wild (IE1)', 32, 'Story'),
        Opponent('Brain (IE1)', 'Brain (IE1)', 26, 'Story'),
        Opponent('Otaku (IE1)', 'Otaku (IE1)', 34, 'Story'),
        Opponent('Teikoku (IE1)', 'Teikoku (IE1)', 35, 'Story', difficulty='Hard'),
        Opponent('Zeus (IE1)', 'Zeus (IE1)', 50, 'Story', difficulty='Hard'),
        Opponent('Gemini Storm (IE2)', 'Gemini Storm (IE2)', 29, 'Story'),
        Opponent('Epsilon (IE2)', 'Epsilon (IE2)', 31, 'Tournament'),
        Opponent('Genesis (IE2)', 'Genesis (IE2)', 12, 'Tournament'),
    ]


@pytest.fixture
def make_config(sample_catalog):
    """Factory for configurations over the sample catalog with everything unlocked."""
    def _make(**overrides):
        settings = {
            'player_level': 30,
            'team_count': 4,
            'level_tolerance_lower': 5,
            'level_tolerance_upper': 5,
            'level_win_rate_modifier': 5,
            'allowed_sources': {'Story', 'Tournament'},
            'unlocked_opponents': {o.opponent_id for o in sample_catalog},
        }
        settings.update(overrides)
        return TournamentConfig(**settings)
    return _make


@pytest.fixture
def large_catalog():
    """Twenty level-30 Story opponents, enough for a 16 team bracket."""
    return [Opponent(f'Team {i:02d}', f'Team {i:02d}', 30, 'Story') for i in range(20)]


@pytest.fixture
def rng():
    """Seeded random source so selections are reproducible."""
    return make_rng(1234)


@pytest.fixture
def client(sample_catalog, tmp_path, monkeypatch):
    """Flask test client serving the sample catalog with no settings file."""
    import app as app_module
    monkeypatch.setattr(app_module, '_catalog', sample_catalog)
    monkeypatch.setattr(app_module, 'SETTINGS_FILE', str(tmp_path / 'settings.yaml'))
    monkeypatch.setattr(app_module, '_tournaments', {})
    monkeypatch.setattr(app_module, '_rng', make_rng(99))
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client


@pytest.fixture
def api_settings(sample_catalog):
    """JSON body for a 4 team tournament over the sample catalog."""
    return {
        'player_level': 30,
        'team_count': 4,
        'level_tolerance_lower': 5,
        'level_tolerance_upper': 5,
        'level_win_rate_modifier': 5,
        'allowed_sources': ['Story', 'Tournament'],
        'unlocked_opponents': [o.opponent_id for o in sample_catalog],
    }
