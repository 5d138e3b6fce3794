"""
Tests for the command-line tournament.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from main import main, parse_args

CATALOG = os.path.join(os.path.dirname(__file__), '..', 'data', 'opponents.yaml')


class TestParseArgs:
    """Tests for command-line defaults."""

    def test_defaults(self):
        args = parse_args([])
        assert args.teams == 8
        assert args.level == 30
        assert args.curve == 'linear'
        assert args.sources is None
        assert not args.auto

    def test_repeatable_source(self):
        args = parse_args(['--source', 'Story', '--source', 'Challenge'])
        assert args.sources == ['Story', 'Challenge']


class TestMain:
    """Tests for playing through the command line."""

    def test_auto_run_finishes(self, capsys):
        assert main(['--catalog', CATALOG, '--seed', '3', '--auto']) == 0
        out = capsys.readouterr().out
        assert 'Eligible opponents:' in out
        assert 'Champion' in out or 'Game over' in out

    def test_answering_no_loses(self, capsys, monkeypatch):
        monkeypatch.setattr('builtins.input', lambda prompt='': 'n')
        assert main(['--catalog', CATALOG, '--seed', '3']) == 0
        assert 'Game over! You were eliminated.' in capsys.readouterr().out

    def test_answering_yes_wins(self, capsys, monkeypatch):
        monkeypatch.setattr('builtins.input', lambda prompt='': 'y')
        assert main(['--catalog', CATALOG, '--seed', '3', '--teams', '4']) == 0
        assert 'Champion: Player!' in capsys.readouterr().out

    def test_reprompts_on_bad_answer(self, capsys, monkeypatch):
        answers = iter(['maybe', 'y', 'y', 'y'])
        monkeypatch.setattr('builtins.input', lambda prompt='': next(answers))
        assert main(['--catalog', CATALOG, '--seed', '5', '--teams', '4']) == 0
        assert 'Please answer y or n.' in capsys.readouterr().out

    def test_too_many_teams(self, capsys):
        assert main(['--catalog', CATALOG, '--teams', '32']) == 2
        assert 'Not enough opponents' in capsys.readouterr().err

    def test_invalid_settings(self, capsys):
        assert main(['--catalog', CATALOG, '--teams', '1']) == 2
        assert 'Error:' in capsys.readouterr().err

    def test_empty_catalog(self, tmp_path, capsys):
        empty = tmp_path / 'empty.yaml'
        empty.write_text('')
        assert main(['--catalog', str(empty)]) == 1
