# Command-line tournament: play your own matches, CPU matches resolve themselves

import argparse
import os
import sys
from bracket.api import list_eligible, build_tournament, apply_match_result
from bracket.builder import get_round_name
from bracket.catalog import load_catalog, list_sources
from bracket.config import TournamentConfig
from bracket.errors import TournamentError, InsufficientOpponents
from bracket.models import BYE, PLAYER, CHAMPION
from bracket.rng import make_rng
from bracket.simulation import simulate_match


def parse_args(argv=None):
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    parser = argparse.ArgumentParser(description='Play a single elimination tournament against CPU teams.')
    parser.add_argument('--catalog', default=os.path.join(base_dir, 'data', 'opponents.yaml'),
                        help='Opponent catalog YAML file')
    parser.add_argument('--level', type=int, default=30, help='Your team level')
    parser.add_argument('--teams', type=int, default=8, help='Number of teams including yours')
    parser.add_argument('--lower', type=int, default=10, help='How far below your level opponents may be')
    parser.add_argument('--upper', type=int, default=10, help='How far above your level opponents may be')
    parser.add_argument('--modifier', type=int, default=5, help='Win rate points per level of difference')
    parser.add_argument('--source', action='append', dest='sources',
                        help='Allowed opponent source (repeatable, default: all)')
    parser.add_argument('--curve', choices=['linear', 'logistic'], default='linear')
    parser.add_argument('--seed', type=int, default=None, help='Seed for a reproducible tournament')
    parser.add_argument('--auto', action='store_true', help='Simulate your matches too')
    return parser.parse_args(argv)


def describe(tournament, team):
    if team is None:
        return '(waiting)'
    if team in (PLAYER, BYE):
        return team
    opponent = tournament.participants[team]
    return f"{opponent.name} (Lv.{opponent.level}, {opponent.difficulty})"


def print_bracket(tournament):
    bracket_size = len(tournament.rounds[0]) * 2
    for round_index, matches in enumerate(tournament.rounds):
        print(f"\n# {get_round_name(bracket_size >> round_index)}")
        for match in matches:
            team1, team2 = match.teams
            line = f"  [{match.match_index}] {describe(tournament, team1)} vs {describe(tournament, team2)}"
            if match.winner:
                line += f"  -> {describe(tournament, match.winner)}"
            print(line)
    if tournament.bye_teams:
        print("\nByes: " + ", ".join(describe(tournament, t) for t in tournament.bye_teams))


def next_player_match(tournament):
    for match in tournament.iter_matches():
        if match.is_ready and PLAYER in match.teams:
            return match
    return None


def ask_winner(tournament, match):
    opponent = next(t for t in match.teams if t != PLAYER)
    while True:
        answer = input(f"\nYou vs {describe(tournament, opponent)} - did you win? [y/n] ").strip().lower()
        if answer in ('y', 'yes'):
            return PLAYER
        if answer in ('n', 'no'):
            return opponent
        print("Please answer y or n.")


def main(argv=None):
    args = parse_args(argv)
    catalog = load_catalog(args.catalog)
    if not catalog:
        print(f"No opponents loaded. Check {args.catalog}")
        return 1

    settings = {
        'player_level': args.level,
        'team_count': args.teams,
        'level_tolerance_lower': args.lower,
        'level_tolerance_upper': args.upper,
        'level_win_rate_modifier': args.modifier,
        'allowed_sources': args.sources or list_sources(catalog),
        'unlocked_opponents': [o.opponent_id for o in catalog],
        'win_curve': args.curve,
    }
    rng = make_rng(args.seed)

    try:
        config = TournamentConfig.from_dict(settings)
        print(f"Eligible opponents: {list_eligible(config, catalog)['count']}")
        tournament = build_tournament(config, catalog, rng)
    except InsufficientOpponents as e:
        print(f"Not enough opponents: {e.required} needed, {e.available} available. "
              f"Widen the level tolerance or allow more sources.", file=sys.stderr)
        return 2
    except TournamentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print_bracket(tournament)
    while not tournament.status.is_terminal:
        match = next_player_match(tournament)
        if args.auto:
            team1, team2 = match.teams
            winner, _ = simulate_match(team1, tournament.level_of(team1), team2, tournament.level_of(team2),
                                       config.level_win_rate_modifier, rng, config.win_curve)
        else:
            winner = ask_winner(tournament, match)
        tournament = apply_match_result(tournament, match.round_index, match.match_index, winner, rng)
        print_bracket(tournament)

    if tournament.status.state == CHAMPION:
        print(f"\nChampion: {describe(tournament, tournament.status.champion)}!")
    else:
        print("\nGame over! You were eliminated.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
