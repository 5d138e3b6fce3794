"""
Flask JSON API hosting the tournament engine.

Live tournaments are kept in memory, one per browser session; nothing is
written to disk and everything is lost on restart.
"""
import os
import threading
import uuid
import yaml
from flask import Flask, request, jsonify, session
from bracket.api import list_eligible, build_tournament, apply_match_result, match_result_steps, get_opponent_catalog
from bracket.builder import get_round_name
from bracket.catalog import load_catalog, filter_catalog, list_series, list_sources
from bracket.config import TournamentConfig
from bracket.errors import TournamentError, InvalidConfiguration, InsufficientOpponents, CatalogError
from bracket.models import PLAYER
from bracket.rng import make_rng

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('INAZUMA_DATA_DIR', os.path.join(BASE_DIR, 'data'))
CATALOG_FILE = os.environ.get('INAZUMA_CATALOG', os.path.join(DATA_DIR, 'opponents.yaml'))
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')

app.secret_key = os.environ.get('SECRET_KEY') or os.urandom(24)

_catalog = None
_tournaments = {}
_store_lock = threading.Lock()
_seed = os.environ.get('INAZUMA_SEED')
_rng = make_rng(int(_seed) if _seed else None)


def get_default_settings() -> dict:
    """Default tournament settings used when a request leaves a field out."""
    return {
        'player_level': 30,
        'team_count': 8,
        'level_tolerance_lower': 10,
        'level_tolerance_upper': 10,
        'level_win_rate_modifier': 5,
        'win_curve': 'linear',
    }


def load_settings() -> dict:
    """Defaults merged with settings.yaml, when present."""
    settings = get_default_settings()
    if not os.path.exists(SETTINGS_FILE):
        return settings
    try:
        with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            settings.update(data)
        elif data is not None:
            app.logger.warning(f'Ignoring {SETTINGS_FILE}: expected a mapping, got {type(data).__name__}')
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
    return settings


def get_catalog() -> list:
    """Load the opponent catalog on first use and keep it for the process lifetime."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog(CATALOG_FILE)
        app.logger.info(f'Loaded {len(_catalog)} opponents from {CATALOG_FILE}')
    return _catalog


def _config_from_request() -> TournamentConfig:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidConfiguration('Request body must be a JSON object')
    return TournamentConfig.from_dict(data, defaults=load_settings())


def _session_token() -> str:
    token = session.get('tournament_token')
    if not token:
        token = uuid.uuid4().hex
        session['tournament_token'] = token
    return token


def _current_tournament():
    token = session.get('tournament_token')
    with _store_lock:
        return _tournaments.get(token) if token else None


def _tournament_payload(tournament) -> dict:
    """Tournament dict plus round names and the player's next match for clients."""
    payload = tournament.to_dict()
    bracket_size = len(tournament.rounds[0]) * 2
    payload['round_names'] = [get_round_name(bracket_size >> i) for i in range(len(tournament.rounds))]
    payload['next_player_match'] = None
    for match in tournament.iter_matches():
        if match.is_ready and PLAYER in match.teams:
            payload['next_player_match'] = {'round_index': match.round_index, 'match_index': match.match_index}
            break
    return payload


@app.errorhandler(TournamentError)
def handle_tournament_error(e):
    """Settings problems are the user's to fix (400); anything else is a client contract violation (409)."""
    body = {'error': str(e), 'kind': e.kind}
    if isinstance(e, InsufficientOpponents):
        body.update({'required': e.required, 'available': e.available})
    if isinstance(e, CatalogError):
        app.logger.error(f'Catalog unavailable: {e}')
        return jsonify(body), 500
    if isinstance(e, (InvalidConfiguration, InsufficientOpponents)):
        return jsonify(body), 400
    app.logger.warning(f'Rejected match result: {e}')
    return jsonify(body), 409


@app.route('/api/settings', methods=['GET'])
def api_settings():
    """Default settings plus the sources available in the catalog."""
    settings = load_settings()
    settings['sources'] = list_sources(get_catalog())
    return jsonify(settings)


@app.route('/api/opponents', methods=['GET'])
def api_opponents():
    """Opponent catalog, optionally narrowed by ?source=...&source=... and ?series=..."""
    sources = request.args.getlist('source') or None
    series = request.args.get('series')
    opponents = filter_catalog(get_opponent_catalog(get_catalog()), sources=sources, series=series)
    return jsonify({'opponents': [o.to_dict() for o in opponents]})


@app.route('/api/series', methods=['GET'])
def api_series():
    return jsonify({'series': list_series(get_catalog())})


@app.route('/api/eligible', methods=['POST'])
def api_eligible():
    """How many opponents the submitted settings allow."""
    config = _config_from_request()
    info = list_eligible(config, get_catalog())
    return jsonify({
        'count': info['count'],
        'required': config.required_opponents,
        'sufficient': info['count'] >= config.required_opponents,
    })


@app.route('/api/tournament', methods=['POST'])
def api_create_tournament():
    """Build a new tournament for this session, replacing any previous one."""
    config = _config_from_request()
    with _store_lock:
        tournament = build_tournament(config, get_catalog(), _rng)
        _tournaments[_session_token()] = tournament
    app.logger.info(f'Built {config.team_count}-team tournament, byes: {tournament.bye_teams}')
    return jsonify(_tournament_payload(tournament)), 201


@app.route('/api/tournament', methods=['GET'])
def api_get_tournament():
    tournament = _current_tournament()
    if tournament is None:
        return jsonify({'error': 'No tournament in progress'}), 404
    return jsonify(_tournament_payload(tournament))


@app.route('/api/tournament/result', methods=['POST'])
def api_match_result():
    """
    Record the player's match result and let CPU matches play out.

    Body: {"round_index": int, "match_index": int, "winner": str}.
    With ?steps=1 the response lists every intermediate bracket as well.
    """
    data = request.get_json(silent=True) or {}
    try:
        round_index = int(data['round_index'])
        match_index = int(data['match_index'])
        winner = str(data['winner'])
    except (KeyError, TypeError, ValueError):
        return jsonify({'error': 'round_index, match_index and winner are required'}), 400

    token = session.get('tournament_token')
    with _store_lock:
        tournament = _tournaments.get(token) if token else None
        if tournament is None:
            return jsonify({'error': 'No tournament in progress'}), 404

        if request.args.get('steps', '').lower() in ('1', 'true', 'yes'):
            snapshots = list(match_result_steps(tournament, round_index, match_index, winner, _rng))
            updated = snapshots[-1]
        else:
            snapshots = None
            updated = apply_match_result(tournament, round_index, match_index, winner, _rng)
        _tournaments[token] = updated

    if updated.status.is_terminal:
        app.logger.info(f'Tournament finished: {updated.status!r}')
    payload = _tournament_payload(updated)
    if snapshots is not None:
        payload['steps'] = [_tournament_payload(s) for s in snapshots]
    return jsonify(payload)


@app.route('/api/tournament/reset', methods=['POST'])
def api_reset_tournament():
    """Forget this session's tournament."""
    token = session.get('tournament_token')
    with _store_lock:
        if token:
            _tournaments.pop(token, None)
    return jsonify({'success': True})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
