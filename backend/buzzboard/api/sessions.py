from flask import Blueprint, jsonify, request, current_app
from buzzboard import get_session_manager
from buzzboard.services.sessions import SessionError, team_color


sessions = Blueprint('sessions', __name__)


@sessions.errorhandler(SessionError)
def handle_session_error(err: SessionError):
    current_app.logger.info(f"[rejected] code={err.code} session={err.session_id} error={err.message}")
    return jsonify(err.to_dict()), err.status_code


@sessions.route('/create', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    num_teams = data.get('num_teams')
    if num_teams is None:
        return jsonify({'error': 'num_teams is required'}), 400
    session = get_session_manager().create_session(num_teams)
    return jsonify({
        'session_id': session.session_id,
        'teams': session.teams,
        'colors': {t: team_color(t) for t in session.teams},
    }), 201


@sessions.route('/state/<string:session_id>', methods=['GET'])
def get_session_state(session_id):
    session = get_session_manager().get_session_snapshot(session_id)
    return jsonify(session.to_dict())


@sessions.route('/buzz', methods=['POST'])
def submit_buzz():
    data = request.get_json(silent=True) or {}
    session_id = data.get('session_id')
    name = data.get('name')
    team = data.get('team')
    if not all([session_id, name, team]):
        return jsonify({'error': 'Missing required fields: session_id, name, team'}), 400
    buzz = get_session_manager().submit_buzz(session_id, name, team)
    return jsonify({'success': True, 'buzz': buzz.to_event()})


@sessions.route('/reset', methods=['POST'])
def reset_buzzes():
    data = request.get_json(silent=True) or {}
    session_id = data.get('session_id')
    if not session_id:
        return jsonify({'error': 'Missing required field: session_id'}), 400
    get_session_manager().reset_buzzes(session_id)
    return jsonify({'success': True})
