from flask import Blueprint, jsonify
from buzzboard.services.sessions import TEAM_PALETTE, team_color

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Buzzboard server!'})

@main.route('/api/teams')
def list_teams():
    """Team palette in assignment order, so the host can preview colours."""
    return jsonify({
        'teams': TEAM_PALETTE,
        'max_teams': len(TEAM_PALETTE),
        'colors': {t: team_color(t) for t in TEAM_PALETTE},
    })
