from flask import Blueprint, current_app, jsonify

from whowrote import game_store
from whowrote.api import request_payload
from whowrote.auth import current_identity
from whowrote.services.game import game_status, reset_game, set_phase
from whowrote.services.game.phases import require_admin
from whowrote.socketio_events import broadcast_state

admin = Blueprint('admin', __name__)


@admin.before_request
def admin_only():
    require_admin(current_identity())


@admin.route('/status', methods=['GET'])
def get_status():
    return jsonify(game_status(game_store.load(), current_identity()))


@admin.route('/set-phase', methods=['POST'])
def post_set_phase():
    data = request_payload()
    with game_store.transaction() as state:
        previous = state.phase
        shuffled = set_phase(state, current_identity(), data.get('phase'))
        phase = state.phase
    current_app.logger.info(f"[set-phase] {previous} -> {phase} shuffled={shuffled}")
    broadcast_state(phase)
    return jsonify({'ok': True, 'phase': phase})


@admin.route('/reset', methods=['POST'])
def post_reset():
    state = reset_game(current_identity())
    game_store.replace(state)
    current_app.logger.info("[reset] game cleared")
    broadcast_state(state.phase)
    return jsonify({'ok': True})
