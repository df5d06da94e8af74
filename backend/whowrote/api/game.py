from flask import Blueprint, current_app, jsonify
from flask_login import login_required

from whowrote import game_store
from whowrote.api import request_payload
from whowrote.auth import current_identity
from whowrote.services.game import compute_results, list_sentences, submit_guesses, submit_sentence
from whowrote.socketio_events import broadcast_state

game = Blueprint('game', __name__)


@game.route('/submit-sentence', methods=['POST'])
@login_required
def post_sentence():
    data = request_payload()
    identity = current_identity()
    with game_store.transaction() as state:
        submit_sentence(state, identity, data.get('text'))
        phase = state.phase
    current_app.logger.info(f"[sentence] user={identity.username}")
    broadcast_state(phase)
    return jsonify({'ok': True})


@game.route('/sentences', methods=['GET'])
@login_required
def get_sentences():
    return jsonify(list_sentences(game_store.load(), current_identity()))


@game.route('/submit-guesses', methods=['POST'])
@login_required
def post_guesses():
    data = request_payload()
    identity = current_identity()
    with game_store.transaction() as state:
        entry = submit_guesses(state, identity, data.get('guessMap'))
        phase = state.phase
    current_app.logger.info(f"[guesses] user={identity.username} count={len(entry.guess_map)}")
    broadcast_state(phase)
    return jsonify({'ok': True})


@game.route('/results', methods=['GET'])
@login_required
def get_results():
    return jsonify(compute_results(game_store.load(), current_identity()))
