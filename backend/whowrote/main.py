from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_user, logout_user

from whowrote import bcrypt, game_store
from whowrote.api import request_payload
from whowrote.auth import Account
from whowrote.exceptions import AuthError, ValidationError
from whowrote.services.game import find_user, register_user
from whowrote.socketio_events import broadcast_state

main = Blueprint('main', __name__)


@main.route('/register', methods=['POST'])
def register():
    data = request_payload()
    password = data.get('password')
    # Hash outside the store lock; register_user rejects a missing password
    credential = bcrypt.generate_password_hash(password).decode('utf-8') if isinstance(password, str) and password else None

    with game_store.transaction() as state:
        user = register_user(state, data.get('username'), data.get('displayName'), credential)
        phase = state.phase

    login_user(Account.student(user.username, user.display_name), remember=True)
    current_app.logger.info(f"[register] user={user.username}")
    broadcast_state(phase)
    return jsonify({'ok': True})


@main.route('/login', methods=['POST'])
def login():
    data = request_payload()
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        raise ValidationError('Username and password required')

    user = find_user(game_store.load(), username)
    if not user or not isinstance(password, str) or not bcrypt.check_password_hash(user.password, password):
        raise AuthError('Invalid username or password')

    login_user(Account.student(user.username, user.display_name), remember=True)
    return jsonify({'ok': True, 'displayName': user.display_name})


@main.route('/admin-login', methods=['POST'])
def admin_login():
    data = request_payload()
    if data.get('password') != current_app.config['ADMIN_PASSWORD']:
        raise AuthError('Wrong admin password')

    login_user(Account.admin(), remember=True)
    return jsonify({'ok': True})


@main.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify({'ok': True})


@main.route('/me', methods=['GET'])
def me():
    if not current_user.is_authenticated:
        return jsonify({'loggedIn': False})
    identity = current_user.identity
    if identity.is_admin:
        return jsonify({'loggedIn': True, 'isAdmin': True})
    return jsonify({
        'loggedIn': True,
        'username': identity.username,
        'displayName': current_user.display_name,
    })


@main.route('/phase', methods=['GET'])
def get_phase():
    return jsonify({'phase': game_store.load().phase})
