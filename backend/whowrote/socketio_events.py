from flask_socketio import emit

from whowrote import game_store, socketio

NAMESPACE = '/ws'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws', 'phase': game_store.load().phase})


def handle_ping(data):
    emit('pong', data or {})


def broadcast_state(phase: int) -> None:
    """Tell every connected client that the game changed, so nobody needs to poll /api/phase."""
    socketio.emit('state_update', {'phase': phase}, namespace=NAMESPACE)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
