from flask import current_app, jsonify

from whowrote.exceptions import (
    AuthError,
    DuplicateError,
    ForbiddenError,
    GameError,
    InvalidPhaseError,
    PhaseOrderError,
    StorageError,
    ValidationError,
)

# Most specific first: ForbiddenError is also an AuthError
STATUS_BY_KIND = [
    (ForbiddenError, 403),
    (AuthError, 401),
    (ValidationError, 400),
    (PhaseOrderError, 400),
    (InvalidPhaseError, 400),
    (DuplicateError, 400),
    (StorageError, 500),
]


def status_for(exc: GameError) -> int:
    for kind, status in STATUS_BY_KIND:
        if isinstance(exc, kind):
            return status
    return 400


def handle_game_error(exc: GameError):
    status = status_for(exc)
    if status >= 500:
        current_app.logger.error(f"[error] kind={type(exc).__name__} message={exc.message}")
    else:
        current_app.logger.info(f"[rejected] kind={type(exc).__name__} message={exc.message}")
    return jsonify({'error': exc.message}), status


def register_error_handlers(app) -> None:
    app.register_error_handler(GameError, handle_game_error)
