from typing import Optional

from whowrote.exceptions import AuthError, ForbiddenError, InvalidPhaseError, PhaseOrderError
from whowrote.models import (
    GameState,
    Identity,
    PHASE_GUESSING,
    PHASE_REGISTRATION,
    PHASE_RESULTS,
)
from .shuffle import shuffle


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise AuthError('Not logged in')
    return identity


def require_student(identity: Optional[Identity]) -> Identity:
    if identity is None or not identity.is_student:
        raise AuthError('Not logged in')
    return identity


def require_admin(identity: Optional[Identity]) -> Identity:
    if identity is None or not identity.is_admin:
        raise ForbiddenError('Not authorized')
    return identity


def require_phase(state: GameState, phase: int, message: str) -> None:
    if state.phase != phase:
        raise PhaseOrderError(message)


def require_min_phase(state: GameState, phase: int, message: str) -> None:
    if state.phase < phase:
        raise PhaseOrderError(message)


def set_phase(state: GameState, identity: Optional[Identity], target, rng=None) -> bool:
    """Advance ``state`` to ``target``.

    Only forward moves are allowed. Crossing from below the guessing phase
    into it (or past it) shuffles the sentences; that is the only time their
    order ever changes. Returns whether a shuffle happened.
    """
    require_admin(identity)
    # JSON clients may send 3.0 for 3
    if isinstance(target, float) and target.is_integer():
        target = int(target)
    if isinstance(target, bool) or not isinstance(target, int) or not PHASE_REGISTRATION <= target <= PHASE_RESULTS:
        raise InvalidPhaseError('Phase must be 1-4')
    if target <= state.phase:
        raise PhaseOrderError('Can only advance to a later phase')

    shuffled = False
    if target >= PHASE_GUESSING and state.phase < PHASE_GUESSING:
        state.sentences = shuffle(state.sentences, rng=rng)
        shuffled = True
    state.phase = target
    return shuffled


def reset_game(identity: Optional[Identity]) -> GameState:
    """A fresh registration-phase game. The caller stores it over whatever was there."""
    require_admin(identity)
    return GameState()
