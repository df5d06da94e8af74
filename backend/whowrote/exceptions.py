"""
Typed errors raised by the game services and the store.

The HTTP layer maps each kind to a status code; the services themselves
never know about transport.
"""


class GameError(Exception):
    """Base exception for all game errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    """Request payload is missing or has the wrong shape."""


class PhaseOrderError(GameError):
    """Operation attempted outside its phase, or a regressive phase change."""


class InvalidPhaseError(GameError):
    """Phase target outside 1-4."""


class AuthError(GameError):
    """Missing identity or bad credentials."""


class ForbiddenError(AuthError):
    """Identity is present but not allowed to perform the operation."""


class DuplicateError(GameError):
    """Username already registered."""


class StorageError(GameError):
    """Game document could not be read or written."""
