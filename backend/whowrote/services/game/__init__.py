"""Game domain services: phases, submissions and scoring.

Everything here works on a ``GameState`` and an explicit ``Identity`` and
raises typed errors from ``whowrote.exceptions``. Loading and saving the
state, sessions and HTTP live elsewhere.
"""
from .phases import reset_game, set_phase
from .scoring import compute_results, game_status
from .shuffle import shuffle
from .submissions import find_user, list_sentences, register_user, submit_guesses, submit_sentence

__all__ = [
    'compute_results',
    'find_user',
    'game_status',
    'list_sentences',
    'register_user',
    'reset_game',
    'set_phase',
    'shuffle',
    'submit_guesses',
    'submit_sentence',
]
