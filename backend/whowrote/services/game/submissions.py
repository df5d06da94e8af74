import unicodedata
from collections.abc import Mapping
from typing import Optional

from whowrote.exceptions import DuplicateError, ValidationError
from whowrote.models import (
    GameState,
    GuessEntry,
    Identity,
    PHASE_GUESSING,
    PHASE_REGISTRATION,
    PHASE_SUBMISSION,
    SentenceEntry,
    User,
    normalize_username,
)
from .phases import require_identity, require_min_phase, require_phase, require_student


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ''


def register_user(state: GameState, username, display_name, password) -> User:
    require_phase(state, PHASE_REGISTRATION, 'Registration is closed')
    if not _clean(username) or not _clean(display_name) or not isinstance(password, str) or not password:
        raise ValidationError('All fields are required')

    normalized = normalize_username(username)
    if state.find_user(normalized):
        raise DuplicateError('Username already taken')

    user = User(username=normalized, display_name=display_name.strip(), password=password)
    state.users.append(user)
    return user


def find_user(state: GameState, username) -> Optional[User]:
    if not isinstance(username, str):
        return None
    return state.find_user(normalize_username(username))


def submit_sentence(state: GameState, identity: Optional[Identity], text) -> SentenceEntry:
    """Store the student's sentence, replacing an earlier one in place."""
    require_student(identity)
    require_phase(state, PHASE_SUBMISSION, 'Sentence submission is not open')
    cleaned = _clean(text)
    if not cleaned:
        raise ValidationError('Sentence cannot be empty')

    for entry in state.sentences:
        if entry.username == identity.username:
            entry.text = cleaned
            return entry
    entry = SentenceEntry(username=identity.username, text=cleaned)
    state.sentences.append(entry)
    return entry


def submit_guesses(state: GameState, identity: Optional[Identity], guess_map) -> GuessEntry:
    """Store the student's guess map as given. Keys and values are not checked."""
    require_student(identity)
    require_phase(state, PHASE_GUESSING, 'Guessing phase is not open')
    if not isinstance(guess_map, Mapping):
        raise ValidationError('Invalid guesses')

    guess_map = dict(guess_map)
    for entry in state.guesses:
        if entry.guesser_username == identity.username:
            entry.guess_map = guess_map
            return entry
    entry = GuessEntry(guesser_username=identity.username, guess_map=guess_map)
    state.guesses.append(entry)
    return entry


def display_sort_key(name: str):
    # Accent- and case-insensitive first, raw name breaks ties
    decomposed = unicodedata.normalize('NFKD', name)
    base = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name)


def list_sentences(state: GameState, identity: Optional[Identity]) -> dict:
    """Sentences in their stored order, and separately who wrote them, by display name.

    The two lists carry no association with each other.
    """
    require_identity(identity)
    require_min_phase(state, PHASE_GUESSING, 'Guessing phase has not started')
    students = [
        {'username': entry.username, 'displayName': state.display_name_for(entry.username)}
        for entry in state.sentences
    ]
    students.sort(key=lambda s: display_sort_key(s['displayName']))
    return {
        'sentences': [entry.text for entry in state.sentences],
        'students': students,
    }
