from typing import Optional

from whowrote.models import GameState, Identity, PHASE_RESULTS
from .phases import require_admin, require_identity, require_min_phase


def build_answer_key(state: GameState) -> dict:
    return {entry.username: entry.text for entry in state.sentences}


def score_guesses(username: str, guess_map: dict, answer_key: dict) -> int:
    """One point per exact match, never for the guesser's own sentence."""
    score = 0
    for target, guessed in guess_map.items():
        if target == username:
            continue
        if target in answer_key and answer_key[target] == guessed:
            score += 1
    return score


def compute_results(state: GameState, identity: Optional[Identity]) -> dict:
    require_identity(identity)
    require_min_phase(state, PHASE_RESULTS, 'Results are not available yet')

    answer_key = build_answer_key(state)
    guesses = {g.guesser_username: g.guess_map for g in state.guesses}

    scoreboard = []
    for user in state.users:
        guess_map = guesses.get(user.username)
        score = score_guesses(user.username, guess_map, answer_key) if guess_map is not None else 0
        scoreboard.append({
            'username': user.username,
            'displayName': user.display_name,
            'score': score,
        })
    # sorted() is stable: ties keep registration order
    scoreboard = sorted(scoreboard, key=lambda row: -row['score'])

    answer_key_display = [
        {'displayName': state.display_name_for(entry.username), 'sentence': entry.text}
        for entry in state.sentences
    ]

    my_score = 0
    if identity.username:
        for row in scoreboard:
            if row['username'] == identity.username:
                my_score = row['score']
                break

    return {
        'scoreboard': scoreboard,
        'totalPossible': len(state.sentences) - 1,
        'myScore': my_score,
        'answerKey': answer_key_display,
    }


def game_status(state: GameState, identity: Optional[Identity]) -> dict:
    """Progress summary for the admin dashboard."""
    require_admin(identity)
    submitted = {entry.username for entry in state.sentences}
    guessed = {entry.guesser_username for entry in state.guesses}
    return {
        'phase': state.phase,
        'userCount': len(state.users),
        'sentenceCount': len(state.sentences),
        'guessCount': len(state.guesses),
        'users': [
            {
                'displayName': user.display_name,
                'hasSentence': user.username in submitted,
                'hasGuessed': user.username in guessed,
            }
            for user in state.users
        ],
    }
