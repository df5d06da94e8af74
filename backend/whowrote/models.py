from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from whowrote import db

PHASE_REGISTRATION = 1
PHASE_SUBMISSION = 2
PHASE_GUESSING = 3
PHASE_RESULTS = 4


def normalize_username(username: str) -> str:
    return username.strip().lower()


@dataclass
class User:
    username: str
    display_name: str
    password: str

    def to_dict(self):
        return {
            'username': self.username,
            'displayName': self.display_name,
            'password': self.password,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(username=data['username'], display_name=data['displayName'], password=data['password'])


@dataclass
class SentenceEntry:
    username: str
    text: str

    def to_dict(self):
        return {'username': self.username, 'text': self.text}

    @classmethod
    def from_dict(cls, data):
        return cls(username=data['username'], text=data['text'])


@dataclass
class GuessEntry:
    guesser_username: str
    guess_map: Dict[str, Any]

    def to_dict(self):
        return {'guesserUsername': self.guesser_username, 'guessMap': self.guess_map}

    @classmethod
    def from_dict(cls, data):
        guess_map = data['guessMap']
        if not isinstance(guess_map, dict):
            raise TypeError('guessMap must be an object')
        return cls(guesser_username=data['guesserUsername'], guess_map=guess_map)


@dataclass
class GameState:
    """The whole game as one document: phase plus users, sentences and guesses."""

    phase: int = PHASE_REGISTRATION
    users: List[User] = field(default_factory=list)
    sentences: List[SentenceEntry] = field(default_factory=list)
    guesses: List[GuessEntry] = field(default_factory=list)

    def to_dict(self):
        return {
            'phase': self.phase,
            'users': [u.to_dict() for u in self.users],
            'sentences': [s.to_dict() for s in self.sentences],
            'guesses': [g.to_dict() for g in self.guesses],
        }

    @classmethod
    def from_dict(cls, data):
        phase = data['phase']
        if isinstance(phase, bool) or not isinstance(phase, int) or not PHASE_REGISTRATION <= phase <= PHASE_RESULTS:
            raise ValueError(f'phase out of range: {phase!r}')
        return cls(
            phase=phase,
            users=[User.from_dict(u) for u in data['users']],
            sentences=[SentenceEntry.from_dict(s) for s in data['sentences']],
            guesses=[GuessEntry.from_dict(g) for g in data['guesses']],
        )

    def find_user(self, username: str) -> Optional[User]:
        for user in self.users:
            if user.username == username:
                return user
        return None

    def display_name_for(self, username: str) -> str:
        user = self.find_user(username)
        return user.display_name if user else username


@dataclass(frozen=True)
class Identity:
    """Who is making a request. Resolved by the HTTP layer, passed into every service call."""

    kind: str
    username: Optional[str] = None

    STUDENT = 'student'
    ADMIN = 'admin'

    @classmethod
    def student(cls, username: str) -> 'Identity':
        return cls(kind=cls.STUDENT, username=username)

    @classmethod
    def admin(cls) -> 'Identity':
        return cls(kind=cls.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.kind == self.ADMIN

    @property
    def is_student(self) -> bool:
        return self.kind == self.STUDENT and bool(self.username)


class GameDocument(db.Model):
    __tablename__ = 'game_state'
    id = db.Column(db.Integer, primary_key=True)
    body = db.Column(db.Text, nullable=False)
