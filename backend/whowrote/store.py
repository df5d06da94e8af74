"""Persistence for the single game document.

Two backends share the load/save/transaction contract: a JSON file on disk
and a one-row table through Flask-SQLAlchemy. ``GameStore`` is the Flask
extension that picks one per app from ``STORE_BACKEND``.
"""
import json
import logging
import os
import threading
from contextlib import contextmanager
from tempfile import NamedTemporaryFile
from typing import Iterator, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from whowrote import db
from whowrote.exceptions import StorageError
from whowrote.models import GameDocument, GameState

DOCUMENT_ID = 1


class StoreBackend:
    def __init__(self, recover_corrupt: bool = True, logger: Optional[logging.Logger] = None):
        self.recover_corrupt = recover_corrupt
        self.logger = logger or logging.getLogger(__name__)
        # Reentrant: load() may need it again inside transaction()
        self._lock = threading.RLock()

    def _read(self) -> Optional[str]:
        raise NotImplementedError

    def _write(self, text: str) -> None:
        raise NotImplementedError

    @staticmethod
    def dumps(state: GameState) -> str:
        return json.dumps(state.to_dict(), indent=2, ensure_ascii=False)

    def _parse(self, raw: Optional[str]) -> Optional[GameState]:
        """The stored game, or None when a fresh default document has to be written."""
        if raw is None:
            return None
        try:
            return GameState.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            if not self.recover_corrupt:
                raise StorageError(f'Stored game is unreadable: {exc}') from exc
            return None

    def load(self) -> GameState:
        """Return the stored game, creating the default document if there is none."""
        state = self._parse(self._read())
        if state is not None:
            return state
        with self._lock:
            # Re-read under the lock; a writer may have saved in the meantime
            raw = self._read()
            state = self._parse(raw)
            if state is None:
                if raw is not None:
                    self.logger.warning("[store-recover] unreadable game document replaced with defaults")
                state = GameState()
                self.save(state)
            return state

    def save(self, state: GameState) -> None:
        self._write(self.dumps(state))

    def replace(self, state: GameState) -> None:
        """Overwrite the document without reading it first, so a corrupt one can still be cleared."""
        with self._lock:
            self.save(state)

    @contextmanager
    def transaction(self) -> Iterator[GameState]:
        """Load, hand the state to the caller, save. Nothing is saved if the body raises."""
        with self._lock:
            state = self.load()
            yield state
            self.save(state)


class JsonFileStore(StoreBackend):
    def __init__(self, path: str, **kwargs):
        super().__init__(**kwargs)
        self.path = os.path.abspath(path)

    def _read(self) -> Optional[str]:
        try:
            with open(self.path, encoding='utf-8') as fh:
                return fh.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f'Could not read {self.path}: {exc}') from exc

    def _write(self, text: str) -> None:
        directory = os.path.dirname(self.path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with NamedTemporaryFile('w', delete=False, dir=directory, encoding='utf-8', suffix='.tmp') as tmp:
                tmp.write(text)
                tmp_path = tmp.name
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f'Could not write {self.path}: {exc}') from exc


class DatabaseStore(StoreBackend):
    """Keeps the document in row ``DOCUMENT_ID`` of ``game_state``. Needs an app context."""

    def _read(self) -> Optional[str]:
        try:
            doc = db.session.get(GameDocument, DOCUMENT_ID)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError(f'Could not read game document: {exc}') from exc
        return doc.body if doc else None

    def _write(self, text: str) -> None:
        try:
            doc = db.session.get(GameDocument, DOCUMENT_ID)
            if doc is None:
                doc = GameDocument(id=DOCUMENT_ID, body=text)
            else:
                doc.body = text
            db.session.add(doc)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError(f'Could not write game document: {exc}') from exc


def backend_from_config(app) -> StoreBackend:
    kind = app.config.get('STORE_BACKEND', 'file')
    recover = bool(app.config.get('STORE_RECOVER_CORRUPT', True))
    if kind == 'database':
        return DatabaseStore(recover_corrupt=recover, logger=app.logger)
    if kind == 'file':
        return JsonFileStore(app.config['DATA_FILE'], recover_corrupt=recover, logger=app.logger)
    raise ValueError(f'Unknown STORE_BACKEND: {kind!r}')


class GameStore:
    """Flask extension giving each app its own store backend."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.extensions['game_store'] = backend_from_config(app)

    @property
    def backend(self) -> StoreBackend:
        return current_app.extensions['game_store']

    def load(self) -> GameState:
        return self.backend.load()

    def save(self, state: GameState) -> None:
        self.backend.save(state)

    def replace(self, state: GameState) -> None:
        self.backend.replace(state)

    def transaction(self):
        return self.backend.transaction()
