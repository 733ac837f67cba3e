"""Session storage: a key-value store with get/set/expire semantics.

``SqlSessionStore`` is the durable binding (one table row per session, via
Flask-SQLAlchemy). ``MemorySessionStore`` keeps everything in a dict and is
meant for a single process and for tests.
"""
import json
import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from buzzboard import db
from buzzboard.models import StoredSession

from .state import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Interface the session manager persists through.

    Expired sessions behave exactly like missing ones.
    """

    def get(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def set(self, session: Session, ttl: int) -> None:
        """Write the whole record and (re)start its time-to-live."""
        raise NotImplementedError

    def expire(self, session_id: str, ttl: int) -> bool:
        """Restart the time-to-live; False when the session is gone."""
        raise NotImplementedError

    def exists(self, session_id: str) -> bool:
        return self.get(session_id) is not None

    def purge_expired(self) -> int:
        return 0


class MemorySessionStore(SessionStore):
    """Dict-backed store. Records are kept serialized so callers never share objects."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._data: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            entry = self._data.get(session_id)
            if entry is None:
                return None
            payload, expires_at = entry
            if expires_at <= self._clock():
                del self._data[session_id]
                return None
        return Session.from_record(session_id, json.loads(payload))

    def set(self, session: Session, ttl: int) -> None:
        payload = json.dumps(session.to_record())
        with self._lock:
            self._data[session.session_id] = (payload, self._clock() + ttl)

    def expire(self, session_id: str, ttl: int) -> bool:
        with self._lock:
            entry = self._data.get(session_id)
            if entry is None or entry[1] <= self._clock():
                return False
            self._data[session_id] = (entry[0], self._clock() + ttl)
            return True

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [k for k, (_, exp) in self._data.items() if exp <= now]
            for k in stale:
                del self._data[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class SqlSessionStore(SessionStore):
    """Store backed by the ``buzz_session`` table.

    Must be used inside a Flask application context, like any other
    Flask-SQLAlchemy access.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def get(self, session_id: str) -> Optional[Session]:
        row = StoredSession.query.filter_by(session_id=session_id).first()
        if not row or row.is_expired(self._clock()):
            return None
        return Session.from_record(row.session_id, json.loads(row.payload))

    def set(self, session: Session, ttl: int) -> None:
        now = self._clock()
        try:
            row = db.session.get(StoredSession, session.session_id)
            if row is None:
                row = StoredSession(session_id=session.session_id)
            row.payload = json.dumps(session.to_record())
            row.expires_at = now + ttl
            row.updated_at = now
            db.session.add(row)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def expire(self, session_id: str, ttl: int) -> bool:
        now = self._clock()
        row = db.session.get(StoredSession, session_id)
        if row is None or row.is_expired(now):
            return False
        try:
            row.expires_at = now + ttl
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return True

    def purge_expired(self) -> int:
        try:
            count = StoredSession.query.filter(StoredSession.expires_at <= self._clock()).delete()
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info(f"[purge] removed={count}")
        return count
