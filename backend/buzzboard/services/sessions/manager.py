"""Session manager: the only mutation path into session records.

Every mutating command runs as read, decide, persist, publish inside a
critical section keyed by session id. Independent sessions never contend.
"""
import logging
import random
import string
import threading
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional

from .broadcast import NEW_BUZZ, RESET_BUZZES, BroadcastGateway, topic_for
from .clock import SystemClock
from .errors import (
    InvalidParticipantName,
    InvalidTeamCount,
    SessionBusy,
    SessionNotFound,
)
from .state import TEAM_PALETTE, Buzz, Session, record_buzz, reset_round
from .store import SessionStore

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_session_code(exists: Callable[[str], bool], length: int = 4) -> str:
    """Generate a short session code not currently in use."""
    while True:
        code = ''.join(random.choices(CODE_ALPHABET, k=length))
        if not exists(code):
            return code


class SessionLocks:
    """Per-session locks, created on demand and dropped once nobody uses them."""

    def __init__(self):
        self._guard = threading.Lock()
        # session_id -> [lock, holders and waiters]
        self._locks: Dict[str, list] = {}

    @contextmanager
    def hold(self, session_id: str, timeout: float):
        with self._guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            if not entry[0].acquire(timeout=timeout):
                logger.warning(f"[busy] session={session_id} timeout={timeout}s")
                raise SessionBusy(session_id)
            try:
                yield
            finally:
                entry[0].release()
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(session_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class SessionManager:

    def __init__(
        self,
        store: SessionStore,
        gateway: BroadcastGateway,
        clock: Optional[Callable[[], int]] = None,
        ttl: int = 60 * 60 * 24,
        lock_timeout: float = 2.0,
        code_length: int = 4,
        max_name_length: int = 20,
        lock_on_first_buzz: bool = False,
        palette: Optional[List[str]] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.clock = clock or SystemClock()
        self.ttl = ttl
        self.lock_timeout = lock_timeout
        self.code_length = code_length
        self.max_name_length = max_name_length
        self.lock_on_first_buzz = lock_on_first_buzz
        self.palette = list(palette or TEAM_PALETTE)
        self.locks = SessionLocks()

    @classmethod
    def from_config(cls, config, store: SessionStore, gateway: BroadcastGateway) -> 'SessionManager':
        return cls(
            store,
            gateway,
            ttl=int(config.get('SESSION_TTL_SEC', 60 * 60 * 24)),
            lock_timeout=float(config.get('SESSION_LOCK_TIMEOUT_SEC', 2.0)),
            code_length=int(config.get('SESSION_CODE_LENGTH', 4)),
            max_name_length=int(config.get('MAX_NAME_LENGTH', 20)),
            lock_on_first_buzz=bool(config.get('LOCK_ON_FIRST_BUZZ', False)),
        )

    @staticmethod
    def normalize_id(session_id) -> str:
        return str(session_id or '').strip().upper()

    def _load(self, session_id: str) -> Session:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def create_session(self, team_count) -> Session:
        """Create a session with the first ``team_count`` palette teams."""
        if isinstance(team_count, bool) or not isinstance(team_count, int) \
                or not 1 <= team_count <= len(self.palette):
            raise InvalidTeamCount(team_count, len(self.palette))

        while True:
            code = generate_session_code(self.store.exists, self.code_length)
            # Holding the new code's section closes the race with a concurrent create
            with self.locks.hold(code, self.lock_timeout):
                if self.store.exists(code):
                    continue
                session = Session(session_id=code, teams=self.palette[:team_count])
                self.store.set(session, self.ttl)
            logger.info(f"[create] session={code} teams={session.teams}")
            return session

    def get_session_snapshot(self, session_id: str) -> Session:
        return self._load(self.normalize_id(session_id))

    def subscribe(self, session_id: str, join: Callable[[str], None]) -> Session:
        """Snapshot a session and subscribe to its topic as one step.

        ``join`` is called with the topic inside the critical section, so no
        buzz can fall between the snapshot and the first event delivered.
        """
        session_id = self.normalize_id(session_id)
        with self.locks.hold(session_id, self.lock_timeout):
            session = self._load(session_id)
            join(topic_for(session_id))
        return session

    def submit_buzz(self, session_id: str, participant_name: str, team: str,
                    now: Optional[int] = None) -> Buzz:
        """Accept a buzz and broadcast it to the session's subscribers.

        ``now`` defaults to the clock read inside the critical section, so
        acceptance order and time order agree.
        """
        name = (participant_name or '').strip() if isinstance(participant_name, str) else ''
        if not name or len(name) > self.max_name_length:
            raise InvalidParticipantName(self.max_name_length)
        session_id = self.normalize_id(session_id)

        with self.locks.hold(session_id, self.lock_timeout):
            session = self._load(session_id)
            at = self.clock() if now is None else now
            buzz = record_buzz(session, name, team, at, lock_on_first_buzz=self.lock_on_first_buzz)
            self.store.set(session, self.ttl)
            logger.info(
                f"[buzz] session={session_id} name={name} team={team} time={buzz.time}ms "
                f"position={session.buzzes.index(buzz) + 1}"
            )
            self.gateway.publish(session_id, NEW_BUZZ, buzz.to_event())
        return buzz

    def reset_buzzes(self, session_id: str) -> Session:
        session_id = self.normalize_id(session_id)
        with self.locks.hold(session_id, self.lock_timeout):
            session = self._load(session_id)
            cleared = len(session.buzzes)
            reset_round(session)
            self.store.set(session, self.ttl)
            logger.info(f"[reset] session={session_id} cleared={cleared}")
            self.gateway.publish(session_id, RESET_BUZZES, {})
        return session
