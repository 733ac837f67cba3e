"""Session registry, round state machine and broadcast fan-out."""

from .broadcast import BroadcastGateway, topic_for
from .clock import ManualClock, SystemClock
from .errors import (
    DeliveryDegraded,
    InvalidParticipantName,
    InvalidTeam,
    InvalidTeamCount,
    RoundLocked,
    SessionBusy,
    SessionError,
    SessionNotFound,
)
from .manager import SessionManager
from .state import TEAM_PALETTE, Buzz, RoundState, Session, team_color
from .store import MemorySessionStore, SessionStore, SqlSessionStore

__all__ = [
    'BroadcastGateway',
    'Buzz',
    'DeliveryDegraded',
    'InvalidParticipantName',
    'InvalidTeam',
    'InvalidTeamCount',
    'ManualClock',
    'MemorySessionStore',
    'RoundLocked',
    'RoundState',
    'Session',
    'SessionBusy',
    'SessionError',
    'SessionManager',
    'SessionNotFound',
    'SessionStore',
    'SqlSessionStore',
    'SystemClock',
    'TEAM_PALETTE',
    'team_color',
    'topic_for',
]
