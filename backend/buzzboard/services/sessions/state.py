"""Session records and the per-round buzz state machine.

A round is implicit in a session: ``start_time`` plus the buzz list. The
round is ARMED while no buzz has been accepted and LOCKED from the first
accepted buzz until the next reset.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import ClockRegression, InvalidTeam, RoundLocked


# Team names in display order; a session with N teams gets the first N.
TEAM_PALETTE = ['Red', 'Blue', 'Green', 'Yellow', 'Purple', 'Orange', 'Cyan', 'Magenta']

TEAM_COLORS = {
    'Red': '#ef4444',
    'Blue': '#3b82f6',
    'Green': '#22c55e',
    'Yellow': '#eab308',
    'Purple': '#a855f7',
    'Orange': '#f97316',
    'Cyan': '#06b6d4',
    'Magenta': '#d946ef',
}
DEFAULT_TEAM_COLOR = '#6b7280'


def team_color(team: Optional[str]) -> str:
    if not team:
        return DEFAULT_TEAM_COLOR
    return TEAM_COLORS.get(team, DEFAULT_TEAM_COLOR)


class RoundState(str, Enum):
    ARMED = 'armed'
    LOCKED = 'locked'


@dataclass(frozen=True)
class Buzz:
    team: str
    name: str
    time: int  # ms since the round's first buzz

    def to_record(self) -> dict:
        return {'team': self.team, 'name': self.name, 'time': self.time}

    def to_event(self) -> dict:
        # Client payloads are snake_case throughout (events, state, acks);
        # only the stored record keeps the camelCase store layout.
        return {'team': self.team, 'name': self.name, 'relative_time': self.time}

    @classmethod
    def from_record(cls, data: dict) -> 'Buzz':
        return cls(team=data['team'], name=data['name'], time=int(data['time']))


@dataclass
class Session:
    session_id: str
    teams: List[str]
    buzzes: List[Buzz] = field(default_factory=list)
    start_time: Optional[int] = None

    @property
    def state(self) -> RoundState:
        return RoundState.LOCKED if self.buzzes else RoundState.ARMED

    def to_record(self) -> dict:
        """Store layout; the session id is the key, not part of the value."""
        return {
            'teams': list(self.teams),
            'buzzes': [b.to_record() for b in self.buzzes],
            'startTime': self.start_time,
        }

    @classmethod
    def from_record(cls, session_id: str, data: dict) -> 'Session':
        start = data.get('startTime')
        return cls(
            session_id=session_id,
            teams=list(data.get('teams') or []),
            buzzes=[Buzz.from_record(b) for b in data.get('buzzes') or []],
            start_time=int(start) if start is not None else None,
        )

    def to_dict(self) -> dict:
        return {
            'session_id': self.session_id,
            'teams': list(self.teams),
            'buzzes': [b.to_event() for b in self.buzzes],
            'start_time': self.start_time,
            'state': self.state.value,
            'colors': {t: team_color(t) for t in self.teams},
        }


def record_buzz(session: Session, participant: str, team: str, now: int,
                lock_on_first_buzz: bool = False) -> Buzz:
    """Accept a buzz into the current round and return it.

    The first buzz of a round pins ``start_time`` to ``now``; later buzzes are
    timed relative to it. The list stays sorted by relative time, ties in
    arrival order. Raises before touching ``session`` when the buzz is
    rejected.
    """
    if team not in session.teams:
        raise InvalidTeam(team, session.session_id)
    if lock_on_first_buzz and session.state is RoundState.LOCKED:
        raise RoundLocked(session.session_id)

    if session.start_time is None:
        start_time = now
    else:
        start_time = session.start_time
    relative = now - start_time
    if relative < 0:
        raise ClockRegression(
            f'clock moved backwards in session {session.session_id}: '
            f'start={start_time} now={now}'
        )

    buzz = Buzz(team=team, name=participant, time=relative)
    session.start_time = start_time
    session.buzzes.append(buzz)
    # list.sort is stable, so equal times keep arrival order
    session.buzzes.sort(key=lambda b: b.time)
    return buzz


def reset_round(session: Session) -> None:
    session.buzzes = []
    session.start_time = None
