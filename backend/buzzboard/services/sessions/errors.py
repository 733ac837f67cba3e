"""Error taxonomy for session commands.

Every error carries a stable ``code`` and the HTTP ``status_code`` the API
layer answers with, so routes and socket handlers translate them the same way.
"""
from typing import Optional


class SessionError(Exception):
    code = 'session_error'
    status_code = 400

    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.session_id = session_id

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code}


class InvalidTeamCount(SessionError):
    code = 'invalid_team_count'

    def __init__(self, team_count, max_teams: int):
        super().__init__(f'Invalid number of teams. Must be between 1 and {max_teams}.')
        self.team_count = team_count
        self.max_teams = max_teams


class InvalidTeam(SessionError):
    code = 'invalid_team'

    def __init__(self, team, session_id: Optional[str] = None):
        super().__init__(f'Team {team!r} is not part of this session', session_id)
        self.team = team


class InvalidParticipantName(SessionError):
    code = 'invalid_name'

    def __init__(self, max_length: int):
        super().__init__(f'Name is required and must be at most {max_length} characters')
        self.max_length = max_length


class SessionNotFound(SessionError):
    code = 'session_not_found'
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__('Game not found', session_id)


class SessionBusy(SessionError):
    code = 'session_busy'
    status_code = 409

    def __init__(self, session_id: str):
        super().__init__('Game is busy, try again', session_id)


class RoundLocked(SessionError):
    code = 'round_locked'
    status_code = 409

    def __init__(self, session_id: str):
        super().__init__('Round already has a winner', session_id)


class DeliveryDegraded(SessionError):
    """A broadcast could not be handed to the transport.

    Never raised out of the gateway: the write that triggered it already
    succeeded and subscribers can resync from a snapshot.
    """
    code = 'delivery_degraded'

    def __init__(self, session_id: str, event: str, cause: BaseException):
        super().__init__(f'Failed to deliver {event!r}: {cause}', session_id)
        self.event = event
        self.cause = cause


class ClockRegression(RuntimeError):
    """The time source went backwards inside a round."""
