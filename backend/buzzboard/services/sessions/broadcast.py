import logging

from .errors import DeliveryDegraded

logger = logging.getLogger(__name__)

NEW_BUZZ = 'new-buzz'
RESET_BUZZES = 'reset-buzzes'


def topic_for(session_id: str) -> str:
    """Room every host and participant of a session subscribes to."""
    return f"game:{session_id.upper()}"


class BroadcastGateway:
    """Relay session events to the session's Socket.IO room.

    Delivery is best effort: a failing emit is logged and counted, and
    ``publish`` reports it by returning False instead of raising. Callers
    publish from inside the session's critical section, which is what keeps
    per-session events in send order.
    """

    def __init__(self, socketio, namespace: str = '/ws'):
        self.socketio = socketio
        self.namespace = namespace
        self.degraded_count = 0
        self.last_failure = None

    def publish(self, session_id: str, event: str, payload: dict) -> bool:
        topic = topic_for(session_id)
        try:
            self.socketio.emit(event, payload, to=topic, namespace=self.namespace)
        except Exception as exc:
            failure = DeliveryDegraded(session_id, event, exc)
            self.degraded_count += 1
            self.last_failure = failure
            logger.warning(f"[broadcast] degraded topic={topic} event={event} error={exc!r}")
            return False
        logger.debug(f"[broadcast] topic={topic} event={event}")
        return True
