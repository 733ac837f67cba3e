from flask_socketio import join_room, leave_room, emit
from flask import current_app
from buzzboard import socketio, get_session_manager
from buzzboard.services.sessions import SessionBusy, SessionError, SessionNotFound, topic_for


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # Rooms are dropped by Socket.IO; sessions outlive their viewers
    pass


def handle_join_session(data):
    """Subscribe to a session's topic and send the joining client a snapshot."""
    session_id = (data or {}).get('session_id')
    if not session_id:
        emit('error', {'message': 'session_id is required'})
        return
    try:
        session = get_session_manager().subscribe(session_id, join_room)
    except SessionNotFound as err:
        emit('session_not_found', err.to_dict())
        return
    except SessionBusy as err:
        emit('session_busy', err.to_dict())
        return
    emit('joined', {'room': topic_for(session.session_id)})
    emit('session_state', session.to_dict())


def handle_leave_session(data):
    session_id = (data or {}).get('session_id')
    if not session_id:
        emit('error', {'message': 'session_id is required'})
        return
    room = topic_for(session_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_buzz(data):
    """Buzz command; the return value is the Socket.IO acknowledgement."""
    data = data or {}
    session_id, name, team = data.get('session_id'), data.get('name'), data.get('team')
    if not all([session_id, name, team]):
        return {'error': 'Missing required fields: session_id, name, team'}
    try:
        buzz = get_session_manager().submit_buzz(session_id, name, team)
    except SessionError as err:
        current_app.logger.info(f"[rejected] code={err.code} session={err.session_id} error={err.message}")
        return err.to_dict()
    return {'success': True, 'buzz': buzz.to_event()}


def handle_reset_buzzes(data):
    session_id = (data or {}).get('session_id')
    if not session_id:
        return {'error': 'Missing required field: session_id'}
    try:
        get_session_manager().reset_buzzes(session_id)
    except SessionError as err:
        current_app.logger.info(f"[rejected] code={err.code} session={err.session_id} error={err.message}")
        return err.to_dict()
    return {'success': True}


def handle_ping(data):
    emit('pong', data or {})


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join_session': handle_join_session,
    'leave_session': handle_leave_session,
    'buzz': handle_buzz,
    'reset_buzzes': handle_reset_buzzes,
    'ping': handle_ping,
}


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Broadcasts are emitted on '/ws' only, so that is the one namespace
    clients subscribe on.
    """
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace='/ws')
