from flask_socketio import join_room, emit, ConnectionRefusedError
from flask import current_app, request
from flask_login import current_user
from fingle import socketio
from fingle.services.notifications import WS_NAMESPACE, user_room
from typing import Dict, Optional
import threading


class ConnectionRegistry:
    """Tracks which socket belongs to which player.

    Delivery goes through the per-user room; this registry only answers
    "who is connected" and keeps the sid bookkeeping in one place.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sid_to_user: Dict[str, int] = {}

    def add(self, sid: str, user_id: int) -> None:
        with self._lock:
            self._sid_to_user[sid] = user_id

    def remove(self, sid: str) -> Optional[int]:
        with self._lock:
            return self._sid_to_user.pop(sid, None)

    def connection_count(self, user_id: int) -> int:
        with self._lock:
            return sum(1 for uid in self._sid_to_user.values() if uid == user_id)

    def is_online(self, user_id: int) -> bool:
        return self.connection_count(user_id) > 0

    def clear(self) -> None:
        with self._lock:
            self._sid_to_user.clear()


registry = ConnectionRegistry()


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    # The Flask-Login session issued by the identity service authenticates the socket
    if not current_user.is_authenticated:
        raise ConnectionRefusedError('authentication required')
    join_room(user_room(current_user.id))
    registry.add(_get_sid(), current_user.id)
    current_app.logger.info(f"[ws-connect] user={current_user.id} sid={_get_sid()}")
    emit('connected', {'userId': current_user.id})


def handle_disconnect(*args):
    user_id = registry.remove(_get_sid())
    if user_id is not None:
        current_app.logger.info(f"[ws-disconnect] user={user_id} remaining={registry.connection_count(user_id)}")


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=WS_NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=WS_NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=WS_NAMESPACE)
