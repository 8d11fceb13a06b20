"""Fire-and-forget delivery of game events to connected players.

The engine only ever talks to a ``NotificationDispatcher``; the Socket.IO
connection registry behind ``SocketIONotifier`` is a separate component.
"""
from typing import Any, Dict

from flask import current_app


WS_NAMESPACE = '/ws'


def user_room(user_id) -> str:
    return f"user:{user_id}"


class NotificationDispatcher:
    def notify(self, user_id, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class SocketIONotifier(NotificationDispatcher):
    """Emits to the per-user Socket.IO room. Never raises."""

    def __init__(self, socketio):
        self.socketio = socketio

    def notify(self, user_id, event, payload):
        try:
            self.socketio.emit(event, payload, to=user_room(user_id), namespace=WS_NAMESPACE)
        except Exception as exc:
            current_app.logger.warning(f"[notify-failed] user={user_id} event={event} error={exc}")


def get_notifier() -> NotificationDispatcher:
    return current_app.extensions['fingle.notifier']


def dispatch(user_id, event: str, payload: Dict[str, Any]) -> None:
    """Best-effort notify; a misbehaving dispatcher never reaches the caller."""
    try:
        get_notifier().notify(user_id, event, payload)
    except Exception as exc:
        current_app.logger.warning(f"[notify-failed] user={user_id} event={event} error={exc}")
