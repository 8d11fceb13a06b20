"""Leaderboard aggregation over (scope, window).

All-time standings read ``user.total_score`` directly, the same counter the
guess commit increments. Weekly and monthly standings are summed fresh from
``guess.points`` over the trailing window. Ties rank by ascending user id.
"""
from datetime import datetime, timedelta
from typing import List, Optional, Set

from flask import current_app
from sqlalchemy import func

from fingle import db
from fingle.models import Guess, User, utcnow
from fingle.schemas import LeaderboardScope, LeaderboardWindow
from fingle.services.friends import accepted_friend_ids


_WINDOW_DAYS_KEYS = {
    LeaderboardWindow.WEEKLY: ('WEEKLY_WINDOW_DAYS', 7),
    LeaderboardWindow.MONTHLY: ('MONTHLY_WINDOW_DAYS', 30),
}


def window_start(window: LeaderboardWindow, now: Optional[datetime] = None) -> Optional[datetime]:
    """Inclusive lower bound for a window; None for all-time."""
    if window == LeaderboardWindow.ALL_TIME:
        return None
    key, default = _WINDOW_DAYS_KEYS[window]
    days = int(current_app.config.get(key, default))
    return (now or utcnow()) - timedelta(days=days)


def eligible_user_ids(requester_id: int, scope: LeaderboardScope) -> Optional[Set[int]]:
    """Ids allowed on the board, or None when everyone is."""
    if scope == LeaderboardScope.GLOBAL:
        return None
    return accepted_friend_ids(requester_id) | {requester_id}


def _entry(user: User, score: int) -> dict:
    return {
        'userId': user.id,
        'username': user.username,
        'avatarUrl': user.avatar_url,
        'score': score,
    }


def _all_time(eligible, limit) -> List[dict]:
    q = User.query
    if eligible is not None:
        q = q.filter(User.id.in_(eligible))
    users = q.order_by(User.total_score.desc(), User.id.asc()).limit(limit).all()
    return [_entry(u, u.total_score) for u in users]


def _windowed(eligible, since, limit) -> List[dict]:
    score = func.sum(Guess.points).label('score')
    q = db.session.query(Guess.user_id, score).filter(Guess.created_at >= since)
    if eligible is not None:
        q = q.filter(Guess.user_id.in_(eligible))
    rows = q.group_by(Guess.user_id).order_by(score.desc(), Guess.user_id.asc()).limit(limit).all()
    if not rows:
        return []

    profiles = {u.id: u for u in User.query.filter(User.id.in_([r.user_id for r in rows]))}
    return [_entry(profiles[r.user_id], int(r.score or 0)) for r in rows if r.user_id in profiles]


def get_leaderboard(requester_id: int, scope: LeaderboardScope, window: LeaderboardWindow,
                    now: Optional[datetime] = None) -> List[dict]:
    limit = int(current_app.config.get('LEADERBOARD_LIMIT', 50))
    eligible = eligible_user_ids(requester_id, scope)
    if window == LeaderboardWindow.ALL_TIME:
        return _all_time(eligible, limit)
    return _windowed(eligible, window_start(window, now), limit)
