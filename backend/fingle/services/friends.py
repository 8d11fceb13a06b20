"""Read-only view of the friend graph owned by the identity service."""
from typing import Set

from sqlalchemy import and_, or_

from fingle.models import Friendship, FriendshipStatus


def is_accepted_friend(user_a: int, user_b: int) -> bool:
    pair = or_(
        and_(Friendship.initiator_id == user_a, Friendship.receiver_id == user_b),
        and_(Friendship.initiator_id == user_b, Friendship.receiver_id == user_a),
    )
    return Friendship.query.filter(
        pair, Friendship.status == FriendshipStatus.ACCEPTED.value
    ).first() is not None


def accepted_friend_ids(user_id: int) -> Set[int]:
    rows = Friendship.query.filter(
        Friendship.status == FriendshipStatus.ACCEPTED.value,
        or_(Friendship.initiator_id == user_id, Friendship.receiver_id == user_id),
    ).all()
    return {r.receiver_id if r.initiator_id == user_id else r.initiator_id for r in rows}
