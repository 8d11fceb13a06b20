import enum
import json
from datetime import datetime, timezone

from flask_login import UserMixin
from sqlalchemy.types import Text, TypeDecorator

from fingle import db
from fingle.fingers import finger_list, to_finger_set


def utcnow() -> datetime:
    """Naive UTC timestamp; all stored datetimes are naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FingerSet(TypeDecorator):
    """Stores a set of FingerName as a canonical JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(finger_list(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return to_finger_set(json.loads(value))


class FriendshipStatus(str, enum.Enum):
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=True)
    avatar_url = db.Column(db.String(512), nullable=True)
    # Only ever changed by the guess commit, and only by SQL-side increment
    total_score = db.Column(db.Integer, default=0, nullable=False)
    # Owned by the identity service
    is_banned = db.Column(db.Boolean, default=False, nullable=False)
    email_verified = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_public_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'avatarUrl': self.avatar_url,
        }

    def to_dict(self):
        data = self.to_public_dict()
        data['totalScore'] = self.total_score
        data['emailVerified'] = self.email_verified
        return data


class Friendship(db.Model):
    __tablename__ = 'friendship'
    __table_args__ = (
        db.UniqueConstraint('initiator_id', 'receiver_id', name='uq_friendship_pair'),
    )
    id = db.Column(db.Integer, primary_key=True)
    initiator_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    receiver_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    status = db.Column(db.String(16), default=FriendshipStatus.PENDING.value, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)


class Challenge(db.Model):
    __tablename__ = 'challenge'
    __table_args__ = (
        db.CheckConstraint('finger_count BETWEEN 1 AND 5', name='ck_challenge_finger_count'),
    )
    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    receiver_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    photo_url = db.Column(db.String(1024), nullable=False)
    finger_count = db.Column(db.Integer, nullable=False)
    which_fingers = db.Column(FingerSet, nullable=False)
    seen = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    sender = db.relationship('User', foreign_keys=[sender_id])
    receiver = db.relationship('User', foreign_keys=[receiver_id])
    guess = db.relationship('Guess', back_populates='challenge', uselist=False)

    def secret_dict(self):
        return {
            'fingerCount': self.finger_count,
            'whichFingers': finger_list(self.which_fingers),
        }

    def to_dict(self, reveal_secret=True):
        data = {
            'id': self.id,
            'senderId': self.sender_id,
            'receiverId': self.receiver_id,
            'photoUrl': self.photo_url,
            'seen': self.seen,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if reveal_secret:
            data.update(self.secret_dict())
        return data


class Guess(db.Model):
    __tablename__ = 'guess'
    id = db.Column(db.Integer, primary_key=True)
    # The unique constraint is what makes "scored exactly once" hold under races
    challenge_id = db.Column(db.Integer, db.ForeignKey('challenge.id'), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    finger_count_guess = db.Column(db.Integer, nullable=False)
    which_fingers_guess = db.Column(FingerSet, nullable=False)
    is_count_correct = db.Column(db.Boolean, nullable=False)
    is_fingers_correct = db.Column(db.Boolean, nullable=False)
    points = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    challenge = db.relationship('Challenge', back_populates='guess')
    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'challengeId': self.challenge_id,
            'userId': self.user_id,
            'fingerCountGuess': self.finger_count_guess,
            'whichFingersGuess': finger_list(self.which_fingers_guess),
            'isCountCorrect': self.is_count_correct,
            'isFingersCorrect': self.is_fingers_correct,
            'points': self.points,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
