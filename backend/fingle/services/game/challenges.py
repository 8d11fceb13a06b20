from typing import List

from flask import current_app
from sqlalchemy.orm import joinedload

from fingle import db
from fingle.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from fingle.models import Challenge, Guess
from fingle.schemas import CreateChallengeInput
from fingle.services.friends import is_accepted_friend
from fingle.services.notifications import dispatch
from fingle.services.photos import get_photo_store
from . import transactions


def create_challenge(sender, params: CreateChallengeInput, photo: bytes, photo_filename: str = '') -> Challenge:
    """Create a challenge for an accepted friend and tell the receiver.

    Friendship is checked here and nowhere else; revoking it later leaves the
    challenge (and any guess on it) valid.
    """
    if not photo:
        raise ValidationError('Photo is required')
    if not is_accepted_friend(sender.id, params.receiver_id):
        raise AuthorizationError('You can only challenge friends')

    photo_url = get_photo_store().store(photo, photo_filename)
    challenge = Challenge(
        sender_id=sender.id,
        receiver_id=params.receiver_id,
        photo_url=photo_url,
        finger_count=params.finger_count,
        which_fingers=params.fingers,
    )
    db.session.add(challenge)
    db.session.commit()
    current_app.logger.info(
        f"[challenge-create] challenge={challenge.id} sender={sender.id} receiver={params.receiver_id}"
    )

    dispatch(params.receiver_id, 'new_challenge', {
        'challengeId': challenge.id,
        'from': sender.to_public_dict(),
    })
    return challenge


def _challenge_for_receiver(challenge_id: int, requester_id: int) -> Challenge:
    # Non-receivers get the same answer as for a missing id
    challenge = db.session.get(Challenge, challenge_id)
    if challenge is None or challenge.receiver_id != requester_id:
        raise NotFoundError('Challenge not found')
    return challenge


def _ensure_not_guessed(challenge: Challenge) -> None:
    if Guess.query.filter_by(challenge_id=challenge.id).first() is not None:
        raise ConflictError('Already guessed this challenge')


def preview_count(challenge_id: int, requester_id: int, count_guess: int) -> bool:
    """Tell the receiver whether ``count_guess`` is right. Writes nothing."""
    challenge = _challenge_for_receiver(challenge_id, requester_id)
    _ensure_not_guessed(challenge)
    return count_guess == challenge.finger_count


def commit_guess(challenge_id: int, requester_id: int, count_guess: int, fingers_guess) -> dict:
    challenge = _challenge_for_receiver(challenge_id, requester_id)
    # Fast path only; the unique index in the commit is the real guard
    _ensure_not_guessed(challenge)
    return transactions.commit_guess(challenge, requester_id, count_guess, fingers_guess)


def received_challenges(user_id: int) -> List[dict]:
    challenges = (
        Challenge.query
        .options(joinedload(Challenge.sender), joinedload(Challenge.guess))
        .filter(Challenge.receiver_id == user_id)
        .order_by(Challenge.created_at.desc(), Challenge.id.desc())
        .all()
    )
    feed = []
    for c in challenges:
        # The secret stays hidden until the receiver has committed a guess
        item = c.to_dict(reveal_secret=c.guess is not None)
        item['sender'] = c.sender.to_public_dict()
        item['guess'] = c.guess.to_dict() if c.guess else None
        feed.append(item)
    return feed


def sent_challenges(user_id: int) -> List[dict]:
    challenges = (
        Challenge.query
        .options(joinedload(Challenge.receiver), joinedload(Challenge.guess))
        .filter(Challenge.sender_id == user_id)
        .order_by(Challenge.created_at.desc(), Challenge.id.desc())
        .all()
    )
    feed = []
    for c in challenges:
        item = c.to_dict()
        item['receiver'] = c.receiver.to_public_dict()
        item['guess'] = c.guess.to_dict() if c.guess else None
        feed.append(item)
    return feed
