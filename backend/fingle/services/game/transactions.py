from flask import current_app
from sqlalchemy.exc import IntegrityError

from fingle import db
from fingle.errors import ConflictError
from fingle.fingers import finger_list, to_finger_set
from fingle.models import Challenge, Guess, User
from fingle.services.notifications import dispatch
from .scoring import evaluate


def commit_guess(challenge: Challenge, guesser_id: int, count_guess: int, fingers_guess) -> dict:
    """Insert the guess, mark the challenge seen and credit the guesser.

    The three writes share one transaction. The guess insert is flushed first
    so that the unique index on ``guess.challenge_id`` settles any race
    before the other rows are touched; the loser gets ConflictError and
    nothing it wrote survives.
    """
    result = evaluate(challenge.finger_count, challenge.which_fingers, count_guess, fingers_guess)
    challenge_id = challenge.id
    sender_id = challenge.sender_id
    secret = {
        'correctCount': challenge.finger_count,
        'correctFingers': finger_list(challenge.which_fingers),
        'photoUrl': challenge.photo_url,
    }

    guess = Guess(
        challenge_id=challenge_id,
        user_id=guesser_id,
        finger_count_guess=count_guess,
        which_fingers_guess=to_finger_set(fingers_guess),
        is_count_correct=result.is_count_correct,
        is_fingers_correct=result.is_fingers_correct,
        points=result.points,
    )
    try:
        db.session.add(guess)
        db.session.flush()
        Challenge.query.filter_by(id=challenge_id).update(
            {Challenge.seen: True}, synchronize_session=False
        )
        # SQL-side increment; concurrent commits by the same user on other
        # challenges must not overwrite each other
        User.query.filter_by(id=guesser_id).update(
            {User.total_score: User.total_score + result.points}, synchronize_session=False
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.info(f"[guess-conflict] challenge={challenge_id} user={guesser_id} lost the race")
        raise ConflictError('Already guessed this challenge')
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"[guess-commit] challenge={challenge_id} user={guesser_id} points={result.points} "
        f"count_ok={result.is_count_correct} fingers_ok={result.is_fingers_correct}"
    )

    # Outside the transaction: a failed delivery never undoes the commit
    dispatch(sender_id, 'challenge_guessed', {
        'challengeId': challenge_id,
        'by': {'id': guesser_id},
        **result.to_dict(),
    })

    payload = result.to_dict()
    payload.update(secret)
    return {'guess': guess, 'result': payload}
