from typing import Iterable, NamedTuple

from fingle.fingers import to_finger_set

POINTS_COUNT_ONLY = 10
POINTS_EXACT = 30


class GuessResult(NamedTuple):
    points: int
    is_count_correct: bool
    is_fingers_correct: bool

    def to_dict(self):
        return {
            'points': self.points,
            'isCountCorrect': self.is_count_correct,
            'isFingersCorrect': self.is_fingers_correct,
        }


MISS = GuessResult(0, False, False)


def evaluate(secret_count: int, secret_fingers: Iterable, guessed_count: int,
             guessed_fingers: Iterable) -> GuessResult:
    """Score a guess against a challenge secret.

    Wrong count scores nothing and the fingers are never looked at. A right
    count scores 10, or 30 when the finger sets are equal (order and
    repetition are irrelevant).
    """
    if guessed_count != secret_count:
        return MISS
    if to_finger_set(guessed_fingers) == to_finger_set(secret_fingers):
        return GuessResult(POINTS_EXACT, True, True)
    return GuessResult(POINTS_COUNT_ONLY, True, False)
