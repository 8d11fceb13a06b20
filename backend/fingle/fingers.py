import enum


class FingerName(str, enum.Enum):
    THUMB = 'thumb'
    INDEX = 'index'
    MIDDLE = 'middle'
    RING = 'ring'
    PINKY = 'pinky'


FINGER_ORDER = {f: i for i, f in enumerate(FingerName)}


def to_finger_set(values) -> frozenset:
    """Coerce an iterable of names or FingerName members into a frozenset.

    Raises ValueError for anything outside the enumeration.
    """
    return frozenset(FingerName(v) for v in (values or ()))


def finger_list(fingers) -> list:
    """Canonical, hand-ordered list of finger names for serialisation."""
    return [f.value for f in sorted(to_finger_set(fingers), key=FINGER_ORDER.__getitem__)]
