"""Typed request bodies, validated before any game logic runs."""
import enum
import json
from typing import List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fingle.errors import ValidationError
from fingle.fingers import FingerName


class LeaderboardScope(str, enum.Enum):
    GLOBAL = 'global'
    FRIENDS = 'friends'


class LeaderboardWindow(str, enum.Enum):
    ALL_TIME = 'all-time'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'


class _Input(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CreateChallengeInput(_Input):
    receiver_id: int = Field(..., alias='receiverId')
    finger_count: int = Field(..., alias='fingerCount', ge=1, le=5)
    which_fingers: List[FingerName] = Field(..., alias='whichFingers')

    @field_validator('which_fingers', mode='before')
    @classmethod
    def _decode_json_array(cls, value):
        # Multipart forms carry the list as a JSON string
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                raise ValueError('whichFingers must be a JSON array')
        if not isinstance(value, list):
            raise ValueError('whichFingers must be a JSON array')
        return value

    @model_validator(mode='after')
    def _fingers_match_count(self):
        if len(set(self.which_fingers)) != len(self.which_fingers):
            raise ValueError('whichFingers must not repeat a finger')
        if len(self.which_fingers) != self.finger_count:
            raise ValueError('whichFingers must contain exactly fingerCount valid finger names')
        return self

    @property
    def fingers(self) -> frozenset:
        return frozenset(self.which_fingers)


class CountPreviewInput(_Input):
    finger_count_guess: int = Field(..., alias='fingerCountGuess', ge=1, le=5, strict=True)


class GuessInput(CountPreviewInput):
    which_fingers_guess: Optional[List[FingerName]] = Field(None, alias='whichFingersGuess')

    @property
    def fingers(self) -> frozenset:
        # Repeated names collapse into one
        return frozenset(self.which_fingers_guess or ())


class LeaderboardQuery(_Input):
    scope: LeaderboardScope = LeaderboardScope.GLOBAL
    window: LeaderboardWindow = LeaderboardWindow.ALL_TIME


def _describe(exc: pydantic.ValidationError) -> str:
    err = exc.errors()[0]
    loc = '.'.join(str(p) for p in err.get('loc', ()))
    msg = err.get('msg', 'invalid value')
    if msg.startswith('Value error, '):
        msg = msg[len('Value error, '):]
    return f"{loc}: {msg}" if loc else msg


def parse_input(model, data):
    """Build ``model`` from a mapping or raise the engine's ValidationError."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(_describe(exc))
