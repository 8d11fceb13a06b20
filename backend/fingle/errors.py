"""Error taxonomy for the challenge engine.

Every error is raised before or during the guess commit and surfaced to the
caller as-is; none of them leaves partial state behind.
"""


class GameError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(GameError):
    """Malformed count or finger-set input."""
    status_code = 400


class AuthorizationError(GameError):
    """Sender and receiver are not accepted friends."""
    status_code = 403


class NotFoundError(GameError):
    """Unknown challenge, or one the requester may not see."""
    status_code = 404


class ConflictError(GameError):
    """A guess already exists for the challenge."""
    status_code = 409
