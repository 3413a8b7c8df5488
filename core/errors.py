"""
Error taxonomy for MediaDeck.

Services raise these exceptions; the request logging middleware turns them
into a JSON body of the form {"error": message} with the matching status.
"""


class MediaDeckError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class AccessDenied(MediaDeckError):
    status_code = 403
    default_message = 'Access denied'


class NotFound(MediaDeckError):
    status_code = 404
    default_message = 'Not found'


class ValidationError(MediaDeckError):
    status_code = 400
    default_message = 'Invalid request'


class Conflict(MediaDeckError):
    # Clients expect "username taken" as a plain 400
    status_code = 400
    default_message = 'Already exists'


class Unauthorized(MediaDeckError):
    status_code = 401
    default_message = 'Unauthorized'


class Forbidden(MediaDeckError):
    status_code = 403
    default_message = 'Forbidden'


class InternalError(MediaDeckError):
    status_code = 500
