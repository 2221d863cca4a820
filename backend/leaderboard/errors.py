"""Error taxonomy for leaderboard operations.

Every failure an operation can report is a ``LeaderboardError`` carrying a
``kind`` tag, an application status code and, for validation failures, the
list of per-field messages. The API boundary renders these into the
response envelope; nothing below it deals with HTTP.
"""

from typing import Any, Dict, List, Optional


class LeaderboardError(Exception):
    kind = 'internal'
    status = 500

    def __init__(self, message: str, details: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.details = list(details) if details else []

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'message': self.message,
            'status': self.status,
            'kind': self.kind,
        }
        if self.details:
            payload['data'] = self.details
        return payload

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r}, status={self.status})"


class BadRequest(LeaderboardError):
    kind = 'bad_request'
    status = 400


class Unauthenticated(LeaderboardError):
    kind = 'unauthenticated'
    status = 401

    def __init__(self, message: str = 'Not authenticated.', details=None):
        super().__init__(message, details)


class NotFound(LeaderboardError):
    kind = 'not_found'
    status = 404


class ValidationFailed(LeaderboardError):
    kind = 'validation_failed'
    status = 422


class Conflict(LeaderboardError):
    kind = 'conflict'
    status = 422


class InternalError(LeaderboardError):
    kind = 'internal'
    status = 500

    def __init__(self, message: str = 'Internal server error.', details=None):
        super().__init__(message, details)
