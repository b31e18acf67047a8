"""Client-facing error kinds raised by the voting services.

Each error carries the HTTP status and a stable machine-readable ``code``;
``main.py`` renders them as ``{"success": false, "detail": ..., "code": ...}``.
Anything that is not a ``TripVoteError`` is a server fault.
"""


class TripVoteError(Exception):
    status_code = 400
    code = "bad_request"
    default_detail = "Bad request."

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidReference(TripVoteError):
    status_code = 400
    code = "invalid_reference"
    default_detail = "Invalid Destination ID format."


class NotFound(TripVoteError):
    status_code = 404
    code = "not_found"
    default_detail = "Destination not found."


class DeadlineExpired(TripVoteError):
    status_code = 400
    code = "deadline_expired"
    default_detail = "The voting deadline for this destination has passed."


class AlreadyVoted(TripVoteError):
    status_code = 400
    code = "already_voted"
    default_detail = "You have already cast your vote."


class Unauthorized(TripVoteError):
    status_code = 401
    code = "unauthorized"
    default_detail = "Not authorized to access this route."


class Forbidden(TripVoteError):
    status_code = 403
    code = "forbidden"
    default_detail = "Admin access required."


class Conflict(TripVoteError):
    status_code = 400
    code = "conflict"
    default_detail = "Resource already exists."
