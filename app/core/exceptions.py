"""Domain errors and their HTTP status codes.

Stores, guards and the order gateway raise these; the handlers registered
in ``app.main`` turn them into ``{"message": ...}`` JSON responses. Status
codes follow what the web client already expects: role and ownership
failures are 401, and a missing record is 400 rather than 404.
"""


class AppError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = 400
    message: str = "Bad request"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        self.message = message or self.message
        self.headers = headers
        super().__init__(self.message)


class Unauthenticated(AppError):
    """Missing, malformed, expired or unverifiable bearer token."""

    status_code = 401
    message = "No authorization token was found"

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Unauthorized(AppError):
    """Caller is authenticated but lacks the required role."""

    status_code = 401
    message = "Not authorized for admin access"


class Forbidden(AppError):
    """Caller does not own the record they are trying to change."""

    status_code = 401
    message = "You cannot modify a record you do not own."


class NotFound(AppError):
    status_code = 400
    message = "Record not found."


class Conflict(AppError):
    status_code = 409
    message = "Record already exists."


class BadGateway(AppError):
    """The commerce API failed or returned something unusable."""

    status_code = 502
    message = "Order service unavailable."


class GatewayTimeout(AppError):
    status_code = 504
    message = "Order service timed out."
