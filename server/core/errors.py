# server/core/errors.py


class AppError(Exception):
    """
    Base class for failures the API reports to clients.
    Each subclass carries the HTTP status code it maps to.
    """
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"


class Conflict(AppError):
    status_code = 400
    default_message = "Resource already exists"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class ServerError(AppError):
    status_code = 500
