class DomainError(Exception):
    """Base class for errors that map onto an HTTP status for API callers."""

    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DomainValidationError(DomainError):
    status = 400


class NotFoundError(DomainError):
    status = 404


class ConflictError(DomainError):
    status = 409


class RateLimitedError(DomainError):
    status = 429
