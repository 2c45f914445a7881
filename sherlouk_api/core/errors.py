"""Error taxonomy shared by repositories, services and routers."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors rendered as ``{"error": message}`` responses."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    """Raised when a request is missing required fields or has the wrong shape."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class PersistenceError(ServiceError):
    """I/O or deserialization failure on the backing document."""

    status_code = 500
