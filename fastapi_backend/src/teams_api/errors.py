import logging
from contextlib import contextmanager
from typing import Optional

import psycopg2
from fastapi import status

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised at startup when a required setting is missing."""


class ServiceError(Exception):
    """Base class for failures that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "All fields are required."


class ConflictError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Record already exists."


class AuthError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials."


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class StoreError(ServiceError):
    """The data store failed; `detail` holds the driver message for server-side use."""

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


# PUBLIC_INTERFACE
@contextmanager
def store_errors(action: str):
    """
    Log any store failure inside the block and re-raise it as StoreError.

    psycopg2 raises a plain ValueError while adapting parameters it cannot
    send, such as strings containing NUL characters.
    """
    try:
        yield
    except (psycopg2.Error, ValueError) as exc:
        logger.error("Error %s: %s", action, exc, exc_info=True)
        raise StoreError(f"An error occurred while {action}.", detail=str(exc).strip()) from exc
