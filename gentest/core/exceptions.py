"""Error taxonomy shared by services, generation functions and routes.

Every error carries a human-readable message (shown to the user as-is) and
the HTTP status the API answers with.
"""

from typing import Optional


class GenTestError(Exception):
    """Base class for application errors"""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BackendError(GenTestError):
    """Row store failure; the message is the backend's own."""

    status_code = 500


class NotAuthenticatedError(GenTestError):
    status_code = 401


class AuthError(GenTestError):
    status_code = 400


class NotFoundError(GenTestError):
    status_code = 404


class ConfigurationError(GenTestError):
    status_code = 500


class GenerationError(GenTestError):
    """A generation function could not be invoked or replied with an unusable payload."""

    status_code = 502


class UpstreamModelError(GenTestError):
    """The generative-language API rejected the request."""

    status_code = 502


class EmptyModelResponseError(UpstreamModelError):
    """The generative-language API answered without candidates."""
