"""Exceptions raised while updating a script."""

from typing import Any


class UpdaterError(Exception):
    """Base exception for every failure reported to the workflow."""


class ConfigError(UpdaterError):
    """A required input was not supplied."""


class InputResolutionError(UpdaterError):
    """The project or script could not be found from the given identifiers."""


class FileError(UpdaterError):
    """The local script file could not be read."""


class ApiError(UpdaterError):
    """The Luarmor API answered with an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        full_message = message
        if response:
            text = str(response)
            full_message = f"{message} - Response: {text[:500]}"
        super().__init__(full_message)
        self.status_code = status_code
        self.response = response


class AuthError(ApiError):
    """HTTP 400 or 403, usually a bad key or an IP that is not whitelisted."""


class GatewayTimeoutError(ApiError):
    """HTTP 504 from the API gateway."""

    def __init__(self, message: str = "504, the API gateway timed out", response: Any = None):
        super().__init__(message, 504, response)


class PollTimeoutError(UpdaterError):
    """The version marker did not change within the allowed number of polls."""
