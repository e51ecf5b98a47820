"""Error taxonomy for the classification client.

Every error carries the text shown to the user and the severity it is shown
with. Components raise these internally and turn them into notifications at
their public boundary.
"""

from __future__ import annotations

from typing import Any

from wasteai.session import Severity

FILE_TOO_LARGE_MESSAGE = "File size exceeds the 10MB limit."
NOT_AN_IMAGE_MESSAGE = "Only image files are supported."
UNREADABLE_FILE_MESSAGE = "The selected file could not be read."
NO_IMAGE_MESSAGE = "Please upload an image first."
UNKNOWN_SERVICE_ERROR_MESSAGE = "An unknown classification error occurred."
CONNECTION_FAILED_MESSAGE = "Failed to connect to the backend server."


class WasteAIError(Exception):
    """Base class for all client-side failures."""

    severity: Severity = Severity.ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WasteAIError):
    """A selected file was rejected before any encoding work."""


class PreconditionError(WasteAIError):
    """An action was triggered before its inputs were ready."""

    severity = Severity.INFO


class ServiceError(WasteAIError):
    """The classification service answered with a failure."""

    def __init__(self, message: str, status_code: int, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class TransportError(WasteAIError):
    """No response could be obtained from the classification service."""

    def __init__(self, message: str = CONNECTION_FAILED_MESSAGE) -> None:
        super().__init__(message)
