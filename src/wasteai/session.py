"""Session state shared by the intake, client and view components."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wasteai.api.schemas import Prediction

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class RequestState(StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Notification:
    """A transient user-facing message."""

    severity: Severity
    text: str


@dataclass(frozen=True)
class ImagePayload:
    """An encoded image ready for transport.

    ``data_uri`` is the ``data:<mime>;base64,<...>`` form sent to the service.
    """

    data_uri: str
    filename: str
    content_type: str
    size: int


# Ordered label/confidence pairs returned by the service.
ClassificationResult = list["Prediction"]


@dataclass
class Session:
    """Single source of truth for one classification context.

    ``file_input`` mirrors the file picker's current selection so that a
    rejected file can be cleared and selected again.
    """

    image: ImagePayload | None = None
    result: ClassificationResult | None = None
    request_state: RequestState = RequestState.IDLE
    busy: bool = False
    file_input: str | None = None

    @property
    def can_submit(self) -> bool:
        """Whether the classify action is enabled."""
        return self.image is not None and not self.busy

    def reset_for_selection(self) -> None:
        """Drop the previous result when a new file is picked."""
        self.result = None
        if self.request_state is not RequestState.SUBMITTING:
            self.request_state = RequestState.IDLE

    def reset_for_classification(self) -> None:
        """Drop the previous result and enter the submitting state."""
        self.result = None
        self.request_state = RequestState.SUBMITTING
        self.busy = True

    def clear_image(self) -> None:
        self.image = None
        self.file_input = None

    def release(self) -> None:
        """Turn the busy indicator off and re-enable submission."""
        self.busy = False

    def finish_request(self, state: RequestState) -> None:
        """Record the outcome of a request attempt."""
        logger.debug("Request finished: %s", state)
        self.request_state = state
