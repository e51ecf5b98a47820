"""HTTP client for the remote classification service.

Lifecycle of one ``classify`` call:
    reset session -> POST {imageData} -> parse predictions or error -> notify

The busy indicator is released in a ``finally`` block so that it is cleared
exactly once on every exit path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

import httpx
from pydantic import ValidationError as SchemaValidationError

from wasteai.api.schemas import ClassifyRequest, ErrorResponse, Prediction
from wasteai.errors import (
    NO_IMAGE_MESSAGE,
    UNKNOWN_SERVICE_ERROR_MESSAGE,
    PreconditionError,
    ServiceError,
    TransportError,
    WasteAIError,
)
from wasteai.session import RequestState, Severity

if TYPE_CHECKING:
    from types import TracebackType

    from wasteai.config import Settings
    from wasteai.notifier import Notifier
    from wasteai.session import ClassificationResult, ImagePayload, Session

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Image classified successfully!"


def parse_predictions(body: Any) -> ClassificationResult:
    """Extract ``results.predictions`` from a success body.

    Anything other than a list at that path yields an empty result. Entries
    without a label or a numeric confidence are dropped; an out-of-range
    confidence is kept and logged.
    """
    results = body.get("results") if isinstance(body, dict) else None
    raw = results.get("predictions") if isinstance(results, dict) else None
    if not isinstance(raw, list):
        if raw is not None or results is not None:
            logger.warning("Unexpected predictions payload: %r", raw)
        return []

    predictions: ClassificationResult = []
    for index, entry in enumerate(raw):
        try:
            prediction = Prediction.model_validate(entry)
        except SchemaValidationError as exc:
            logger.warning("Dropping prediction %d: %s", index, exc.errors(include_url=False))
            continue
        if not 0.0 <= prediction.confidence <= 1.0:
            logger.warning("Prediction %d confidence out of range: %s", index, prediction.confidence)
        predictions.append(prediction)
    return predictions


def extract_error(body: Any) -> ErrorResponse:
    """Read the ``{error, details}`` failure body, tolerating any shape."""
    if not isinstance(body, dict):
        return ErrorResponse(details=body)
    try:
        return ErrorResponse.model_validate(body)
    except SchemaValidationError:
        return ErrorResponse(details=body)


class ClassificationClient:
    """Sends images to the classification service and records the outcome."""

    def __init__(
        self,
        settings: Settings,
        session: Session,
        notifier: Notifier,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint_url = settings.endpoint_url
        self._session = session
        self._notifier = notifier
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.request_timeout)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def classify(self, payload: ImagePayload | None) -> None:
        """Classify ``payload`` and update the session and notifier.

        Never raises for service or transport failures; those become error
        notifications and leave the request state at ``FAILED``.
        """
        try:
            image = self._check_ready(payload)
        except PreconditionError as exc:
            self._notifier.show(exc.severity, exc.message)
            return
        if self._session.busy:
            logger.warning("Classification already in flight; ignoring request")
            return
        self._session.reset_for_classification()
        self._notifier.dismiss()
        try:
            predictions = await self._submit(image)
        except ServiceError as exc:
            logger.error(
                "Classification API error (HTTP %s): %s",
                exc.status_code,
                exc.details if exc.details is not None else exc.message,
            )
            self._fail(exc)
        except TransportError as exc:
            self._fail(exc)
        else:
            self._session.result = predictions
            self._session.finish_request(RequestState.SUCCEEDED)
            self._notifier.show(Severity.SUCCESS, SUCCESS_MESSAGE)
            logger.info("Classified %s: %d prediction(s)", image.filename, len(predictions))
        finally:
            self._session.release()

    @staticmethod
    def _check_ready(payload: ImagePayload | None) -> ImagePayload:
        if payload is None:
            raise PreconditionError(NO_IMAGE_MESSAGE)
        return payload

    async def _submit(self, payload: ImagePayload) -> ClassificationResult:
        """Issue the request and interpret the response.

        Raises:
            ServiceError: If the service reported a failure.
            TransportError: If no usable response could be obtained.
        """
        request = ClassifyRequest(image_data=payload.data_uri)
        try:
            response = await self._http.post(
                self._endpoint_url,
                json=request.model_dump(by_alias=True),
            )
        except httpx.RequestError as exc:
            logger.error("Classification request failed: %s", exc, exc_info=True)
            raise TransportError from exc

        try:
            body: Any = response.json()
        except ValueError:
            logger.warning("Non-JSON response body (HTTP %s)", response.status_code)
            body = None

        if response.is_success and not _reports_error(body):
            return parse_predictions(body)

        error = extract_error(body)
        raise ServiceError(
            error.error or UNKNOWN_SERVICE_ERROR_MESSAGE,
            status_code=response.status_code,
            details=error.details if error.details is not None else body,
        )

    def _fail(self, exc: WasteAIError) -> None:
        self._session.result = None
        self._session.finish_request(RequestState.FAILED)
        self._notifier.show(exc.severity, exc.message)


def _reports_error(body: Any) -> bool:
    return isinstance(body, dict) and isinstance(body.get("error"), str) and bool(body["error"])
