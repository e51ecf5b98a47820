"""Pydantic request/response schemas for the classification service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClassifyRequest(BaseModel):
    """Body of the outbound classification call."""

    model_config = ConfigDict(populate_by_name=True)

    image_data: str = Field(alias="imageData", description="Data-URI encoded image")


class Prediction(BaseModel):
    """A single label/confidence pair.

    Extra fields sent by the service (bounding boxes, class ids, ...) are kept
    so they show up in the raw response dump. Numeric labels are coerced to
    strings; confidence is expected in 0..1 but not enforced.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    label: str = Field(alias="class")
    confidence: float

    @field_validator("label", mode="before")
    @classmethod
    def _coerce_label(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ErrorResponse(BaseModel):
    """Failure body returned by the service."""

    error: str | None = None
    details: Any = None
