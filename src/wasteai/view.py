"""Text rendering of a classification result."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from wasteai.api.schemas import Prediction

NO_DATA_MESSAGE = "No data returned."


def format_confidence(confidence: float) -> str:
    """Render a 0..1 confidence as a percentage with two decimals."""
    return f"{confidence * 100:.2f}%"


class ResultView:
    """Renders the held result and its raw dump.

    The raw dump is a diagnostic affordance hidden behind ``toggle_raw``.
    """

    def __init__(self) -> None:
        self.raw_visible = False

    def toggle_raw(self) -> bool:
        self.raw_visible = not self.raw_visible
        return self.raw_visible

    def render(self, result: Any) -> list[str] | None:
        """Return one line per prediction, or None when there is no result."""
        if result is None:
            return None
        if not isinstance(result, (list, tuple)) or not all(isinstance(item, Prediction) for item in result):
            return [NO_DATA_MESSAGE]
        return [
            f"Label: {item.label}, Confidence: {format_confidence(item.confidence)}"
            for item in result
        ]

    @staticmethod
    def raw_dump(result: Any) -> str:
        """Pretty-print the result as JSON with the service's field names."""
        return json.dumps(_to_jsonable(result), indent=2)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value
