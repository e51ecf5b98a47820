"""Image intake: validate a selected file and encode it for transport."""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from wasteai.errors import (
    FILE_TOO_LARGE_MESSAGE,
    NOT_AN_IMAGE_MESSAGE,
    UNREADABLE_FILE_MESSAGE,
    ValidationError,
)
from wasteai.session import ImagePayload

if TYPE_CHECKING:
    from wasteai.config import Settings
    from wasteai.notifier import Notifier
    from wasteai.session import Session

logger = logging.getLogger(__name__)


class SelectedFile(Protocol):
    """A file handed over by the file picker."""

    @property
    def name(self) -> str: ...

    @property
    def size(self) -> int: ...

    @property
    def content_type(self) -> str: ...

    async def read(self) -> bytes:
        """Return the full binary content of the file."""
        ...


class LocalImageFile:
    """A file on disk, read off the event loop."""

    def __init__(self, path: Path | str, content_type: str | None = None) -> None:
        self._path = Path(path)
        guessed, _ = mimetypes.guess_type(self._path.name)
        self._content_type = content_type or guessed or "application/octet-stream"

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def size(self) -> int:
        return self._path.stat().st_size

    @property
    def content_type(self) -> str:
        return self._content_type

    async def read(self) -> bytes:
        return await asyncio.to_thread(self._path.read_bytes)


def encode_data_uri(data: bytes, content_type: str) -> str:
    """Encode raw bytes as a ``data:`` URI that keeps the MIME type."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ImageIntake:
    """Turns a picked file into the session's ImagePayload."""

    def __init__(self, settings: Settings, session: Session, notifier: Notifier) -> None:
        self._max_file_size = settings.max_file_size
        self._session = session
        self._notifier = notifier

    def validate(self, file: SelectedFile) -> None:
        """Check the file before any read or encoding work.

        Raises:
            ValidationError: If the file is too large, unreadable or not an image.
        """
        try:
            size = file.size
        except OSError as exc:
            raise ValidationError(UNREADABLE_FILE_MESSAGE) from exc
        if size > self._max_file_size:
            raise ValidationError(FILE_TOO_LARGE_MESSAGE)
        if not file.content_type.startswith("image/"):
            raise ValidationError(NOT_AN_IMAGE_MESSAGE)

    async def select_file(self, file: SelectedFile | None) -> None:
        """Validate, read and encode ``file`` into the session.

        Failures are reported through the notifier and never propagate.
        """
        if file is None:
            return
        self._session.file_input = file.name

        try:
            self.validate(file)
            data = await self._read(file)
        except ValidationError as exc:
            logger.info("Rejected %s: %s", file.name, exc.message)
            self._notifier.show(exc.severity, exc.message)
            self._session.clear_image()
            return

        self._session.reset_for_selection()
        self._session.image = ImagePayload(
            data_uri=encode_data_uri(data, file.content_type),
            filename=file.name,
            content_type=file.content_type,
            size=len(data),
        )
        logger.info("Loaded %s (%s, %d bytes)", file.name, file.content_type, len(data))

    @staticmethod
    async def _read(file: SelectedFile) -> bytes:
        try:
            return await file.read()
        except OSError as exc:
            logger.warning("Failed to read %s: %s", file.name, exc)
            raise ValidationError(UNREADABLE_FILE_MESSAGE) from exc
