"""Single-page classifier: wiring, text rendering and command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from wasteai.api.client import ClassificationClient
from wasteai.config import Settings, get_settings
from wasteai.intake import ImageIntake, LocalImageFile
from wasteai.notifier import Notifier
from wasteai.session import RequestState, Session
from wasteai.view import ResultView

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    import httpx

    from wasteai.intake import SelectedFile

logger = logging.getLogger(__name__)

TITLE = "Waste AI Classifier"


class ClassifierPage:
    """Owns one session and the components acting on it."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self.session = Session()
        self.notifier = Notifier(ttl=settings.notification_ttl)
        self.intake = ImageIntake(settings, self.session, self.notifier)
        self.client = ClassificationClient(settings, self.session, self.notifier, http_client)
        self.view = ResultView()

    async def select_file(self, file: SelectedFile | None) -> None:
        await self.intake.select_file(file)

    async def classify(self) -> None:
        await self.client.classify(self.session.image)

    def render(self) -> str:
        """Render the whole page as plain text."""
        lines = [TITLE, ""]
        image = self.session.image
        lines.append(f"Image: {image.filename} ({image.size} bytes)" if image else "Image: none")

        if self.session.busy:
            lines.append("[ Classifying... ]")
        elif self.session.can_submit:
            lines.append("[ Classify Waste ]")
        else:
            lines.append("[ Classify Waste ] (disabled)")

        rendered = self.view.render(self.session.result)
        if rendered is not None:
            lines += ["", "Classification Results", *rendered]
            if self.view.raw_visible:
                lines += ["", "Raw API Response:", self.view.raw_dump(self.session.result)]

        notification = self.notifier.current
        if notification is not None:
            lines += ["", f"({notification.severity}) {notification.text}"]
        return "\n".join(lines)


@asynccontextmanager
async def open_page(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncIterator[ClassifierPage]:
    """Create a page and close its HTTP client on exit."""
    settings = settings or get_settings()
    page = ClassifierPage(settings, http_client)
    try:
        yield page
    finally:
        page.notifier.dismiss()
        await page.client.aclose()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def run(image_path: str, settings: Settings, show_raw: bool = False) -> RequestState:
    """Select ``image_path``, classify it and print the resulting page."""
    async with open_page(settings) as page:
        if show_raw:
            page.view.toggle_raw()
        await page.select_file(LocalImageFile(image_path))
        if page.session.image is not None:
            await page.classify()
        print(page.render())
        return page.session.request_state


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wasteai", description="Classify a waste image.")
    parser.add_argument("image", help="path to the image file")
    parser.add_argument("--endpoint", help="classification service URL")
    parser.add_argument("--raw", action="store_true", help="show the raw API response")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not Path(args.image).is_file():
        parser.error(f"no such file: {args.image}")
    settings = get_settings()
    if args.endpoint:
        settings = settings.model_copy(update={"endpoint_url": args.endpoint})
    configure_logging(settings.log_level)
    logger.info("Using classification endpoint %s", settings.endpoint_url)

    state = asyncio.run(run(args.image, settings, show_raw=args.raw))
    return 0 if state is RequestState.SUCCEEDED else 1


if __name__ == "__main__":
    sys.exit(main())
