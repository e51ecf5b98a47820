"""Shared fixtures: an in-memory file and a fake classification service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from wasteai.config import Settings
from wasteai.notifier import Notifier
from wasteai.session import Session

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

ENDPOINT_URL = "http://testserver/api/classify"
MIB = 1024 * 1024


@dataclass
class InMemoryFile:
    """Stand-in for a file handed over by the picker."""

    name: str
    data: bytes = b""
    content_type: str = "image/jpeg"
    declared_size: int | None = None
    reads: int = field(default=0, init=False)

    @property
    def size(self) -> int:
        return self.declared_size if self.declared_size is not None else len(self.data)

    async def read(self) -> bytes:
        self.reads += 1
        return self.data


def make_jpeg(size: int) -> InMemoryFile:
    return InMemoryFile(name="photo.jpg", data=b"\xff\xd8\xff" + b"\x00" * (size - 3))


def make_settings(**overrides: object) -> Settings:
    defaults: dict[str, object] = {
        "endpoint_url": ENDPOINT_URL,
        "request_timeout": 5.0,
        "max_file_size": 10 * MIB,
        "notification_ttl": 5.0,
    }
    defaults.update(overrides)
    return Settings(**defaults)  # type: ignore[arg-type]


class FakeService:
    """A FastAPI app that records requests and replies with a canned response."""

    def __init__(self) -> None:
        self.status_code: int = status.HTTP_200_OK
        self.body: Any = {"results": {"predictions": []}}
        self.requests: list[Any] = []
        self.app = FastAPI()
        self.app.add_api_route("/api/classify", self._classify, methods=["POST"])

    def reply(self, body: Any, status_code: int = status.HTTP_200_OK) -> None:
        self.body = body
        self.status_code = status_code

    async def _classify(self, request: Request) -> JSONResponse:
        self.requests.append(await request.json())
        return JSONResponse(status_code=self.status_code, content=self.body)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def session() -> Session:
    return Session()


@pytest.fixture()
def notifier() -> Iterator[Notifier]:
    n = Notifier(ttl=5.0)
    yield n
    n.dismiss()


@pytest.fixture()
def service() -> FakeService:
    return FakeService()


@pytest.fixture()
async def http_client(service: FakeService) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=service.app),
        base_url="http://testserver",
    ) as ac:
        yield ac
