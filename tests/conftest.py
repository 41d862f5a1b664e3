"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

# Ensure src/ is on the import path (for local imports without installing as package)
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from agency.config import ClientConfig  # noqa: E402
from agency.llm import ConversationClient  # noqa: E402

ENDPOINT = "http://llm.test/v1/chat/completions"


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the root directory of the project."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    monkeypatch.delenv("AGENCY_CONFIG", raising=False)
    for var in list(os.environ):
        if var.startswith("AGENCY__"):
            monkeypatch.delenv(var, raising=False)
    yield


class FakeEndpoint:
    """Records every request and answers with a canned body (or an exception)."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.bodies: List[str] = []
        self.reply: bytes = b'{"choices":[{"message":{"role":"assistant","content":"ok"}}]}'
        self.status: int = 200
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.content.decode("utf-8"))
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, content=self.reply)


@pytest.fixture
def endpoint() -> FakeEndpoint:
    return FakeEndpoint()


@pytest.fixture
def output() -> List[str]:
    """Collects whatever the client writes to its output channel."""
    return []


@pytest.fixture
def make_client(endpoint: FakeEndpoint, output: List[str]) -> Callable[..., ConversationClient]:
    clients: List[ConversationClient] = []

    def _make(**cfg) -> ConversationClient:
        client = ConversationClient(
            ClientConfig(api_endpoint=ENDPOINT, **cfg),
            transport=httpx.MockTransport(endpoint),
            output=output.append,
        )
        clients.append(client)
        return client

    yield _make
    for c in clients:
        c.close()
