from __future__ import annotations

import os

# Settings are read at import time, so the test environment must be in place
# before any braindump module loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("OPIK_ENABLED", "false")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("OPENAI_BASE_URL", "http://llm.test/v1")

import json  # noqa: E402
from typing import Any, Callable, Dict, List  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from braindump.db.models.brain_dump import BrainDump  # noqa: E402
from braindump.services import brain_dump_analyzer  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    BrainDump.__table__.create(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


def chat_completion(content: str) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": brain_dump_analyzer.LLM_MODEL,
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class FakeLLMEndpoint:
    """httpx transport handler standing in for POST {base_url}/chat/completions."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json=chat_completion("{}")
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def reply_json(self, payload: Any) -> None:
        self.reply_content(json.dumps(payload))

    def reply_content(self, content: str) -> None:
        self._respond = lambda request: httpx.Response(200, json=chat_completion(content))

    def reply_status(self, status_code: int) -> None:
        self._respond = lambda request: httpx.Response(status_code, json={"error": {"message": "upstream failure"}})

    def raise_error(self, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self._respond = _raise

    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def llm_endpoint(monkeypatch) -> FakeLLMEndpoint:
    endpoint = FakeLLMEndpoint()
    real_build = brain_dump_analyzer.build_llm_client

    def build_with_mock_transport():
        return real_build(http_client=httpx.Client(transport=httpx.MockTransport(endpoint)))

    monkeypatch.setattr(brain_dump_analyzer, "build_llm_client", build_with_mock_transport)
    return endpoint
