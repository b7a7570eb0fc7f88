from __future__ import annotations

import json

import httpx
import pytest

from mediscan.application.dto.analyze import ImagePayload
from mediscan.domain.exceptions import VisionAnalysisError
from mediscan.infrastructure.clients import gemini_vision_client
from mediscan.infrastructure.clients.gemini_vision_client import (
    GeminiVisionClient,
    GeminiVisionClientSettings,
)


IMAGE = ImagePayload(mime_type="image/jpeg", data_base64="aGVsbG8=")


def _make_client(handler, *, api_key: str = "api-key", max_retries: int = 0) -> GeminiVisionClient:
    return GeminiVisionClient(
        GeminiVisionClientSettings(
            api_base="https://vision.test/v1beta/",
            api_key=api_key,
            model="gemini-test",
            timeout_seconds=5,
            max_retries=max_retries,
        ),
        transport=httpx.MockTransport(handler),
    )


def _answer(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_analyze_posts_prompt_and_inline_image():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_answer('{"ok": true}'))

    text = _make_client(handler).analyze(image=IMAGE, prompt="describe")

    assert text == '{"ok": true}'
    request = seen[0]
    assert request.url.path == "/v1beta/models/gemini-test:generateContent"
    assert request.headers["x-goog-api-key"] == "api-key"
    assert "key" not in request.url.params
    parts = json.loads(request.content)["contents"][0]["parts"]
    assert parts[0] == {"text": "describe"}
    assert parts[1] == {"inline_data": {"mime_type": "image/jpeg", "data": "aGVsbG8="}}


def test_analyze_retries_server_errors(monkeypatch):
    monkeypatch.setattr(gemini_vision_client.time, "sleep", lambda _seconds: None)
    responses = iter([httpx.Response(503), httpx.Response(200, json=_answer("{}"))])

    text = _make_client(lambda _request: next(responses), max_retries=1).analyze(image=IMAGE, prompt="p")

    assert text == "{}"


def test_analyze_does_not_retry_client_errors(monkeypatch):
    monkeypatch.setattr(gemini_vision_client.time, "sleep", lambda _seconds: None)
    calls: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(400, json={"error": {"message": "bad"}})

    with pytest.raises(VisionAnalysisError) as exc_info:
        _make_client(handler, max_retries=3).analyze(image=IMAGE, prompt="p")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Vision service request failed"
    assert len(calls) == 1


def test_analyze_rejects_empty_candidates():
    with pytest.raises(VisionAnalysisError):
        _make_client(lambda _request: httpx.Response(200, json={"candidates": []})).analyze(image=IMAGE, prompt="p")


def test_analyze_requires_api_key():
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(VisionAnalysisError):
        _make_client(handler, api_key="").analyze(image=IMAGE, prompt="p")


def test_analyze_makes_one_attempt_plus_retries(monkeypatch):
    monkeypatch.setattr(gemini_vision_client.time, "sleep", lambda _seconds: None)
    calls: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503)

    with pytest.raises(VisionAnalysisError):
        _make_client(handler, max_retries=2).analyze(image=IMAGE, prompt="p")

    assert len(calls) == 3


def test_failed_requests_keep_api_key_out_of_logs(monkeypatch, caplog):
    monkeypatch.setattr(gemini_vision_client.time, "sleep", lambda _seconds: None)
    responses = iter([httpx.Response(503), httpx.Response(400)])

    with caplog.at_level("WARNING", logger=gemini_vision_client.__name__):
        with pytest.raises(VisionAnalysisError):
            _make_client(lambda _request: next(responses), api_key="SECRET-KEY-123", max_retries=1).analyze(
                image=IMAGE,
                prompt="p",
            )

    assert "generate_retry" in caplog.text
    assert "generate_failed" in caplog.text
    assert "status=400" in caplog.text
    assert "SECRET-KEY-123" not in caplog.text
