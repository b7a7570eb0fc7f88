from __future__ import annotations

from dataclasses import dataclass
import logging
import time

import httpx

from mediscan.application.dto.analyze import ImagePayload
from mediscan.application.ports.vision_port import VisionPort
from mediscan.domain.exceptions import VisionAnalysisError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeminiVisionClientSettings:
    api_base: str
    api_key: str
    model: str
    timeout_seconds: float
    max_retries: int = 2


class GeminiVisionClient(VisionPort):
    def __init__(
        self,
        settings: GeminiVisionClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    def analyze(self, *, image: ImagePayload, prompt: str) -> str:
        if not self._settings.api_key:
            raise VisionAnalysisError("Vision service is not configured")

        body = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {"inline_data": {"mime_type": image.mime_type, "data": image.data_base64}},
                    ]
                }
            ]
        }
        payload = self._post_generate_content(body=body)
        return _extract_text(payload)

    def _post_generate_content(self, *, body: dict) -> dict:
        url = f"{self._settings.api_base.rstrip('/')}/models/{self._settings.model}:generateContent"
        attempts = max(0, self._settings.max_retries) + 1
        delay = 0.5
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport) as client:
                    response = client.post(url, headers={"x-goog-api-key": self._settings.api_key}, json=body)
                    response.raise_for_status()
                    return response.json()
            except httpx.HTTPStatusError as exc:
                last_exc = exc
                # Client errors will not improve on retry.
                if exc.response.status_code < 500 or attempt == attempts:
                    break
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
            logger.warning(
                "gemini_vision_client: generate_retry attempt=%s/%s error=%s",
                attempt,
                attempts,
                _describe_error(last_exc),
            )
            time.sleep(delay)
            delay *= 2

        logger.error(
            "gemini_vision_client: generate_failed model=%s error=%s",
            self._settings.model,
            _describe_error(last_exc),
        )
        raise VisionAnalysisError("Vision service request failed") from last_exc


def _describe_error(exc: Exception | None) -> str:
    # Exception text carries the request URL, keep it out of the logs.
    if isinstance(exc, httpx.HTTPStatusError):
        return f"{type(exc).__name__} status={exc.response.status_code}"
    return type(exc).__name__


def _extract_text(payload: dict) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise VisionAnalysisError("Vision service returned no candidates") from exc
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise VisionAnalysisError("Vision service returned an empty answer")
    return text
