from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AnalyzeImageInput:
    image: str | None


@dataclass(frozen=True)
class ImagePayload:
    mime_type: str
    data_base64: str


@dataclass(frozen=True)
class AnalyzeImageOutput:
    analysis: dict[str, Any]
