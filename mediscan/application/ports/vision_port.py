from __future__ import annotations

from typing import Protocol

from mediscan.application.dto.analyze import ImagePayload


class VisionPort(Protocol):
    def analyze(self, *, image: ImagePayload, prompt: str) -> str:
        """Return the model's raw text answer."""
        ...
