from __future__ import annotations

from pydantic import BaseModel


class AnalyzeRequest(BaseModel):
    image: str | None = None
