from __future__ import annotations

from pydantic import BaseModel, Field


class ParsedDoc(BaseModel):
    page_count: int
    text: str
    parsing_warnings: list[str] = Field(default_factory=list)
