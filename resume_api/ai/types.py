from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class DocumentPart:
    data: bytes
    mime_type: str = "application/pdf"
    filename: str = "resume.pdf"


class AIClient(Protocol):
    async def generate(self, prompt: str, *, document: DocumentPart | None = None) -> str: ...

    async def aclose(self) -> None: ...
