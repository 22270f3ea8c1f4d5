from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

SECTION_VOCABULARY: tuple[str, ...] = (
    "personalInfo",
    "education",
    "experience",
    "projects",
    "skills",
    "achievements",
    "certifications",
    "professionalSummary",
)


@dataclass(frozen=True)
class SectionSet:
    """Ordered, immutable set of section tokens detected in one source document."""

    sections: tuple[str, ...]

    @classmethod
    def from_tokens(cls, tokens: Iterable[object]) -> "SectionSet":
        seen: list[str] = []
        for token in tokens:
            if not isinstance(token, str):
                continue
            name = token.strip()
            if name in SECTION_VOCABULARY and name not in seen:
                seen.append(name)
        return cls(sections=tuple(seen))

    def __contains__(self, item: object) -> bool:
        return item in self.sections

    def __iter__(self) -> Iterator[str]:
        return iter(self.sections)

    def __len__(self) -> int:
        return len(self.sections)

    def to_list(self) -> list[str]:
        return list(self.sections)
