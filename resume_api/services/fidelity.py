from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_snake

from resume_api.core.errors import InvalidResumeStructureError, StructureMismatchError
from resume_api.schemas.records import FidelitySummary
from resume_api.schemas.resume import ResumeContent, Skills
from resume_api.schemas.sections import SectionSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FidelityReport:
    content: ResumeContent
    sections: tuple[str, ...]
    dropped: tuple[str, ...]
    missing: tuple[str, ...]
    warnings: tuple[str, ...]

    def payload(self) -> dict[str, Any]:
        """Serialised content with sections in discovery order."""
        dumped = self.content.to_payload()
        return {section: dumped[section] for section in self.sections if section in dumped}

    def summary(self) -> FidelitySummary:
        return FidelitySummary(
            sections=list(self.sections),
            dropped=list(self.dropped),
            missing=list(self.missing),
            warnings=list(self.warnings),
        )


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Skills):
        return value.is_empty()
    if isinstance(value, BaseModel):
        return all(_is_empty(item) for item in value.model_dump(exclude_none=True).values())
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return all(_is_empty(item) for item in value)
    if isinstance(value, dict):
        return all(_is_empty(item) for item in value.values())
    return False


def validate_fidelity(
    candidate: Mapping[str, Any],
    section_set: SectionSet,
    *,
    strict: bool = False,
) -> FidelityReport:
    """
    Restrict an untrusted model candidate to the sections of its source document.

    Sections outside ``section_set`` are dropped. Sections of the set that are
    absent, empty or not coercible are reported as missing; that is a warning
    unless ``strict`` is set, in which case StructureMismatchError is raised.
    The result must still carry a non-empty ``personalInfo.name``.
    """
    if not isinstance(candidate, Mapping):
        raise InvalidResumeStructureError("Tailored content is not a JSON object")

    dropped = [key for key in candidate.keys() if key not in section_set]
    for key in dropped:
        logger.warning("fidelity_section_dropped section=%s", key)

    kept: dict[str, Any] = {}
    missing: list[str] = []
    warnings: list[str] = []
    for section in section_set:
        value = candidate.get(section)
        if value is not None:
            try:
                coerced = getattr(ResumeContent.model_validate({section: value}), to_snake(section))
            except PydanticValidationError as exc:
                missing.append(section)
                warnings.append(f"Section '{section}' could not be read from the tailored content.")
                logger.warning("fidelity_section_malformed section=%s errors=%s", section, exc.error_count())
                continue
            if not _is_empty(coerced):
                kept[section] = value
                continue
        missing.append(section)
        warnings.append(f"Section '{section}' exists in the original resume but is missing from the tailored content.")
        logger.warning("fidelity_section_missing section=%s", section)

    if strict and missing:
        raise StructureMismatchError(
            f"Tailored content is missing sections from the original resume: {', '.join(missing)}",
            missing=missing,
        )

    content = ResumeContent.model_validate(kept)
    if not content.has_identity():
        logger.error("fidelity_invalid_structure personal_info_present=%s", content.personal_info is not None)
        raise InvalidResumeStructureError("Invalid resume structure: missing personalInfo or name")

    sections = tuple(section for section in section_set if section in kept)
    logger.info("fidelity_validated sections=%s dropped=%s missing=%s", list(sections), dropped, missing)
    return FidelityReport(
        content=content,
        sections=sections,
        dropped=tuple(dropped),
        missing=tuple(missing),
        warnings=tuple(warnings),
    )
