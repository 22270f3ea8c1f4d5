from __future__ import annotations

from resume_api.schemas.records import ResumeChange
from resume_api.schemas.resume import ResumeContent


def summarize_changes(original: ResumeContent, tailored: ResumeContent) -> list[ResumeChange]:
    """Describe what tailoring changed relative to the parsed master résumé."""
    changes: list[ResumeChange] = []

    if (original.professional_summary or "") != (tailored.professional_summary or ""):
        changes.append(
            ResumeChange(
                section="professionalSummary",
                type="modified",
                description="Professional summary optimized for job requirements",
            )
        )

    original_technical = original.skills.technical if original.skills else []
    tailored_technical = tailored.skills.technical if tailored.skills else []
    if original_technical != tailored_technical:
        changes.append(
            ResumeChange(
                section="skills",
                type="reordered",
                description="Technical skills reordered to prioritize job-relevant technologies",
            )
        )

    for index, (before, after) in enumerate(zip(original.experience or [], tailored.experience or []), start=1):
        if before.description != after.description:
            changes.append(
                ResumeChange(
                    section="experience",
                    type="modified",
                    description=f"Experience entry {index} enhanced with relevant keywords and achievements",
                )
            )

    for index, (before, after) in enumerate(zip(original.projects or [], tailored.projects or []), start=1):
        if before.description != after.description or before.achievements != after.achievements:
            changes.append(
                ResumeChange(
                    section="projects",
                    type="modified",
                    description=f"Project {index} description and achievements optimized for job relevance",
                )
            )

    return changes
