from .records import ApplicationStatus, FidelitySummary, MasterResumeRecord, ResumeChange, TailoredResumeRecord
from .resume import (
    Certification,
    Education,
    Experience,
    PersonalInfo,
    Project,
    ResumeContent,
    Skills,
)
from .sections import SECTION_VOCABULARY, SectionSet

__all__ = [
    "ApplicationStatus",
    "Certification",
    "Education",
    "Experience",
    "FidelitySummary",
    "MasterResumeRecord",
    "PersonalInfo",
    "Project",
    "ResumeChange",
    "ResumeContent",
    "SECTION_VOCABULARY",
    "SectionSet",
    "Skills",
    "TailoredResumeRecord",
]
