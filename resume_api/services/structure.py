from __future__ import annotations

import logging

from resume_api.ai.types import AIClient, DocumentPart
from resume_api.core.errors import StructureExtractionError
from resume_api.schemas.sections import SectionSet
from resume_api.services.llm_json import extract_json_object

logger = logging.getLogger(__name__)

STRUCTURE_PROMPT = """
Analyze this PDF resume and return ONLY a JSON object listing all the sections present.

Return format:
{
  "sections": ["personalInfo", "education", "experience", "projects", "skills", "achievements"]
}

Only include sections that actually exist in the PDF. If a section does not exist, do not include it.

Map what you find to these names:
- Personal Info (name, contact) -> "personalInfo"
- Education -> "education"
- Work Experience -> "experience"
- Projects -> "projects"
- Skills -> "skills"
- Achievements/Awards -> "achievements"
- Certifications -> "certifications"
- Professional Summary/Objective -> "professionalSummary"

Return ONLY the JSON with the sections array.
""".strip()


def parse_structure_response(raw: str) -> SectionSet:
    try:
        payload = extract_json_object(raw)
    except ValueError as exc:
        raise StructureExtractionError(f"Could not extract resume structure: {exc}") from exc

    sections = payload.get("sections")
    if not isinstance(sections, list):
        raise StructureExtractionError("Could not extract resume structure: response has no 'sections' list")

    section_set = SectionSet.from_tokens(sections)
    ignored = [token for token in sections if token not in section_set]
    if ignored:
        logger.info("structure_discovery_ignored_tokens tokens=%s", ignored)
    return section_set


async def discover_sections(pdf_bytes: bytes, ai_client: AIClient) -> SectionSet:
    raw = await ai_client.generate(STRUCTURE_PROMPT, document=DocumentPart(data=pdf_bytes))
    logger.debug("structure_discovery_response chars=%s", len(raw))
    section_set = parse_structure_response(raw)
    logger.info("structure_discovery_done sections=%s", section_set.to_list())
    return section_set
