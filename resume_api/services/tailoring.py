from __future__ import annotations

import logging
from typing import Any

from resume_api.ai.types import AIClient, DocumentPart
from resume_api.core.errors import TailoringGenerationError
from resume_api.services.llm_json import extract_json_object

logger = logging.getLogger(__name__)

_TAILOR_TEMPLATE = """
You are an expert resume optimization specialist. Analyze the uploaded PDF resume and tailor it for the job described below.

JOB DETAILS:
{job_details}

JOB DESCRIPTION:
{job_description}

STRUCTURE RULES:
1. Identify every section present in the original PDF.
2. Return JSON containing ONLY those sections, nothing more and nothing less.
3. NEVER add a section that does not exist in the original (no invented summary, certifications, links, coursework, education, experience, projects or skills).
4. Do not assume any section is required except personalInfo.

MODIFICATION RULES (only for sections that exist in the original):

experience:
- Keep the EXACT same job titles, companies and durations. Never invent employers, titles or dates.
- Lightly rewrite description bullets to include keywords relevant to the job.
- Bold key technical terms with **double asterisks**.

projects:
- Keep the EXACT same project names.
- Lightly rewrite descriptions and achievements to highlight relevant technologies.
- Bold key technical terms with **double asterisks**.

skills:
- Reorder so job-relevant skills come first and group similar technologies together.
- Do not add skills the candidate does not list.

ALL OTHER SECTIONS (personalInfo, education, achievements, certifications, professionalSummary):
- Copy them EXACTLY as they appear in the original. Do not modify their content.

OUTPUT SHAPE (include only the keys for sections that exist):
{{
  "personalInfo": {{"name": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": "", "website": ""}},
  "professionalSummary": "",
  "education": [{{"degree": "", "institution": "", "year": "", "gpa": "", "relevantCourses": []}}],
  "experience": [{{"title": "", "company": "", "duration": "", "description": [], "technologies": []}}],
  "projects": [{{"name": "", "description": "", "technologies": [], "achievements": []}}],
  "skills": {{"technical": [], "soft": [], "tools": [], "languages": []}},
  "achievements": [],
  "certifications": [{{"name": "", "issuer": "", "date": ""}}]
}}

Before answering, confirm the JSON has exactly the same sections as the original resume.
Return ONLY the JSON, no additional text or explanations.
""".strip()


def build_tailoring_prompt(job_description: str, job_title: str | None = None, company: str | None = None) -> str:
    details = []
    if job_title and job_title.strip():
        details.append(f"Position: {job_title.strip()}")
    if company and company.strip():
        details.append(f"Company: {company.strip()}")
    return _TAILOR_TEMPLATE.format(
        job_details="\n".join(details) if details else "Not specified",
        job_description=job_description.strip(),
    )


def parse_tailoring_response(raw: str) -> dict[str, Any]:
    try:
        candidate = extract_json_object(raw)
    except ValueError as exc:
        logger.warning("tailoring_response_unparseable chars=%s: %s", len(raw or ""), exc)
        raise TailoringGenerationError(f"No valid JSON found in AI response: {exc}") from exc

    personal = candidate.get("personalInfo")
    name = personal.get("name") if isinstance(personal, dict) else None
    if not isinstance(name, str) or not name.strip():
        raise TailoringGenerationError("AI response is missing personalInfo.name")
    return candidate


async def tailor_content(
    pdf_bytes: bytes,
    job_description: str,
    ai_client: AIClient,
    *,
    job_title: str | None = None,
    company: str | None = None,
) -> dict[str, Any]:
    """Ask the model for a tailored résumé. The result is an unvalidated candidate."""
    prompt = build_tailoring_prompt(job_description, job_title=job_title, company=company)
    raw = await ai_client.generate(prompt, document=DocumentPart(data=pdf_bytes))
    candidate = parse_tailoring_response(raw)
    logger.info("tailoring_candidate_ready sections=%s", sorted(candidate.keys()))
    return candidate
