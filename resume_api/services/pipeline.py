from __future__ import annotations

import logging
from dataclasses import dataclass

from resume_api.ai.types import AIClient
from resume_api.core.config import settings
from resume_api.core.errors import AIProviderError
from resume_api.schemas.sections import SectionSet
from resume_api.services.fidelity import FidelityReport, validate_fidelity
from resume_api.services.llm_json import retry_with_backoff
from resume_api.services.structure import discover_sections
from resume_api.services.tailoring import tailor_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TailoringOutcome:
    section_set: SectionSet
    report: FidelityReport
    discovered: bool


async def parse_and_tailor(
    pdf_bytes: bytes,
    job_description: str,
    ai_client: AIClient,
    *,
    job_title: str | None = None,
    company: str | None = None,
    section_set: SectionSet | None = None,
    strict: bool | None = None,
    max_attempts: int | None = None,
    base_delay_s: float | None = None,
) -> TailoringOutcome:
    """
    Structure discovery, content tailoring and fidelity validation, in order.

    A cached ``section_set`` skips discovery. Provider failures are retried
    with exponential backoff; unparseable responses are not.
    """
    attempts = max_attempts if max_attempts is not None else settings.ai_max_retries
    delay = base_delay_s if base_delay_s is not None else settings.ai_retry_base_delay_s
    strict_mode = settings.strict_section_fidelity if strict is None else strict

    discovered = section_set is None
    if section_set is None:
        logger.info("pipeline_structure_discovery bytes=%s", len(pdf_bytes))
        section_set = await retry_with_backoff(
            lambda: discover_sections(pdf_bytes, ai_client),
            attempts=attempts,
            base_delay_s=delay,
            label="structure_discovery",
            retryable=(AIProviderError,),
        )
    else:
        logger.info("pipeline_structure_cached sections=%s", section_set.to_list())

    logger.info("pipeline_tailoring job_title=%s company=%s jd_chars=%s", job_title, company, len(job_description))
    candidate = await retry_with_backoff(
        lambda: tailor_content(
            pdf_bytes,
            job_description,
            ai_client,
            job_title=job_title,
            company=company,
        ),
        attempts=attempts,
        base_delay_s=delay,
        label="content_tailoring",
        retryable=(AIProviderError,),
    )

    report = validate_fidelity(candidate, section_set, strict=strict_mode)
    return TailoringOutcome(section_set=section_set, report=report, discovered=discovered)
