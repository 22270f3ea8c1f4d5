"""
Model-free résumé extraction from plain PDF text.

Used for the master résumé when no job description is supplied. Matching is
best-effort: contact details come from regexes, sections are split on
well-known headings and skills are matched against a fixed keyword table.
"""

from __future__ import annotations

import re
from typing import Any

from resume_api.schemas.resume import ResumeContent

from .text_utils import (
    EMAIL_RE,
    GITHUB_RE,
    LINKEDIN_RE,
    PHONE_RE,
    WEBSITE_RE,
    YEAR_RE,
    is_bullet_like,
    is_contact_or_url,
    normalize_line,
    split_list_items,
    strip_bullet_prefix,
)

_SECTION_HEADERS: dict[str, re.Pattern[str]] = {
    "professionalSummary": re.compile(
        r"^(?:professional\s+)?(?:summary|objective|profile|about(?:\s+me)?|overview)$", re.I
    ),
    "experience": re.compile(
        r"^(?:(?:professional|work|relevant)\s+)?(?:experience|employment(?:\s+history)?|work\s+history)$", re.I
    ),
    "education": re.compile(r"^(?:education|academic\s+background|qualifications)$", re.I),
    "projects": re.compile(r"^(?:(?:personal|academic|selected|key)\s+)?projects?$", re.I),
    "certifications": re.compile(r"^(?:certifications?|certificates?|licenses?(?:\s*&\s*certifications?)?)$", re.I),
    "skills": re.compile(r"^(?:(?:technical|core|key)\s+)?(?:skills|technologies|competencies|tools)$", re.I),
    "achievements": re.compile(r"^(?:achievements|awards|honors(?:\s*&\s*awards)?|accomplishments)$", re.I),
}

SKILL_KEYWORDS: dict[str, tuple[str, ...]] = {
    "technical": (
        "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Rust",
        "HTML", "CSS", "SQL", "Kotlin", "Swift", "Scala",
    ),
    "frameworks": (
        "React", "Angular", "Vue", "Django", "Flask", "FastAPI", "Spring", "Laravel", "Express",
        "Next.js", "Nuxt.js", "Svelte", "Node.js", "Tailwind", "Bootstrap",
    ),
    "databases": (
        "MySQL", "PostgreSQL", "MongoDB", "Redis", "SQLite", "Oracle", "SQL Server", "DynamoDB",
    ),
    "tools": (
        "Git", "Docker", "Kubernetes", "Jenkins", "Jira", "Confluence", "Figma", "Webpack",
        "AWS", "Azure", "GCP", "Terraform",
    ),
}

_DATE_RANGE_RE = re.compile(
    r"((?:[A-Za-z]{3,9}\.?\s+)?(?:19|20)\d{2})\s*(?:-|–|—|to)\s*((?:[A-Za-z]{3,9}\.?\s+)?(?:19|20)\d{2}|present|current|now)",
    re.I,
)
_TITLE_COMPANY_SPLIT = re.compile(r"\s+(?:at|@)\s+|\s*[|,–—]\s*|\s+-\s+")
_DEGREE_HINT = re.compile(r"\b(?:bachelor|master|b\.?s\.?c?|m\.?s\.?c?|b\.?a|m\.?a|ph\.?d|mba|diploma|degree|associate)\b", re.I)
_INSTITUTION_HINT = re.compile(r"\b(?:university|college|institute|school|academy|polytechnic)\b", re.I)
_NOT_A_NAME = re.compile(r"\b(?:resume|résumé|curriculum\s+vitae|cv)\b", re.I)


# Ordinary English words; only their capitalised spelling counts as a skill.
CASE_SENSITIVE_KEYWORDS = frozenset(
    {"Go", "Rust", "Swift", "Ruby", "Spring", "Express", "Flask", "Oracle", "Bootstrap", "Jenkins"}
)


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    flags = 0 if keyword in CASE_SENSITIVE_KEYWORDS else re.I
    return re.compile(rf"(?<![A-Za-z0-9]){re.escape(keyword)}(?![A-Za-z0-9+#])", flags)


_SKILL_PATTERNS = {
    category: [(keyword, _keyword_pattern(keyword)) for keyword in keywords]
    for category, keywords in SKILL_KEYWORDS.items()
}


def extract_personal_info(text: str) -> dict[str, str]:
    info: dict[str, str] = {"name": "", "email": "", "phone": "", "location": ""}

    email = EMAIL_RE.search(text)
    if email:
        info["email"] = email.group(0)

    phone = PHONE_RE.search(text)
    if phone:
        info["phone"] = phone.group(0).strip()

    linkedin = LINKEDIN_RE.search(text)
    if linkedin:
        info["linkedin"] = f"https://linkedin.com/in/{linkedin.group(1)}"

    github = GITHUB_RE.search(text)
    if github:
        info["github"] = f"https://github.com/{github.group(1)}"

    for match in WEBSITE_RE.finditer(text):
        candidate = match.group(0)
        lowered = candidate.lower()
        touches_email = "@" in text[max(0, match.start() - 1) : match.start()] or text[match.end() : match.end() + 1] == "@"
        if "linkedin" in lowered or "github" in lowered or touches_email:
            continue
        info["website"] = candidate if lowered.startswith("http") else f"https://{candidate}"
        break

    lines = [normalize_line(line) for line in text.splitlines() if line.strip()][:10]
    for line in lines:
        if is_contact_or_url(line) or _NOT_A_NAME.search(line):
            continue
        if 2 < len(line) < 50 and _section_for_heading(line) is None:
            info["name"] = line
            break
    return info


def _section_for_heading(line: str) -> str | None:
    cleaned = normalize_line(line).rstrip(":").strip()
    if not cleaned or len(cleaned) >= 50:
        return None
    for section, pattern in _SECTION_HEADERS.items():
        if pattern.match(cleaned):
            return section
    return None


def split_sections(text: str) -> dict[str, list[str]]:
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        heading = _section_for_heading(line)
        if heading is not None:
            current = heading
            sections.setdefault(current, [])
            continue
        if current is not None:
            sections[current].append(line)
    return sections


def _split_title_company(text: str) -> list[str]:
    if not text:
        return []
    return [part.strip() for part in _TITLE_COMPANY_SPLIT.split(text) if part.strip()]


def parse_experience_entries(lines: list[str]) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    current: dict[str, Any] | None = None
    pending_heading: str | None = None

    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        if not is_bullet_like(line) and not _DATE_RANGE_RE.search(line) and _DATE_RANGE_RE.search(next_line):
            pending_heading = normalize_line(line)
            continue

        date_range = _DATE_RANGE_RE.search(line)
        if date_range and not is_bullet_like(line):
            if current is not None:
                entries.append(current)
            rest = normalize_line(line[: date_range.start()] + " " + line[date_range.end() :]).strip(" |,–—-()")
            rest_parts = _split_title_company(rest)
            heading_parts = _split_title_company(pending_heading or "")
            if heading_parts and rest_parts and len(heading_parts) == 1:
                parts = [heading_parts[0], rest_parts[0]]
            else:
                parts = heading_parts or rest_parts
            current = {
                "title": parts[0] if parts else "",
                "company": parts[1] if len(parts) > 1 else "",
                "duration": normalize_line(date_range.group(0)),
                "description": [],
                "technologies": [],
            }
            pending_heading = None
            continue

        if current is not None:
            # A plain line right after the date line is usually the company.
            if not is_bullet_like(line) and not current["description"] and not current["company"]:
                current["company"] = normalize_line(line)
            else:
                current["description"].append(strip_bullet_prefix(line))
            continue
        pending_heading = normalize_line(line)

    if current is not None:
        entries.append(current)
    for entry in entries:
        entry["technologies"] = skill_list(" ".join(entry["description"]))
    return entries


def parse_education_entries(lines: list[str]) -> list[dict[str, str]]:
    if not lines:
        return []
    degree = next((line for line in lines if _DEGREE_HINT.search(line)), lines[0])
    institution = next((line for line in lines if _INSTITUTION_HINT.search(line) and line != degree), "")
    if not institution:
        remaining = [line for line in lines if line != degree]
        institution = remaining[0] if remaining else ""
    years = [match.group(0) for line in lines for match in YEAR_RE.finditer(line)]
    return [
        {
            "degree": normalize_line(degree),
            "institution": normalize_line(institution),
            "year": years[-1] if years else "",
        }
    ]


def parse_project_entries(lines: list[str]) -> list[dict[str, Any]]:
    projects: list[dict[str, Any]] = []
    current: dict[str, Any] | None = None
    for line in lines:
        if not is_bullet_like(line) and (current is None or current["description"]):
            if current is not None:
                projects.append(current)
            current = {"name": normalize_line(line), "description": "", "technologies": [], "achievements": []}
            continue
        if current is None:
            continue
        text = strip_bullet_prefix(line)
        current["description"] = f"{current['description']} {text}".strip()
    if current is not None:
        projects.append(current)
    for project in projects:
        project["technologies"] = skill_list(f"{project['name']} {project['description']}")
    return projects


def parse_certification_entries(lines: list[str]) -> list[dict[str, str]]:
    return [{"name": strip_bullet_prefix(line), "issuer": "", "date": ""} for line in lines if line.strip()]


def match_skills(text: str) -> dict[str, list[str]]:
    found: dict[str, list[str]] = {}
    for category, patterns in _SKILL_PATTERNS.items():
        hits = [keyword for keyword, pattern in patterns if pattern.search(text)]
        if hits:
            found[category] = hits
    return found


def skill_list(text: str) -> list[str]:
    seen: list[str] = []
    for hits in match_skills(text).values():
        seen.extend(hit for hit in hits if hit not in seen)
    return seen


def extract_resume_from_text(text: str) -> ResumeContent:
    """Best-effort structured résumé from raw text. Only detected sections are set."""
    data: dict[str, Any] = {"personalInfo": extract_personal_info(text)}
    sections = split_sections(text)

    summary = sections.get("professionalSummary")
    if summary:
        data["professionalSummary"] = " ".join(normalize_line(line) for line in summary)

    if sections.get("education"):
        data["education"] = parse_education_entries(sections["education"])
    if sections.get("experience"):
        data["experience"] = parse_experience_entries(sections["experience"])
    if sections.get("projects"):
        data["projects"] = parse_project_entries(sections["projects"])
    if sections.get("certifications"):
        data["certifications"] = parse_certification_entries(sections["certifications"])
    if sections.get("achievements"):
        data["achievements"] = [strip_bullet_prefix(line) for line in sections["achievements"]]

    skills: dict[str, list[str]] = match_skills(text)
    listed = [item for line in sections.get("skills", []) for item in split_list_items(strip_bullet_prefix(line))]
    known = {skill.lower() for hits in skills.values() for skill in hits}
    extra = [item for item in listed if item.lower() not in known]
    if extra:
        skills.setdefault("technical", [])
        skills["technical"].extend(item for item in extra if item not in skills["technical"])
    if skills:
        data["skills"] = skills

    return ResumeContent.model_validate(data)
