from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s*")
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(?:\+?\d{1,2}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b")
LINKEDIN_RE = re.compile(r"linkedin\.com/(?:in|pub)/([A-Za-z0-9\-_]+)", re.IGNORECASE)
GITHUB_RE = re.compile(r"github\.com/([A-Za-z0-9\-_]+)", re.IGNORECASE)
WEBSITE_RE = re.compile(r"(?:https?://)?(?:www\.)?[A-Za-z0-9\-]+\.(?:com|net|org|io|dev|me)(?:/[^\s]*)?", re.IGNORECASE)
URL_RE = re.compile(r"(?:https?://|www\.|linkedin\.com|github\.com)", re.IGNORECASE)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_bullet_like(line: str) -> bool:
    return bool(re.match(rf"^\s*[{re.escape(_BULLET_CHARS)}]", line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line, count=1).strip() if is_bullet_like(line) else line.strip()


def is_contact_or_url(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped:
        return False
    return bool(EMAIL_RE.search(stripped) or PHONE_RE.search(stripped) or URL_RE.search(stripped))


def split_list_items(line: str) -> list[str]:
    """Split a skills-style line such as ``Languages: Python, Go | SQL`` into items."""
    body = line.split(":", 1)[1] if ":" in line else line
    parts = re.split(r"\s*[,|;•·]\s*", body)
    return [part.strip() for part in parts if part.strip()]
