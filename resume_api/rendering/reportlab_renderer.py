from __future__ import annotations

import logging
import re
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError

from resume_api.core.errors import RenderError
from resume_api.schemas.resume import ResumeContent

from .base import ensure_pdf_bytes

logger = logging.getLogger(__name__)

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_PRIMARY = colors.HexColor("#2c3e50")
_MUTED = colors.HexColor("#555555")

_SKILL_LABELS = {
    "technical": "Technical",
    "soft": "Soft Skills",
    "tools": "Tools",
    "languages": "Languages",
}


def _markup(text: str) -> str:
    """Escape text for Paragraph markup and turn **bold** runs into <b> tags."""
    return _BOLD_RE.sub(r"<b>\1</b>", escape(text or ""))


def _clean_bullet(text: str) -> str:
    text = text.strip()
    for marker in ("- ", "• ", "* "):
        if text.startswith(marker):
            return text[len(marker):].strip()
    return text.lstrip("-•*").strip()


def _styles() -> dict[str, ParagraphStyle]:
    return {
        "name": ParagraphStyle(
            name="Name", fontName="Helvetica-Bold", fontSize=22, leading=26,
            alignment=TA_CENTER, textColor=_PRIMARY, spaceAfter=4,
        ),
        "contact": ParagraphStyle(
            name="Contact", fontName="Helvetica", fontSize=9.5, leading=12,
            alignment=TA_CENTER, textColor=_MUTED,
        ),
        "section": ParagraphStyle(
            name="SectionTitle", fontName="Helvetica-Bold", fontSize=12, leading=14,
            alignment=TA_LEFT, textColor=_PRIMARY, spaceBefore=10, spaceAfter=2,
        ),
        "entry": ParagraphStyle(name="Entry", fontName="Helvetica-Bold", fontSize=10.5, leading=13),
        "entry_right": ParagraphStyle(
            name="EntryRight", fontName="Helvetica-Oblique", fontSize=9.5, leading=13,
            alignment=TA_RIGHT, textColor=_MUTED,
        ),
        "body": ParagraphStyle(name="Body", fontName="Helvetica", fontSize=10, leading=13, spaceAfter=2),
        "bullet": ParagraphStyle(
            name="Bullet", fontName="Helvetica", fontSize=9.5, leading=12,
            leftIndent=14, firstLineIndent=-9, spaceAfter=1,
        ),
    }


class ReportLabRenderer:
    """Single-column A4 résumé built from platypus flowables."""

    name = "reportlab"

    def __init__(self, pagesize: tuple[float, float] = A4, margin: float = 0.55 * inch):
        self._pagesize = pagesize
        self._margin = margin
        self._styles = _styles()

    def render(self, content: ResumeContent, *, title: str | None = None) -> bytes:
        buffer = BytesIO()
        author = content.name or "Resume"
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self._pagesize,
            rightMargin=self._margin,
            leftMargin=self._margin,
            topMargin=self._margin,
            bottomMargin=self._margin,
            title=title or f"{author} - Resume",
            author=author,
        )
        flowables = self.build_flowables(content)
        logger.debug("pdf_render_start sections=%s flowables=%s", content.section_keys(), len(flowables))
        try:
            doc.build(flowables)
        except (LayoutError, ValueError) as exc:
            logger.error("pdf_render_failed sections=%s: %s", content.section_keys(), exc)
            raise RenderError(f"PDF generation failed: {exc}") from exc
        return ensure_pdf_bytes(buffer.getvalue())

    def build_flowables(self, content: ResumeContent) -> list:
        flowables: list = []
        flowables.extend(self._header(content))
        if content.professional_summary:
            flowables.extend(self._section("Professional Summary"))
            flowables.append(Paragraph(_markup(content.professional_summary), self._styles["body"]))
        if content.education:
            flowables.extend(self._education(content))
        if content.experience:
            flowables.extend(self._experience(content))
        if content.projects:
            flowables.extend(self._projects(content))
        if content.skills and not content.skills.is_empty():
            flowables.extend(self._skills(content))
        if content.achievements:
            flowables.extend(self._section("Achievements"))
            flowables.extend(self._bullets(content.achievements))
        if content.certifications:
            flowables.extend(self._certifications(content))
        return flowables

    def _header(self, content: ResumeContent) -> list:
        info = content.personal_info
        name = content.name or "Name"
        out: list = [Paragraph(_markup(name), self._styles["name"])]
        if info is None:
            return out
        contact = [value for value in (info.email, info.phone, info.location) if value]
        if contact:
            out.append(Paragraph(_markup("  |  ".join(contact)), self._styles["contact"]))
        links = [
            f"{label}: {value}"
            for label, value in (("LinkedIn", info.linkedin), ("GitHub", info.github), ("Website", info.website))
            if value
        ]
        if links:
            out.append(Paragraph(_markup("  |  ".join(links)), self._styles["contact"]))
        out.append(Spacer(1, 4))
        return out

    def _section(self, title: str) -> list:
        return [
            Paragraph(escape(title.upper()), self._styles["section"]),
            HRFlowable(width="100%", thickness=0.6, color=_PRIMARY, spaceBefore=1, spaceAfter=5),
        ]

    def _entry_row(self, left: str, right: str) -> Table:
        width = self._pagesize[0] - 2 * self._margin
        table = Table(
            [[Paragraph(left, self._styles["entry"]), Paragraph(_markup(right), self._styles["entry_right"])]],
            colWidths=[width * 0.72, width * 0.28],
        )
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                    ("TOPPADDING", (0, 0), (-1, -1), 1),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
                ]
            )
        )
        return table

    def _bullets(self, items: list[str]) -> list:
        return [
            Paragraph(f"•&nbsp;&nbsp;{_markup(_clean_bullet(item))}", self._styles["bullet"])
            for item in items
            if item and item.strip()
        ]

    def _education(self, content: ResumeContent) -> list:
        out = self._section("Education")
        for edu in content.education or []:
            heading = " - ".join(part for part in (edu.institution, edu.degree) if part)
            block: list = [self._entry_row(f"<b>{_markup(heading)}</b>", edu.year)]
            if edu.gpa:
                block.append(Paragraph(_markup(f"GPA: {edu.gpa}"), self._styles["body"]))
            if edu.relevant_courses:
                block.append(
                    Paragraph(_markup(f"Relevant Courses: {', '.join(edu.relevant_courses)}"), self._styles["body"])
                )
            out.append(KeepTogether(block))
        return out

    def _experience(self, content: ResumeContent) -> list:
        out = self._section("Experience")
        for exp in content.experience or []:
            heading = _markup(exp.title)
            if exp.company:
                heading = f"{heading} <font name='Helvetica'>- {_markup(exp.company)}</font>" if heading else _markup(exp.company)
            block: list = [self._entry_row(heading, exp.duration)]
            block.extend(self._bullets(exp.description))
            if exp.achievements:
                block.extend(self._bullets(exp.achievements))
            if exp.technologies:
                block.append(Paragraph(f"<i>Technologies:</i> {_markup(', '.join(exp.technologies))}", self._styles["body"]))
            block.append(Spacer(1, 3))
            out.append(KeepTogether(block))
        return out

    def _projects(self, content: ResumeContent) -> list:
        out = self._section("Projects")
        for project in content.projects or []:
            link = project.url or project.github or ""
            block: list = [self._entry_row(_markup(project.name), link)]
            if project.description:
                block.append(Paragraph(_markup(project.description), self._styles["body"]))
            block.extend(self._bullets(project.achievements))
            if project.technologies:
                block.append(
                    Paragraph(f"<i>Technologies:</i> {_markup(', '.join(project.technologies))}", self._styles["body"])
                )
            block.append(Spacer(1, 3))
            out.append(KeepTogether(block))
        return out

    def _skills(self, content: ResumeContent) -> list:
        if content.skills is None:
            return []
        out = self._section("Skills")
        for category, items in content.skills.categories().items():
            if not items:
                continue
            label = _SKILL_LABELS.get(category, category.replace("_", " ").title())
            out.append(Paragraph(f"<b>{escape(label)}:</b> {_markup(', '.join(items))}", self._styles["body"]))
        return out

    def _certifications(self, content: ResumeContent) -> list:
        out = self._section("Certifications")
        lines = []
        for cert in content.certifications or []:
            parts = [cert.name]
            if cert.issuer:
                parts.append(cert.issuer)
            if cert.date:
                parts.append(cert.date)
            lines.append(" - ".join(part for part in parts if part))
        out.extend(self._bullets(lines))
        return out
