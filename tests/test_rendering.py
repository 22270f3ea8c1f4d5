import unittest
from io import BytesIO

import _support  # noqa: F401

from pypdf import PdfReader

from resume_api.core.errors import RenderError
from resume_api.parsing.parse import parse_pdf_bytes
from resume_api.rendering.base import ensure_pdf_bytes
from resume_api.rendering.placeholder import placeholder_resume
from resume_api.rendering.reportlab_renderer import ReportLabRenderer
from resume_api.schemas.resume import ResumeContent


class ReportLabRendererTests(unittest.TestCase):
    def setUp(self):
        self.renderer = ReportLabRenderer()

    def test_full_resume_renders_pdf(self):
        content = ResumeContent.model_validate(
            {
                "personalInfo": {
                    "name": "Jane Smith",
                    "email": "jane@example.com",
                    "github": "https://github.com/jane",
                },
                "professionalSummary": "Backend engineer with **10 years** of R&D <experience>.",
                "education": [{"degree": "B.S.", "institution": "State University", "year": "2018", "gpa": "3.8"}],
                "experience": [
                    {
                        "title": "Engineer",
                        "company": "Acme & Sons",
                        "duration": "2019 - 2023",
                        "description": ["- Built **Python** services", "• Cut costs by 30%"],
                        "technologies": "Python, Go",
                    }
                ],
                "projects": [{"name": "Tracker", "description": "CLI tool", "achievements": ["1k users"]}],
                "skills": {"technical": ["Python"], "frameworks": ["FastAPI"]},
                "achievements": ["Hackathon winner"],
                "certifications": ["AWS Certified Developer"],
            }
        )
        pdf_bytes = self.renderer.render(content)

        self.assertTrue(pdf_bytes.startswith(b"%PDF"))
        text = parse_pdf_bytes(pdf_bytes).text
        self.assertIn("Jane Smith", text)
        self.assertIn("EXPERIENCE", text)
        self.assertIn("Acme", text)
        self.assertIn("CERTIFICATIONS", text)

    def test_absent_sections_are_not_rendered(self):
        content = ResumeContent.model_validate(
            {"personalInfo": {"name": "Jane Smith"}, "skills": {"technical": ["Go"]}}
        )
        text = parse_pdf_bytes(self.renderer.render(content)).text
        self.assertIn("SKILLS", text)
        self.assertNotIn("EDUCATION", text)
        self.assertNotIn("EXPERIENCE", text)

    def test_title_metadata(self):
        content = ResumeContent.model_validate({"personalInfo": {"name": "Jane Smith"}})
        default = PdfReader(BytesIO(self.renderer.render(content))).metadata
        self.assertEqual(default.title, "Jane Smith - Resume")
        titled = PdfReader(BytesIO(self.renderer.render(content, title="Jane Smith - Engineer at Globex"))).metadata
        self.assertEqual(titled.title, "Jane Smith - Engineer at Globex")

    def test_skills_block_is_empty_without_skills(self):
        content = ResumeContent.model_validate({"personalInfo": {"name": "Jane Smith"}})
        self.assertEqual(self.renderer._skills(content), [])

    def test_placeholder_renders(self):
        pdf_bytes = self.renderer.render(placeholder_resume())
        self.assertTrue(pdf_bytes.startswith(b"%PDF"))
        self.assertIn("John Doe", parse_pdf_bytes(pdf_bytes).text)

    def test_placeholder_is_a_fresh_copy(self):
        first = placeholder_resume()
        first.personal_info.name = "Changed"
        self.assertEqual(placeholder_resume().name, "John Doe")


class EnsurePdfBytesTests(unittest.TestCase):
    def test_empty_buffer_is_rejected(self):
        with self.assertRaises(RenderError):
            ensure_pdf_bytes(b"")

    def test_missing_magic_is_rejected(self):
        with self.assertRaises(RenderError):
            ensure_pdf_bytes(b"<html></html>")

    def test_valid_buffer_passes(self):
        self.assertEqual(ensure_pdf_bytes(bytearray(b"%PDF-1.4 ...")), b"%PDF-1.4 ...")


if __name__ == "__main__":
    unittest.main()
