import unittest

import _support  # noqa: F401

from resume_api.core.errors import ValidationError
from resume_api.parsing.heuristic import (
    extract_personal_info,
    extract_resume_from_text,
    match_skills,
    parse_experience_entries,
    split_sections,
)
from resume_api.parsing.parse import inspect_pdf, parse_pdf_bytes

SAMPLE_TEXT = "\n".join(_support.SAMPLE_RESUME_LINES)


class HeuristicExtractionTests(unittest.TestCase):
    def test_personal_info(self):
        info = extract_personal_info(SAMPLE_TEXT)
        self.assertEqual(info["name"], "Jane Smith")
        self.assertEqual(info["email"], "jane.smith@example.com")
        self.assertIn("123-4567", info["phone"])
        self.assertEqual(info["linkedin"], "https://linkedin.com/in/janesmith")
        self.assertNotIn("website", info)

    def test_sections_split_on_headings(self):
        sections = split_sections(SAMPLE_TEXT)
        self.assertEqual(set(sections), {"professionalSummary", "experience", "education", "skills"})
        self.assertEqual(sections["skills"], ["Python, Go, Docker, Kubernetes"])

    def test_experience_entry_from_date_line(self):
        entries = parse_experience_entries(
            [
                "Senior Engineer at Acme Corp Jan 2020 - Present",
                "- Built Python services with Django and PostgreSQL",
            ]
        )
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]["title"], "Senior Engineer")
        self.assertEqual(entries[0]["company"], "Acme Corp")
        self.assertEqual(entries[0]["duration"], "Jan 2020 - Present")
        self.assertEqual(entries[0]["description"], ["Built Python services with Django and PostgreSQL"])
        self.assertIn("Django", entries[0]["technologies"])

    def test_skill_keywords_are_categorised(self):
        skills = match_skills("Worked with React, PostgreSQL and Docker")
        self.assertEqual(skills["frameworks"], ["React"])
        self.assertEqual(skills["databases"], ["PostgreSQL"])
        self.assertIn("Docker", skills["tools"])

    def test_everyday_words_are_not_skills(self):
        skills = match_skills("Ready to go the extra mile in spring; express ideas swiftly, no rust.")
        self.assertEqual(skills, {})

    def test_capitalised_language_names_are_skills(self):
        skills = match_skills("Services in Go and Rust, frontends with Express")
        self.assertEqual(skills["technical"], ["Go", "Rust"])
        self.assertEqual(skills["frameworks"], ["Express"])

    def test_only_detected_sections_are_set(self):
        content = extract_resume_from_text(SAMPLE_TEXT)
        payload = content.to_payload()
        self.assertEqual(content.name, "Jane Smith")
        self.assertNotIn("projects", payload)
        self.assertNotIn("certifications", payload)
        self.assertIn("Kubernetes", payload["skills"]["tools"])
        self.assertEqual(payload["education"][0]["year"], "2018")

    def test_text_without_name_has_no_identity(self):
        content = extract_resume_from_text("jane@example.com\nExperience\n")
        self.assertFalse(content.has_identity())


class PdfIntakeTests(unittest.TestCase):
    def test_inspect_pdf_counts_pages(self):
        self.assertEqual(inspect_pdf(_support.make_pdf()), 1)

    def test_non_pdf_is_rejected(self):
        with self.assertRaises(ValidationError):
            inspect_pdf(b"plain text, not a pdf")

    def test_magic_header_must_be_near_the_start(self):
        with self.assertRaises(ValidationError):
            inspect_pdf(b" " * 2048 + _support.make_pdf())

    def test_text_is_extracted(self):
        parsed = parse_pdf_bytes(_support.make_pdf())
        self.assertEqual(parsed.page_count, 1)
        self.assertIn("Jane Smith", parsed.text)
        self.assertEqual(parsed.parsing_warnings, [])
        self.assertEqual(set(type(parsed).model_fields), {"page_count", "text", "parsing_warnings"})


if __name__ == "__main__":
    unittest.main()
