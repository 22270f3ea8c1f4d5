import unittest

import _support  # noqa: F401

from resume_api.ai.types import DocumentPart
from resume_api.core.errors import StructureExtractionError
from resume_api.services.structure import STRUCTURE_PROMPT, discover_sections, parse_structure_response


class StructureResponseParsingTests(unittest.TestCase):
    def test_fenced_json_is_parsed(self):
        raw = '```json\n{"sections": ["personalInfo", "experience", "skills"]}\n```'
        self.assertEqual(parse_structure_response(raw).to_list(), ["personalInfo", "experience", "skills"])

    def test_json_surrounded_by_prose(self):
        raw = 'Here you go: {"sections": ["personalInfo", "education"]} Hope this helps.'
        self.assertEqual(parse_structure_response(raw).to_list(), ["personalInfo", "education"])

    def test_trailing_prose_with_braces(self):
        raw = 'Here you go: {"sections": ["personalInfo", "skills"]}\nNote: names use {camelCase}.'
        self.assertEqual(parse_structure_response(raw).to_list(), ["personalInfo", "skills"])

    def test_unknown_tokens_and_duplicates_are_discarded(self):
        raw = '{"sections": ["personalInfo", "hobbies", "skills", "personalInfo", 7, "skills"]}'
        section_set = parse_structure_response(raw)
        self.assertEqual(section_set.to_list(), ["personalInfo", "skills"])
        self.assertNotIn("hobbies", section_set)

    def test_no_json_raises(self):
        with self.assertRaises(StructureExtractionError):
            parse_structure_response("I could not read the document.")

    def test_missing_sections_list_raises(self):
        with self.assertRaises(StructureExtractionError):
            parse_structure_response('{"sectionNames": ["personalInfo"]}')

    def test_sections_must_be_a_list(self):
        with self.assertRaises(StructureExtractionError):
            parse_structure_response('{"sections": "personalInfo"}')


class DiscoverSectionsTests(unittest.IsolatedAsyncioTestCase):
    async def test_sends_pdf_with_structure_prompt(self):
        pdf_bytes = _support.make_pdf()
        client = _support.FakeAIClient(['{"sections": ["personalInfo", "experience"]}'])

        section_set = await discover_sections(pdf_bytes, client)

        self.assertEqual(section_set.to_list(), ["personalInfo", "experience"])
        prompt, document = client.calls[0]
        self.assertEqual(prompt, STRUCTURE_PROMPT)
        self.assertIsInstance(document, DocumentPart)
        self.assertEqual(document.data, pdf_bytes)
        self.assertEqual(document.mime_type, "application/pdf")

    async def test_same_bytes_yield_same_section_set(self):
        pdf_bytes = _support.make_pdf()
        response = '{"sections": ["personalInfo", "skills", "projects"]}'
        client = _support.FakeAIClient([response, response])

        first = await discover_sections(pdf_bytes, client)
        second = await discover_sections(pdf_bytes, client)

        self.assertEqual(first, second)

    async def test_unparseable_response_has_no_partial_result(self):
        client = _support.FakeAIClient(['{"sections": ["personalInfo",'])
        with self.assertRaises(StructureExtractionError):
            await discover_sections(b"%PDF-1.4", client)


if __name__ == "__main__":
    unittest.main()
