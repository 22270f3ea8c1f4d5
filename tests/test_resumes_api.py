import json
import unittest
from dataclasses import replace
from unittest import mock

import _support

from fastapi.testclient import TestClient

from resume_api.core.config import settings
from resume_api.core.deps import get_ai_client_factory
from resume_api.main import app


class ResumesApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.pdf_bytes = _support.make_pdf()

    def setUp(self):
        self.ai = _support.FakeAIClient()
        app.dependency_overrides[get_ai_client_factory] = lambda: (lambda: self.ai)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _upload(self, user_id="api-user", content=None, content_type="application/pdf"):
        return self.client.post(
            "/v1/resumes/upload",
            files={"resume": ("My CV.pdf", content if content is not None else self.pdf_bytes, content_type)},
            data={"userId": user_id} if user_id else {},
        )

    def _uploaded_id(self, user_id):
        response = self._upload(user_id)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]["resumeId"]

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_upload_contract(self):
        response = self._upload("upload-user")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Resume uploaded successfully")
        self.assertTrue(body["data"]["resumeId"].startswith("upload-user_"))
        self.assertEqual(body["data"]["fileName"], "My CV.pdf")

        record = self.client.get(f"/v1/resumes/{body['data']['resumeId']}").json()["data"]
        self.assertEqual(record["userId"], "upload-user")
        self.assertFalse(record["isParsed"])
        self.assertTrue(record["fileName"].startswith("My_CV_upload-user_"))
        stored = self.client.get(record["pdfUrl"])
        self.assertEqual(stored.status_code, 200)
        self.assertEqual(stored.content, self.pdf_bytes)
        self.assertEqual(stored.headers["content-type"], "application/pdf")

    def test_upload_without_user_id_generates_one(self):
        response = self._upload(user_id=None)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["data"]["resumeId"].startswith("user_"))

    def test_upload_rejects_non_pdf_mime(self):
        response = self._upload(content=b"hello", content_type="text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "Only PDF files are allowed", "code": "invalid_input"})

    def test_upload_rejects_unreadable_pdf(self):
        response = self._upload(content=b"not really a pdf")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "invalid_input")

    def test_upload_rejects_oversized_file(self):
        small = replace(settings, max_upload_bytes=100)
        with mock.patch("resume_api.api.v1.resumes.settings", small):
            response = self._upload()
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.json()["code"], "payload_too_large")

    def test_parse_requires_resume_id(self):
        response = self.client.post("/v1/resumes/parse", json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Resume ID is required")

    def test_parse_unknown_resume(self):
        response = self.client.post("/v1/resumes/parse", json={"resumeId": "nobody_1"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "not_found")

    def test_parse_checks_ownership(self):
        resume_id = self._uploaded_id("owner-user")
        response = self.client.post("/v1/resumes/parse", json={"resumeId": resume_id, "userId": "someone-else"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "forbidden")

    def test_parse_without_job_description_uses_text_extraction(self):
        resume_id = self._uploaded_id("heuristic-user")
        response = self.client.post("/v1/resumes/parse", json={"resumeId": resume_id, "userId": "heuristic-user"})
        self.assertEqual(response.status_code, 200, response.text)
        data = response.json()["data"]
        self.assertFalse(data["tailored"])
        self.assertEqual(data["content"]["personalInfo"]["name"], "Jane Smith")
        self.assertEqual(self.ai.calls, [])

        record = self.client.get(f"/v1/resumes/{resume_id}").json()["data"]
        self.assertTrue(record["isParsed"])
        self.assertEqual(record["content"]["personalInfo"]["email"], "jane.smith@example.com")

    def test_parse_without_name_is_rejected_and_not_persisted(self):
        resume_id = self._uploaded_id("nameless-user")
        nameless = _support.make_pdf(["jane@example.com", "(555) 123-4567", "Experience", "Skills"])
        with mock.patch("resume_api.storage.blobs.LocalBlobStore.get", return_value=(nameless, "application/pdf")):
            response = self.client.post("/v1/resumes/parse", json={"resumeId": resume_id})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "invalid_resume_structure")
        self.assertFalse(self.client.get(f"/v1/resumes/{resume_id}").json()["data"]["isParsed"])

    def test_parse_and_tailor_flow(self):
        resume_id = self._uploaded_id("tailor-user")
        self.client.post("/v1/resumes/parse", json={"resumeId": resume_id})

        self.ai.responses = [
            '{"sections": ["personalInfo", "experience", "skills", "unknownThing"]}',
            json.dumps(_support.tailored_candidate(education=[{"degree": "PhD", "institution": "Nowhere"}])),
        ]
        response = self.client.post(
            "/v1/resumes/parse",
            json={
                "resumeId": resume_id,
                "userId": "tailor-user",
                "jobDescription": "Python engineer with FastAPI experience",
                "jobTitle": "Backend Engineer",
                "company": "Globex",
            },
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["message"], "Resume parsed and tailored successfully")
        data = body["data"]
        self.assertTrue(data["tailored"])
        self.assertEqual(list(data["content"]), ["personalInfo", "experience", "skills"])
        self.assertEqual(data["validation"]["dropped"], ["education"])
        self.assertEqual(data["validation"]["missing"], [])
        self.assertTrue(data["tailoredResumeId"].endswith("_tailored"))
        self.assertTrue(data["changes"])
        self.assertTrue(all(change["type"] in {"modified", "reordered", "added"} for change in data["changes"]))

        master = self.client.get(f"/v1/resumes/{resume_id}").json()["data"]
        self.assertEqual(master["sectionSet"], ["personalInfo", "experience", "skills"])

        # second tailoring reuses the cached section set
        self.ai.responses = [json.dumps(_support.tailored_candidate())]
        second = self.client.post(
            "/v1/resumes/parse",
            json={"resumeId": resume_id, "jobDescription": "Go engineer"},
        )
        self.assertEqual(second.status_code, 200, second.text)
        self.assertEqual(len(self.ai.calls), 3)

        listed = self.client.get(f"/v1/resumes/{resume_id}/tailored").json()["data"]
        self.assertEqual([item["id"] for item in listed], [second.json()["data"]["tailoredResumeId"], data["tailoredResumeId"]])
        self.assertEqual(listed[1]["jobTitle"], "Backend Engineer")
        self.assertEqual(listed[1]["status"], "draft")

        patched = self.client.patch(f"/v1/tailored-resumes/{data['tailoredResumeId']}/status", json={"status": "applied"})
        self.assertEqual(patched.status_code, 200)
        self.assertEqual(patched.json()["data"]["status"], "applied")

        invalid = self.client.patch(f"/v1/tailored-resumes/{data['tailoredResumeId']}/status", json={"status": "ghosted"})
        self.assertEqual(invalid.status_code, 422)

    def test_invalid_tailored_structure_persists_nothing(self):
        resume_id = self._uploaded_id("invalid-structure-user")
        self.ai.responses = [
            '{"sections": ["experience", "skills"]}',
            json.dumps(_support.tailored_candidate()),
        ]
        response = self.client.post("/v1/resumes/parse", json={"resumeId": resume_id, "jobDescription": "Any role"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "invalid_resume_structure")
        self.assertEqual(self.client.get(f"/v1/resumes/{resume_id}/tailored").json()["data"], [])
        self.assertNotIn("sectionSet", self.client.get(f"/v1/resumes/{resume_id}").json()["data"])

    def test_unparseable_model_output_is_upstream_error(self):
        resume_id = self._uploaded_id("upstream-user")
        self.ai.responses = ["no json here"]
        response = self.client.post("/v1/resumes/parse", json={"resumeId": resume_id, "jobDescription": "Any role"})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["code"], "structure_extraction_failed")

    def test_unconfigured_ai_provider_is_upstream_error(self):
        resume_id = self._uploaded_id("no-key-user")

        def missing_key():
            raise RuntimeError("OPENAI_API_KEY is missing")

        app.dependency_overrides[get_ai_client_factory] = lambda: missing_key
        response = self.client.post("/v1/resumes/parse", json={"resumeId": resume_id, "jobDescription": "Any role"})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["code"], "ai_provider_error")

    def test_unknown_tailored_resume(self):
        response = self.client.get("/v1/tailored-resumes/missing_tailored")
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
