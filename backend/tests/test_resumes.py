import pytest

from resume_tailor.config import settings
from resume_tailor.dependencies import get_document_store
from resume_tailor.main import app
from resume_tailor.models.generation import ResumeGeneration
from resume_tailor.models.job import Job
from resume_tailor.services.document_store import DocumentStore
from resume_tailor.services.errors import PersistenceError
from resume_tailor.services.pdf_service import generate_resume_pdf
from resume_tailor.services.resume_service import (
    extract_company_name,
    extract_job_title,
    save_resume,
)

JOB_DESCRIPTION = "Title: Frontend Engineer\nCompany: Acme Inc.\nWe need React and TypeScript."
SAMPLE_RESUME = "Jane Smith\njane@example.com\nSkills\nJavaScript"
TAILORED_RESUME = "Jane Smith\njane@example.com\n\nTECHNICAL SKILLS\nJavaScript, TypeScript"


def _save_payload(**overrides):
    payload = {
        "jobDescription": JOB_DESCRIPTION,
        "sampleResume": SAMPLE_RESUME,
        "tailoredResume": TAILORED_RESUME,
        "matchScore": 80,
        "keywords": ["React", "Typescript"],
        "improvements": ["Added TypeScript"],
    }
    payload.update(overrides)
    return payload


def _count(tmp_data, collection):
    return len(list((tmp_data / "documents" / collection).glob("*.json")))


class TestMetadataExtraction:
    def test_title_from_labelled_line(self):
        assert extract_job_title(JOB_DESCRIPTION) == "Frontend Engineer"

    def test_title_falls_back_to_first_line(self):
        assert extract_job_title("\nSenior Designer\nRemote") == "Senior Designer"
        assert extract_job_title("") == "Unknown Position"

    def test_company(self):
        assert extract_company_name(JOB_DESCRIPTION) == "Acme Inc."
        assert extract_company_name("Backend role\nGlobex Corp. is hiring") == "Globex Corp. is hiring"
        assert extract_company_name("Backend role") == "Unknown Company"


class TestSaveResume:
    def test_save_writes_both_stores(self, client, auth_headers, session, tmp_data, test_db):
        r = client.post("/api/v1/save-resume", json=_save_payload(), headers=auth_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is True

        for collection in ("job_descriptions", "sample_resumes", "tailored_resumes"):
            assert _count(tmp_data, collection) == 1

        db = test_db()
        try:
            jobs = db.query(Job).all()
            generations = db.query(ResumeGeneration).all()
            assert len(jobs) == 1
            assert len(generations) == 1
            assert jobs[0].id == data["jobId"]
            assert jobs[0].user_id == session["user_id"]
            assert jobs[0].job_title == "Frontend Engineer"
            assert jobs[0].company_name == "Acme Inc."
            assert jobs[0].document_job_description_id == data["documentIds"]["jobDescriptionId"]
            assert generations[0].job_id == jobs[0].id
            assert generations[0].document_sample_resume_id == data["documentIds"]["sampleResumeId"]
            assert generations[0].document_tailored_resume_id == data["documentIds"]["tailoredResumeId"]
            assert generations[0].match_score == 80
            assert generations[0].generation_status == "completed"
        finally:
            db.close()

    @pytest.mark.parametrize("missing", ["jobDescription", "sampleResume", "tailoredResume"])
    def test_missing_fields(self, client, auth_headers, tmp_data, missing):
        r = client.post("/api/v1/save-resume", json=_save_payload(**{missing: ""}), headers=auth_headers)
        assert r.status_code == 400
        assert r.json()["detail"] == "Missing required fields"
        assert list((tmp_data / "documents").rglob("*.json")) == []

    def test_document_store_failure(self, client, auth_headers, tmp_path):
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")
        app.dependency_overrides[get_document_store] = lambda: DocumentStore(blocked)
        r = client.post("/api/v1/save-resume", json=_save_payload(), headers=auth_headers)
        assert r.status_code == 500
        assert "job_descriptions" in r.json()["detail"]

    def test_metadata_failure_keeps_documents(self, test_db, store, tmp_data):
        db = test_db()
        try:
            with pytest.raises(PersistenceError, match="Failed to save job metadata"):
                save_resume(db, store, "no-such-user", JOB_DESCRIPTION, SAMPLE_RESUME, TAILORED_RESUME)
            assert db.query(Job).count() == 0
        finally:
            db.close()
        assert _count(tmp_data, "tailored_resumes") == 1

    def test_generation_failure_keeps_job_and_documents(self, test_db, store, tmp_data, session, monkeypatch):
        def invalid_generation(**fields):
            return ResumeGeneration(**{**fields, "generation_status": "unknown"})

        monkeypatch.setattr("resume_tailor.services.resume_service.ResumeGeneration", invalid_generation)
        db = test_db()
        try:
            with pytest.raises(PersistenceError, match="Failed to save resume metadata"):
                save_resume(db, store, session["user_id"], JOB_DESCRIPTION, SAMPLE_RESUME, TAILORED_RESUME)
            assert db.query(Job).count() == 1
            assert db.query(ResumeGeneration).count() == 0
        finally:
            db.close()
        for collection in ("job_descriptions", "sample_resumes", "tailored_resumes"):
            assert _count(tmp_data, collection) == 1


class TestDocumentStore:
    def test_default_store_writes_under_configured_documents_dir(self, client, tmp_data):
        doc_id = DocumentStore().insert("sample_resumes", {"userId": "u1", "content": SAMPLE_RESUME})
        assert (settings.documents_dir / "sample_resumes" / f"{doc_id}.json").exists()
        assert settings.documents_dir == tmp_data / "documents"


class TestSavedResumes:
    def _save(self, client, headers):
        r = client.post("/api/v1/save-resume", json=_save_payload(), headers=headers)
        return r.json()["documentIds"]["tailoredResumeId"]

    def test_list_and_get(self, client, auth_headers):
        resume_id = self._save(client, auth_headers)

        r = client.get("/api/v1/resumes", headers=auth_headers)
        assert r.status_code == 200
        items = r.json()
        assert len(items) == 1
        assert items[0]["id"] == resume_id
        assert items[0]["matchScore"] == 80

        r = client.get(f"/api/v1/resumes/{resume_id}", headers=auth_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["content"] == TAILORED_RESUME
        assert data["jobDescription"] == JOB_DESCRIPTION
        assert data["sampleResume"] == SAMPLE_RESUME
        assert data["improvements"] == ["Added TypeScript"]

    def test_newest_first(self, client, auth_headers):
        first = self._save(client, auth_headers)
        second = self._save(client, auth_headers)
        ids = [item["id"] for item in client.get("/api/v1/resumes", headers=auth_headers).json()]
        assert ids == [second, first]

    def test_other_users_cannot_read(self, client, auth_headers, sign_in):
        resume_id = self._save(client, auth_headers)
        other = sign_in("other@example.com")
        other_headers = {"Authorization": f"Bearer {other['token']}"}

        assert client.get("/api/v1/resumes", headers=other_headers).json() == []
        r = client.get(f"/api/v1/resumes/{resume_id}", headers=other_headers)
        assert r.status_code == 404

    def test_unknown_id(self, client, auth_headers):
        assert client.get("/api/v1/resumes/not-an-id", headers=auth_headers).status_code == 404


class TestExport:
    def test_export_pdf(self, client, auth_headers):
        r = client.post("/api/v1/export", json={"tailoredResume": TAILORED_RESUME, "format": "pdf"},
                        headers=auth_headers)
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/pdf"
        assert "optimized-resume-" in r.headers["content-disposition"]
        assert r.content.startswith(b"%PDF")

    def test_export_text(self, client, auth_headers):
        r = client.post("/api/v1/export", json={"tailoredResume": TAILORED_RESUME, "format": "txt"},
                        headers=auth_headers)
        assert r.status_code == 200
        assert r.text == TAILORED_RESUME
        assert r.headers["content-disposition"].endswith('.txt"')

    def test_export_rejects_bad_format(self, client, auth_headers):
        r = client.post("/api/v1/export", json={"tailoredResume": TAILORED_RESUME, "format": "docx"},
                        headers=auth_headers)
        assert r.status_code == 400

    def test_export_rejects_empty(self, client, auth_headers):
        r = client.post("/api/v1/export", json={"tailoredResume": "  "}, headers=auth_headers)
        assert r.status_code == 400

    def test_export_saved_resume(self, client, auth_headers):
        saved = client.post("/api/v1/save-resume", json=_save_payload(), headers=auth_headers).json()
        resume_id = saved["documentIds"]["tailoredResumeId"]
        r = client.get(f"/api/v1/resumes/{resume_id}/export?format=txt", headers=auth_headers)
        assert r.status_code == 200
        assert r.text == TAILORED_RESUME


class TestExtractText:
    def test_plain_text_upload(self, client, auth_headers):
        r = client.post(
            "/api/v1/resumes/extract-text",
            files={"file": ("resume.txt", SAMPLE_RESUME.encode("utf-8"), "text/plain")},
            headers=auth_headers,
        )
        assert r.status_code == 200
        assert r.json()["text"] == SAMPLE_RESUME
        assert r.json()["charCount"] == len(SAMPLE_RESUME)

    def test_pdf_upload(self, client, auth_headers):
        pdf_bytes = generate_resume_pdf("Jane Smith, frontend developer")
        r = client.post(
            "/api/v1/resumes/extract-text",
            files={"file": ("resume.pdf", pdf_bytes, "application/pdf")},
            headers=auth_headers,
        )
        assert r.status_code == 200
        assert "Optimized Resume" in r.json()["text"]

    def test_empty_upload(self, client, auth_headers):
        r = client.post(
            "/api/v1/resumes/extract-text",
            files={"file": ("resume.txt", b"", "text/plain")},
            headers=auth_headers,
        )
        assert r.status_code == 400
