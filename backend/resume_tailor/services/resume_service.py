import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from resume_tailor.models.generation import ResumeGeneration
from resume_tailor.models.job import Job
from resume_tailor.services.document_store import DocumentStore
from resume_tailor.services.errors import PersistenceError

logger = logging.getLogger("app.resumes")


def _lines(text: str) -> list[str]:
    return [line for line in text.split("\n") if line.strip()]


def extract_job_title(job_description: str) -> str:
    lines = _lines(job_description)
    for line in lines:
        lower = line.lower()
        if "title:" in lower or "position:" in lower or "role:" in lower:
            value = line.split(":", 1)[1].strip()
            return value or lines[0].strip()
    return lines[0].strip() if lines else "Unknown Position"


def extract_company_name(job_description: str) -> str:
    lines = _lines(job_description)
    for line in lines:
        lower = line.lower()
        if "company:" in lower or "organization:" in lower:
            return line.split(":", 1)[1].strip() or "Unknown Company"
    for line in lines:
        lower = line.lower()
        if any(marker in lower for marker in ("inc.", "corp.", "ltd.", "llc")):
            return line.strip()
    return "Unknown Company"


def save_resume_documents(
    store: DocumentStore,
    user_id: str,
    job_description: str,
    sample_resume: str,
    tailored_resume: str,
    match_score: int | None = None,
    keywords: list[str] | None = None,
    improvements: list[str] | None = None,
) -> dict[str, str]:
    """Write the three documents for one saved result. Returns their ids."""
    job_description_id = store.insert("job_descriptions", {
        "userId": user_id,
        "content": job_description,
    })
    sample_resume_id = store.insert("sample_resumes", {
        "userId": user_id,
        "content": sample_resume,
    })
    tailored_resume_id = store.insert("tailored_resumes", {
        "userId": user_id,
        "jobDescriptionId": job_description_id,
        "sampleResumeId": sample_resume_id,
        "content": tailored_resume,
        "matchScore": match_score or 0,
        "keywords": keywords or [],
        "improvements": improvements or [],
    })
    return {
        "jobDescriptionId": job_description_id,
        "sampleResumeId": sample_resume_id,
        "tailoredResumeId": tailored_resume_id,
    }


def save_resume(
    db: Session,
    store: DocumentStore,
    user_id: str,
    job_description: str,
    sample_resume: str,
    tailored_resume: str,
    match_score: int | None = None,
    keywords: list[str] | None = None,
    improvements: list[str] | None = None,
) -> dict:
    """Persist documents first, then metadata rows referencing them.

    A metadata failure leaves the documents in place; there is no
    compensating delete across the two stores.
    """
    document_ids = save_resume_documents(
        store, user_id, job_description, sample_resume, tailored_resume,
        match_score, keywords, improvements,
    )

    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    job = Job(
        id=str(uuid.uuid4()),
        user_id=user_id,
        document_job_description_id=document_ids["jobDescriptionId"],
        job_title=extract_job_title(job_description),
        company_name=extract_company_name(job_description),
        created_at=now,
    )
    try:
        db.add(job)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Job metadata insert failed for user %s: %s", user_id, exc)
        raise PersistenceError(f"Failed to save job metadata: {exc}") from exc

    generation = ResumeGeneration(
        id=str(uuid.uuid4()),
        user_id=user_id,
        job_id=job.id,
        document_sample_resume_id=document_ids["sampleResumeId"],
        document_tailored_resume_id=document_ids["tailoredResumeId"],
        match_score=match_score or 0,
        generation_status="completed",
        created_at=now,
    )
    try:
        db.add(generation)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Resume metadata insert failed for job %s: %s", job.id, exc)
        raise PersistenceError(f"Failed to save resume metadata: {exc}") from exc

    return {"document_ids": document_ids, "job_id": job.id, "generation_id": generation.id}


def get_user_resumes(store: DocumentStore, user_id: str) -> list[dict]:
    return store.find_by_user("tailored_resumes", user_id)


def get_resume_by_id(store: DocumentStore, resume_id: str) -> dict | None:
    resume = store.get("tailored_resumes", resume_id)
    if resume is None:
        return None
    job_description = store.get("job_descriptions", resume["jobDescriptionId"]) or {}
    sample_resume = store.get("sample_resumes", resume["sampleResumeId"]) or {}
    return {
        **resume,
        "jobDescription": job_description.get("content", ""),
        "sampleResume": sample_resume.get("content", ""),
    }
