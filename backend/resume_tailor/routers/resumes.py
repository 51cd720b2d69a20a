import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from resume_tailor.config import settings
from resume_tailor.database import get_db
from resume_tailor.dependencies import get_document_store, get_summarizer_context, require_session
from resume_tailor.schemas.resume import (
    DocumentIds,
    ExportRequest,
    ExtractTextResponse,
    GenerateResumeRequest,
    GenerateResumeResponse,
    SaveResumeRequest,
    SaveResumeResponse,
    TailoredResumeDetail,
    TailoredResumeSummary,
)
from resume_tailor.services.document_store import DocumentStore
from resume_tailor.services.errors import PersistenceError
from resume_tailor.services.pdf_service import export_filename, generate_resume_pdf
from resume_tailor.services.resume_service import get_resume_by_id, get_user_resumes, save_resume
from resume_tailor.services.summarizer_service import SummarizerContext, tailor_resume
from resume_tailor.services.text_extraction import extract_resume_text

logger = logging.getLogger("app.resumes")

router = APIRouter(tags=["resumes"])

EXPORT_FORMATS = {"pdf", "txt"}


def _export_response(content: str, fmt: str) -> Response:
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"Invalid format. Must be one of: {sorted(EXPORT_FORMATS)}")
    filename = export_filename(fmt)
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if fmt == "pdf":
        return Response(content=generate_resume_pdf(content), media_type="application/pdf", headers=headers)
    return Response(content=content, media_type="text/plain; charset=utf-8", headers=headers)


def _owned_resume(store: DocumentStore, resume_id: str, user_id: str) -> dict:
    resume = get_resume_by_id(store, resume_id)
    if not resume or resume.get("userId") != user_id:
        raise HTTPException(status_code=404, detail="Resume not found")
    return resume


@router.post("/generate-resume", response_model=GenerateResumeResponse)
def generate_resume(
    req: GenerateResumeRequest,
    user_id: str = Depends(require_session),
    context: SummarizerContext = Depends(get_summarizer_context),
):
    job_description = req.job_description.strip()
    resume_text = req.resume_text.strip()
    if not job_description or not resume_text:
        raise HTTPException(status_code=400, detail="Job description and resume text are required")
    if len(job_description) > settings.max_text_chars or len(resume_text) > settings.max_text_chars:
        raise HTTPException(status_code=413, detail=f"Input too large (max {settings.max_text_chars} characters)")

    try:
        result = tailor_resume(job_description, resume_text, context, use_alternative=req.use_alternative)
    except Exception as exc:
        logger.exception("Resume generation failed for user %s", user_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    logger.info("Generated resume for user %s via %s (score %d)", user_id, result.service_label, result.match_score)
    return GenerateResumeResponse(
        tailored_resume=result.tailored_text,
        keywords=list(result.keywords),
        improvements=list(result.improvements),
        match_score=result.match_score,
        timestamp=result.timestamp,
        service=result.service_label,
    )


@router.post("/save-resume", response_model=SaveResumeResponse)
def save_resume_result(
    req: SaveResumeRequest,
    user_id: str = Depends(require_session),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    if not req.job_description.strip() or not req.sample_resume.strip() or not req.tailored_resume.strip():
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        saved = save_resume(
            db,
            store,
            user_id=user_id,
            job_description=req.job_description.strip(),
            sample_resume=req.sample_resume.strip(),
            tailored_resume=req.tailored_resume,
            match_score=req.match_score,
            keywords=req.keywords,
            improvements=req.improvements,
        )
    except PersistenceError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return SaveResumeResponse(
        success=True,
        document_ids=DocumentIds(
            job_description_id=saved["document_ids"]["jobDescriptionId"],
            sample_resume_id=saved["document_ids"]["sampleResumeId"],
            tailored_resume_id=saved["document_ids"]["tailoredResumeId"],
        ),
        job_id=saved["job_id"],
        message="Resume data saved successfully",
    )


@router.get("/resumes", response_model=list[TailoredResumeSummary])
async def list_resumes(
    user_id: str = Depends(require_session),
    store: DocumentStore = Depends(get_document_store),
):
    return [
        TailoredResumeSummary(
            id=doc["_id"],
            created_at=doc["createdAt"],
            match_score=doc.get("matchScore", 0),
            keywords=doc.get("keywords", []),
            preview=doc["content"][:200],
        )
        for doc in get_user_resumes(store, user_id)
    ]


@router.get("/resumes/{resume_id}", response_model=TailoredResumeDetail)
async def get_resume(
    resume_id: str,
    user_id: str = Depends(require_session),
    store: DocumentStore = Depends(get_document_store),
):
    resume = _owned_resume(store, resume_id, user_id)
    return TailoredResumeDetail(
        id=resume["_id"],
        created_at=resume["createdAt"],
        content=resume["content"],
        match_score=resume.get("matchScore", 0),
        keywords=resume.get("keywords", []),
        improvements=resume.get("improvements", []),
        job_description=resume["jobDescription"],
        sample_resume=resume["sampleResume"],
    )


@router.get("/resumes/{resume_id}/export")
async def export_saved_resume(
    resume_id: str,
    format: str = Query("pdf"),
    user_id: str = Depends(require_session),
    store: DocumentStore = Depends(get_document_store),
):
    resume = _owned_resume(store, resume_id, user_id)
    return _export_response(resume["content"], format)


@router.post("/export")
async def export_resume(req: ExportRequest, _user_id: str = Depends(require_session)):
    if not req.tailored_resume.strip():
        raise HTTPException(status_code=400, detail="Nothing to export")
    return _export_response(req.tailored_resume, req.format)


@router.post("/resumes/extract-text", response_model=ExtractTextResponse)
async def extract_text(
    file: UploadFile = File(...),
    _user_id: str = Depends(require_session),
):
    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    content = b"".join(chunks)
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")

    text = extract_resume_text(content, file.filename, file.content_type)
    if not text:
        raise HTTPException(status_code=422, detail="No readable text found in file")
    return ExtractTextResponse(filename=file.filename, text=text, char_count=len(text))
