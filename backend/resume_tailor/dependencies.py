from fastapi import Header, HTTPException, Request

from resume_tailor.services.auth_service import auth_service
from resume_tailor.services.document_store import DocumentStore, document_store
from resume_tailor.services.summarizer_service import SummarizerContext


async def require_session(authorization: str = Header(...)) -> str:
    """Resolve the bearer token to a user id."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    user_id = auth_service.user_for_token(authorization[7:])
    if not user_id:
        raise HTTPException(status_code=401, detail="Session expired or invalid token")
    return user_id


async def get_bearer_token(authorization: str = Header(...)) -> str:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return authorization[7:]


def get_summarizer_context(request: Request) -> SummarizerContext:
    return request.app.state.summarizer


def get_document_store() -> DocumentStore:
    return document_store
