import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from resume_tailor.database import get_db
from resume_tailor.dependencies import get_bearer_token, require_session
from resume_tailor.models.user import User
from resume_tailor.schemas.auth import (
    MagicLinkRequest,
    MagicLinkResponse,
    MeResponse,
    SessionResponse,
    VerifyRequest,
)
from resume_tailor.services.auth_service import auth_service
from resume_tailor.services.mailer import send_magic_link

logger = logging.getLogger("app.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/magic-link", response_model=MagicLinkResponse)
async def request_magic_link(req: MagicLinkRequest, db: Session = Depends(get_db)):
    email = req.email.strip()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise HTTPException(status_code=400, detail="A valid email address is required")

    _token, link = auth_service.request_magic_link(db, email)
    try:
        send_magic_link(email.lower(), link)
    except OSError as exc:
        logger.error("Could not send magic link to %s: %s", email, exc)
        raise HTTPException(status_code=502, detail="Could not send sign-in email") from exc
    return MagicLinkResponse(message="Check your email for the sign-in link")


@router.post("/verify", response_model=SessionResponse)
async def verify_magic_link(req: VerifyRequest, db: Session = Depends(get_db)):
    result = auth_service.verify_magic_link(db, req.email, req.token)
    if result is None:
        raise HTTPException(status_code=401, detail="Invalid or expired sign-in link")
    if "error" in result:
        raise HTTPException(status_code=429, detail=result)
    return SessionResponse(**result)


@router.post("/logout")
async def logout(token: str = Depends(get_bearer_token)):
    auth_service.logout(token)
    return {"message": "Signed out"}


@router.get("/me", response_model=MeResponse)
async def me(user_id: str = Depends(require_session), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return MeResponse(user_id=user.id, email=user.email)
