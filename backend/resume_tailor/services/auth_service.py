import time
import uuid
from datetime import datetime, timezone
from urllib.parse import urlencode

from sqlalchemy import text
from sqlalchemy.orm import Session

from resume_tailor.config import settings
from resume_tailor.models.user import LoginLink, User
from resume_tailor.utils.security import (
    generate_login_token,
    generate_token,
    hash_login_token,
    verify_login_token,
)


class AuthService:
    """Passwordless sign-in: one-time emailed links exchanged for bearer sessions."""

    def __init__(self):
        self._sessions: dict[str, tuple[str, float]] = {}  # token -> (user_id, expires_at)

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {
            t: (uid, exp) for t, (uid, exp) in self._sessions.items() if exp > now
        }

    def get_or_create_user(self, db: Session, email: str) -> User:
        email = email.strip().lower()
        user = db.query(User).filter_by(email=email).first()
        if user:
            return user
        now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        user = User(id=str(uuid.uuid4()), email=email, created_at=now)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def request_magic_link(self, db: Session, email: str) -> tuple[str, str]:
        """Issue a one-time login token for ``email``. Returns (token, link).

        Requesting a new link replaces any outstanding one for the same email.
        """
        user = self.get_or_create_user(db, email)
        token = generate_login_token()
        db.merge(LoginLink(
            email=user.email,
            token_hash=hash_login_token(token),
            expires_at=time.time() + settings.magic_link_ttl_seconds,
        ))
        db.commit()
        link = f"{settings.magic_link_base_url}?{urlencode({'email': user.email, 'token': token})}"
        return token, link

    def verify_magic_link(self, db: Session, email: str, token: str) -> dict | None:
        email = email.strip().lower()
        throttle_key = f"verify:{email}"
        delay = self._get_throttle_delay(db, throttle_key)
        if delay > 0:
            return {"error": "too_many_attempts", "retry_after_seconds": delay}

        link = db.query(LoginLink).filter_by(email=email).first()
        if not link or link.expires_at < time.time() or not verify_login_token(link.token_hash, token):
            self._record_failed_attempt(db, throttle_key)
            return None

        db.delete(link)
        db.commit()
        self._reset_failed_attempts(db, throttle_key)

        user = db.query(User).filter_by(email=email).first()
        session_token = generate_token()
        self._sessions[session_token] = (user.id, time.time() + settings.session_ttl_seconds)
        return {
            "token": session_token,
            "user_id": user.id,
            "email": user.email,
            "expires_in_seconds": settings.session_ttl_seconds,
        }

    def user_for_token(self, token: str) -> str | None:
        self._cleanup_expired()
        entry = self._sessions.get(token)
        return entry[0] if entry else None

    def logout(self, token: str):
        self._sessions.pop(token, None)

    def _get_throttle_delay(self, db: Session, key: str) -> float:
        row = db.execute(
            text("SELECT failed_attempts, last_failed_at FROM auth_throttle WHERE key = :key"),
            {"key": key},
        ).fetchone()
        if not row:
            return 0
        failed_attempts = int(row[0])
        last_failed_at = float(row[1])

        if failed_attempts < 3:
            return 0
        if failed_attempts < 5:
            delay = 5.0
        elif failed_attempts < 10:
            delay = 30.0
        else:
            delay = 300.0
        remaining = delay - (time.time() - last_failed_at)
        return max(0, remaining)

    def _record_failed_attempt(self, db: Session, key: str):
        now = time.time()
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 1, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = failed_attempts + 1,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": now},
        )
        db.commit()

    def _reset_failed_attempts(self, db: Session, key: str):
        db.execute(text("DELETE FROM auth_throttle WHERE key = :key"), {"key": key})
        db.commit()


auth_service = AuthService()
