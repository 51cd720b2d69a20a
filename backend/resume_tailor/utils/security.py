import hashlib
import secrets
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError

ph = PasswordHasher(time_cost=2, memory_cost=19456, parallelism=1)


def hash_login_token(token: str) -> str:
    return ph.hash(token)


def verify_login_token(stored_hash: str, token: str) -> bool:
    try:
        return ph.verify(stored_hash, token)
    except VerificationError:
        return False


def generate_token() -> str:
    return secrets.token_hex(32)


def generate_login_token() -> str:
    return secrets.token_urlsafe(32)


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
