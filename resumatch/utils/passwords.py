# resumatch/utils/passwords.py
from passlib.context import CryptContext

from resumatch.core.config import settings

_pwd = CryptContext(schemes=["argon2"], default="argon2", deprecated="auto")

def hash_password(raw: str, min_length: int | None = None) -> str:
    raw = (raw or "").strip()
    min_length = settings.min_password_length if min_length is None else min_length
    if len(raw) < min_length:
        raise ValueError(f"Password must be at least {min_length} characters")
    # Cap absurdly long inputs
    if len(raw) > 4096:
        raw = raw[:4096]
    return _pwd.hash(raw)

def verify_password(raw: str, hashed: str) -> bool:
    raw = (raw or "").strip()
    if not raw or not hashed:
        return False
    return _pwd.verify(raw[:4096], hashed)
