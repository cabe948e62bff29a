# resumatch/services/auth_service.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resumatch.core.config import settings
from resumatch.core.errors import AuthError, EmailAlreadyRegisteredError, InvalidCredentialsError
from resumatch.core.logging import get_logger
from resumatch.schemas.base import UserOut
from resumatch.services.user_service import UserRepository
from resumatch.utils.passwords import hash_password, verify_password

log = get_logger(__name__)

AuthListener = Callable[[Optional[UserOut]], None]


@dataclass(frozen=True)
class SessionContext:
    """The signed-in user for one request, passed explicitly to whatever needs it."""
    user: Optional[UserOut] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"


def _clean_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService:
    def __init__(self, *, admin_emails: Optional[Iterable[str]] = None, min_password_length: Optional[int] = None):
        emails = settings.admin_emails if admin_emails is None else admin_emails
        self.admin_emails = {_clean_email(e) for e in emails}
        self.min_password_length = min_password_length or settings.min_password_length
        self._listeners: List[AuthListener] = []

    # ---------- subscriptions ----------
    def subscribe(self, callback: AuthListener) -> Callable[[], None]:
        """Call ``callback(user_or_none)`` after every login, signup and logout."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, user: Optional[UserOut]) -> None:
        for cb in list(self._listeners):
            try:
                cb(user)
            except Exception:
                log.exception("Auth listener %r failed", cb)

    # ---------- flows ----------
    def login(self, db: Session, email: str, password: str) -> UserOut:
        email = _clean_email(email)
        user = UserRepository(db).get_by_email(email)
        if not user or not user.password_hash or not verify_password(password, user.password_hash):
            log.info("Failed login for %s", email or "<blank>")
            raise InvalidCredentialsError()
        record = UserOut.model_validate(user)
        log.info("User %s logged in", record.id)
        self._notify(record)
        return record

    def signup(self, db: Session, email: str, password: str, name: str = "") -> UserOut:
        record = self._create(db, email, password, name)
        self._notify(record)
        return record

    def logout(self, ctx: SessionContext) -> None:
        if ctx.user:
            log.info("User %s logged out", ctx.user.id)
        self._notify(None)

    def ensure_admin(self, db: Session, email: str, password: str, name: str = "Admin") -> UserOut:
        """Create the bootstrap admin if it does not exist yet."""
        existing = UserRepository(db).get_by_email(_clean_email(email))
        if existing:
            return UserOut.model_validate(existing)
        return self._create(db, email, password, name, role="admin")

    def _create(self, db: Session, email: str, password: str, name: str, role: Optional[str] = None) -> UserOut:
        email = _clean_email(email)
        if not email or "@" not in email:
            raise AuthError("Please enter a valid email.")
        users = UserRepository(db)
        if users.get_by_email(email):
            raise EmailAlreadyRegisteredError()
        try:
            pw_hash = hash_password(password, self.min_password_length)
        except ValueError as ve:
            raise AuthError(str(ve)) from ve

        role = role or ("admin" if email in self.admin_emails else "user")
        try:
            user = users.create(
                email=email,
                name=(name or "").strip() or email.split("@")[0],
                password_hash=pw_hash,
                role=role,
            )
        except IntegrityError as exc:
            db.rollback()
            raise EmailAlreadyRegisteredError() from exc
        log.info("Provisioned %s account %s", role, user.id)
        return UserOut.model_validate(user)
