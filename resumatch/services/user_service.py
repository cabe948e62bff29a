# resumatch/services/user_service.py
from __future__ import annotations

from typing import Optional
from urllib.parse import quote_plus

from sqlalchemy import select
from sqlalchemy.orm import Session

from resumatch.db.models import User
from resumatch.utils.slug import short_slug


def avatar_url(name: str, role: str = "user") -> str:
    background = "4f46e5" if role == "admin" else "059669"
    return f"https://ui-avatars.com/api/?name={quote_plus(name)}&background={background}&color=fff"


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.email == email)).first()

    def create(self, *, email: str, name: str, password_hash: str, role: str = "user") -> User:
        u = User(
            id=short_slug(),
            email=email,
            name=name,
            role=role,
            avatar=avatar_url(name, role),
            password_hash=password_hash,
        )
        self.db.add(u); self.db.commit(); self.db.refresh(u)
        return u
