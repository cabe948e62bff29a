# resumatch/routes/deps.py
from __future__ import annotations
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from resumatch.ai.client import ModelClient, OpenAIModelClient
from resumatch.core.config import settings
from resumatch.db.session import get_db
from resumatch.schemas.base import UserOut
from resumatch.services.analyze_service import ResumeAnalyzer
from resumatch.services.auth_service import AuthService, SessionContext
from resumatch.services.match_service import JobMatcher
from resumatch.services.skill_gap_service import SkillGapAdvisor
from resumatch.services.user_service import UserRepository


@lru_cache(maxsize=1)
def get_model_client() -> ModelClient:
    return OpenAIModelClient(
        settings.gemini_api_key,
        model=settings.model_name,
        base_url=settings.model_base_url,
        timeout=settings.model_timeout_seconds,
    )


def get_analyzer(client: ModelClient = Depends(get_model_client)) -> ResumeAnalyzer:
    return ResumeAnalyzer(client)


def get_matcher(client: ModelClient = Depends(get_model_client)) -> JobMatcher:
    return JobMatcher(client)


def get_skill_gap_advisor(client: ModelClient = Depends(get_model_client)) -> SkillGapAdvisor:
    return SkillGapAdvisor(client)


def get_auth(request: Request) -> AuthService:
    return request.app.state.auth


def get_session_context(request: Request, db: Session = Depends(get_db)) -> SessionContext:
    session = request.session if "session" in request.scope else {}
    uid = session.get("user_id")
    if not uid:
        return SessionContext()
    user = UserRepository(db).get(uid)
    if not user:
        # stale cookie for a deleted account
        session.clear()
        return SessionContext()
    return SessionContext(user=UserOut.model_validate(user))


def require_user(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    if not ctx.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return ctx


def require_admin(ctx: SessionContext = Depends(require_user)) -> SessionContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return ctx
