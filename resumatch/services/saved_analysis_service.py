# resumatch/services/saved_analysis_service.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from resumatch.core.errors import ForbiddenError, NotFoundError, QuotaExceededError
from resumatch.core.logging import get_logger
from resumatch.db.models import SavedAnalysis, User
from resumatch.schemas.analysis import JobMatch, ResumeAnalysis
from resumatch.utils.slug import short_slug

log = get_logger(__name__)


class AnalysisRepository:
    """Saved analyses. Rows are written once and never updated."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, user_id: str, analysis: ResumeAnalysis, matches: Sequence[JobMatch]) -> SavedAnalysis:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        now = datetime.now(timezone.utc)
        row = SavedAnalysis(
            id=short_slug(),
            user_id=user_id,
            ats_score=analysis.ats_score,
            detected_role=analysis.detected_role,
            top_skills=list(analysis.top_skills),
            summary=analysis.summary,
            matches=[m.model_dump(by_alias=True) for m in matches],
            full_analysis=analysis.model_dump(by_alias=True),
            created_at=now,
        )
        # analysis row and the owner's timestamps go in together
        user.last_analysis_at = now
        user.updated_at = now
        try:
            self.db.add(row); self.db.commit(); self.db.refresh(row)
        except Exception:
            self.db.rollback()
            raise
        log.info("Saved analysis %s for user %s (%d matches)", row.id, user_id, len(matches))
        return row

    def list_for_user(self, user_id: str, limit: int = 10) -> List[SavedAnalysis]:
        q = (
            select(SavedAnalysis)
            .where(SavedAnalysis.user_id == user_id)
            .order_by(SavedAnalysis.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(q))

    def get(self, analysis_id: str) -> Optional[SavedAnalysis]:
        return self.db.get(SavedAnalysis, analysis_id)

    def get_owned(self, analysis_id: str, user_id: str) -> SavedAnalysis:
        row = self.get(analysis_id)
        if not row:
            raise NotFoundError("Analysis not found")
        if row.user_id != user_id:
            raise ForbiddenError("Unauthorized or analysis not found")
        return row

    def delete(self, analysis_id: str, user_id: str) -> None:
        row = self.get_owned(analysis_id, user_id)
        self.db.delete(row); self.db.commit()
        log.info("Deleted analysis %s", analysis_id)

    def count_since(self, user_id: str, since: datetime) -> int:
        q = select(func.count(SavedAnalysis.id)).where(
            SavedAnalysis.user_id == user_id, SavedAnalysis.created_at >= since
        )
        return self.db.scalar(q) or 0

    def check_quota(self, user_id: str, limit: int) -> None:
        """Raise QuotaExceededError once the user has ``limit`` analyses since UTC midnight."""
        today_start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        used = self.count_since(user_id, today_start)
        if used >= limit:
            raise QuotaExceededError(f"Daily limit reached ({limit} per day).")
