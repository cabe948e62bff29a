# resumatch/services/job_service.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from resumatch.core.errors import NotFoundError
from resumatch.core.logging import get_logger
from resumatch.db.models import Job
from resumatch.db.seed import DEFAULT_JOBS
from resumatch.schemas.base import JobCreate, JobUpdate
from resumatch.utils.slug import short_slug

log = get_logger(__name__)

# columns a partial update may clear
_NULLABLE = {"salary_range", "is_active"}


def _seed_rows() -> List[Job]:
    return [Job(position=i, **data) for i, data in enumerate(DEFAULT_JOBS)]


class JobRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self, active_only: bool = False) -> List[Job]:
        q = select(Job).order_by(Job.position.asc(), Job.created_at.desc())
        if active_only:
            q = q.where(or_(Job.is_active.is_(None), Job.is_active.is_(True)))
        return list(self.db.scalars(q))

    def get(self, job_id: str) -> Optional[Job]:
        return self.db.get(Job, job_id)

    def create(self, data: JobCreate) -> Job:
        first = self.db.scalar(select(func.min(Job.position)))
        job = Job(id=short_slug(), position=(first if first is not None else 0) - 1, **data.model_dump())
        self.db.add(job); self.db.commit(); self.db.refresh(job)
        log.info("Created job %s (%s @ %s)", job.id, job.title, job.company)
        return job

    def update(self, job_id: str, data: JobUpdate) -> Job:
        job = self.get(job_id)
        if not job:
            raise NotFoundError(f"Job {job_id} not found")
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in _NULLABLE:
                continue
            setattr(job, field, value)
        self.db.commit(); self.db.refresh(job)
        return job

    def delete(self, job_id: str) -> None:
        job = self.get(job_id)
        if not job:
            raise NotFoundError(f"Job {job_id} not found")
        self.db.delete(job); self.db.commit()
        log.info("Deleted job %s", job_id)

    def ensure_seeded(self) -> bool:
        if self.db.scalar(select(func.count(Job.id))):
            return False
        self.db.add_all(_seed_rows()); self.db.commit()
        log.info("Seeded %d default jobs", len(DEFAULT_JOBS))
        return True

    def reset_to_defaults(self) -> List[Job]:
        """Replace the whole catalog with the default seed in a single transaction."""
        try:
            for job in self.db.scalars(select(Job)).all():
                self.db.delete(job)
            # deletes must hit the DB before re-inserting the same ids
            self.db.flush()
            self.db.add_all(_seed_rows())
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        log.info("Job catalog reset to %d defaults", len(DEFAULT_JOBS))
        return self.list()
