from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from resumatch.core.errors import NotFoundError
from resumatch.db.session import get_db
from resumatch.routes.deps import require_admin
from resumatch.schemas.base import JobCreate, JobOut, JobUpdate
from resumatch.services.job_service import JobRepository


router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=List[JobOut], summary="List job postings")
async def list_jobs(active_only: bool = False, db: Session = Depends(get_db)):
	return JobRepository(db).list(active_only=active_only)


@router.post("", response_model=JobOut, status_code=status.HTTP_201_CREATED, summary="Create job posting",
			 dependencies=[Depends(require_admin)])
async def create_job(payload: JobCreate, db: Session = Depends(get_db)):
	return JobRepository(db).create(payload)


@router.post("/reset", response_model=List[JobOut], summary="Reset catalog to the default jobs",
			 dependencies=[Depends(require_admin)])
async def reset_jobs(db: Session = Depends(get_db)):
	return JobRepository(db).reset_to_defaults()


@router.get("/{job_id}", response_model=JobOut)
async def get_job(job_id: str, db: Session = Depends(get_db)):
	j = JobRepository(db).get(job_id)
	if not j:
		raise HTTPException(status_code=404, detail="Job not found")
	return j


@router.patch("/{job_id}", response_model=JobOut, summary="Edit job posting",
			  dependencies=[Depends(require_admin)])
async def update_job(job_id: str, payload: JobUpdate, db: Session = Depends(get_db)):
	try:
		return JobRepository(db).update(job_id, payload)
	except NotFoundError:
		raise HTTPException(status_code=404, detail="Job not found")


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete job posting",
			   dependencies=[Depends(require_admin)])
async def delete_job(job_id: str, db: Session = Depends(get_db)):
	try:
		JobRepository(db).delete(job_id)
	except NotFoundError:
		raise HTTPException(status_code=404, detail="Job not found")
	return Response(status_code=status.HTTP_204_NO_CONTENT)
