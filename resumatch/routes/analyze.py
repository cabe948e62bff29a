# resumatch/routes/analyze.py
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from resumatch.core.config import settings as cfg
from resumatch.core.errors import (
    AnalysisError,
    ForbiddenError,
    NotFoundError,
    QuotaExceededError,
    UnsupportedDocumentError,
)
from resumatch.core.logging import get_logger
from resumatch.db.session import get_db
from resumatch.routes.deps import get_analyzer, get_matcher, get_skill_gap_advisor, require_user
from resumatch.schemas.analysis import (
    AnalyzeResponse,
    ResumeAnalysis,
    SkillGapRequest,
    SkillGapResponse,
)
from resumatch.schemas.base import JobOut
from resumatch.services.analyze_service import ResumeAnalyzer
from resumatch.services.auth_service import SessionContext
from resumatch.services.job_service import JobRepository
from resumatch.services.match_service import JobMatcher
from resumatch.services.saved_analysis_service import AnalysisRepository
from resumatch.services.skill_gap_service import SkillGapAdvisor
from resumatch.utils.documents import UPLOAD_TYPES, normalize_mime
from resumatch.utils.timing import timer
from resumatch.utils.tracking import track

log = get_logger(__name__)

router = APIRouter(tags=["analyze"])


def _check_quota(analyses: AnalysisRepository, user_id: str) -> None:
    if cfg.unlimited_analyses:
        return
    try:
        analyses.check_quota(user_id, cfg.daily_analysis_limit)
    except QuotaExceededError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc))


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: Request,
    file: UploadFile = File(...),
    ctx: SessionContext = Depends(require_user),
    db: Session = Depends(get_db),
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
    matcher: JobMatcher = Depends(get_matcher),
):
    track(request, "analyze_clicked")
    analyses = AnalysisRepository(db)
    _check_quota(analyses, ctx.user.id)

    mime = normalize_mime(file.content_type)
    if mime not in UPLOAD_TYPES:
        track(request, "analyze_fail", {"reason": "bad_type"})
        raise HTTPException(status_code=415, detail="Please upload a PDF or DOCX file.")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="The uploaded file is empty.")
    if len(data) > cfg.max_upload_mb * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File is larger than {cfg.max_upload_mb} MB.")

    with timer() as elapsed:
        # 1. analyze resume (fail-closed)
        try:
            analysis = await analyzer.analyze(data, mime)
        except UnsupportedDocumentError as exc:
            raise HTTPException(status_code=415, detail=str(exc))
        except AnalysisError as exc:
            track(request, "analyze_fail", {"reason": "model"})
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

        # 2. match against the current catalog (fail-open)
        jobs = [JobOut.model_validate(j) for j in JobRepository(db).list(active_only=True)]
        matches = await matcher.match_jobs(analysis, jobs)
        runtime = elapsed()

    # 3. persist; a failed save must not hide the result
    saved_id = None
    try:
        saved_id = analyses.save(ctx.user.id, analysis, matches).id
    except (SQLAlchemyError, NotFoundError) as exc:
        log.error("Error saving analysis (non-blocking): %s", exc)

    track(request, "analyze_success", {"ats_score": analysis.ats_score, "matches": len(matches)})
    return AnalyzeResponse(analysis=analysis, matches=matches, saved_id=saved_id, runtime_ms=runtime)


@router.post("/skill-gaps", response_model=SkillGapResponse)
async def skill_gaps(
    payload: SkillGapRequest,
    ctx: SessionContext = Depends(require_user),
    db: Session = Depends(get_db),
    advisor: SkillGapAdvisor = Depends(get_skill_gap_advisor),
):
    analysis = payload.analysis
    if payload.analysis_id:
        try:
            row = AnalysisRepository(db).get_owned(payload.analysis_id, ctx.user.id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Analysis not found")
        except ForbiddenError:
            raise HTTPException(status_code=403, detail="Unauthorized or analysis not found")
        analysis = ResumeAnalysis.model_validate(row.full_analysis)
    if analysis is None:
        raise HTTPException(status_code=400, detail="Provide analysisId or analysis")

    gaps = await advisor.find_gaps(analysis, payload.target_role)
    return SkillGapResponse(target_role=payload.target_role, gaps=gaps)
