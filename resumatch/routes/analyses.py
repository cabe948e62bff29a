# resumatch/routes/analyses.py
from __future__ import annotations
from io import BytesIO
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from resumatch.core.errors import ForbiddenError, NotFoundError
from resumatch.db.models import SavedAnalysis
from resumatch.db.session import get_db
from resumatch.routes.deps import require_user
from resumatch.schemas.analysis import AnalysisDetail, SavedAnalysisOut
from resumatch.schemas.base import JobOut
from resumatch.services.auth_service import SessionContext
from resumatch.services.job_service import JobRepository
from resumatch.services.presentation import build_match_cards
from resumatch.services.saved_analysis_service import AnalysisRepository
from resumatch.utils.pdf_report import generate_report_pdf
from resumatch.utils.tracking import track

router = APIRouter(prefix="/analyses", tags=["analyses"])


def _owned(db: Session, analysis_id: str, ctx: SessionContext) -> SavedAnalysis:
    try:
        return AnalysisRepository(db).get_owned(analysis_id, ctx.user.id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Analysis not found")
    except ForbiddenError:
        raise HTTPException(status_code=403, detail="Unauthorized or analysis not found")


def _detail(db: Session, row: SavedAnalysis) -> AnalysisDetail:
    saved = SavedAnalysisOut.model_validate(row)
    jobs = [JobOut.model_validate(j) for j in JobRepository(db).list()]
    cards = build_match_cards(saved.matches, jobs, saved.top_skills)
    return AnalysisDetail(analysis=saved, cards=cards)


@router.get("", response_model=List[SavedAnalysisOut])
async def list_analyses(
    limit: int = Query(default=10, ge=1, le=50),
    ctx: SessionContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    return AnalysisRepository(db).list_for_user(ctx.user.id, limit=limit)


@router.get("/{analysis_id}.pdf")
async def analysis_pdf(
    analysis_id: str,
    request: Request,
    ctx: SessionContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    detail = _detail(db, _owned(db, analysis_id, ctx))
    buf = BytesIO()
    generate_report_pdf(buf, detail.analysis.full_analysis, detail.cards)
    headers = {"Content-Disposition": f'inline; filename="resumatch-{analysis_id}.pdf"'}
    track(request, "download_pdf", {"analysis_id": analysis_id})
    return StreamingResponse(buf, headers=headers, media_type="application/pdf")


@router.get("/{analysis_id}", response_model=AnalysisDetail)
async def get_analysis(
    analysis_id: str,
    ctx: SessionContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    return _detail(db, _owned(db, analysis_id, ctx))


@router.delete("/{analysis_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_analysis(
    analysis_id: str,
    ctx: SessionContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        AnalysisRepository(db).delete(analysis_id, ctx.user.id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Analysis not found")
    except ForbiddenError:
        raise HTTPException(status_code=403, detail="Unauthorized or analysis not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
