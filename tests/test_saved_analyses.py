from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest

from conftest import make_user
from resumatch.core.errors import ForbiddenError, NotFoundError, QuotaExceededError
from resumatch.db.models import User
from resumatch.schemas.analysis import JobMatch, SavedAnalysisOut
from resumatch.schemas.base import JobOut
from resumatch.services.job_service import JobRepository
from resumatch.services.presentation import build_match_cards, matching_skills
from resumatch.services.saved_analysis_service import AnalysisRepository
from resumatch.utils.pdf_report import generate_report_pdf


def match(job_id, score, label="Medium"):
    return JobMatch(job_id=job_id, fit_score=score, fit_label=label, reasoning="r", missing_skills=["Go"])


@pytest.fixture
def owner(db):
    return make_user(db, "owner@example.com")


def test_save_stamps_owner_and_round_trips(db, owner, analysis):
    repo = AnalysisRepository(db)
    row = repo.save(owner.id, analysis, [match("1", 90, "High")])

    db.expire_all()
    assert db.get(User, owner.id).last_analysis_at is not None

    out = SavedAnalysisOut.model_validate(repo.get(row.id))
    assert out.full_analysis == analysis
    assert out.matches == [match("1", 90, "High")]
    assert out.ats_score == analysis.ats_score
    assert out.top_skills == analysis.top_skills


def test_save_for_unknown_user(db, analysis):
    with pytest.raises(NotFoundError):
        AnalysisRepository(db).save("ghost", analysis, [])


def test_list_newest_first_with_limit(db, owner, analysis):
    repo = AnalysisRepository(db)
    ids = [repo.save(owner.id, analysis, []).id for _ in range(3)]
    assert [r.id for r in repo.list_for_user(owner.id)] == ids[::-1]
    assert len(repo.list_for_user(owner.id, limit=2)) == 2


def test_ownership(db, owner, analysis):
    other = make_user(db, "other@example.com")
    repo = AnalysisRepository(db)
    row = repo.save(owner.id, analysis, [])

    with pytest.raises(ForbiddenError):
        repo.delete(row.id, other.id)
    with pytest.raises(NotFoundError):
        repo.get_owned("missing", owner.id)

    repo.delete(row.id, owner.id)
    assert repo.get(row.id) is None


def test_quota(db, owner, analysis):
    repo = AnalysisRepository(db)
    repo.check_quota(owner.id, 2)
    repo.save(owner.id, analysis, [])
    repo.save(owner.id, analysis, [])
    with pytest.raises(QuotaExceededError, match="2 per day"):
        repo.check_quota(owner.id, 2)
    tomorrow = datetime.now(timezone.utc) + timedelta(days=1)
    assert repo.count_since(owner.id, tomorrow) == 0


def test_matching_skills_is_case_insensitive_both_ways():
    assert matching_skills(["react", "SQL Server"], ["React", "SQL", "Go"]) == ["React", "SQL"]
    assert matching_skills([], ["React"]) == []


def test_cards_skip_orphans_and_rank_by_fit(db, analysis):
    repo = JobRepository(db)
    repo.ensure_seeded()
    jobs = [JobOut.model_validate(j) for j in repo.list()]
    matches = [match("2", 40), match("1", 95, "High"), match("deleted", 99, "High"), match("3", 70)]

    cards = build_match_cards(matches, jobs, analysis.top_skills)
    assert [c.job.id for c in cards] == ["1", "3", "2"]
    assert [c.is_best_match for c in cards] == [True, False, False]
    assert cards[0].matching_skills == ["React", "TypeScript", "Tailwind CSS"]


def test_pdf_report(db, analysis):
    repo = JobRepository(db)
    repo.ensure_seeded()
    jobs = [JobOut.model_validate(j) for j in repo.list()]
    cards = build_match_cards([match("1", 95, "High")], jobs, analysis.top_skills)

    buf = BytesIO()
    generate_report_pdf(buf, analysis, cards)
    assert buf.read(5) == b"%PDF-"

    empty = BytesIO()
    generate_report_pdf(empty, analysis, [])
    assert empty.getvalue().startswith(b"%PDF-")
