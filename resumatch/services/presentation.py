# resumatch/services/presentation.py
from __future__ import annotations

from typing import Iterable, List, Sequence

from resumatch.core.logging import get_logger
from resumatch.schemas.analysis import JobMatch, MatchCard
from resumatch.schemas.base import JobOut

log = get_logger(__name__)


def matching_skills(resume_skills: Iterable[str], requirements: Iterable[str]) -> List[str]:
    """Requirements that some resume skill contains, or is contained by (case-insensitive)."""
    skills = [s.lower() for s in resume_skills if s]
    out = []
    for req in requirements:
        r = (req or "").lower()
        if r and any(s in r or r in s for s in skills):
            out.append(req)
    return out


def build_match_cards(matches: Sequence[JobMatch], jobs: Sequence[JobOut], top_skills: Sequence[str]) -> List[MatchCard]:
    """Join matches to the current catalog, best fit first. Matches for deleted jobs are skipped."""
    by_id = {j.id: j for j in jobs}
    cards: List[MatchCard] = []
    for m in matches:
        job = by_id.get(m.job_id)
        if job is None:
            log.debug("Skipping orphaned match for job %s", m.job_id)
            continue
        cards.append(MatchCard(
            job=job,
            match=m,
            matching_skills=matching_skills(top_skills, job.requirements),
            is_best_match=m.fit_label == "High",
        ))
    cards.sort(key=lambda c: c.match.fit_score, reverse=True)
    return cards
