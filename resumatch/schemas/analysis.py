# resumatch/schemas/analysis.py
from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from resumatch.schemas.base import CamelModel, JobOut


def _clamp_score(v: Any) -> int:
	if isinstance(v, bool) or v is None:
		raise ValueError("score must be a number")
	try:
		f = float(v)
	except OverflowError:
		raise ValueError("score is out of range")
	# json.loads accepts Infinity, NaN and 1e999
	if not math.isfinite(f):
		raise ValueError("score must be finite")
	return int(max(0.0, min(100.0, round(f))))


def _title(v: Any) -> Any:
	# the model sometimes answers "strong" / "HIGH"
	return v.strip().capitalize() if isinstance(v, str) else v


def _list_or_empty(v: Any) -> Any:
	return [] if v is None else v


Score = Annotated[int, BeforeValidator(_clamp_score)]
Status = Annotated[Literal["Strong", "Improve", "Critical"], BeforeValidator(_title)]
Level = Annotated[Literal["High", "Medium", "Low"], BeforeValidator(_title)]
StrList = Annotated[List[str], BeforeValidator(_list_or_empty)]


class ResumeAnalysis(CamelModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True, frozen=True)

	ats_score: Score
	summary: str = ""
	detected_role: str = ""
	top_skills: StrList = []
	experience_level: str = ""

	skills_feedback: str = ""
	skills_status: Status
	experience_feedback: str = ""
	experience_status: Status
	keywords_feedback: str = ""
	keywords_status: Status
	formatting_feedback: str = ""
	formatting_status: Status

	improvement_tips: StrList = []


class JobMatch(CamelModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True, frozen=True)

	job_id: str
	fit_score: Score
	fit_label: Level
	reasoning: str = ""
	missing_skills: StrList = []

	@field_validator("job_id", mode="before")
	@classmethod
	def id_as_str(cls, v: Any) -> Any:
		return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class SkillGap(CamelModel):
	skill: str = Field(min_length=1)
	importance: Level
	recommendation: str = ""


# ---------- API payloads ----------
class AnalyzeResponse(CamelModel):
	analysis: ResumeAnalysis
	matches: List[JobMatch]
	saved_id: Optional[str] = None
	runtime_ms: int = 0


class SkillGapRequest(CamelModel):
	target_role: str = Field(min_length=1)
	analysis_id: Optional[str] = None
	analysis: Optional[ResumeAnalysis] = None


class SkillGapResponse(CamelModel):
	target_role: str
	gaps: List[SkillGap]


class SavedAnalysisOut(CamelModel):
	id: str
	user_id: str
	ats_score: int
	detected_role: str
	top_skills: List[str] = []
	summary: str
	matches: List[JobMatch] = []
	full_analysis: ResumeAnalysis
	created_at: Optional[datetime] = None


class MatchCard(CamelModel):
	job: JobOut
	match: JobMatch
	matching_skills: List[str] = []
	is_best_match: bool = False


class AnalysisDetail(CamelModel):
	analysis: SavedAnalysisOut
	cards: List[MatchCard]
