from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


JobType = Literal["Full-time", "Contract", "Remote", "Hybrid"]
Role = Literal["admin", "user"]


class CamelModel(BaseModel):
	"""Serialises with the camelCase names the frontend uses; accepts snake_case too."""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------- Jobs ----------
class JobCreate(CamelModel):
	title: str = Field(min_length=1)
	company: str = Field(min_length=1)
	location: str = Field(min_length=1)
	type: JobType = "Full-time"
	description: str = Field(min_length=1)
	requirements: List[str] = []
	salary_range: Optional[str] = "Competitive"
	is_active: Optional[bool] = None

	@field_validator("requirements")
	@classmethod
	def strip_requirements(cls, v: List[str]) -> List[str]:
		return [r.strip() for r in v if r and r.strip()]


class JobUpdate(CamelModel):
	title: Optional[str] = Field(default=None, min_length=1)
	company: Optional[str] = Field(default=None, min_length=1)
	location: Optional[str] = Field(default=None, min_length=1)
	type: Optional[JobType] = None
	description: Optional[str] = Field(default=None, min_length=1)
	requirements: Optional[List[str]] = None
	salary_range: Optional[str] = None
	is_active: Optional[bool] = None


class JobOut(CamelModel):
	id: str
	title: str
	company: str
	location: str
	type: JobType
	description: str
	requirements: List[str] = []
	salary_range: Optional[str] = None
	is_active: Optional[bool] = None


# ---------- Auth ----------
class SignupRequest(CamelModel):
	email: str
	password: str
	name: str = ""


class LoginRequest(CamelModel):
	email: str
	password: str


class UserOut(CamelModel):
	id: str
	email: str
	name: Optional[str] = None
	role: Role = "user"
	avatar: Optional[str] = None
	created_at: Optional[datetime] = None
	last_analysis_at: Optional[datetime] = None
