# resumatch/services/skill_gap_service.py
from __future__ import annotations

import asyncio
from typing import List, Optional

from pydantic import ValidationError

from resumatch.ai.client import ModelClient
from resumatch.ai.parsing import parse_json_object
from resumatch.ai.prompts import SKILL_GAP_SCHEMA, SYSTEM_INSTRUCTION_SKILL_GAP, build_skill_gap_prompt
from resumatch.core.config import settings
from resumatch.core.logging import get_logger
from resumatch.schemas.analysis import ResumeAnalysis, SkillGap
from resumatch.services.policy import fail_open

log = get_logger(__name__)


class SkillGapAdvisor:
    def __init__(self, client: ModelClient, *, timeout: Optional[float] = None):
        self.client = client
        self.timeout = timeout if timeout is not None else settings.model_timeout_seconds

    @fail_open("skill_gaps", list)
    async def find_gaps(self, analysis: ResumeAnalysis, target_role: str) -> List[SkillGap]:
        text = await asyncio.wait_for(
            self.client.generate(
                system_instruction=SYSTEM_INSTRUCTION_SKILL_GAP,
                contents=[build_skill_gap_prompt(analysis, target_role)],
                schema=SKILL_GAP_SCHEMA,
                schema_name="skill_gaps",
            ),
            timeout=self.timeout,
        )
        raw = parse_json_object(text).get("gaps") or []
        if not isinstance(raw, list):
            raise ValueError("'gaps' is not an array")

        gaps: List[SkillGap] = []
        for item in raw:
            try:
                gaps.append(SkillGap.model_validate(item))
            except ValidationError as exc:
                log.warning("Dropping invalid skill gap for %r: %s", target_role, exc.errors()[:1])
        return gaps
