# resumatch/services/match_service.py
from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from pydantic import ValidationError

from resumatch.ai.client import ModelClient
from resumatch.ai.parsing import parse_json_object
from resumatch.ai.prompts import MATCH_SCHEMA, SYSTEM_INSTRUCTION_MATCHING, build_match_prompt
from resumatch.core.config import settings
from resumatch.core.logging import get_logger
from resumatch.schemas.analysis import JobMatch, ResumeAnalysis
from resumatch.schemas.base import JobOut
from resumatch.services.policy import fail_open
from resumatch.utils.timing import timer

log = get_logger(__name__)


def make_batches(jobs: Sequence[JobOut], size: int) -> List[List[JobOut]]:
    if size < 1:
        raise ValueError("batch size must be >= 1")
    return [list(jobs[i:i + size]) for i in range(0, len(jobs), size)]


class JobMatcher:
    """
    Scores a resume against the job catalog with one model call per batch.

    Small batches keep each structured response short enough not to be cut off.
    A batch that errors, times out or returns unusable JSON only loses its own
    jobs; the merged result keeps catalog order.
    """

    def __init__(
        self,
        client: ModelClient,
        *,
        batch_size: Optional[int] = None,
        description_chars: Optional[int] = None,
        concurrency: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.batch_size = batch_size if batch_size is not None else settings.match_batch_size
        self.description_chars = (
            description_chars if description_chars is not None else settings.match_description_chars
        )
        self.concurrency = max(1, concurrency if concurrency is not None else settings.match_concurrency)
        self.timeout = timeout if timeout is not None else settings.model_timeout_seconds
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

    @fail_open("match_jobs", list)
    async def match_jobs(self, analysis: ResumeAnalysis, jobs: Sequence[JobOut]) -> List[JobMatch]:
        batches = make_batches(list(jobs), self.batch_size)
        if not batches:
            return []

        sem = asyncio.Semaphore(self.concurrency)

        async def run(index: int, batch: List[JobOut]) -> List[JobMatch]:
            async with sem:
                try:
                    return await self._match_batch(index, len(batches), analysis, batch)
                except Exception as exc:
                    # a failing batch contributes nothing
                    log.warning("Match batch %d/%d failed (%s: %s); skipping",
                                index + 1, len(batches), type(exc).__name__, exc)
                    return []

        with timer(f"Matching {len(jobs)} jobs in {len(batches)} batches", log):
            results = await asyncio.gather(*(run(i, b) for i, b in enumerate(batches)))

        merged = [m for batch_matches in results for m in batch_matches]
        ok = sum(1 for r in results if r)
        log.info("Job matching: %d matches from %d/%d batches", len(merged), ok, len(batches))
        return merged

    async def _match_batch(
        self, index: int, total: int, analysis: ResumeAnalysis, batch: List[JobOut]
    ) -> List[JobMatch]:
        label = f"batch {index + 1}/{total}"
        prompt = build_match_prompt(analysis, batch, self.description_chars)
        try:
            text = await asyncio.wait_for(
                self.client.generate(
                    system_instruction=SYSTEM_INSTRUCTION_MATCHING,
                    contents=[prompt],
                    schema=MATCH_SCHEMA,
                    schema_name="job_matches",
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            log.warning("Match %s timed out after %.0fs; skipping", label, self.timeout)
            return []
        except Exception as exc:
            log.warning("Match %s call failed (%s: %s); skipping", label, type(exc).__name__, exc)
            return []

        try:
            payload = parse_json_object(text)
        except ValueError as exc:
            log.warning("Error parsing match %s (%s); raw text was: %r", label, exc, (text or "")[:200])
            return []

        raw = payload.get("matches")
        if not isinstance(raw, list):
            log.warning("Match %s has no 'matches' array; skipping", label)
            return []
        return self._repair(label, raw, batch)

    @staticmethod
    def _repair(label: str, raw: list, batch: List[JobOut]) -> List[JobMatch]:
        wanted = {j.id for j in batch}
        seen: set[str] = set()
        out: List[JobMatch] = []
        for item in raw:
            try:
                match = JobMatch.model_validate(item)
            except ValidationError as exc:
                log.warning("Dropping invalid match in %s: %s", label, exc.errors()[:1])
                continue
            if match.job_id not in wanted:
                log.warning("Dropping match for unknown job %r in %s", match.job_id, label)
                continue
            if match.job_id in seen:
                continue
            seen.add(match.job_id)
            out.append(match)
        return out
