# resumatch/services/analyze_service.py
from __future__ import annotations

import asyncio
from typing import Optional

from resumatch.ai.client import ModelClient
from resumatch.ai.parsing import parse_json_object
from resumatch.ai.prompts import ANALYSIS_SCHEMA, SYSTEM_INSTRUCTION_ANALYSIS, build_analysis_contents
from resumatch.core.config import settings
from resumatch.core.errors import AnalysisError, UnsupportedDocumentError
from resumatch.core.logging import get_logger
from resumatch.schemas.analysis import ResumeAnalysis
from resumatch.utils.documents import SUPPORTED_TYPES, normalize_mime

log = get_logger(__name__)


class ResumeAnalyzer:
    """Single resume-analysis call. Fail-closed: every failure raises AnalysisError."""

    def __init__(self, client: ModelClient, *, timeout: Optional[float] = None):
        self.client = client
        self.timeout = timeout if timeout is not None else settings.model_timeout_seconds

    async def analyze(self, data: bytes, mime_type: str) -> ResumeAnalysis:
        mime = normalize_mime(mime_type)
        if mime not in SUPPORTED_TYPES:
            raise UnsupportedDocumentError(f"Unsupported document type: {mime or 'unknown'}")
        if not data:
            raise AnalysisError("Analysis failed: the uploaded document is empty.")

        try:
            text = await asyncio.wait_for(
                self.client.generate(
                    system_instruction=SYSTEM_INSTRUCTION_ANALYSIS,
                    contents=build_analysis_contents(data, mime),
                    schema=ANALYSIS_SCHEMA,
                    schema_name="resume_analysis",
                ),
                timeout=self.timeout,
            )
        except AnalysisError:
            raise
        except asyncio.TimeoutError as exc:
            log.error("Resume analysis timed out after %.0fs", self.timeout)
            raise AnalysisError("Analysis failed: the AI service did not answer in time.") from exc
        except Exception as exc:
            log.error("Resume analysis error: %s", exc)
            raise AnalysisError(f"Analysis failed: {exc}. Please check API key and quota.") from exc

        if not text or not text.strip():
            raise AnalysisError("Analysis failed: No response from AI.")

        try:
            return ResumeAnalysis.model_validate(parse_json_object(text))
        except (ValueError, ArithmeticError) as exc:
            log.error("Resume analysis returned unusable output: %s; raw: %r", exc, text[:200])
            raise AnalysisError("Analysis failed: the AI response could not be read.") from exc
