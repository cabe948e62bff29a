# resumatch/ai/prompts.py
from __future__ import annotations

import json
from typing import Iterable, List

from resumatch.ai.client import DocumentPart

SYSTEM_INSTRUCTION_ANALYSIS = """
You are an expert ATS (Applicant Tracking System) and Resume Coach.
Analyze the provided resume document.
Return a valid JSON object strictly adhering to this structure:
{
  "atsScore": number (0-100),
  "summary": "Short professional summary (max 2 sentences)",
  "detectedRole": "Likely job title",
  "topSkills": ["skill1", "skill2", ...],
  "experienceLevel": "Entry" | "Mid" | "Senior",

  "skillsFeedback": "Specific feedback on technical/soft skills",
  "skillsStatus": "Strong" | "Improve" | "Critical",

  "experienceFeedback": "Feedback on how work history and impact are presented",
  "experienceStatus": "Strong" | "Improve" | "Critical",

  "keywordsFeedback": "Feedback on industry keywords and ATS optimization",
  "keywordsStatus": "Strong" | "Improve" | "Critical",

  "formattingFeedback": "Feedback on layout, structure, and readability",
  "formattingStatus": "Strong" | "Improve" | "Critical",

  "improvementTips": ["Actionable Tip 1", "Actionable Tip 2", "Actionable Tip 3"]
}
"""

SYSTEM_INSTRUCTION_MATCHING = """
You are a Recruitment AI.
I will provide you with a Resume Analysis and a list of Available Jobs.
You must compare the candidate's profile against EACH job in the list.
Return a valid JSON object strictly adhering to this structure:
{
  "matches": [
    {
      "jobId": "id from the job list",
      "fitScore": number (0-100),
      "fitLabel": "High" | "Medium" | "Low",
      "reasoning": "One sentence explaining why they fit or don't fit",
      "missingSkills": ["skill missing for this specific job"]
    }
  ]
}
"""

SYSTEM_INSTRUCTION_SKILL_GAP = """
You are a Career Coach.
Based on the candidate's resume and a target job role, provide a valid JSON object with detailed skill gap analysis:
{
  "gaps": [
    {
      "skill": "Name of skill",
      "importance": "High" | "Medium" | "Low",
      "recommendation": "Actionable advice on how to improve this specific skill (e.g., specific project or concept to learn)"
    }
  ]
}
"""

ANALYZE_REQUEST = "Analyze this resume provided in the attachment."

JOBS_MARKER = "AVAILABLE JOBS BATCH:"

_STATUS = {"type": "string", "enum": ["Strong", "Improve", "Critical"]}
_LEVEL = {"type": "string", "enum": ["High", "Medium", "Low"]}
_STRINGS = {"type": "array", "items": {"type": "string"}}

ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "atsScore": {"type": "integer"},
        "summary": {"type": "string"},
        "detectedRole": {"type": "string"},
        "topSkills": _STRINGS,
        "experienceLevel": {"type": "string"},
        "skillsFeedback": {"type": "string"},
        "skillsStatus": _STATUS,
        "experienceFeedback": {"type": "string"},
        "experienceStatus": _STATUS,
        "keywordsFeedback": {"type": "string"},
        "keywordsStatus": _STATUS,
        "formattingFeedback": {"type": "string"},
        "formattingStatus": _STATUS,
        "improvementTips": _STRINGS,
    },
    "required": [
        "atsScore", "summary", "detectedRole", "topSkills", "experienceLevel",
        "skillsFeedback", "skillsStatus", "experienceFeedback", "experienceStatus",
        "keywordsFeedback", "keywordsStatus", "formattingFeedback", "formattingStatus",
        "improvementTips",
    ],
}

MATCH_SCHEMA = {
    "type": "object",
    "properties": {
        "matches": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "jobId": {"type": "string"},
                    "fitScore": {"type": "integer"},
                    "fitLabel": _LEVEL,
                    "reasoning": {"type": "string"},
                    "missingSkills": _STRINGS,
                },
                "required": ["jobId", "fitScore", "fitLabel", "reasoning", "missingSkills"],
            },
        }
    },
    "required": ["matches"],
}

SKILL_GAP_SCHEMA = {
    "type": "object",
    "properties": {
        "gaps": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "skill": {"type": "string"},
                    "importance": _LEVEL,
                    "recommendation": {"type": "string"},
                },
                "required": ["skill", "importance", "recommendation"],
            },
        }
    },
    "required": ["gaps"],
}


def _skills(analysis) -> str:
    return ", ".join(analysis.top_skills or [])


def build_analysis_contents(data: bytes, mime_type: str) -> list:
    return [DocumentPart(data=data, mime_type=mime_type), ANALYZE_REQUEST]


def job_context(jobs: Iterable, description_chars: int) -> List[dict]:
    # lightweight view of each job; descriptions are cut to save input tokens
    return [
        {
            "id": j.id,
            "title": j.title,
            "description": (j.description or "")[:description_chars],
            "requirements": list(j.requirements or []),
        }
        for j in jobs
    ]


def build_match_prompt(analysis, jobs: Iterable, description_chars: int = 150) -> str:
    context = json.dumps(job_context(jobs, description_chars), ensure_ascii=False)
    return (
        f"RESUME SUMMARY: {analysis.summary}\n"
        f"RESUME SKILLS: {_skills(analysis)}\n"
        f"RESUME ROLE: {analysis.detected_role}\n"
        "\n"
        f"{JOBS_MARKER} {context}\n"
        "\n"
        "Compare the resume to these jobs. Keep reasoning concise (max 20 words)."
    )


def build_skill_gap_prompt(analysis, target_role: str) -> str:
    return (
        f"RESUME SKILLS: {_skills(analysis)}\n"
        f"RESUME EXPERIENCE: {analysis.experience_level}\n"
        f"TARGET ROLE: {target_role}"
    )
