import asyncio
import json

import pytest

from conftest import FakeModelClient
from resumatch.ai.client import OpenAIModelClient
from resumatch.services.policy import FAILURE_POLICY, FailurePolicy, fail_open
from resumatch.services.skill_gap_service import SkillGapAdvisor


def gaps(client, analysis, role="Full Stack Engineer"):
    return asyncio.run(SkillGapAdvisor(client).find_gaps(analysis, role))


def test_returns_gaps_and_sends_role(analysis):
    fake = FakeModelClient()
    result = gaps(fake, analysis, "Staff Engineer")
    assert [(g.skill, g.importance) for g in result] == [("GraphQL", "High"), ("Testing", "Medium")]
    prompt = fake.calls[0]["contents"][0]
    assert "TARGET ROLE: Staff Engineer" in prompt
    assert "React, TypeScript, CSS" in prompt


@pytest.mark.parametrize("answer", [
    RuntimeError("quota"),
    None,
    "garbage",
    '{"gaps": "none"}',
])
def test_failures_mean_no_gaps(analysis, answer):
    assert gaps(FakeModelClient(skill_gaps=lambda n, c: answer), analysis) == []


def test_missing_key_means_no_gaps(analysis):
    assert gaps(OpenAIModelClient(None), analysis) == []


def test_invalid_items_are_dropped(analysis):
    payload = {"gaps": [
        {"skill": "Kubernetes", "importance": "low", "recommendation": "Run a cluster."},
        {"skill": "", "importance": "High", "recommendation": "?"},
        {"skill": "Go", "importance": "Urgent", "recommendation": "?"},
    ]}
    result = gaps(FakeModelClient(skill_gaps=lambda n, c: json.dumps(payload)), analysis)
    assert [(g.skill, g.importance) for g in result] == [("Kubernetes", "Low")]


def test_policy_table():
    assert FAILURE_POLICY["analyze_resume"] is FailurePolicy.FAIL_CLOSED
    assert FAILURE_POLICY["match_jobs"] is FailurePolicy.FAIL_OPEN
    assert FAILURE_POLICY["skill_gaps"] is FailurePolicy.FAIL_OPEN


def test_fail_open_refuses_fail_closed_operations():
    with pytest.raises(ValueError):
        fail_open("analyze_resume", list)


def test_fail_open_returns_default():
    @fail_open("skill_gaps", list)
    async def explode():
        raise KeyError("x")

    assert asyncio.run(explode()) == []
