import asyncio
import json
import math

import pytest

from conftest import FakeModelClient, batch_jobs, matches_for
from resumatch.ai.client import OpenAIModelClient
from resumatch.schemas.base import JobOut
from resumatch.services import match_service
from resumatch.services.match_service import JobMatcher, make_batches


def make_jobs(n):
    return [
        JobOut(id=str(i), title=f"Job {i}", company="Acme", location="Remote", type="Full-time",
               description="x" * 400, requirements=["Python", "SQL"])
        for i in range(1, n + 1)
    ]


def run(matcher, analysis, jobs):
    return asyncio.run(matcher.match_jobs(analysis, jobs))


def ids(matches):
    return [m.job_id for m in matches]


def test_make_batches():
    assert [len(b) for b in make_batches(make_jobs(5), 2)] == [2, 2, 1]
    assert make_batches([], 2) == []
    with pytest.raises(ValueError):
        make_batches(make_jobs(1), 0)


@pytest.mark.parametrize("n,size", [(0, 2), (1, 2), (4, 2), (5, 2), (6, 3), (7, 1), (4, 10)])
def test_one_call_per_batch(analysis, n, size):
    fake = FakeModelClient()
    result = run(JobMatcher(fake, batch_size=size), analysis, make_jobs(n))
    assert fake.count("job_matches") == math.ceil(n / size)
    assert ids(result) == [str(i) for i in range(1, n + 1)]


def test_batches_of_two_two_one(analysis):
    fake = FakeModelClient()
    run(JobMatcher(fake, batch_size=2), analysis, make_jobs(5))
    sizes = [len(batch_jobs(c["contents"][0])) for c in fake.calls]
    assert sizes == [2, 2, 1]


def test_failed_middle_batch_keeps_the_others(analysis):
    def handler(n, contents):
        if n == 1:
            return RuntimeError("quota exceeded")
        return matches_for(batch_jobs(contents[0]))

    fake = FakeModelClient(job_matches=handler)
    result = run(JobMatcher(fake, batch_size=2), analysis, make_jobs(5))
    assert ids(result) == ["1", "2", "5"]
    assert fake.count("job_matches") == 3


def test_malformed_batch_is_isolated(analysis):
    def handler(n, contents):
        if n == 0:
            return '{"matches": [{"jobId": "1", '
        return matches_for(batch_jobs(contents[0]))

    result = run(JobMatcher(FakeModelClient(job_matches=handler), batch_size=2), analysis, make_jobs(5))
    assert ids(result) == ["3", "4", "5"]


def test_fenced_batch_response(analysis):
    fake = FakeModelClient(job_matches=lambda n, c: "```json\n" + matches_for(batch_jobs(c[0])) + "\n```")
    result = run(JobMatcher(fake, batch_size=2), analysis, make_jobs(3))
    assert ids(result) == ["1", "2", "3"]


@pytest.mark.parametrize("answer", [
    RuntimeError("boom"),
    None,
    "",
    "not json at all",
    '{"matches": "none"}',
    '{"results": []}',
])
def test_all_batches_failing_returns_empty(analysis, answer):
    fake = FakeModelClient(job_matches=lambda n, c: answer)
    assert run(JobMatcher(fake, batch_size=2), analysis, make_jobs(5)) == []
    assert fake.count("job_matches") == 3


def test_missing_api_key_degrades_to_no_matches(analysis):
    assert run(JobMatcher(OpenAIModelClient(None), batch_size=2), analysis, make_jobs(3)) == []


def test_ids_are_a_subset_of_the_batch(analysis):
    def handler(n, contents):
        batch = batch_jobs(contents[0])
        items = json.loads(matches_for(batch))["matches"]
        items.append({"jobId": "99", "fitScore": 99, "fitLabel": "High", "reasoning": "", "missingSkills": []})
        return json.dumps({"matches": items})

    jobs = make_jobs(4)
    result = run(JobMatcher(FakeModelClient(job_matches=handler), batch_size=2), analysis, jobs)
    assert set(ids(result)) <= {j.id for j in jobs}
    assert "99" not in ids(result)


def test_items_are_repaired_or_dropped(analysis):
    payload = {"matches": [
        {"jobId": 1, "fitScore": 140, "fitLabel": "high", "reasoning": "ok", "missingSkills": None},
        {"jobId": "1", "fitScore": 10, "fitLabel": "Low", "reasoning": "dup", "missingSkills": []},
        {"jobId": "2", "fitScore": 50, "fitLabel": "Great", "reasoning": "bad label", "missingSkills": []},
    ]}
    fake = FakeModelClient(job_matches=lambda n, c: json.dumps(payload))
    (match,) = run(JobMatcher(fake, batch_size=2), analysis, make_jobs(2))
    assert match.job_id == "1"
    assert match.fit_score == 100
    assert match.fit_label == "High"
    assert match.missing_skills == []


class DelayedClient(FakeModelClient):
    def __init__(self, delays, **handlers):
        super().__init__(**handlers)
        self.delays = list(delays)

    async def generate(self, **kwargs):
        delay = self.delays[self.count(kwargs["schema_name"])]
        result = await super().generate(**kwargs)
        await asyncio.sleep(delay)
        return result


def test_timed_out_batch_is_skipped(analysis):
    fake = DelayedClient([1.0, 0, 0])
    result = run(JobMatcher(fake, batch_size=2, timeout=0.05), analysis, make_jobs(5))
    assert ids(result) == ["3", "4", "5"]


def test_concurrent_batches_merge_in_catalog_order(analysis):
    fake = DelayedClient([0.15, 0.1, 0.0])
    result = run(JobMatcher(fake, batch_size=2, concurrency=3), analysis, make_jobs(5))
    assert ids(result) == ["1", "2", "3", "4", "5"]


def test_prompt_truncates_descriptions(analysis):
    fake = FakeModelClient()
    run(JobMatcher(fake, batch_size=2, description_chars=150), analysis, make_jobs(2))
    (sent,) = [batch_jobs(c["contents"][0]) for c in fake.calls]
    assert [len(j["description"]) for j in sent] == [150, 150]
    assert {"id", "title", "description", "requirements"} == set(sent[0])


@pytest.mark.parametrize("score", ["Infinity", "-Infinity", "NaN", "1e999", "1" + "0" * 400])
def test_unrepresentable_score_only_drops_that_item(analysis, score):
    def handler(n, contents):
        if n == 1:
            return (
                '{"matches": ['
                f'{{"jobId": "3", "fitScore": {score}, "fitLabel": "High", "reasoning": "", "missingSkills": []}},'
                '{"jobId": "4", "fitScore": 60, "fitLabel": "Medium", "reasoning": "", "missingSkills": []}'
                "]}"
            )
        return matches_for(batch_jobs(contents[0]))

    result = run(JobMatcher(FakeModelClient(job_matches=handler), batch_size=2), analysis, make_jobs(5))
    assert ids(result) == ["1", "2", "4", "5"]


def test_unexpected_batch_error_is_isolated(analysis, monkeypatch):
    real = match_service.build_match_prompt

    def prompt(analysis, jobs, chars):
        if any(j.id == "3" for j in jobs):
            raise RuntimeError("template broke")
        return real(analysis, jobs, chars)

    monkeypatch.setattr(match_service, "build_match_prompt", prompt)
    result = run(JobMatcher(FakeModelClient(), batch_size=2), analysis, make_jobs(5))
    assert ids(result) == ["1", "2", "5"]


@pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"batch_size": -1}, {"timeout": 0}])
def test_explicit_zero_is_not_replaced_by_the_default(kwargs):
    with pytest.raises(ValueError):
        JobMatcher(FakeModelClient(), **kwargs)
