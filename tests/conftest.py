import json

import pytest
from fastapi.testclient import TestClient

from resumatch.ai.prompts import JOBS_MARKER
from resumatch.db.models import init_db
from resumatch.db.session import get_db, make_engine, make_sessionmaker
from resumatch.main import create_app
from resumatch.routes.deps import get_model_client
from resumatch.schemas.analysis import ResumeAnalysis
from resumatch.services.job_service import JobRepository
from resumatch.services.user_service import UserRepository
from resumatch.utils.passwords import hash_password


ANALYSIS = {
    "atsScore": 78,
    "summary": "Frontend engineer with six years of React work.",
    "detectedRole": "Frontend Engineer",
    "topSkills": ["React", "TypeScript", "CSS"],
    "experienceLevel": "Senior",
    "skillsFeedback": "Solid core stack.",
    "skillsStatus": "Strong",
    "experienceFeedback": "Quantify impact more.",
    "experienceStatus": "Improve",
    "keywordsFeedback": "Missing testing keywords.",
    "keywordsStatus": "Improve",
    "formattingFeedback": "Two columns confuse parsers.",
    "formattingStatus": "Critical",
    "improvementTips": ["Add metrics", "Use one column"],
}

GAPS = {
    "gaps": [
        {"skill": "GraphQL", "importance": "High", "recommendation": "Build a small API."},
        {"skill": "Testing", "importance": "Medium", "recommendation": "Learn Jest."},
    ]
}

PASSWORD = "secret123"


def batch_jobs(prompt: str) -> list:
    line = next(l for l in prompt.splitlines() if l.startswith(JOBS_MARKER))
    return json.loads(line[len(JOBS_MARKER):])


def matches_for(jobs: list, score: int = 80, label: str = "High") -> str:
    return json.dumps({
        "matches": [
            {"jobId": j["id"], "fitScore": score, "fitLabel": label,
             "reasoning": "Good overlap.", "missingSkills": ["Docker"]}
            for j in jobs
        ]
    })


class FakeModelClient:
    """Stands in for the LLM; handlers get (call number for that schema, contents)."""

    def __init__(self, **handlers):
        self.handlers = {
            "resume_analysis": lambda n, contents: json.dumps(ANALYSIS),
            "job_matches": lambda n, contents: matches_for(batch_jobs(contents[0])),
            "skill_gaps": lambda n, contents: json.dumps(GAPS),
        }
        self.handlers.update(handlers)
        self.calls = []

    async def generate(self, *, system_instruction, contents, schema, schema_name):
        n = self.count(schema_name)
        self.calls.append({"schema_name": schema_name, "contents": list(contents), "system": system_instruction})
        result = self.handlers[schema_name](n, list(contents))
        if isinstance(result, BaseException):
            raise result
        return result

    def count(self, schema_name: str) -> int:
        return sum(1 for c in self.calls if c["schema_name"] == schema_name)


def make_user(db, email: str, role: str = "user", password: str = PASSWORD):
    return UserRepository(db).create(email=email, name=email.split("@")[0], password_hash=hash_password(password), role=role)


@pytest.fixture
def analysis() -> ResumeAnalysis:
    return ResumeAnalysis.model_validate(ANALYSIS)


@pytest.fixture
def engine():
    e = make_engine("sqlite://")
    init_db(e)
    yield e
    e.dispose()


@pytest.fixture
def session_factory(engine):
    return make_sessionmaker(engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def fake_model():
    return FakeModelClient()


@pytest.fixture
def app(session_factory, fake_model):
    app = create_app()

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_model_client] = lambda: fake_model
    with session_factory() as s:
        JobRepository(s).ensure_seeded()
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def _login(app, email: str) -> TestClient:
    c = TestClient(app)
    r = c.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return c


@pytest.fixture
def user_client(app, db):
    make_user(db, "jordan@example.com")
    return _login(app, "jordan@example.com")


@pytest.fixture
def admin_client(app, db):
    make_user(db, "alex@example.com", role="admin")
    return _login(app, "alex@example.com")
