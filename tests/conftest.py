import pytest

from jobmatcher.matching.rate_limiter import RateLimiter
from jobmatcher.mcp.pipeline import ToolPipeline

RESUME = (
    "Jane Doe - Senior Software Engineer (8 years total experience). "
    + "Experience building Python services, data pipelines and REST APIs for fintech teams. " * 8
)


def make_match(i=0, **overrides):
    job = {
        "job_title": f"Data Engineer {i}",
        "company_name": f"Company {i}",
        "location": "Zurich",
        "similarity_score": 0.873,
        "job_link": f"https://jobs.example.com/view/{1000 + i}",
        "first_published": None,
        "min_experience_years": 3,
        "chunk_text": "Required Skills: Python, SQL\nJob Summary: Point1: Build pipelines Point2: Own the warehouse",
    }
    job.update(overrides)
    return job


def make_payload(n=2, **overrides):
    payload = {
        "matches": [make_match(i) for i in range(n)],
        "total_matches": n,
        "page": 1,
        "total_pages": 1,
        "has_more": False,
        "extracted_skills": ["Python", "SQL"],
        "user_experience": 8,
        "resume_processing": {
            "filename": "resume.txt",
            "parsing_method": "text",
            "enhancement_used": True,
            "original_length": 1200,
            "enhanced_length": 1500,
        },
    }
    payload.update(overrides)
    return payload


class FakeBackend:
    """Stands in for BackendClient: records calls, returns a payload or raises."""

    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else make_payload()
        self.error = error
        self.calls = []

    def call(self, request, secret):
        self.calls.append((request, secret))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def resume_text():
    return RESUME


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def pipeline(fake_backend):
    return ToolPipeline(RateLimiter(10, 60.0), fake_backend)
