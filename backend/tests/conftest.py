"""Pytest configuration and fixtures for the Study Notes backend tests."""

import os

import pytest

# Set test environment variables (before any studynotes import reads settings)
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-000")
os.environ.setdefault("LLM_API_KEY", "test-key")

from fakes import USER_ID, FakeSupabase, make_llm, make_quiz_payload  # noqa: E402
from studynotes.features.generation.generator import ArtifactGenerator  # noqa: E402


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def note_row(fake_db):
    """A plain-text note owned by USER_ID."""
    return fake_db.add("notes", {
        "user_id": USER_ID,
        "title": "photosynthesis.txt",
        "content": "Photosynthesis turns light, water and CO2 into glucose and oxygen.",
        "file_type": "text/plain",
        "file_size": 66,
    })


@pytest.fixture
def sample_quiz_payload():
    return make_quiz_payload()


@pytest.fixture
def generator_factory():
    """Build an ArtifactGenerator over a mocked chat model (kwargs go to make_llm)."""
    def factory(**kwargs) -> ArtifactGenerator:
        return ArtifactGenerator(make_llm(**kwargs))
    return factory
