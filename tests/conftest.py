"""
Pytest configuration and shared fixtures for the Ping! question engine tests.
"""
import json
import os
import tempfile
from unittest.mock import patch

import pytest

# Set before any ping_engine import so config picks it up.
os.environ.setdefault(
    "PING_REQUEST_LOG", os.path.join(tempfile.gettempdir(), "ping-engine-tests", "requests.ndjson")
)


@pytest.fixture(autouse=True)
def mock_environment():
    """Ensure environment variables are set for testing."""
    env_vars = {
        "OPENAI_API_KEY": "test-openai-key",
        "PROMPT_DEBUG": "0",
        "OPENAI_DEBUG": "0",
    }
    with patch.dict(os.environ, env_vars):
        yield


def make_question(
    style="soft_curiosity",
    level="discovery",
    text="What are you working on this week?",
    follow_up="Tell me more about {{their_last_point}}.",
    rationale="Open and low-stakes.",
):
    return {
        "level": level,
        "style": style,
        "text": text,
        "rationale": rationale,
        "follow_up": follow_up,
        "flags": {"loud_safe": True, "time_safe": True, "boundary_ok": True},
    }


@pytest.fixture
def question():
    """Factory for one raw question dict as the model would return it."""
    return make_question


@pytest.fixture
def valid_questions():
    return [
        make_question("soft_curiosity", "discovery", "What brought you to this event tonight?"),
        make_question("shared_interest", "bridge", "How did you first get into climbing?"),
        make_question("opportunity_probe", "discovery", "Is there anything I could help with on your launch?"),
        make_question("playful_personal", "catalyst", "What is the most unexpected thing on your desk?"),
    ]


@pytest.fixture
def model_content():
    """Serialize a question list the way the backend returns it."""

    def _build(questions, **extra):
        body = {
            "summary": {
                "detected_commonalities": ["invented by the model"],
                "detected_complements": [],
                "context_notes": "model notes",
            },
            "questions": questions,
            "top_picks": [0, 1, 2],
        }
        body.update(extra)
        return json.dumps(body)

    return _build


@pytest.fixture
def fake_backend():
    """Async backend returning fixed content and recording the messages it saw."""

    def _build(content):
        calls = []

        async def backend(messages):
            calls.append(messages)
            return content

        backend.calls = calls
        return backend

    return _build


@pytest.fixture
def self_profile():
    return {
        "name": "Maya",
        "role": "Founder",
        "company": "Loop Labs",
        "school": "Northeastern",
        "interests": ["AI", "climbing"],
        "goals_next_90_days": ["hire a designer"],
        "help_offer": ["seed intros", "product feedback"],
    }


@pytest.fixture
def other_profile():
    return {
        "name": "Sam",
        "role": "Student",
        "school": "northeastern",
        "interests": ["ai", "pottery"],
        "goals_next_90_days": ["raise a seed round"],
        "help_offer": [],
    }
