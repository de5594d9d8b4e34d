"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
an in-memory SQLite document store, a deterministic embedder and a scripted
generation client, so no test needs a network, a model download or Postgres.
"""
import sys
import zlib
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from uuid import uuid4

import numpy as np
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pathgen.db.database import init_db, make_session_factory  # noqa: E402
from pathgen.db.store import DocumentStore  # noqa: E402
from pathgen.semantic.embedding_service import EmbeddingResult  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ========================================
# Test doubles
# ========================================


class HashingEmbedder:
    """
    Bag-of-words embedder: each word adds 1.0 to a crc32-selected dimension.

    Texts sharing words get a positive cosine similarity; disjoint texts
    score close to zero.
    """

    model_name = "hashing-test"

    def __init__(self, dimension: int = 64, fail_on: str | None = None):
        self.dimension = dimension
        self.fail_on = fail_on
        self.calls: list[str] = []

    def embed(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise RuntimeError("embedding backend unavailable")
        vector = np.zeros(self.dimension, dtype=np.float32)
        words = text.lower().split()
        for word in words:
            vector[zlib.crc32(word.encode("utf-8")) % self.dimension] += 1.0
        return EmbeddingResult(
            text=text,
            embedding=vector,
            token_count=len(words),
            model_name=self.model_name,
            generated_at=datetime.utcnow(),
        )


class ScriptedGenerationClient:
    """
    Generation client that replays one scripted reply per call.

    A reply is either a value to return or an exception to raise. When the
    script runs out, two valid activities per section are produced.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls: list[tuple[str, list[dict]]] = []

    def generate(self, system_context, batch):
        self.calls.append((system_context, batch))
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return valid_activities(batch)


def valid_activities(batch):
    """Well-formed raw activities (slide then quiz) for every section context."""
    activities = []
    for context in batch:
        activities.append({
            "title": f"Overview of {context['heading']}",
            "description": "Read through the key points.",
            "type": "slide",
            "config": {"content": context["excerpt"], "narration": "Let's begin."},
        })
        activities.append({
            "title": f"Check: {context['heading']}",
            "description": "Test your understanding.",
            "type": "quiz",
            "config": {
                "question": f"What does {context['heading']} cover?",
                "options": ["A", "B", "C", "D"],
                "correct_answer": 1,
            },
        })
    return activities


def make_section(heading: str = "Routing Basics", content: str | None = None, section_id=None):
    """A section-shaped object for components that only read id/heading/content."""
    if content is None:
        content = (
            "Routers forward packets between networks. Each router keeps a routing "
            "table, and the table maps destination prefixes to next hops."
        )
    return SimpleNamespace(id=section_id or uuid4(), heading=heading, content=content)


# ========================================
# Fixtures
# ========================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return DocumentStore(session_factory)


@pytest.fixture
def embedder():
    return HashingEmbedder()


@pytest.fixture
def scripted_client():
    """Factory for ScriptedGenerationClient instances."""
    return ScriptedGenerationClient


@pytest.fixture
def sample_section():
    """Provide a section with enough content to qualify for generation."""
    return make_section()


@pytest.fixture
def sample_sections():
    """Six qualifying sections, as in a short networking chapter."""
    topics = ["IP Addressing", "Subnetting", "Routing", "Switching", "VLANs", "NAT"]
    return [
        make_section(
            heading=topic,
            content=(
                f"{topic} is a core networking topic. Engineers configure {topic.lower()} "
                f"on devices, and they verify it with show commands."
            ),
        )
        for topic in topics
    ]


@pytest.fixture
def sample_document_text():
    """Markdown document with a preamble and nested headings."""
    return (
        "This guide introduces basic networking concepts for new engineers.\n"
        "# Addressing\n"
        "Every host on an IP network needs a unique address, and addresses are grouped "
        "into subnets.\n"
        "## Subnet Masks\n"
        "A subnet mask splits an address into its network part and its host part. "
        "Masks are written in dotted decimal or prefix notation.\n"
        "# Routing\n"
        "Routers forward packets between networks. Each router keeps a routing table "
        "that maps destination prefixes to next hops.\n"
    )


@pytest.fixture
def section_factory():
    """Factory for section-shaped objects."""
    return make_section


@pytest.fixture
def activity_factory():
    """Factory for well-formed raw activities for a batch of section contexts."""
    return valid_activities


@pytest.fixture
def embedder_factory():
    """Factory for HashingEmbedder instances."""
    return HashingEmbedder
