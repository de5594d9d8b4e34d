"""
Integration tests for the learning-path pipeline.

Runs ingest and generation against an in-memory SQLite store with a
deterministic embedder and a scripted generation client.
"""
from uuid import uuid4

import pytest

from pathgen.exceptions import DocumentNotFound, EmptyContent, GenerationError, InsufficientContent
from pathgen.generation import BatchOrchestrator, LearningPathGenerator
from pathgen.ingest import IngestService

TOPICS = ["IP Addressing", "Subnetting", "Routing", "Switching", "VLANs", "NAT"]


@pytest.fixture
def pauses():
    return []


@pytest.fixture
def make_generator(store, pauses):
    def _make(client):
        orchestrator = BatchOrchestrator(
            client, batch_size=5, activities_per_section=2, pause_seconds=1.0, sleep=pauses.append
        )
        return LearningPathGenerator(store, client, orchestrator=orchestrator, min_section_chars=50)
    return _make


@pytest.fixture
def six_section_document(store, embedder):
    document = store.create_document(path="uploads/networking.md", doc_type="md", source="upload")
    for index, topic in enumerate(TOPICS):
        content = f"{topic}\n{topic} is configured on network devices and verified with show commands."
        result = embedder.embed(content)
        store.add_section(
            document_id=document.id,
            heading=topic,
            content=content,
            slug=topic.lower().replace(" ", "-"),
            token_count=result.token_count,
            embedding=result.to_bytes(),
            chunk_index=index,
        )
    store.add_section(
        document_id=document.id, heading="Notes", content="Notes\ntoo short",
        slug="notes", token_count=3, embedding=None, chunk_index=len(TOPICS),
    )
    return document


class TestLearningPathGeneration:

    def test_failed_first_batch_end_to_end(self, store, make_generator, scripted_client, six_section_document, pauses):
        client = scripted_client([GenerationError("rate limited")])

        result = make_generator(client).generate_learning_path(six_section_document.id)

        assert [len(batch) for _, batch in client.calls] == [5, 1]
        assert len(result.activities) == 12
        assert sum(a.from_fallback for a in result.activities) == 10
        assert result.activities_created == 12
        assert result.used_fallback_batches == 1
        assert result.learning_path.title == "Learning Path: networking"
        assert result.learning_path.duration_estimate_hours == 3
        assert pauses == [1.0]

        stored = store.list_activities(result.learning_path.id)
        assert len(stored) == 12
        assert store.get_learning_path(result.learning_path.id).duration_estimate_hours == 3

    def test_short_sections_excluded(self, make_generator, scripted_client, six_section_document):
        client = scripted_client()
        result = make_generator(client).generate_learning_path(six_section_document.id)
        headings = [c["heading"] for _, batch in client.calls for c in batch]
        assert "Notes" not in headings
        assert result.used_fallback_batches == 0
        assert {a.section_id for a in result.activities}.isdisjoint({None})

    def test_document_context_passed_to_client(self, make_generator, scripted_client, six_section_document):
        client = scripted_client()
        make_generator(client).generate_learning_path(six_section_document.id)
        assert client.calls[0][0] == "Document: uploads/networking.md"

    def test_every_run_creates_a_new_path(self, store, make_generator, scripted_client, six_section_document):
        generator = make_generator(scripted_client())
        first = generator.generate_learning_path(six_section_document.id)
        second = generator.generate_learning_path(six_section_document.id)
        assert first.learning_path.id != second.learning_path.id
        assert len(store.list_activities(first.learning_path.id)) == 12
        assert len(store.list_activities(second.learning_path.id)) == 12


class TestPipelineErrors:

    def test_unknown_document(self, make_generator, scripted_client):
        with pytest.raises(DocumentNotFound):
            make_generator(scripted_client()).generate_learning_path(uuid4())

    def test_document_without_sections(self, store, make_generator, scripted_client):
        document = store.create_document(path=None, doc_type="text", source="upload")
        with pytest.raises(EmptyContent):
            make_generator(scripted_client()).generate_learning_path(document.id)

    def test_only_short_sections(self, store, make_generator, scripted_client):
        document = store.create_document(path=None, doc_type="text", source="upload")
        store.add_section(
            document_id=document.id, heading="Tiny", content="Tiny\nbody",
            slug="tiny", token_count=2, embedding=None,
        )
        client = scripted_client()
        with pytest.raises(InsufficientContent):
            make_generator(client).generate_learning_path(document.id)
        assert client.calls == []


class TestIngestThenGenerate:

    def test_uploaded_document_to_learning_path(self, store, embedder, make_generator, scripted_client, sample_document_text):
        document = IngestService(store, embedder, max_chunk_size=10).ingest_document(
            sample_document_text, path="guide.md"
        )

        result = make_generator(scripted_client()).generate_learning_path(document.id)

        assert len(store.list_sections(document.id)) == 4
        assert len(result.activities) == 8
        assert result.activities_created == 8
        assert result.learning_path.title == "Learning Path: guide"
        assert result.learning_path.duration_estimate_hours == 2
