"""
Unit tests for SectionSearch over an in-memory store.
"""
import pytest

from pathgen.semantic.section_search import SectionSearch


@pytest.fixture
def populated(store, embedder):
    document = store.create_document(path="net.md", doc_type="md", source="upload")
    other = store.create_document(path="cats.md", doc_type="md", source="upload")
    texts = [
        (document.id, "Routing", "routers forward packets between networks"),
        (document.id, "Switching", "switches forward frames inside a network"),
        (other.id, "Cats", "cats purr when content"),
    ]
    for index, (doc_id, heading, content) in enumerate(texts):
        result = embedder.embed(content)
        store.add_section(
            document_id=doc_id,
            heading=heading,
            content=content,
            slug=heading.lower(),
            token_count=result.token_count,
            embedding=result.to_bytes(),
            chunk_index=index,
        )
    store.add_section(
        document_id=document.id, heading="No vector", content="routers forward packets",
        slug="no-vector", token_count=0, embedding=None, chunk_index=9,
    )
    return document, other


def test_exact_text_ranks_first(store, embedder, populated):
    search = SectionSearch(store, embedder)
    matches = search.search("routers forward packets between networks", threshold=0.0)
    assert matches[0].section.heading == "Routing"
    assert matches[0].similarity == pytest.approx(1.0)
    assert [m.similarity for m in matches] == sorted((m.similarity for m in matches), reverse=True)


def test_sections_without_embedding_skipped(store, embedder, populated):
    matches = SectionSearch(store, embedder).search("routers forward packets", threshold=-1.0)
    assert "No vector" not in {m.section.heading for m in matches}


def test_document_filter(store, embedder, populated):
    document, other = populated
    matches = SectionSearch(store, embedder).search("cats purr when content", document_id=other.id)
    assert [m.section.heading for m in matches] == ["Cats"]


def test_threshold_and_limit(store, embedder, populated):
    search = SectionSearch(store, embedder)
    assert len(search.search("routers forward packets between networks", threshold=0.0, limit=1)) == 1
    assert search.search("completely unrelated vocabulary xyz", threshold=0.99) == []


def test_dimension_mismatch_skipped(store, embedder_factory, populated):
    matches = SectionSearch(store, embedder_factory(dimension=16)).search("routers", threshold=-1.0)
    assert matches == []


def test_empty_store_does_not_embed_query(store, embedder):
    assert SectionSearch(store, embedder).search("routers") == []
    assert embedder.calls == []
