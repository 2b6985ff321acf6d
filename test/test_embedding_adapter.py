"""
Tests for the batching/pacing embedding adapter.
"""

import asyncio

import pytest

from conftest import FakeEmbeddings
from ytravel_rag.errors import EmbeddingBatchError
from ytravel_rag.integrations.embedding_adapter import EmbeddingBatcher


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class TestBatching:

    def test_splits_into_ceil_batches(self):
        embeddings = FakeEmbeddings()
        batcher = EmbeddingBatcher(embeddings, batch_size=3, pace_seconds=0)

        vectors = asyncio.run(batcher.embed([f"text {i}" for i in range(7)]))

        assert len(vectors) == 7
        assert [len(call) for call in embeddings.calls] == [3, 3, 1]

    def test_preserves_index_correspondence(self):
        texts = [f"doc-{i}" * (i + 1) for i in range(10)]
        embeddings = FakeEmbeddings(default=lambda text: [float(len(text)), 0.5])
        batcher = EmbeddingBatcher(embeddings, batch_size=4, pace_seconds=0)

        vectors = asyncio.run(batcher.embed(texts))

        for text, vector in zip(texts, vectors):
            assert vector == [float(len(text)), 0.5]

    def test_empty_input_makes_no_calls(self):
        embeddings = FakeEmbeddings()
        batcher = EmbeddingBatcher(embeddings, batch_size=4, pace_seconds=0)

        assert asyncio.run(batcher.embed([])) == []
        assert embeddings.calls == []

    def test_default_batch_size(self):
        batcher = EmbeddingBatcher(FakeEmbeddings())
        assert batcher.batch_size == 96
        assert batcher.pace_seconds == 10
        assert batcher.batch_count(97) == 2

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            EmbeddingBatcher(FakeEmbeddings(), batch_size=0)


class TestPacing:

    def test_waits_between_batches_only(self):
        sleep = RecordingSleep()
        batcher = EmbeddingBatcher(FakeEmbeddings(), batch_size=2, pace_seconds=10, sleep=sleep)

        asyncio.run(batcher.embed(["a", "b", "c", "d", "e"]))

        # 3 batches -> 2 pauses
        assert sleep.delays == [10, 10]

    def test_single_batch_does_not_wait(self):
        sleep = RecordingSleep()
        batcher = EmbeddingBatcher(FakeEmbeddings(), batch_size=5, pace_seconds=10, sleep=sleep)

        asyncio.run(batcher.embed(["a", "b"]))

        assert sleep.delays == []

    def test_query_does_not_wait(self):
        sleep = RecordingSleep()
        embeddings = FakeEmbeddings(vectors={"where to go": [1.0, 0.0]})
        batcher = EmbeddingBatcher(embeddings, batch_size=5, pace_seconds=10, sleep=sleep)

        vector = asyncio.run(batcher.embed_query("where to go"))

        assert vector == [1.0, 0.0]
        assert embeddings.query_calls == ["where to go"]
        assert sleep.delays == []


class TestFailures:

    def test_failed_batch_reports_context(self):
        embeddings = FakeEmbeddings(fail_on_call=2)
        batcher = EmbeddingBatcher(embeddings, batch_size=2, pace_seconds=0)

        with pytest.raises(EmbeddingBatchError) as exc_info:
            asyncio.run(batcher.embed(["a", "b", "c", "d", "e", "f"]))

        error = exc_info.value
        assert error.batch_index == 1
        assert error.total_batches == 3
        assert error.embedded_count == 2
        assert error.details['embedded_count'] == 2
        assert isinstance(error.__cause__, RuntimeError)

    def test_stops_after_failed_batch(self):
        embeddings = FakeEmbeddings(fail_on_call=1)
        batcher = EmbeddingBatcher(embeddings, batch_size=2, pace_seconds=0)

        with pytest.raises(EmbeddingBatchError):
            asyncio.run(batcher.embed(["a", "b", "c"]))

        assert len(embeddings.calls) == 1

    def test_short_response_is_a_batch_failure(self):
        class DroppingEmbeddings(FakeEmbeddings):
            def embed_documents(self, texts):
                return super().embed_documents(texts)[:-1]

        batcher = EmbeddingBatcher(DroppingEmbeddings(), batch_size=3, pace_seconds=0)

        with pytest.raises(EmbeddingBatchError) as exc_info:
            asyncio.run(batcher.embed(["a", "b", "c"]))

        assert exc_info.value.batch_index == 0
        assert exc_info.value.embedded_count == 0
