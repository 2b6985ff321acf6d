"""
Batching adapter for embedding providers

Wraps any LangChain Embeddings backend so that arbitrarily long text lists are
submitted in provider-sized batches with a fixed pause between submissions.
Provider calls are blocking, so they run in a worker thread and only suspend
the awaiting task.
"""

import asyncio
import logging
import math
from typing import Awaitable, Callable, List, Sequence

from langchain_core.embeddings import Embeddings

from ytravel_rag.errors import EmbeddingBatchError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 96
DEFAULT_PACE_SECONDS = 10.0


class EmbeddingBatcher:
    """
    Batches and paces calls to an embedding backend.

    Output order always matches input order: vector i belongs to text i.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        batch_size: int = DEFAULT_BATCH_SIZE,
        pace_seconds: float = DEFAULT_PACE_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize the batcher.

        Args:
            embeddings: Backend implementing embed_documents / embed_query
            batch_size: Maximum texts per provider request
            pace_seconds: Pause between successive batch submissions
            sleep: Coroutine used for pacing (injectable for tests)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if pace_seconds < 0:
            raise ValueError("pace_seconds must not be negative")

        self.embeddings = embeddings
        self.batch_size = batch_size
        self.pace_seconds = pace_seconds
        self._sleep = sleep

    def batch_count(self, total: int) -> int:
        return math.ceil(total / self.batch_size)

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed texts in batches.

        Args:
            texts: Texts to embed

        Returns:
            One vector per input text, in input order

        Raises:
            EmbeddingBatchError: If a batch call fails or returns the wrong
                number of vectors
        """
        texts = list(texts)
        total_batches = self.batch_count(len(texts))
        vectors: List[List[float]] = []

        for batch_index, start in enumerate(range(0, len(texts), self.batch_size)):
            if batch_index > 0 and self.pace_seconds:
                await self._sleep(self.pace_seconds)

            batch = texts[start:start + self.batch_size]
            logger.info(f"Embedding batch {batch_index + 1} of {total_batches}...")

            try:
                result = await asyncio.to_thread(self.embeddings.embed_documents, batch)
            except Exception as e:
                logger.error(f"❌ Embedding batch {batch_index + 1} of {total_batches} failed: {e}")
                raise EmbeddingBatchError(
                    f"Embedding batch {batch_index + 1} of {total_batches} failed: {e}",
                    batch_index=batch_index,
                    total_batches=total_batches,
                    embedded_count=len(vectors)
                ) from e

            if len(result) != len(batch):
                raise EmbeddingBatchError(
                    f"Embedding batch {batch_index + 1} returned {len(result)} vectors for {len(batch)} texts",
                    batch_index=batch_index,
                    total_batches=total_batches,
                    embedded_count=len(vectors)
                )

            vectors.extend(list(vector) for vector in result)

        return vectors

    async def embed_query(self, text: str) -> List[float]:
        """Embed a single query text (one request, no pacing)."""
        vector = await asyncio.to_thread(self.embeddings.embed_query, text)
        return list(vector)
