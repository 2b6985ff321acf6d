"""
Corpus embedding pipeline

Warm start: load the cached embeddings and return them without calling the
provider. Cold start: normalize every source, embed all documents in batches,
persist the result and return it. A failed embedding run persists nothing.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Union

from ytravel_rag.integrations.embedding_adapter import EmbeddingBatcher
from ytravel_rag.rag.cache_store import EmbeddingCacheStore
from ytravel_rag.rag.document_loader import DEFAULT_SOURCES, SourceKind, load_documents
from ytravel_rag.rag.models import EmbeddedDocument

logger = logging.getLogger(__name__)


class CorpusPipeline:
    """Builds or loads the embedded corpus."""

    def __init__(
        self,
        documents_dir: Union[str, Path],
        batcher: EmbeddingBatcher,
        store: EmbeddingCacheStore,
        sources: Iterable[SourceKind] = DEFAULT_SOURCES
    ):
        self.documents_dir = Path(documents_dir)
        self.batcher = batcher
        self.store = store
        self.sources = tuple(sources)

    async def ensure_ready(self, force_rebuild: bool = False) -> List[EmbeddedDocument]:
        """
        Return the embedded corpus, building it if no valid cache exists.

        Args:
            force_rebuild: Ignore any existing cache and re-embed everything

        Returns:
            Embedded documents in corpus order

        Raises:
            EmbeddingBatchError: If the provider fails; nothing is saved
        """
        if force_rebuild:
            logger.info("🔄 Force rebuilding embeddings...")
        else:
            result = await asyncio.to_thread(self.store.load)
            if result.is_valid:
                return result.documents

        return await self.build()

    async def build(self) -> List[EmbeddedDocument]:
        """Normalize, embed and persist the full corpus."""
        documents = await asyncio.to_thread(load_documents, self.documents_dir, self.sources)
        if not documents:
            logger.warning("⚠️ No documents loaded from any source; nothing to embed")
            return []

        logger.info(
            f"Embedding {len(documents)} documents in "
            f"{self.batcher.batch_count(len(documents))} batches..."
        )
        vectors = await self.batcher.embed([doc.embedding_text() for doc in documents])

        embedded = [
            EmbeddedDocument(document=document, embedding=vector)
            for document, vector in zip(documents, vectors)
        ]

        await asyncio.to_thread(self.store.save, embedded)
        logger.info("Embeddings ready.")
        return embedded
