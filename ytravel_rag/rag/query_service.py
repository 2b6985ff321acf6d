"""
Query service

Owns the corpus handle, runs the startup build in the background and serves
the two request operations: answering a travel question from retrieved
documents and generating a free-form itinerary.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ytravel_rag.config import Config
from ytravel_rag.errors import UpstreamDependencyError, UserInputError
from ytravel_rag.integrations.chat_client import get_chat_client
from ytravel_rag.integrations.embedding_adapter import EmbeddingBatcher
from ytravel_rag.integrations.embedding_client import get_embedding_client
from ytravel_rag.prompts import ITINERARY_PROMPT, TRAVEL_ASSISTANT_PREAMBLE
from ytravel_rag.rag.cache_store import EmbeddingCacheStore
from ytravel_rag.rag.corpus import CorpusHandle
from ytravel_rag.rag.models import Document
from ytravel_rag.rag.pipeline import CorpusPipeline
from ytravel_rag.rag.search import CHAT_TOP_K, DEFAULT_TOP_K, top_k

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    documents: List[Document] = field(default_factory=list)


@dataclass
class AnswerResult:
    documents: List[Document]
    text: str
    citations: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'documents': [doc.to_dict() for doc in self.documents],
            'text': self.text,
            'generatedText': self.text,
            'citations': self.citations,
        }


def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise UserInputError(f"{field_name} is required", {'field': field_name})
    return value.strip()


class QueryService:
    """Retrieval and generation entry point for the HTTP layer."""

    def __init__(
        self,
        pipeline: CorpusPipeline,
        batcher: EmbeddingBatcher,
        chat_client=None,
        corpus: Optional[CorpusHandle] = None,
        retrieval_top_k: int = DEFAULT_TOP_K,
        chat_top_k: int = CHAT_TOP_K,
        chat_temperature: float = 0.3,
        itinerary_temperature: float = 0.7,
        itinerary_max_tokens: int = 1000
    ):
        self.pipeline = pipeline
        self.batcher = batcher
        self.chat_client = chat_client
        self.corpus = corpus or CorpusHandle()
        self.retrieval_top_k = retrieval_top_k
        self.chat_top_k = chat_top_k
        self.chat_temperature = chat_temperature
        self.itinerary_temperature = itinerary_temperature
        self.itinerary_max_tokens = itinerary_max_tokens

    # ------------------------------------------------------------------
    # Corpus lifecycle
    # ------------------------------------------------------------------

    async def warm_up(self, force_rebuild: bool = False) -> bool:
        """
        Build or load the corpus and publish it.

        Failures are logged and recorded on the corpus handle, never raised.

        Returns:
            True if a corpus was published
        """
        if not self.corpus.begin_build():
            logger.info("Corpus build already in progress")
            return False

        try:
            documents = await self.pipeline.ensure_ready(force_rebuild=force_rebuild)
        except Exception as e:
            logger.exception("Corpus build aborted; no cache written")
            self.corpus.fail(str(e))
            return False

        self.corpus.publish(documents)
        return True

    def start_background_build(self, force_rebuild: bool = False) -> threading.Thread:
        """
        Run warm_up() on its own event loop without blocking the caller.

        Returns:
            The started daemon thread
        """
        thread = threading.Thread(
            target=asyncio.run,
            args=(self.warm_up(force_rebuild=force_rebuild),),
            name="corpus-build",
            daemon=True
        )
        thread.start()
        logger.info("🚀 Corpus build started in background")
        return thread

    # ------------------------------------------------------------------
    # Request operations
    # ------------------------------------------------------------------

    async def answer(self, prompt: Any, k: Optional[int] = None) -> QueryResult:
        """
        Retrieve the documents most relevant to a prompt.

        Args:
            prompt: User question
            k: Number of documents (defaults to retrieval_top_k)

        Returns:
            QueryResult with ranked documents

        Raises:
            UserInputError: If the prompt is missing or empty
            NotReadyError: If the corpus is not built yet
            UpstreamDependencyError: If the embedding call fails
            DimensionMismatchError: If the query and corpus dimensions differ
        """
        prompt = _require_text(prompt, "Prompt")
        snapshot = self.corpus.require_ready()
        if not snapshot.documents:
            return QueryResult(documents=[])

        logger.info("Embedding user prompt...")
        try:
            query_vector = await self.batcher.embed_query(prompt)
        except Exception as e:
            logger.error(f"❌ Query embedding failed: {e}")
            raise UpstreamDependencyError(f"Embedding request failed: {e}", {'stage': 'embed'}) from e

        documents = top_k(query_vector, snapshot.documents, self.retrieval_top_k if k is None else k)
        logger.info(f"Retrieved top {len(documents)} documents.")
        return QueryResult(documents=documents)

    async def generate_answer(self, prompt: Any) -> AnswerResult:
        """
        Answer a travel question grounded on the retrieved documents.

        Raises:
            Same as answer(), plus UpstreamDependencyError for the chat call
        """
        prompt = _require_text(prompt, "Prompt")
        chat_client = self._require_chat_client()
        result = await self.answer(prompt, k=self.chat_top_k)

        try:
            response = await asyncio.to_thread(
                chat_client.chat,
                prompt,
                documents=[doc.embedding_text() for doc in result.documents],
                preamble=TRAVEL_ASSISTANT_PREAMBLE,
                temperature=self.chat_temperature
            )
        except Exception as e:
            logger.error(f"❌ Chat request failed: {e}")
            raise UpstreamDependencyError(f"Chat request failed: {e}", {'stage': 'chat'}) from e

        return AnswerResult(documents=result.documents, text=response.text, citations=response.citations)

    async def generate_itinerary(self, user_input: Any) -> str:
        """
        Generate a day-wise holiday itinerary. Does not use the corpus.

        Raises:
            UserInputError: If user_input is missing or empty
            UpstreamDependencyError: If the chat call fails
        """
        user_input = _require_text(user_input, "userInput")
        chat_client = self._require_chat_client()

        try:
            response = await asyncio.to_thread(
                chat_client.chat,
                ITINERARY_PROMPT.format(user_input=user_input),
                temperature=self.itinerary_temperature,
                max_tokens=self.itinerary_max_tokens
            )
        except Exception as e:
            logger.error(f"❌ Itinerary request failed: {e}")
            raise UpstreamDependencyError(f"Itinerary request failed: {e}", {'stage': 'chat'}) from e

        return response.text

    def _require_chat_client(self):
        if self.chat_client is None:
            raise UpstreamDependencyError("Generation provider is not configured", {'stage': 'chat'})
        return self.chat_client


# ============================================================================
# INITIALIZATION HELPER
# ============================================================================

def initialize_rag_system(config=Config) -> QueryService:
    """
    Wire the providers, cache store and pipeline from configuration.

    Does not start the corpus build; call start_background_build() for that.
    """
    embeddings = get_embedding_client(
        provider=config.EMBEDDING_PROVIDER,
        api_key=config.COHERE_API_KEY,
        model=config.EMBEDDING_MODEL,
        base_url=config.COHERE_BASE_URL,
        timeout=config.EMBED_TIMEOUT,
        local_model=config.LOCAL_EMBEDDING_MODEL
    )
    batcher = EmbeddingBatcher(
        embeddings,
        batch_size=config.EMBED_BATCH_SIZE,
        pace_seconds=config.EMBED_PACE_SECONDS
    )
    pipeline = CorpusPipeline(
        documents_dir=config.DOCUMENTS_DIR,
        batcher=batcher,
        store=EmbeddingCacheStore(config.EMBEDDINGS_FILE)
    )

    try:
        chat_client = get_chat_client(
            provider=config.CHAT_PROVIDER,
            cohere_api_key=config.COHERE_API_KEY,
            cohere_model=config.CHAT_MODEL,
            base_url=config.COHERE_BASE_URL,
            gemini_api_key=config.GEMINI_API_KEY,
            gemini_model=config.GEMINI_MODEL,
            timeout=config.EMBED_TIMEOUT
        )
    except ValueError as e:
        logger.warning(f"⚠️ Chat provider unavailable: {e}")
        chat_client = None

    return QueryService(
        pipeline=pipeline,
        batcher=batcher,
        chat_client=chat_client,
        retrieval_top_k=config.RETRIEVAL_TOP_K,
        chat_top_k=config.CHAT_TOP_K,
        chat_temperature=config.CHAT_TEMPERATURE,
        itinerary_temperature=config.ITINERARY_TEMPERATURE,
        itinerary_max_tokens=config.ITINERARY_MAX_TOKENS
    )
