"""
Embedding API clients

LangChain-compatible embedding backends for the corpus build and query path:
- CohereEmbeddings: Cohere /embed REST API (default)
- get_local_embeddings: HuggingFace model through LangChain, for offline work

Usage:
    from ytravel_rag.integrations.embedding_client import CohereEmbeddings

    embeddings = CohereEmbeddings(api_key="...")
    vector = embeddings.embed_query("beaches in Portugal")
"""

import requests
import logging
from typing import List, Optional

from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


class CohereEmbeddings(Embeddings):
    """
    Client for the Cohere embedding endpoint.

    Documents are embedded with input_type "search_document" and queries with
    "search_query", as the multilingual v3 models expect.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "embed-multilingual-v3.0",
        base_url: str = "https://api.cohere.com/v1",
        timeout: int = 60,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Cohere embedding client.

        Args:
            api_key: Cohere API key
            model: Embedding model identifier
            base_url: API root (without trailing slash)
            timeout: Request timeout in seconds
            session: Optional requests session (for connection reuse)
        """
        if not api_key:
            raise ValueError("api_key required for CohereEmbeddings")

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

        logger.info(f"🔗 CohereEmbeddings initialized: {self.model}")

    def _embed(self, texts: List[str], input_type: str) -> List[List[float]]:
        try:
            response = self.session.post(
                f"{self.base_url}/embed",
                json={
                    "texts": texts,
                    "model": self.model,
                    "input_type": input_type,
                },
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout
            )
            response.raise_for_status()
            embeddings = response.json()["embeddings"]
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Cohere embed API error: {e}")
            raise

        # embedding_types requests return {"float": [...]}
        if isinstance(embeddings, dict):
            embeddings = embeddings["float"]
        return embeddings

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        """
        Embed multiple documents in one request.

        Args:
            texts: List of texts to embed

        Returns:
            List of embedding vectors, one per text

        Raises:
            requests.RequestException: If API call fails
        """
        if not texts:
            return []
        return self._embed(list(texts), "search_document")

    def embed_query(self, text: str) -> List[float]:
        """
        Embed a single query text.

        Raises:
            requests.RequestException: If API call fails
        """
        return self._embed([text], "search_query")[0]


def get_local_embeddings(model_name: str = "sentence-transformers/all-MiniLM-L6-v2") -> Embeddings:
    """
    Load a local HuggingFace embedding model.

    Use this when no Cohere key is available (development/testing).
    """
    logger.info(f"🤖 Loading local embedding model: {model_name}")

    from langchain_huggingface import HuggingFaceEmbeddings

    embeddings = HuggingFaceEmbeddings(
        model_name=model_name,
        model_kwargs={'device': 'cpu'},
        encode_kwargs={'normalize_embeddings': True}
    )

    logger.info("✅ Local embedding model loaded")
    return embeddings


def get_embedding_client(
    provider: str = "cohere",
    api_key: Optional[str] = None,
    model: str = "embed-multilingual-v3.0",
    base_url: str = "https://api.cohere.com/v1",
    timeout: int = 60,
    local_model: str = "sentence-transformers/all-MiniLM-L6-v2"
) -> Embeddings:
    """
    Factory function to get the configured embedding backend.

    Args:
        provider: "cohere" or "local"
        api_key: Cohere API key (required for "cohere")

    Returns:
        Embeddings instance

    Raises:
        ValueError: If configuration is invalid
    """
    if provider == "cohere":
        return CohereEmbeddings(api_key=api_key, model=model, base_url=base_url, timeout=timeout)
    if provider == "local":
        return get_local_embeddings(local_model)
    raise ValueError(f"Unknown embedding provider: {provider}")
