"""
Integration clients for external AI providers.

- Embedding API (Cohere, or a local HuggingFace model)
- Chat API (Cohere, or Gemini)
"""

from .embedding_client import CohereEmbeddings, get_embedding_client
from .embedding_adapter import EmbeddingBatcher
from .chat_client import ChatResponse, CohereChatClient, GeminiChatClient, get_chat_client

__all__ = [
    "CohereEmbeddings",
    "get_embedding_client",
    "EmbeddingBatcher",
    "ChatResponse",
    "CohereChatClient",
    "GeminiChatClient",
    "get_chat_client",
]
