"""
RAG package

Corpus normalization, embedding cache, similarity search and the query
service that ties them together.
"""

from .models import Document, EmbeddedDocument
from .document_loader import SourceKind, normalize_record, load_documents
from .cache_store import EmbeddingCacheStore, CacheStatus, CacheLoadResult
from .corpus import CorpusHandle, CorpusState
from .pipeline import CorpusPipeline
from .search import cosine_similarity, top_k, DEFAULT_TOP_K, CHAT_TOP_K
from .query_service import QueryService, QueryResult, AnswerResult, initialize_rag_system

__all__ = [
    'Document',
    'EmbeddedDocument',
    'SourceKind',
    'normalize_record',
    'load_documents',
    'EmbeddingCacheStore',
    'CacheStatus',
    'CacheLoadResult',
    'CorpusHandle',
    'CorpusState',
    'CorpusPipeline',
    'cosine_similarity',
    'top_k',
    'DEFAULT_TOP_K',
    'CHAT_TOP_K',
    'QueryService',
    'QueryResult',
    'AnswerResult',
    'initialize_rag_system',
]
