"""
Cosine-similarity top-K search over the in-memory corpus.
"""

import logging
from typing import List, Sequence

import numpy as np

from ytravel_rag.errors import DimensionMismatchError
from ytravel_rag.rag.models import Document, EmbeddedDocument

logger = logging.getLogger(__name__)

# Generic retrieval vs. the chat-answering path
DEFAULT_TOP_K = 5
CHAT_TOP_K = 10

# Score given to zero-norm vectors; sorts after every real similarity
ZERO_NORM_SCORE = float('-inf')


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns ZERO_NORM_SCORE if either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    a = np.asarray(vec_a, dtype=float)
    b = np.asarray(vec_b, dtype=float)
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Vector dimensions differ: {a.shape[0]} != {b.shape[0]}",
            {'left': a.shape[0], 'right': b.shape[0]}
        )

    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0:
        return ZERO_NORM_SCORE
    return float(np.dot(a, b) / norm)


def score_corpus(query_vector: Sequence[float], corpus: Sequence[EmbeddedDocument]) -> np.ndarray:
    """
    Cosine similarity of the query against every corpus vector.

    Raises:
        DimensionMismatchError: If the query dimension differs from the corpus
    """
    query = np.asarray(query_vector, dtype=float)
    try:
        matrix = np.asarray([doc.embedding for doc in corpus], dtype=float)
    except ValueError as e:
        raise DimensionMismatchError(f"Corpus embeddings do not share one dimension: {e}") from e

    if matrix.ndim != 2 or query.ndim != 1 or matrix.shape[1] != query.shape[0]:
        corpus_dim = corpus[0].dimension if corpus else 0
        raise DimensionMismatchError(
            f"Query dimension {len(query_vector)} does not match corpus dimension {corpus_dim}",
            {'query_dimension': len(query_vector), 'corpus_dimension': corpus_dim}
        )

    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query

    scores = np.full(len(corpus), ZERO_NORM_SCORE)
    nonzero = norms > 0
    scores[nonzero] = dots[nonzero] / norms[nonzero]
    return scores


def top_k(
    query_vector: Sequence[float],
    corpus: Sequence[EmbeddedDocument],
    k: int = DEFAULT_TOP_K
) -> List[Document]:
    """
    Return the k documents most similar to the query vector.

    Ordered by descending cosine similarity; equal scores keep corpus order.

    Args:
        query_vector: Embedded query
        corpus: Embedded documents sharing one dimension
        k: Maximum number of results (clamped to the corpus size)

    Returns:
        Up to k documents

    Raises:
        ValueError: If k is not positive
        DimensionMismatchError: If the query dimension differs from the corpus
    """
    if k < 1:
        raise ValueError(f"k must be positive, got {k}")
    if not corpus:
        return []

    scores = score_corpus(query_vector, corpus)
    # Stable sort on negated scores keeps corpus order for ties
    order = np.argsort(-scores, kind='stable')[:min(k, len(corpus))]

    return [corpus[int(i)].document for i in order]
