"""
Corpus readiness handle

Holds the embedded corpus together with its build state. The state and the
document list live in one immutable snapshot that is replaced by a single
assignment, so request handlers always read a consistent pair.

State machine:
    UNINITIALIZED -> BUILDING -> READY | FAILED
    FAILED -> BUILDING (retry)
    READY -> BUILDING (forced rebuild; the old corpus keeps serving)
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ytravel_rag.errors import NotReadyError
from ytravel_rag.rag.models import EmbeddedDocument

logger = logging.getLogger(__name__)

EMPTY_CORPUS_ERROR = "Corpus is empty: no source documents were loaded"


class CorpusState(str, Enum):
    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class CorpusSnapshot:
    state: CorpusState
    documents: Tuple[EmbeddedDocument, ...] = ()
    error: Optional[str] = None

    @property
    def dimension(self) -> int:
        return self.documents[0].dimension if self.documents else 0


class CorpusHandle:
    """Single-writer owner of the in-memory corpus."""

    def __init__(self):
        self._snapshot = CorpusSnapshot(state=CorpusState.UNINITIALIZED)
        # Serializes writers only; readers never take it
        self._write_lock = threading.Lock()

    @property
    def snapshot(self) -> CorpusSnapshot:
        return self._snapshot

    @property
    def state(self) -> CorpusState:
        return self._snapshot.state

    def begin_build(self) -> bool:
        """
        Move to BUILDING.

        Returns:
            False if a build is already running
        """
        with self._write_lock:
            current = self._snapshot
            if current.state is CorpusState.BUILDING:
                return False
            # A rebuild of a ready corpus keeps serving the old documents
            documents = current.documents if current.state is CorpusState.READY else ()
            self._snapshot = CorpusSnapshot(state=CorpusState.BUILDING, documents=documents)
            return True

    def publish(self, documents) -> None:
        """
        Swap in a freshly built or loaded corpus and mark it READY.

        An empty corpus is still READY, but carries EMPTY_CORPUS_ERROR so the
        health endpoint can tell it apart from a populated one.
        """
        documents = tuple(documents)
        error = None if documents else EMPTY_CORPUS_ERROR
        snapshot = CorpusSnapshot(state=CorpusState.READY, documents=documents, error=error)
        with self._write_lock:
            self._snapshot = snapshot

        if documents:
            logger.info(f"✅ Corpus ready ({len(documents)} documents)")
        else:
            logger.error(f"❌ {EMPTY_CORPUS_ERROR}; every query will return no documents")

    def fail(self, error: str) -> None:
        """Mark the build as FAILED, keeping a previously ready corpus."""
        with self._write_lock:
            current = self._snapshot
            if current.documents:
                # A failed rebuild leaves the previous corpus in service
                self._snapshot = CorpusSnapshot(
                    state=CorpusState.READY, documents=current.documents, error=error
                )
            else:
                self._snapshot = CorpusSnapshot(state=CorpusState.FAILED, error=error)
        logger.error(f"❌ Corpus build failed: {error}")

    def require_ready(self) -> CorpusSnapshot:
        """
        Return the current snapshot if it can serve queries.

        Raises:
            NotReadyError: If no corpus has been published yet
        """
        snapshot = self._snapshot
        if snapshot.state is CorpusState.READY or snapshot.documents:
            return snapshot
        raise NotReadyError(
            f"Corpus is not ready (state: {snapshot.state.value})",
            {'state': snapshot.state.value, 'error': snapshot.error}
        )
