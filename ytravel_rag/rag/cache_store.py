"""
Embedding cache persistence

The whole corpus is stored as a single JSON file of
{id, title, text, embedding} records. Writes go to a temporary file that is
renamed into place, so a reader sees either the previous file or the new one.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Sequence, Union

from ytravel_rag.errors import CacheCorruptError
from ytravel_rag.rag.models import EmbeddedDocument

logger = logging.getLogger(__name__)


class CacheStatus(str, Enum):
    VALID = "valid"
    ABSENT = "absent"
    CORRUPT = "corrupt"


@dataclass
class CacheLoadResult:
    """Outcome of EmbeddingCacheStore.load()."""
    status: CacheStatus
    documents: List[EmbeddedDocument] = field(default_factory=list)
    reason: str = ""

    @property
    def is_valid(self) -> bool:
        return self.status is CacheStatus.VALID


def validate_dimensions(documents: Sequence[EmbeddedDocument]) -> int:
    """
    Check that every embedding shares one dimensionality.

    Returns:
        The shared dimension (0 for an empty collection)

    Raises:
        CacheCorruptError: If dimensions differ
    """
    if not documents:
        return 0

    dimension = documents[0].dimension
    for position, document in enumerate(documents):
        if document.dimension != dimension:
            raise CacheCorruptError(
                f"Embedding dimension mismatch at record {position}: "
                f"{document.dimension} != {dimension}",
                {'position': position, 'id': document.id}
            )
    return dimension


class EmbeddingCacheStore:
    """File-backed store for the embedded corpus."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def _parse(self, content: str) -> List[EmbeddedDocument]:
        try:
            records = json.loads(content)
        except ValueError as e:
            raise CacheCorruptError(f"Unparsable cache file: {e}") from e

        if not isinstance(records, list):
            raise CacheCorruptError("Cache file does not contain a record list")
        if not records:
            raise CacheCorruptError("Cache file contains no records")

        documents = []
        for position, record in enumerate(records):
            try:
                documents.append(EmbeddedDocument.from_record(record))
            except (KeyError, TypeError, ValueError) as e:
                raise CacheCorruptError(
                    f"Invalid cache record {position}: {e}",
                    {'position': position}
                ) from e

        validate_dimensions(documents)
        return documents

    def load(self) -> CacheLoadResult:
        """
        Load the cached corpus.

        Returns:
            CacheLoadResult with status VALID, ABSENT or CORRUPT. Documents
            are only populated for VALID.
        """
        if not self.exists():
            logger.warning(f"No existing embeddings file found at {self.path}. Will compute embeddings.")
            return CacheLoadResult(status=CacheStatus.ABSENT)

        try:
            content = self.path.read_text(encoding='utf-8')
            documents = self._parse(content)
        except (OSError, UnicodeDecodeError, CacheCorruptError) as e:
            logger.warning(f"⚠️ Embeddings file {self.path} is corrupt, rebuilding: {e}")
            return CacheLoadResult(status=CacheStatus.CORRUPT, reason=str(e))

        logger.info(f"Loaded {len(documents)} embeddings from {self.path}")
        return CacheLoadResult(status=CacheStatus.VALID, documents=documents)

    def save(self, documents: Sequence[EmbeddedDocument]) -> None:
        """
        Persist the corpus atomically.

        Raises:
            CacheCorruptError: If the documents do not share one dimension
            OSError: If the file cannot be written
        """
        validate_dimensions(documents)
        records = [document.to_record() for document in documents]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info(f"Embeddings saved to {self.path}")

    def clear(self) -> bool:
        """
        Remove the cache file so the next build starts cold.

        Returns:
            True if a file was removed
        """
        if self.exists():
            self.path.unlink()
            logger.info(f"🗑️ Removed embeddings file {self.path}")
            return True
        return False
