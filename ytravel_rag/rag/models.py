"""
Document model shared by the normalizer, cache store and search engine.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Document:
    """
    Normalized unit of retrievable text.

    Attributes:
        id: Stable identifier, "{source}_{name}"
        title: Short human label
        text: Concatenated descriptive fields (may be empty)
    """
    id: str
    title: str
    text: str = ""

    def embedding_text(self) -> str:
        """Text submitted to the embedding provider and the chat provider."""
        return f"{self.title}. {self.text}"

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'title': self.title, 'text': self.text}


@dataclass(frozen=True)
class EmbeddedDocument:
    """A Document paired with its embedding vector."""
    document: Document
    embedding: List[float] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def dimension(self) -> int:
        return len(self.embedding)

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the on-disk cache record."""
        record = self.document.to_dict()
        record['embedding'] = list(self.embedding)
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'EmbeddedDocument':
        """
        Build from an on-disk cache record.

        Accepts the legacy "snippet" key in place of "text".

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        if not isinstance(record, dict):
            raise TypeError(f"cache record must be an object, got {type(record).__name__}")

        text = record['text'] if 'text' in record else record.get('snippet', '')
        embedding = record['embedding']
        if not isinstance(embedding, list) or not embedding:
            raise ValueError(f"record {record.get('id')!r} has no embedding")

        document = Document(
            id=str(record['id']),
            title=str(record.get('title') or ''),
            text=str(text or '')
        )
        return cls(document=document, embedding=[float(value) for value in embedding])
