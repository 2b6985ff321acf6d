"""
Shared fixtures: fake embedding/chat backends and sample corpus files.
"""

import json
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
from langchain_core.embeddings import Embeddings

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ytravel_rag.integrations.chat_client import ChatResponse  # noqa: E402
from ytravel_rag.rag.models import Document, EmbeddedDocument  # noqa: E402


class FakeEmbeddings(Embeddings):
    """
    In-memory Embeddings backend.

    Vectors come from `vectors` when the text is known, otherwise from
    `default`. Every embed_documents call is recorded in `calls`.
    """

    def __init__(
        self,
        vectors: Optional[Dict[str, List[float]]] = None,
        default: Callable[[str], List[float]] = lambda text: [float(len(text)), 1.0],
        fail_on_call: Optional[int] = None
    ):
        self.vectors = vectors or {}
        self.default = default
        self.fail_on_call = fail_on_call
        self.calls: List[List[str]] = []
        self.query_calls: List[str] = []

    def _vector(self, text: str) -> List[float]:
        return list(self.vectors.get(text) or self.default(text))

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise RuntimeError("provider unavailable")
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> List[float]:
        self.query_calls.append(text)
        if self.fail_on_call == 0:
            raise RuntimeError("provider unavailable")
        return self._vector(text)


class FakeChatClient:
    """Records chat() calls and returns a canned response."""

    def __init__(self, text: str = "Here are some ideas.", fail: bool = False):
        self.text = text
        self.fail = fail
        self.calls = []

    def chat(self, message, documents=(), preamble=None, temperature=0.3, max_tokens=None):
        self.calls.append({
            'message': message,
            'documents': list(documents),
            'preamble': preamble,
            'temperature': temperature,
            'max_tokens': max_tokens,
        })
        if self.fail:
            raise RuntimeError("chat provider down")
        return ChatResponse(text=self.text, citations=[{'start': 0, 'end': 4, 'text': 'Here'}])


def embedded(doc_id: str, embedding: List[float], title: Optional[str] = None, text: str = "") -> EmbeddedDocument:
    return EmbeddedDocument(
        document=Document(id=doc_id, title=title or doc_id, text=text),
        embedding=embedding
    )


@pytest.fixture
def fake_embeddings():
    return FakeEmbeddings()


@pytest.fixture
def fake_chat():
    return FakeChatClient()


@pytest.fixture
def sample_sources():
    """Record payloads for every source file."""
    return {
        'tour_details.json': [
            {
                'name': 'Classic Japan',
                'description': 'Tokyo to Kyoto by rail.',
                'details': [{'body': 'Day 1 Tokyo.'}, {'body': 'Day 2 Kyoto.'}],
            },
        ],
        'tours.json': [
            {'name': 'Classic Japan', 'product_line': 'Small group'},
            {'name': 'Iceland Circle', 'product_line': 'Self drive'},
        ],
        'rest_countries.json': [
            {
                'name': {'common': 'Portugal', 'official': 'Portuguese Republic'},
                'capital': ['Lisbon'],
                'region': 'Europe',
                'subregion': 'Southern Europe',
                'population': 10305564,
                'languages': {'por': 'Portuguese'},
                'area': 92090.0,
            },
        ],
        'unesco_sites.json': {
            'query': {
                'row': [
                    {'site': 'Historic Centre of Porto', 'short_description': '<p>Built along the <b>Douro</b>.</p>'},
                ]
            }
        },
        'merged_countries.json': [
            {'name': 'Japan', 'capital': 'Tokyo', 'region': 'Asia', 'population': 125000000,
             'language': 'Japanese', 'currency': 'JPY'},
        ],
    }


@pytest.fixture
def documents_dir(tmp_path, sample_sources):
    """Directory with all five source files written out."""
    for filename, payload in sample_sources.items():
        (tmp_path / filename).write_text(json.dumps(payload), encoding='utf-8')
    return tmp_path
