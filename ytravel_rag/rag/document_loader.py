"""
Corpus normalization

Converts the travel record collections (tours, countries, heritage sites) into
uniform Document objects. Each source kind has its own mapping; missing fields
degrade to empty strings and a broken source file is skipped without stopping
the others.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from bs4 import BeautifulSoup

from ytravel_rag.errors import SourceReadError
from ytravel_rag.rag.models import Document

logger = logging.getLogger(__name__)


class SourceKind(str, Enum):
    """Known corpus sources. The value is the document id prefix."""
    DETAILED_TOUR = "tour_details"
    TOUR_SUMMARY = "tours"
    COUNTRY_PROFILE = "rest_countries"
    HERITAGE_SITE = "unesco_sites"
    MERGED_COUNTRY_PROFILE = "merged_countries"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"


# Build order of the corpus; document order follows it
DEFAULT_SOURCES: Tuple[SourceKind, ...] = (
    SourceKind.DETAILED_TOUR,
    SourceKind.TOUR_SUMMARY,
    SourceKind.COUNTRY_PROFILE,
    SourceKind.HERITAGE_SITE,
    SourceKind.MERGED_COUNTRY_PROFILE,
)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _field(value: Any) -> str:
    """Render an optional field; None becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip()


def _get(record: Dict, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    value: Any = record
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def strip_html(markup: Optional[str]) -> str:
    """
    Remove HTML tags from a description field.

    Example:
        "<p>Ancient <b>city</b></p>" -> "Ancient city"
    """
    if not markup:
        return ""
    return BeautifulSoup(str(markup), "html.parser").get_text().strip()


# ============================================================================
# PER-KIND MAPPINGS
# ============================================================================

def _detailed_tour(record: Dict) -> Tuple[str, str]:
    details = record.get('details') or []
    bodies = [_field(d.get('body')) for d in details if isinstance(d, dict)]
    parts = [_field(record.get('description')), " ".join(b for b in bodies if b)]
    return _field(record.get('name')), " ".join(p for p in parts if p)


def _tour_summary(record: Dict) -> Tuple[str, str]:
    return _field(record.get('name')), _field(record.get('product_line'))


def _country_profile(record: Dict) -> Tuple[str, str]:
    languages = record.get('languages') or {}
    if isinstance(languages, dict):
        language_list = ", ".join(_field(v) for v in languages.values())
    else:
        language_list = ", ".join(_field(v) for v in languages)

    capitals = record.get('capital') or []
    if isinstance(capitals, str):
        capital = capitals
    else:
        capital = _field(capitals[0]) if capitals else ""

    text = (
        f"Official Name: {_field(_get(record, 'name', 'official'))}. "
        f"Capital: {capital}. "
        f"Region: {_field(record.get('region'))}. "
        f"Subregion: {_field(record.get('subregion'))}. "
        f"Population: {_field(record.get('population'))}. "
        f"Languages: {language_list}. "
        f"Area: {_field(record.get('area'))} sq km."
    )
    return _field(_get(record, 'name', 'common')), text


def _heritage_site(record: Dict) -> Tuple[str, str]:
    return _field(record.get('site')), strip_html(record.get('short_description'))


def _merged_country_profile(record: Dict) -> Tuple[str, str]:
    text = (
        f"Capital: {_field(record.get('capital'))}, "
        f"Region: {_field(record.get('region'))}, "
        f"Population: {_field(record.get('population'))}, "
        f"Language: {_field(record.get('language'))}, "
        f"Currency: {_field(record.get('currency'))}"
    )
    return _field(record.get('name')), text


_MAPPERS: Dict[SourceKind, Callable[[Dict], Tuple[str, str]]] = {
    SourceKind.DETAILED_TOUR: _detailed_tour,
    SourceKind.TOUR_SUMMARY: _tour_summary,
    SourceKind.COUNTRY_PROFILE: _country_profile,
    SourceKind.HERITAGE_SITE: _heritage_site,
    SourceKind.MERGED_COUNTRY_PROFILE: _merged_country_profile,
}


# ============================================================================
# PUBLIC API
# ============================================================================

def normalize_record(kind: SourceKind, record: Any) -> Optional[Document]:
    """
    Convert one source record into a Document.

    Args:
        kind: Source the record came from
        record: Parsed JSON record

    Returns:
        Document, or None when the record has no usable name
    """
    if not isinstance(record, dict):
        return None

    title, text = _MAPPERS[kind](record)
    if not title:
        return None

    return Document(id=f"{kind.value}_{title}", title=title, text=text)


def extract_records(kind: SourceKind, payload: Any) -> List[Any]:
    """
    Pull the record list out of a parsed source file.

    Heritage sites are wrapped as {"query": {"row": [...]}}; every other
    source is a top-level list.

    Raises:
        SourceReadError: If the payload does not have the expected shape
    """
    if kind is SourceKind.HERITAGE_SITE:
        rows = _get(payload, 'query', 'row')
        if rows is None and isinstance(payload, dict):
            return []
        payload = rows

    if not isinstance(payload, list):
        raise SourceReadError(
            f"Unexpected structure in {kind.filename}",
            {'source': kind.value, 'type': type(payload).__name__}
        )
    return payload


def load_source(kind: SourceKind, path: Union[str, Path]) -> List[Document]:
    """
    Read and normalize one source file.

    Raises:
        SourceReadError: If the file is unreadable or unparsable
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise SourceReadError(
            f"Error reading {path}: {e}",
            {'source': kind.value, 'path': str(path)}
        ) from e

    documents = []
    for record in extract_records(kind, payload):
        document = normalize_record(kind, record)
        if document is not None:
            documents.append(document)
    return documents


def load_documents(
    documents_dir: Union[str, Path],
    sources: Iterable[SourceKind] = DEFAULT_SOURCES
) -> List[Document]:
    """
    Load every configured source into one ordered document list.

    A source that fails to load is logged and contributes zero documents.

    Args:
        documents_dir: Directory holding the source JSON files
        sources: Source kinds to load, in order

    Returns:
        Documents from all readable sources
    """
    documents_dir = Path(documents_dir)
    documents: List[Document] = []

    for kind in sources:
        path = documents_dir / kind.filename
        try:
            loaded = load_source(kind, path)
        except SourceReadError as e:
            logger.error(f"❌ Skipping source {kind.value}: {e}")
            continue

        logger.info(f"📂 {kind.filename}: {len(loaded)} documents")
        documents.extend(loaded)

    logger.info(f"Loaded {len(documents)} documents")
    return documents
