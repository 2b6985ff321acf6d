"""
Tests for corpus normalization (document ids, per-source text, bad sources).
"""

import json

import pytest

from ytravel_rag.errors import SourceReadError
from ytravel_rag.rag.document_loader import (
    DEFAULT_SOURCES,
    SourceKind,
    extract_records,
    load_documents,
    load_source,
    normalize_record,
    strip_html,
)


class TestNormalizeRecord:
    """Per-kind mapping of a single record"""

    def test_detailed_tour_joins_description_and_details(self):
        doc = normalize_record(SourceKind.DETAILED_TOUR, {
            'name': 'Classic Japan',
            'description': 'Tokyo to Kyoto.',
            'details': [{'body': 'Day 1.'}, {'body': 'Day 2.'}],
        })

        assert doc.id == 'tour_details_Classic Japan'
        assert doc.title == 'Classic Japan'
        assert doc.text == 'Tokyo to Kyoto. Day 1. Day 2.'

    def test_detailed_tour_without_optional_fields(self):
        doc = normalize_record(SourceKind.DETAILED_TOUR, {'name': 'Bare Tour', 'details': None})

        assert doc.text == ''
        assert 'None' not in doc.text

    def test_tour_summary_uses_product_line(self):
        doc = normalize_record(SourceKind.TOUR_SUMMARY, {'name': 'Iceland Circle', 'product_line': 'Self drive'})

        assert doc.id == 'tours_Iceland Circle'
        assert doc.text == 'Self drive'

    def test_country_profile_text(self):
        doc = normalize_record(SourceKind.COUNTRY_PROFILE, {
            'name': {'common': 'Portugal', 'official': 'Portuguese Republic'},
            'capital': ['Lisbon'],
            'region': 'Europe',
            'subregion': 'Southern Europe',
            'population': 10305564,
            'languages': {'por': 'Portuguese', 'mwl': 'Mirandese'},
            'area': 92090.0,
        })

        assert doc.id == 'rest_countries_Portugal'
        assert doc.text == (
            'Official Name: Portuguese Republic. Capital: Lisbon. Region: Europe. '
            'Subregion: Southern Europe. Population: 10305564. '
            'Languages: Portuguese, Mirandese. Area: 92090.0 sq km.'
        )

    def test_country_profile_missing_fields_degrade_to_empty(self):
        doc = normalize_record(SourceKind.COUNTRY_PROFILE, {'name': {'common': 'Atlantis'}})

        assert doc.title == 'Atlantis'
        assert 'None' not in doc.text
        assert 'Capital: .' in doc.text
        assert 'Languages: .' in doc.text

    def test_heritage_site_strips_html(self):
        doc = normalize_record(SourceKind.HERITAGE_SITE, {
            'site': 'Historic Centre of Porto',
            'short_description': '<p>Built along the <b>Douro</b> river.</p>',
        })

        assert doc.id == 'unesco_sites_Historic Centre of Porto'
        assert doc.text == 'Built along the Douro river.'
        assert '<' not in doc.text

    def test_merged_country_profile_text(self):
        doc = normalize_record(SourceKind.MERGED_COUNTRY_PROFILE, {
            'name': 'Japan', 'capital': 'Tokyo', 'region': 'Asia',
            'population': 125000000, 'language': 'Japanese', 'currency': 'JPY',
        })

        assert doc.id == 'merged_countries_Japan'
        assert doc.text == 'Capital: Tokyo, Region: Asia, Population: 125000000, Language: Japanese, Currency: JPY'

    def test_record_without_name_yields_nothing(self):
        assert normalize_record(SourceKind.TOUR_SUMMARY, {'product_line': 'Orphan'}) is None
        assert normalize_record(SourceKind.COUNTRY_PROFILE, {'name': None}) is None

    def test_non_object_record_yields_nothing(self):
        assert normalize_record(SourceKind.TOUR_SUMMARY, "not a record") is None

    def test_normalization_is_idempotent(self, sample_sources):
        record = sample_sources['rest_countries.json'][0]

        first = normalize_record(SourceKind.COUNTRY_PROFILE, record)
        second = normalize_record(SourceKind.COUNTRY_PROFILE, record)

        assert first == second


class TestStripHtml:

    def test_plain_text_unchanged(self):
        assert strip_html('No markup here') == 'No markup here'

    def test_empty_values(self):
        assert strip_html(None) == ''
        assert strip_html('') == ''


class TestExtractRecords:

    def test_heritage_sites_are_nested(self):
        rows = extract_records(SourceKind.HERITAGE_SITE, {'query': {'row': [{'site': 'A'}]}})
        assert rows == [{'site': 'A'}]

    def test_heritage_sites_without_rows(self):
        assert extract_records(SourceKind.HERITAGE_SITE, {'query': {}}) == []

    def test_unexpected_shape_raises(self):
        with pytest.raises(SourceReadError):
            extract_records(SourceKind.TOUR_SUMMARY, {'tours': []})


class TestLoadDocuments:
    """Loading the full corpus from a directory"""

    def test_loads_all_sources_in_order(self, documents_dir):
        docs = load_documents(documents_dir)

        assert [doc.id for doc in docs] == [
            'tour_details_Classic Japan',
            'tours_Classic Japan',
            'tours_Iceland Circle',
            'rest_countries_Portugal',
            'unesco_sites_Historic Centre of Porto',
            'merged_countries_Japan',
        ]

    def test_ids_are_unique(self, documents_dir):
        docs = load_documents(documents_dir)
        assert len({doc.id for doc in docs}) == len(docs)

    def test_missing_source_is_skipped(self, documents_dir):
        (documents_dir / 'tours.json').unlink()

        docs = load_documents(documents_dir)

        assert len(docs) == 4
        assert not any(doc.id.startswith('tours_') for doc in docs)

    def test_unparsable_source_is_skipped(self, documents_dir):
        (documents_dir / 'rest_countries.json').write_text('{"truncated": ', encoding='utf-8')

        docs = load_documents(documents_dir)

        assert len(docs) == 5
        assert not any(doc.id.startswith('rest_countries_') for doc in docs)

    def test_empty_directory_yields_no_documents(self, tmp_path):
        assert load_documents(tmp_path) == []

    def test_reloading_unchanged_sources_is_identical(self, documents_dir):
        assert load_documents(documents_dir) == load_documents(documents_dir)

    def test_subset_of_sources(self, documents_dir):
        docs = load_documents(documents_dir, sources=[SourceKind.MERGED_COUNTRY_PROFILE])
        assert [doc.id for doc in docs] == ['merged_countries_Japan']


class TestLoadSource:

    def test_missing_file_raises_source_read_error(self, tmp_path):
        with pytest.raises(SourceReadError) as exc_info:
            load_source(SourceKind.TOUR_SUMMARY, tmp_path / 'tours.json')

        assert exc_info.value.details['source'] == 'tours'

    def test_filenames_match_sources(self):
        assert [kind.filename for kind in DEFAULT_SOURCES] == [
            'tour_details.json',
            'tours.json',
            'rest_countries.json',
            'unesco_sites.json',
            'merged_countries.json',
        ]

    def test_unicode_content(self, tmp_path):
        path = tmp_path / 'tours.json'
        path.write_text(json.dumps([{'name': 'Hà Nội', 'product_line': 'Phố cổ'}], ensure_ascii=False), encoding='utf-8')

        docs = load_source(SourceKind.TOUR_SUMMARY, path)

        assert docs[0].id == 'tours_Hà Nội'
        assert docs[0].text == 'Phố cổ'
