"""
Test suite for the Value Normalizer and Row Cleaner.

The tests verify:
1. Currency-aware normalization of text cells
2. Sparse-row filtering at the 50% empty threshold
3. Numeric conversion while keeping non-numeric text verbatim
4. Explicit numeric column parsing with skip counts
5. Date parsing for date-role columns, one pandas pass per column
"""

from datetime import date, datetime
import math

import pytest

from insightedge.services import normalization
from insightedge.services.normalization import (
    align_row,
    clean_rows,
    coerce_number,
    is_empty,
    normalize_value,
    parse_date,
    parse_date_column,
    parse_dates,
    parse_numeric_column,
    sum_columns,
)


class TestNormalizeValue:
    """Tests for normalize_value."""

    @pytest.mark.parametrize('raw,expected', [
        ('$1,250.50', 1250.5),
        ('€3,000', 3000.0),
        ('£ 12', 12.0),
        ('¥1000', 1000.0),
        ('-42', -42.0),
        ('1e3', 1000.0),
        ('.5', 0.5),
        ('  7  ', 7.0),
    ])
    def test_parses_currency_and_plain_numbers(self, raw, expected):
        assert normalize_value(raw) == pytest.approx(expected)

    @pytest.mark.parametrize('raw', ['', '   ', '$', 'N/A', 'abc', '12%', '2024-01-15', 'inf', 'nan'])
    def test_rejects_non_numeric_text(self, raw):
        assert normalize_value(raw) is None

    def test_non_string_returns_none(self):
        assert normalize_value(12) is None


class TestCoerceNumber:

    def test_numbers_pass_through(self):
        assert coerce_number(3) == 3.0
        assert coerce_number(2.5) == 2.5

    def test_text_must_be_bare_decimal(self):
        assert coerce_number(' 42 ') == 42.0
        assert coerce_number('$42') is None
        assert coerce_number('1,000') is None

    def test_empty_bool_and_nan_are_not_numbers(self):
        assert coerce_number(None) is None
        assert coerce_number('') is None
        assert coerce_number(True) is None
        assert coerce_number(float('nan')) is None


class TestCleanRows:
    """Tests for the row cleaner."""

    def test_all_empty_row_is_dropped(self):
        rows = [{'a': '', 'b': '', 'c': '', 'd': ''}]
        assert clean_rows(rows) == []

    def test_row_with_one_of_four_empty_is_kept(self):
        rows = [{'a': '1', 'b': '', 'c': 'x', 'd': '$4'}]
        cleaned = clean_rows(rows)
        assert cleaned == [{'a': 1.0, 'b': '', 'c': 'x', 'd': 4.0}]

    def test_exactly_half_empty_is_dropped(self):
        rows = [{'a': '1', 'b': None, 'c': '', 'd': '2'}]
        assert clean_rows(rows) == []

    def test_preserves_order_and_never_grows(self, dirty_rows):
        cleaned = clean_rows(dirty_rows)
        assert len(cleaned) == 3
        assert [row['customers'] for row in cleaned] == [10.0, 20.0, 30.0]

    def test_non_numeric_text_kept_verbatim(self, dirty_rows):
        cleaned = clean_rows(dirty_rows)
        assert cleaned[0]['date'] == '2024-01-15'
        assert cleaned[2]['expenses'] == 'N/A'
        assert cleaned[2]['revenue'] == pytest.approx(3000.5)

    def test_malformed_rows_are_dropped(self):
        rows = [None, 'not a row', {}, {'a': '1'}]
        assert clean_rows(rows) == [{'a': 1.0}]

    def test_alignment_to_headers_adds_missing_keys(self):
        rows = [{'b': '2', 'a': '1'}, {'a': '3', 'b': '4', 'c': '5'}]
        cleaned = clean_rows(rows, headers=['a', 'b', 'c'])
        assert list(cleaned[0].keys()) == ['a', 'b', 'c']
        assert cleaned[0]['c'] is None
        assert cleaned[1] == {'a': 3.0, 'b': 4.0, 'c': 5.0}

    def test_threshold_from_settings(self, monkeypatch):
        monkeypatch.setenv('EMPTY_VALUE_THRESHOLD', '0.9')
        rows = [{'a': '1', 'b': '', 'c': ''}]
        assert len(clean_rows(rows)) == 1

    def test_does_not_mutate_input(self, dirty_rows):
        before = [dict(row) for row in dirty_rows]
        clean_rows(dirty_rows)
        assert dirty_rows == before


class TestParseNumericColumn:

    def test_reports_skipped_cells(self):
        rows = [{'v': 1.0}, {'v': 'abc'}, {'v': None}, {'v': '4'}, {}]
        column = parse_numeric_column(rows, 'v')
        assert column.values == [1.0, 4.0]
        assert column.skipped == 3

    def test_sum_columns_counts_numbers_only(self):
        rows = [{'a': 1.0, 'b': 'x'}, {'a': 2.0, 'b': 3}]
        assert sum_columns(rows, ['a', 'b']) == 6.0
        assert sum_columns(rows, []) == 0.0


class TestHelpers:

    def test_is_empty(self):
        assert is_empty(None)
        assert is_empty('')
        assert is_empty(math.nan)
        assert not is_empty(0)
        assert not is_empty(' ')

    def test_align_row(self):
        assert align_row({'b': 1}, ['a', 'b']) == {'a': None, 'b': 1}

    def test_parse_date_text(self):
        assert parse_date('2024-03-15') == datetime(2024, 3, 15)

    def test_parse_date_objects(self):
        assert parse_date(date(2024, 5, 1)) == datetime(2024, 5, 1)

    def test_parse_date_rejects_numbers_and_garbage(self):
        assert parse_date(20240315) is None
        assert parse_date('not a date') is None
        assert parse_date('') is None


class TestParseDateColumn:
    """Column-wise date parsing."""

    def test_mixed_formats_and_non_dates(self):
        values = ['2024-01-15', '3/5/2024', 'tbd', 20240101, None, '', date(2024, 6, 1)]
        assert parse_date_column(values) == [
            datetime(2024, 1, 15),
            datetime(2024, 3, 5),
            None,
            None,
            None,
            None,
            datetime(2024, 6, 1),
        ]

    def test_timezone_aware_text_is_made_naive(self):
        parsed = parse_date_column(['2024-02-01T10:30:00+02:00'])[0]
        assert parsed == datetime(2024, 2, 1, 10, 30)
        assert parsed.tzinfo is None

    def test_distinct_texts_parsed_once_per_column(self, monkeypatch):
        calls = []
        original = normalization.pd.to_datetime

        def counting_to_datetime(*args, **kwargs):
            calls.append(len(args[0]))
            return original(*args, **kwargs)

        monkeypatch.setattr(normalization.pd, 'to_datetime', counting_to_datetime)
        values = [f"2024-{month:02d}-01" for month in range(1, 13)] * 500

        parsed = parse_date_column(values)

        assert calls == [12]
        assert parsed[0] == datetime(2024, 1, 1)
        assert parsed[-1] == datetime(2024, 12, 1)

    def test_unparseable_texts_are_remembered(self):
        assert parse_dates(['tbd', ' 2024-01-15 ', 'tbd', '']) == {
            'tbd': None,
            '2024-01-15': datetime(2024, 1, 15),
        }

    def test_lookup_is_reused(self, monkeypatch):
        def fail(values):
            raise AssertionError('lookup should cover every text')

        lookup = parse_dates(['2024-01-15', 'tbd'])
        monkeypatch.setattr(normalization, 'parse_dates', fail)

        parsed = parse_date_column(['2024-01-15', 'tbd', '2024-01-15'], lookup)
        assert parsed == [datetime(2024, 1, 15), None, datetime(2024, 1, 15)]

    def test_lookup_is_extended_for_unseen_texts(self):
        lookup = {'2024-01-15': datetime(2024, 1, 15)}
        assert parse_date_column(['2024-01-15', '2024-07-04'], lookup) == [
            datetime(2024, 1, 15),
            datetime(2024, 7, 4),
        ]
        assert '2024-07-04' not in lookup
