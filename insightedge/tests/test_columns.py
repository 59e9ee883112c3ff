"""
Test suite for the Column Classifier.

Keyword matching is case-insensitive substring matching against the first
row's keys; a column may carry several roles.
"""

import pytest

from insightedge.models import ColumnRole, InsightCategory
from insightedge.services.columns import (
    COST_KEYWORDS,
    REVENUE_KEYWORDS,
    categorize_field,
    classify_columns,
    find_columns,
    get_categorical_fields,
    get_cost_fields,
    get_customer_fields,
    get_numeric_fields,
    get_revenue_fields,
)


class TestFindColumns:

    def test_case_insensitive_substring_match(self):
        rows = [{'Date': 'x', 'Total_Sales': 1, 'Net Revenue': 2, 'Notes': 'y'}]
        assert find_columns(rows, REVENUE_KEYWORDS) == ['Total_Sales', 'Net Revenue']

    def test_names_come_from_first_row(self):
        rows = [{'revenue': 1}, {'revenue': 2, 'cost': 3}]
        assert find_columns(rows, COST_KEYWORDS) == []

    def test_no_rows(self):
        assert find_columns([], REVENUE_KEYWORDS) == []


class TestNumericFields:

    def test_numeric_and_numeric_text_samples(self):
        rows = [{'a': 1.5, 'b': '42', 'c': 'hello', 'd': None, 'e': ''}]
        assert get_numeric_fields(rows) == ['a', 'b']

    def test_categorical_fields_are_text_and_not_numeric(self):
        rows = [{'a': 1.5, 'b': '42', 'c': 'hello', 'd': None}]
        assert get_categorical_fields(rows) == ['c']

    def test_role_field_helpers(self):
        rows = [{'sales': 1.0, 'cost_total': 2.0, 'user_count': 3.0, 'region': 'N'}]
        assert get_revenue_fields(rows) == ['sales']
        assert get_cost_fields(rows) == ['cost_total']
        assert get_customer_fields(rows) == ['user_count']


class TestClassifyColumns:

    def test_multiple_roles_per_column(self):
        rows = [{'net_sales': 10.0, 'order_date': '2024-01-01', 'region': 'N'}]
        result = classify_columns(rows)
        assert result.roles[ColumnRole.REVENUE] == ['net_sales']
        assert result.roles[ColumnRole.PROFIT] == ['net_sales']
        assert result.roles[ColumnRole.DATE] == ['order_date']
        assert result.roles[ColumnRole.UNCLASSIFIED] == ['region']
        assert result.numeric == ['net_sales']
        assert result.categorical == ['order_date', 'region']


class TestCategorizeField:

    @pytest.mark.parametrize('field,expected', [
        ('Monthly Revenue', InsightCategory.REVENUE),
        ('shipping_cost', InsightCategory.COSTS),
        ('active_users', InsightCategory.CUSTOMERS),
        ('campaign_spend', InsightCategory.MARKETING),
        ('leads', InsightCategory.MARKETING),
        ('inventory', InsightCategory.OPERATIONS),
    ])
    def test_category_order(self, field, expected):
        assert categorize_field(field) == expected
