"""
Test suite for the analysis orchestrator.

The tests verify:
1. The full AnalyzedMetrics bundle for a dirty dataset
2. Idempotence of everything except synthetic chart months
3. Row-count and currency invariants
4. Column alignment to declared headers
5. Generic failure for unusable input
"""

import re

import numpy as np
import pytest

from insightedge.core.exceptions import AnalysisError
from insightedge.models import DataProvenance, TabularDataset, TrendDirection
from insightedge.services.analysis import analyze_business_data
from insightedge.services.normalization import clean_rows


def parse_currency(value: str) -> float:
    return float(re.sub(r'[$,]', '', value))


class TestAnalyzeBusinessData:

    @pytest.mark.asyncio
    async def test_dirty_dataset_bundle(self, dirty_dataset, rng):
        metrics = await analyze_business_data(dirty_dataset, rng=rng)

        titles = [k.title for k in metrics.kpis]
        assert titles == ['Total Revenue', 'Total Expenses', 'Net Profit', 'Avg. Order Value']
        # 1000 + 2000 + 3000.5 revenue; 'N/A' expenses count as 0
        assert metrics.kpis[0].value == '$6,001'
        assert metrics.kpis[1].value == '$1,950'
        assert len(metrics.chartData) == 12
        assert metrics.chartData[0].provenance == DataProvenance.OBSERVED
        assert metrics.chartData[0].sales == pytest.approx(1000.0)
        assert metrics.chartData[3].provenance == DataProvenance.SYNTHETIC
        assert metrics.dataSummary.totalRecords == 4
        assert metrics.dataSummary.missingData == 1
        assert metrics.growthAlert.title == 'Strong Growth Momentum'
        assert metrics.executiveSummary.startswith('Business Performance Overview')
        assert metrics.columns is not None
        assert [r.name for r in metrics.reports][:2] == [
            'Revenue Analysis Report', 'Customer Behavior Report',
        ]

    @pytest.mark.asyncio
    async def test_accepts_plain_mapping(self):
        metrics = await analyze_business_data(
            {'headers': ['revenue'], 'rows': [{'revenue': '$1,000'}, {'revenue': '$2,000'}]},
            rng=np.random.default_rng(0),
        )
        assert metrics.kpis[0].value == '$3,000'
        assert metrics.kpis[0].trend == TrendDirection.UP

    @pytest.mark.asyncio
    async def test_idempotent_apart_from_synthetic_months(self, dirty_dataset):
        first = await analyze_business_data(dirty_dataset)
        second = await analyze_business_data(dirty_dataset)

        assert first.kpis == second.kpis
        assert first.columns == second.columns
        assert first.dataSummary == second.dataSummary
        observed = [p for p in first.chartData if p.provenance == DataProvenance.OBSERVED]
        assert observed == [p for p in second.chartData if p.provenance == DataProvenance.OBSERVED]

    @pytest.mark.asyncio
    async def test_row_count_and_currency_invariants(self, dirty_dataset, dirty_rows):
        metrics = await analyze_business_data(dirty_dataset)
        cleaned = clean_rows(dirty_rows, headers=dirty_dataset.headers)

        assert len(cleaned) <= len(dirty_rows)
        assert metrics.dataSummary.missingData == len(dirty_rows) - len(cleaned)
        revenue = sum(row['revenue'] for row in cleaned)
        assert abs(parse_currency(metrics.kpis[0].value) - revenue) <= 0.5

    @pytest.mark.asyncio
    @pytest.mark.scenario
    async def test_no_date_column(self, no_date_dataset, rng):
        metrics = await analyze_business_data(no_date_dataset, rng=rng)

        assert metrics.dataSummary.dateRange == 'Unknown'
        assert len(metrics.chartData) == 12
        assert all(p.provenance == DataProvenance.SYNTHETIC for p in metrics.chartData)

    @pytest.mark.asyncio
    async def test_first_row_missing_column_is_still_classified(self, rng):
        dataset = TabularDataset(
            headers=['month', 'revenue', 'cost'],
            rows=[
                {'month': 'Jan', 'revenue': '100'},
                {'month': 'Feb', 'revenue': '200', 'cost': '50'},
            ],
        )
        metrics = await analyze_business_data(dataset, rng=rng)
        assert 'Total Expenses' in [k.title for k in metrics.kpis]

    @pytest.mark.asyncio
    async def test_first_row_missing_date_still_has_date_range(self, rng):
        dataset = TabularDataset(
            headers=['date', 'revenue', 'cost', 'units'],
            rows=[
                {'revenue': '100', 'cost': '40', 'units': '3'},
                {'date': '2024-02-15', 'revenue': '200', 'cost': '80', 'units': '4'},
                {'date': '2024-03-15', 'revenue': '300', 'cost': '90', 'units': '5'},
            ],
        )
        metrics = await analyze_business_data(dataset, rng=rng)

        observed = [p.month for p in metrics.chartData if p.provenance == DataProvenance.OBSERVED]
        assert observed == ['Feb', 'Mar']
        assert metrics.dataSummary.dateRange == '2/15/2024 - 3/15/2024'

    @pytest.mark.asyncio
    async def test_first_row_keys_when_alignment_disabled(self, monkeypatch, rng):
        monkeypatch.setenv('ALIGN_TO_DECLARED_HEADERS', 'false')
        dataset = TabularDataset(
            headers=['month', 'revenue', 'cost'],
            rows=[
                {'month': 'Jan', 'revenue': '100'},
                {'month': 'Feb', 'revenue': '200', 'cost': '50'},
            ],
        )
        metrics = await analyze_business_data(dataset, rng=rng)
        assert [k.title for k in metrics.kpis] == ['Total Revenue']

    @pytest.mark.asyncio
    async def test_advanced_insights_can_be_disabled(self, monkeypatch, dirty_dataset):
        monkeypatch.setenv('INCLUDE_ADVANCED_INSIGHTS', 'false')
        metrics = await analyze_business_data(dirty_dataset)
        assert metrics.columns is None
        assert metrics.anomalies == []

    @pytest.mark.asyncio
    async def test_empty_dataset(self, rng):
        metrics = await analyze_business_data(TabularDataset(), rng=rng)
        assert metrics.kpis == []
        assert metrics.dataSummary.dataQuality.value == 'poor'
        assert metrics.growthAlert.title == 'Performance Review Needed'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('bad', [
        {'rows': 'not a list'},
        {'headers': ['a', 'a'], 'rows': []},
        {'headers': ['a'], 'rows': [{'b': 1}]},
        None,
    ])
    async def test_unusable_dataset_raises_generic_error(self, bad):
        with pytest.raises(AnalysisError) as exc_info:
            await analyze_business_data(bad)
        assert str(exc_info.value) == 'Failed to analyze business data'
