"""
Test suite for the Time-Series Synthesizer.

Chart data always has 12 points; months with dated rows are observed,
others are synthetic (or empty when fill is disabled).
"""

from datetime import datetime

import numpy as np
import pytest

from insightedge.models import DataProvenance
from insightedge.services.time_series import MONTHS, generate_chart_data, group_rows_by_month


class TestGenerateChartData:

    def test_observed_months_aggregate_role_columns(self, monthly_rows, rng):
        points = generate_chart_data(monthly_rows, rng=rng)

        assert [p.month for p in points] == MONTHS
        assert all(p.provenance == DataProvenance.OBSERVED for p in points)
        jan = points[0]
        assert jan.sales == pytest.approx(1000.0)
        assert jan.revenue == pytest.approx(1000.0)
        assert jan.expenses == pytest.approx(600.0)
        assert jan.profit == pytest.approx(400.0)

    def test_same_month_of_different_years_is_combined(self, rng):
        rows = [
            {'date': '2023-03-10', 'sales': 100.0},
            {'date': '2024-03-20', 'sales': 50.0},
        ]
        points = generate_chart_data(rows, rng=rng)
        assert points[2].sales == pytest.approx(150.0)
        assert points[2].provenance == DataProvenance.OBSERVED
        assert points[0].provenance == DataProvenance.SYNTHETIC

    @pytest.mark.scenario
    def test_no_date_column_is_fully_synthetic(self, rng):
        rows = [{'product': 'Widget', 'sales': 120.0}]
        points = generate_chart_data(rows, rng=rng)

        assert len(points) == 12
        for point in points:
            assert point.provenance == DataProvenance.SYNTHETIC
            assert 30000.0 <= point.sales < 80000.0
            assert point.expenses == pytest.approx(point.sales * 0.7)
            assert point.profit == pytest.approx(point.sales - point.expenses)

    def test_seeded_generator_is_deterministic(self):
        first = generate_chart_data([], rng=np.random.default_rng(7))
        second = generate_chart_data([], rng=np.random.default_rng(7))
        assert [p.sales for p in first] == [p.sales for p in second]

    def test_seed_from_settings(self, monkeypatch):
        monkeypatch.setenv('SYNTHETIC_FILL_SEED', '11')
        first = generate_chart_data([])
        second = generate_chart_data([])
        assert [p.sales for p in first] == [p.sales for p in second]

    def test_fill_disabled_yields_empty_months(self, rng):
        points = generate_chart_data([{'sales': 10.0}], rng=rng, synthetic_fill=False)
        assert all(p.provenance == DataProvenance.EMPTY for p in points)
        assert all(p.sales == 0.0 and p.expenses == 0.0 and p.profit == 0.0 for p in points)

    def test_fill_disabled_via_settings(self, monkeypatch):
        monkeypatch.setenv('SYNTHETIC_FILL_ENABLED', 'false')
        points = generate_chart_data([])
        assert all(p.provenance == DataProvenance.EMPTY for p in points)


class TestGroupRowsByMonth:

    def test_unparseable_and_empty_dates_are_ignored(self):
        rows = [{'d': '2024-05-02'}, {'d': 'soon'}, {'d': None}, {'d': 20240101}]
        buckets = group_rows_by_month(rows, 'd')
        assert list(buckets.keys()) == [5]

    def test_no_date_column(self):
        assert group_rows_by_month([{'d': '2024-05-02'}], None) == {}

    def test_shared_lookup_and_mixed_formats(self):
        rows = [{'d': '2024-05-02'}, {'d': '7/4/2024'}, {'d': '2024-05-20'}]
        lookup = {'2024-05-02': datetime(2024, 5, 2)}
        buckets = group_rows_by_month(rows, 'd', lookup)
        assert sorted(buckets) == [5, 7]
        assert len(buckets[5]) == 2
