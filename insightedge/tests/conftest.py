"""
Pytest Configuration and Shared Fixtures for InsightEdge Tests.

This module provides fixtures and configuration for all tests, supporting:
- Async test execution with pytest-asyncio
- Settings isolation (the lru_cache singleton is cleared around each test)
- Sample business datasets: dirty currency data, dated monthly sales,
  correlated series, and a dataset without any date column
- A seeded numpy random generator for synthetic chart months
"""

from typing import Any, Dict, Generator, List

import numpy as np
import pytest

from insightedge.core.config import get_settings
from insightedge.models import TabularDataset


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Register custom markers.

    - slow: marks tests as slow (deselect with -m "not slow")
    - scenario: marks end-to-end behavioural scenarios
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'scenario: marks end-to-end behavioural scenarios'
    )


# ============================================================
# SETTINGS FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reset the settings singleton so env overrides never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng() -> np.random.Generator:
    """Deterministic random source for synthetic chart months."""
    return np.random.default_rng(42)


# ============================================================
# SAMPLE DATA FIXTURES
# ============================================================

@pytest.fixture
def dirty_rows() -> List[Dict[str, Any]]:
    """
    Raw rows as they arrive from a CSV upload.

    Row 3 has 3 of 4 cells empty and is dropped by the row cleaner.
    """
    return [
        {'date': '2024-01-15', 'revenue': '$1,000', 'expenses': '750', 'customers': '10'},
        {'date': '2024-02-15', 'revenue': '$2,000', 'expenses': '1,200', 'customers': '20'},
        {'date': '', 'revenue': '', 'expenses': None, 'customers': '5'},
        {'date': '2024-03-15', 'revenue': '€3,000.50', 'expenses': 'N/A', 'customers': '30'},
    ]


@pytest.fixture
def dirty_dataset(dirty_rows) -> TabularDataset:
    return TabularDataset(
        headers=['date', 'revenue', 'expenses', 'customers'],
        rows=dirty_rows,
    )


@pytest.fixture
def monthly_rows() -> List[Dict[str, Any]]:
    """
    Twelve cleaned monthly rows with steadily rising revenue and costs.

    Revenue goes 1000, 1100, ... 2100; cost is 60% of revenue.
    """
    return [
        {
            'date': f"2024-{month:02d}-01",
            'revenue': 1000.0 + 100 * (month - 1),
            'cost': 0.6 * (1000.0 + 100 * (month - 1)),
            'region': 'North' if month % 2 else 'South',
        }
        for month in range(1, 13)
    ]


@pytest.fixture
def no_date_dataset() -> TabularDataset:
    return TabularDataset(
        headers=['product', 'sales'],
        rows=[
            {'product': 'Widget', 'sales': '120'},
            {'product': 'Gadget', 'sales': '80'},
        ],
    )


@pytest.fixture
def sales_rows() -> List[Dict[str, Any]]:
    """Ten rows with a 'Sales' column, for natural-language queries."""
    return [{'Sales': 1000.0 + 50 * i, 'Region': 'East'} for i in range(10)]
