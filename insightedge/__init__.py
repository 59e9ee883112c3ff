"""
InsightEdge Analysis Package.

Business-intelligence analysis engine for uploaded tabular datasets. Takes
already-parsed CSV/Excel rows and derives cleaned rows, KPIs, monthly chart
points, statistical signals and narrative insights for the dashboard.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration and error types
    - models: Pydantic schemas and enums
    - services: Stateless analysis services
"""

__version__ = "1.0.0"
