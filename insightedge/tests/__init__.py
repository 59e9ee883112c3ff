"""Test suite for the InsightEdge analysis engine."""
