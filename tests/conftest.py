"""Shared fixtures for estimator tests."""

from datetime import date

import pytest

from core.config import Settings
from core.services.rows import ProductionRow, generate_initial_rows


def _make_row(row_id, d, agave, ratio=2.0, kenya=None, batch=None):
    bottles = agave * ratio
    return ProductionRow(
        id=row_id,
        batch=batch if batch is not None else 20 + row_id,
        date=d,
        agave=float(agave),
        fermented_liquid=agave * 35.0,
        bottle_ratio=float(ratio),
        bottles=float(bottles),
        kenya_sales=float(round(bottles * 0.2) if kenya is None else kenya),
    )


@pytest.fixture
def make_row():
    """Factory for a consistent ProductionRow (20% Kenya unless given)."""
    return _make_row


@pytest.fixture
def seed_rows():
    """The ten-batch seed table."""
    return generate_initial_rows(Settings())


@pytest.fixture
def march_rows():
    """Two March 2025 rows summing to 200 bottles, plus one April row."""
    return [
        _make_row(0, date(2025, 3, 7), 40, kenya=10),
        _make_row(1, date(2025, 3, 28), 60, kenya=60),
        _make_row(2, date(2025, 4, 18), 50, kenya=20),
    ]
