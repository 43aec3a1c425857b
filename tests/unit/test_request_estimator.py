"""
Tests unitarios para request_estimator.py.
"""
from __future__ import annotations

import pytest

from attachment_transfer.application.use_cases.request_estimator import estimate_request_count


def test_reference_scenario() -> None:
    """50 registros, 1 campo, 10 archivos, páginas de 50."""
    assert estimate_request_count(50, 1, 10, 50) == 1604


def test_partial_last_page_counts_as_page() -> None:
    # 3 validación + 2 páginas + 51 * (2 + 0)
    assert estimate_request_count(51, 0, 0, 50) == 3 + 2 + 102


def test_no_records_still_fetches_one_page() -> None:
    assert estimate_request_count(0, 2, 3, 50) == 4


def test_invalid_page_size() -> None:
    with pytest.raises(ValueError):
        estimate_request_count(10, 1, 1, 0)


def test_negative_counts() -> None:
    with pytest.raises(ValueError):
        estimate_request_count(-1, 1, 1, 50)
