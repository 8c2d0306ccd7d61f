# tests/conftest.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from loanvest.core.finance import compare
from tests.utils import SAMPLE_SCENARIO, make_investment, make_loan


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _clear_loanvest_env(monkeypatch):
    """Keep LOANVEST_* overrides from the developer's shell out of the tests."""
    for key in ("LOANVEST_OUT", "LOANVEST_TITLE", "LOANVEST_SHOW_SCHEDULE", "LOANVEST_DEBUG"):
        monkeypatch.delenv(key, raising=False)
    yield


# -------- Financial fixtures --------
@pytest.fixture
def loan_factory():
    """Factory for loans of any type (overridable)."""

    def _factory(loan_type=None, **overrides):
        if loan_type is None:
            return make_loan(**overrides)
        return make_loan(loan_type, **overrides)

    return _factory


@pytest.fixture
def investment_factory():
    """Factory for baseline investments (overridable)."""

    def _factory(**overrides):
        return make_investment(**overrides)

    return _factory


@pytest.fixture
def baseline_comparison():
    """One default loan vs. one default investment."""
    return compare([make_loan()], [make_investment()])


@pytest.fixture
def scenario_file(tmp_path: Path):
    """
    Callable factory writing a scenario JSON into tmp_path.

    Usage:
        path = scenario_file()                       # SAMPLE_SCENARIO, bare root
        path = scenario_file({"scenario": ..., "run": ...}, name="cfg.json")
    """

    def _factory(payload: dict | None = None, *, name: str = "scenario.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload if payload is not None else SAMPLE_SCENARIO), encoding="utf-8")
        return path

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")
