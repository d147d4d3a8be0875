"""Shared pytest fixtures"""

import pytest

from config import config


@pytest.fixture(autouse=True)
def no_decision_log(monkeypatch):
    """Keep test runs from writing decision log files"""
    monkeypatch.setattr(config, 'DECISION_LOG_ENABLED', False)
