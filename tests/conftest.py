"""Shared fixtures for the tradelog test suite."""

from __future__ import annotations

import pytest

from tradelog.core.config import AnalyticsConfig


@pytest.fixture
def config() -> AnalyticsConfig:
    """Default engine config: 100k balance, UTC, 0.5 USD / 0.01% band."""
    return AnalyticsConfig()
