"""Global test fixtures and utilities for Aurae insights tests"""
import pytest
from zoneinfo import ZoneInfo

from aurae.services.insights_service import InsightsService
from tests.factories import FIXED_NOW, make_episode


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def now():
    """Fixed reference time for streak and frequency calculations"""
    return FIXED_NOW


@pytest.fixture
def utc():
    return ZoneInfo("UTC")


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def service(utc):
    """Insights service doing calendar math in UTC"""
    return InsightsService(tz=utc)


@pytest.fixture
def episode_factory():
    """Expose make_episode to tests that prefer fixtures"""
    return make_episode
