"""
Test configuration and fixtures for GutSafe.

Every fixture builds fresh objects; matchers and engines are never shared
between tests.
"""

from datetime import datetime, timedelta

import pytest

from gutsafe.models import GutCondition, SeverityLevel
from gutsafe.services import (
    IngredientMatcher,
    InMemoryLearningDataSource,
    LearningEngine,
    ResultCache,
    ScanVerdictAggregator,
)
from tests.factories import BASE_TIME, make_profile


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Manually advanced clock, usable for both monotonic and wall time."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)

    def monotonic(self) -> float:
        return (self.now - BASE_TIME).total_seconds()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(BASE_TIME + timedelta(days=10))


# =============================================================================
# Matching fixtures
# =============================================================================


@pytest.fixture
def matcher(clock) -> IngredientMatcher:
    """Matcher with a small cache driven by the fake clock."""
    return IngredientMatcher(
        cache=ResultCache(ttl_seconds=3600, max_entries=64, clock=clock.monotonic)
    )


@pytest.fixture
def aggregator(matcher) -> ScanVerdictAggregator:
    return ScanVerdictAggregator(matcher)


@pytest.fixture
def fodmap_profile():
    return make_profile({GutCondition.IBS_FODMAP: SeverityLevel.MODERATE})


@pytest.fixture
def gluten_profile():
    return make_profile({GutCondition.GLUTEN: SeverityLevel.SEVERE})


# =============================================================================
# Learning fixtures
# =============================================================================


@pytest.fixture
def engine(clock) -> LearningEngine:
    """Uninitialized engine over an empty in-memory data source."""
    return LearningEngine(data_source=InMemoryLearningDataSource(), clock=clock)
