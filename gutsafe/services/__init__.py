"""
GutSafe services.

Usage:
    from gutsafe.services import IngredientMatcher, ScanVerdictAggregator

    aggregator = ScanVerdictAggregator(IngredientMatcher())
    analysis = aggregator.analyze_food(food_item, gut_profile)

Matchers and engines hold per-session state (result cache, history), so
construct one per user session instead of sharing a global instance.
"""
from gutsafe.services.data_sources import (
    InMemoryLearningDataSource,
    JsonFileLearningDataSource,
    LearningDataSource,
)
from gutsafe.services.ingredient_matcher import IngredientMatcher
from gutsafe.services.learning_engine import LearningEngine
from gutsafe.services.pattern_analyzer import PatternAnalyzer
from gutsafe.services.recommendation_service import RecommendationService
from gutsafe.services.result_cache import ResultCache
from gutsafe.services.scan_service import ScanVerdictAggregator
from gutsafe.services.trigger_catalog import CATALOG_VERSION, TriggerCatalog

__all__ = [
    "CATALOG_VERSION",
    "InMemoryLearningDataSource",
    "IngredientMatcher",
    "JsonFileLearningDataSource",
    "LearningDataSource",
    "LearningEngine",
    "PatternAnalyzer",
    "RecommendationService",
    "ResultCache",
    "ScanVerdictAggregator",
    "TriggerCatalog",
]
