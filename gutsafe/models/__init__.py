"""
Domain models for GutSafe.

Import all models here so callers can use ``from gutsafe.models import ...``.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gutsafe.exceptions import ValidationError
from gutsafe.models.analysis import (
    ComplexFoodAnalysis,
    ComplexFoodRecommendations,
    ConditionWarning,
    FlaggedIngredient,
    IngredientAnalysis,
    IngredientAnalysisResult,
    IngredientRecommendations,
    RiskSummary,
    ScanAnalysis,
)
from gutsafe.models.enums import (
    EngineState,
    FodmapLevel,
    GutCondition,
    IngredientCategory,
    InsightType,
    OverallSafety,
    RecommendationPriority,
    RecommendationType,
    RiskLevel,
    SeverityLevel,
    SymptomTiming,
    SymptomType,
    TimeSlot,
    TriggerCategory,
    UserFeedback,
)
from gutsafe.models.food_item import FoodItem
from gutsafe.models.learning import (
    AdaptiveRecommendation,
    DataQuality,
    FoodTriggerPattern,
    InsightEvidence,
    LearningData,
    LearningInsights,
    LearningMetrics,
    LearningProgress,
    PatternInsight,
    RecommendationEvidence,
    ScanRecord,
    SymptomEntry,
    SymptomLog,
    SymptomPattern,
    TimingPattern,
)
from gutsafe.models.profile import ConditionSettings, GutProfile, ProfilePreferences
from gutsafe.models.trigger import HiddenTrigger

ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_model(model: Type[ModelT], value: Any) -> ModelT:
    """
    Return value as an instance of model, validating mappings and JSON strings.

    Raises:
        ValidationError: If value does not have the shape of model
    """
    if isinstance(value, model):
        return value
    try:
        if isinstance(value, (str, bytes)):
            return model.model_validate_json(value)
        return model.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {model.__name__}: {e}") from e


__all__ = [
    "AdaptiveRecommendation",
    "ComplexFoodAnalysis",
    "ComplexFoodRecommendations",
    "ConditionSettings",
    "ConditionWarning",
    "DataQuality",
    "EngineState",
    "FlaggedIngredient",
    "FodmapLevel",
    "FoodItem",
    "FoodTriggerPattern",
    "GutCondition",
    "GutProfile",
    "HiddenTrigger",
    "IngredientAnalysis",
    "IngredientAnalysisResult",
    "IngredientCategory",
    "IngredientRecommendations",
    "InsightEvidence",
    "InsightType",
    "LearningData",
    "LearningInsights",
    "LearningMetrics",
    "LearningProgress",
    "OverallSafety",
    "PatternInsight",
    "ProfilePreferences",
    "RecommendationEvidence",
    "RecommendationPriority",
    "RecommendationType",
    "RiskLevel",
    "RiskSummary",
    "ScanAnalysis",
    "ScanRecord",
    "SeverityLevel",
    "SymptomEntry",
    "SymptomLog",
    "SymptomPattern",
    "SymptomTiming",
    "SymptomType",
    "TimeSlot",
    "TimingPattern",
    "TriggerCategory",
    "UserFeedback",
    "coerce_model",
]
