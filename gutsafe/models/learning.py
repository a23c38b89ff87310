"""History, pattern and insight models used by the learning engine."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from gutsafe.models.base import Ratio, Timestamp, utcnow
from gutsafe.models.enums import (
    GutCondition,
    InsightType,
    OverallSafety,
    RecommendationPriority,
    RecommendationType,
    SymptomTiming,
    SymptomType,
    TimeSlot,
    UserFeedback,
)
from gutsafe.models.profile import GutProfile


class ScanRecord(BaseModel):
    food_name: str
    ingredients: List[str] = Field(default_factory=list)
    analysis_result: OverallSafety = OverallSafety.SAFE
    user_feedback: Optional[UserFeedback] = None
    timestamp: Timestamp = Field(default_factory=utcnow)


class SymptomEntry(BaseModel):
    type: SymptomType
    severity: int = Field(ge=1, le=10)


class SymptomLog(BaseModel):
    symptoms: List[SymptomEntry] = Field(default_factory=list)
    related_food_items: List[str] = Field(default_factory=list)
    timestamp: Timestamp = Field(default_factory=utcnow)

    def symptom_key(self) -> tuple:
        """Sorted set of symptom types reported together."""
        return tuple(sorted({s.type.value for s in self.symptoms}))

    def average_severity(self) -> float:
        """Mean severity scaled to [0, 1]."""
        if not self.symptoms:
            return 0.0
        return sum(s.severity for s in self.symptoms) / len(self.symptoms) / 10


class LearningData(BaseModel):
    """Accumulated scan and symptom history for one user."""

    scan_history: List[ScanRecord] = Field(default_factory=list)
    symptom_logs: List[SymptomLog] = Field(default_factory=list)
    gut_profile: GutProfile = Field(default_factory=GutProfile.default)
    user_conditions: List[GutCondition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _derive_user_conditions(self):
        self.user_conditions = self.gut_profile.enabled_conditions()
        return self

    def replace_profile(self, profile: GutProfile) -> None:
        self.gut_profile = profile
        self.user_conditions = profile.enabled_conditions()

    def data_point_count(self) -> int:
        return len(self.scan_history) + len(self.symptom_logs)

    def timestamps(self) -> List[datetime]:
        return [s.timestamp for s in self.scan_history] + [
            s.timestamp for s in self.symptom_logs
        ]


# --- Mining results ---


class FoodTriggerPattern(BaseModel):
    ingredient: str
    frequency: int
    severity: Ratio
    conditions: List[GutCondition] = Field(default_factory=list)
    confidence: Ratio = 0.0


class SymptomPattern(BaseModel):
    symptoms: List[SymptomType]
    frequency: int
    severity: Ratio = 0.0
    timing: SymptomTiming = SymptomTiming.CHRONIC
    conditions: List[GutCondition] = Field(default_factory=list)
    confidence: Ratio = 0.0


class TimingPattern(BaseModel):
    time_of_day: TimeSlot
    frequency: int
    severity: Ratio = 0.0
    confidence: Ratio = 0.0


class InsightEvidence(BaseModel):
    frequency: int = 0
    severity: Ratio = 0.0
    consistency: Ratio = 0.0


class PatternInsight(BaseModel):
    type: InsightType
    subject: str
    confidence: Ratio
    description: str
    evidence: InsightEvidence = Field(default_factory=InsightEvidence)
    recommendations: List[str] = Field(default_factory=list)
    affected_conditions: List[GutCondition] = Field(default_factory=list)


class RecommendationEvidence(BaseModel):
    data_points: int = 0
    time_span_days: int = 0
    consistency: Ratio = 0.0


class AdaptiveRecommendation(BaseModel):
    """Suggested change to the user's gut profile."""

    type: RecommendationType
    priority: RecommendationPriority
    confidence: Ratio
    description: str
    condition: Optional[GutCondition] = None
    current_value: Any = None
    suggested_value: Any = None
    reasoning: List[str] = Field(default_factory=list)
    evidence: RecommendationEvidence = Field(default_factory=RecommendationEvidence)


# --- Engine outputs ---


class DataQuality(BaseModel):
    completeness: Ratio = 0.0
    consistency: Ratio = 0.0
    recency: Ratio = 0.0


class LearningInsights(BaseModel):
    patterns: List[PatternInsight] = Field(default_factory=list)
    recommendations: List[AdaptiveRecommendation] = Field(default_factory=list)
    confidence: Ratio = 0.0
    data_quality: DataQuality = Field(default_factory=DataQuality)
    last_updated: Timestamp = Field(default_factory=utcnow)


class LearningMetrics(BaseModel):
    total_data_points: int = 0
    learning_accuracy: Ratio = 0.0
    prediction_accuracy: Ratio = 0.0
    user_satisfaction: Ratio = 0.0
    adaptation_rate: Ratio = 0.0
    last_evaluation: Timestamp = Field(default_factory=utcnow)


class LearningProgress(BaseModel):
    data_points: int = 0
    patterns_discovered: int = 0
    recommendations_generated: int = 0
    accuracy: Ratio = 0.0
    last_update: Timestamp = Field(default_factory=utcnow)
