"""Result models produced by the ingredient matcher and scan aggregator."""

from typing import List, Optional

from pydantic import BaseModel, Field

from gutsafe.models.base import Ratio, Timestamp, utcnow
from gutsafe.models.enums import (
    GutCondition,
    IngredientCategory,
    OverallSafety,
    RiskLevel,
    SeverityLevel,
)
from gutsafe.models.trigger import HiddenTrigger


class IngredientAnalysis(BaseModel):
    normalized_text: str
    detected_keywords: List[str] = Field(default_factory=list)
    category: IngredientCategory = IngredientCategory.OTHER
    risk_level: RiskLevel = RiskLevel.LOW


class IngredientRecommendations(BaseModel):
    avoid: bool = False
    caution: bool = False
    alternatives: List[str] = Field(default_factory=list)
    modifications: List[str] = Field(default_factory=list)


class IngredientAnalysisResult(BaseModel):
    """Verdict for one ingredient string against one set of user conditions."""

    ingredient: str
    is_problematic: bool = False
    is_hidden: bool = False
    detected_triggers: List[HiddenTrigger] = Field(default_factory=list)
    confidence: Ratio = 0.0
    analysis: IngredientAnalysis
    recommendations: IngredientRecommendations = Field(
        default_factory=IngredientRecommendations
    )

    @property
    def max_severity(self) -> Optional[SeverityLevel]:
        if not self.detected_triggers:
            return None
        return max(t.severity for t in self.detected_triggers)


class FlaggedIngredient(BaseModel):
    ingredient: str
    reason: str
    severity: SeverityLevel
    condition: GutCondition


class ConditionWarning(BaseModel):
    ingredient: str
    severity: SeverityLevel
    condition: GutCondition


class ScanAnalysis(BaseModel):
    """Aggregate verdict for one food item against one gut profile."""

    food_item_id: Optional[str] = None
    overall_safety: OverallSafety = OverallSafety.SAFE
    flagged_ingredients: List[FlaggedIngredient] = Field(default_factory=list)
    condition_warnings: List[ConditionWarning] = Field(default_factory=list)
    safe_alternatives: List[str] = Field(default_factory=list)
    explanation: str = ""
    confidence: Ratio = 0.0
    ingredient_results: List[IngredientAnalysisResult] = Field(default_factory=list)
    data_source: str = "GutSafe Analysis"
    last_updated: Timestamp = Field(default_factory=utcnow)


class RiskSummary(BaseModel):
    total_ingredients: int = 0
    problematic_count: int = 0
    hidden_count: int = 0
    severe_count: int = 0
    moderate_count: int = 0
    mild_count: int = 0


class ComplexFoodRecommendations(BaseModel):
    overall: str
    specific: List[str] = Field(default_factory=list)
    alternatives: List[str] = Field(default_factory=list)


class ComplexFoodAnalysis(BaseModel):
    """Verdict for a free-form food (recipe, menu item) with no product flags."""

    food_name: str
    overall_risk: OverallSafety = OverallSafety.SAFE
    flagged_ingredients: List[IngredientAnalysisResult] = Field(default_factory=list)
    hidden_triggers: List[HiddenTrigger] = Field(default_factory=list)
    risk_summary: RiskSummary = Field(default_factory=RiskSummary)
    recommendations: ComplexFoodRecommendations
    confidence: Ratio = 0.0
