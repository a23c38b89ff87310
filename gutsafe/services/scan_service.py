"""Scan verdict aggregation: one safety verdict per food item and profile."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from gutsafe.models import (
    ComplexFoodAnalysis,
    ComplexFoodRecommendations,
    ConditionWarning,
    FlaggedIngredient,
    FodmapLevel,
    FoodItem,
    GutCondition,
    GutProfile,
    HiddenTrigger,
    IngredientAnalysisResult,
    OverallSafety,
    RiskLevel,
    RiskSummary,
    ScanAnalysis,
    SeverityLevel,
    coerce_model,
)
from gutsafe.services.ingredient_matcher import IngredientMatcher

logger = logging.getLogger(__name__)

SAFE_EXPLANATION = (
    "This product appears to be safe for your current gut health conditions."
)
CAUTION_EXPLANATION = (
    "This product may cause issues with some of your gut conditions. "
    "Consider alternatives."
)
AVOID_EXPLANATION = (
    "This product contains ingredients that may trigger your gut conditions. "
    "We recommend avoiding this item."
)

# Structural checks driven by product flags rather than ingredient text
STRUCTURAL_RULES = (
    (
        GutCondition.GLUTEN,
        "Gluten",
        "Contains gluten which may trigger gluten sensitivity",
        lambda food: not food.gluten_free,
    ),
    (
        GutCondition.LACTOSE,
        "Lactose",
        "Contains dairy which may trigger lactose intolerance",
        lambda food: not food.lactose_free,
    ),
    (
        GutCondition.IBS_FODMAP,
        "High FODMAP",
        "Contains high FODMAP ingredients which may trigger IBS symptoms",
        lambda food: food.fodmap_level == FodmapLevel.HIGH,
    ),
)

COMPLEX_FOOD_CONDITION_ADVICE = {
    GutCondition.IBS_FODMAP: (
        "Check for hidden FODMAPs in sauces and seasonings",
        ["Low-FODMAP sauces", "Homemade dressings", "Simple seasonings"],
    ),
    GutCondition.ADDITIVES: (
        "Avoid processed foods with multiple additives",
        ["Whole foods", "Minimally processed options", "Homemade alternatives"],
    ),
}


class ScanVerdictAggregator:
    """Combines per-ingredient matches and profile rules into one verdict."""

    def __init__(self, matcher: Optional[IngredientMatcher] = None):
        self.matcher = matcher or IngredientMatcher()

    def analyze_food(self, food_item: Any, gut_profile: Any) -> ScanAnalysis:
        """
        Analyze a food item against a user's gut profile.

        Args:
            food_item: FoodItem or a mapping with the same shape
            gut_profile: GutProfile or a mapping with the same shape

        Returns:
            ScanAnalysis with overall safety tier, flags and explanation

        Raises:
            ValidationError: If either input is malformed
        """
        food = coerce_model(FoodItem, food_item)
        profile = coerce_model(GutProfile, gut_profile)
        conditions = profile.enabled_conditions()

        ingredient_results = self.matcher.match_many(
            food.ingredients, conditions, profile.user_triggers()
        )

        flags: List[FlaggedIngredient] = []
        for result in ingredient_results:
            if result.is_problematic:
                flags.append(_flag_for_result(result, conditions))
        flags.extend(_structural_flags(food, profile))
        flags.extend(_allergen_flags(food, profile))

        overall_safety = determine_overall_safety(flags)
        analysis = ScanAnalysis(
            food_item_id=food.id,
            overall_safety=overall_safety,
            flagged_ingredients=flags,
            condition_warnings=[
                ConditionWarning(
                    ingredient=f.ingredient, severity=f.severity, condition=f.condition
                )
                for f in flags
            ],
            safe_alternatives=list(profile.preferences.preferred_alternatives),
            explanation=generate_explanation(overall_safety, flags),
            confidence=_mean_confidence(ingredient_results),
            ingredient_results=ingredient_results,
        )

        logger.info(
            "Analyzed food %s: %s with %d flags",
            food.id,
            overall_safety.value,
            len(flags),
        )
        return analysis

    def analyze_complex_food(
        self, food_name: str, ingredients: Iterable[str], gut_profile: Any
    ) -> ComplexFoodAnalysis:
        """
        Analyze a free-form food (recipe, menu item) from its ingredient list.

        Unlike analyze_food there are no product flags, so the verdict rests
        on ingredient matches alone.
        """
        profile = coerce_model(GutProfile, gut_profile)
        conditions = profile.enabled_conditions()
        results = self.matcher.match_many(
            list(ingredients), conditions, profile.user_triggers()
        )

        flagged = [r for r in results if r.is_problematic]
        hidden_triggers: Dict[tuple, HiddenTrigger] = {}
        for result in flagged:
            for trigger in result.detected_triggers:
                hidden_triggers.setdefault((trigger.name, trigger.is_custom), trigger)

        summary = calculate_risk_summary(results)
        return ComplexFoodAnalysis(
            food_name=food_name,
            overall_risk=determine_overall_risk(summary),
            flagged_ingredients=flagged,
            hidden_triggers=list(hidden_triggers.values()),
            risk_summary=summary,
            recommendations=_complex_food_recommendations(
                food_name, flagged, list(hidden_triggers.values()), conditions
            ),
            confidence=_mean_confidence(results),
        )


def determine_overall_safety(flags: List[FlaggedIngredient]) -> OverallSafety:
    """Strict precedence: any severe flag means avoid, any flag means caution."""
    if any(f.severity == SeverityLevel.SEVERE for f in flags):
        return OverallSafety.AVOID
    if flags:
        return OverallSafety.CAUTION
    return OverallSafety.SAFE


def generate_explanation(
    overall_safety: OverallSafety, flags: List[FlaggedIngredient]
) -> str:
    if not flags:
        return SAFE_EXPLANATION
    if overall_safety == OverallSafety.CAUTION:
        return CAUTION_EXPLANATION
    return AVOID_EXPLANATION


def calculate_risk_summary(results: List[IngredientAnalysisResult]) -> RiskSummary:
    return RiskSummary(
        total_ingredients=len(results),
        problematic_count=sum(1 for r in results if r.is_problematic),
        hidden_count=sum(1 for r in results if r.is_hidden),
        severe_count=sum(1 for r in results if r.analysis.risk_level == RiskLevel.SEVERE),
        moderate_count=sum(1 for r in results if r.analysis.risk_level == RiskLevel.HIGH),
        mild_count=sum(1 for r in results if r.analysis.risk_level == RiskLevel.MODERATE),
    )


def determine_overall_risk(summary: RiskSummary) -> OverallSafety:
    if summary.severe_count > 0:
        return OverallSafety.AVOID
    if summary.moderate_count > 0 or summary.problematic_count > 0:
        return OverallSafety.CAUTION
    return OverallSafety.SAFE


def _flag_for_result(
    result: IngredientAnalysisResult, conditions: List[GutCondition]
) -> FlaggedIngredient:
    severity = result.max_severity
    worst = next(t for t in result.detected_triggers if t.severity == severity)
    names = ", ".join(t.name for t in result.detected_triggers)
    return FlaggedIngredient(
        ingredient=result.ingredient,
        reason=f"Detected triggers: {names}",
        severity=severity,
        condition=worst.first_affected(conditions) or conditions[0],
    )


def _structural_flags(food: FoodItem, profile: GutProfile) -> List[FlaggedIngredient]:
    flags = []
    for condition, label, reason, applies in STRUCTURAL_RULES:
        condition_settings = profile.settings_for(condition)
        if condition_settings.enabled and applies(food):
            flags.append(
                FlaggedIngredient(
                    ingredient=label,
                    reason=reason,
                    severity=condition_settings.severity,
                    condition=condition,
                )
            )
    return flags


def _allergen_flags(food: FoodItem, profile: GutProfile) -> List[FlaggedIngredient]:
    """Declared allergens listed as a known trigger escalate straight to severe."""
    flags = []
    for allergen in sorted(food.allergens):
        condition = profile.condition_for_trigger(allergen)
        if condition is None:
            continue
        flags.append(
            FlaggedIngredient(
                ingredient=allergen,
                reason=f"Contains {allergen} which is a known trigger",
                severity=SeverityLevel.SEVERE,
                condition=condition,
            )
        )
    return flags


def _mean_confidence(results: List[IngredientAnalysisResult]) -> float:
    if not results:
        return 0.0
    return round(sum(r.confidence for r in results) / len(results), 3)


def _complex_food_recommendations(
    food_name: str,
    flagged: List[IngredientAnalysisResult],
    hidden_triggers: List[HiddenTrigger],
    conditions: List[GutCondition],
) -> ComplexFoodRecommendations:
    if not flagged:
        return ComplexFoodRecommendations(
            overall=f"{food_name} appears to be safe for your gut health conditions."
        )

    plural = "s" if len(flagged) != 1 else ""
    overall = f"{food_name} contains {len(flagged)} potentially problematic ingredient{plural}. "
    if any(t.severity == SeverityLevel.SEVERE for t in hidden_triggers):
        overall += "It is recommended to avoid this product due to severe triggers."
    elif any(t.severity == SeverityLevel.MODERATE for t in hidden_triggers):
        overall += "Use caution and consider alternatives."
    else:
        overall += "Monitor your symptoms if consuming this product."

    specific = []
    alternatives: Dict[str, None] = {}
    for result in flagged:
        specific.append(
            f"{result.ingredient}: {', '.join(result.recommendations.modifications)}"
        )
        for alternative in result.recommendations.alternatives:
            alternatives.setdefault(alternative, None)

    for condition in conditions:
        advice = COMPLEX_FOOD_CONDITION_ADVICE.get(condition)
        if advice:
            specific.append(advice[0])
            for alternative in advice[1]:
                alternatives.setdefault(alternative, None)

    return ComplexFoodRecommendations(
        overall=overall, specific=specific, alternatives=list(alternatives)
    )
