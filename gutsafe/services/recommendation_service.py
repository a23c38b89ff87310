"""Turns pattern insights into profile recommendations and diet advice."""

import logging
from typing import Dict, List

from gutsafe.models import (
    AdaptiveRecommendation,
    GutCondition,
    GutProfile,
    InsightType,
    PatternInsight,
    RecommendationEvidence,
    RecommendationPriority,
    RecommendationType,
    SeverityLevel,
)

logger = logging.getLogger(__name__)

PROFILE_UPDATE_MIN_CONFIDENCE = 0.7
TRIGGER_ADDITION_MIN_CONFIDENCE = 0.6
SEVERITY_ADJUSTMENT_MIN_CONFIDENCE = 0.8
CONDITION_TOGGLE_MIN_CONFIDENCE = 0.7
HIGH_PRIORITY_CONFIDENCE = 0.8
PERSONALIZED_MIN_CONFIDENCE = 0.7

CONDITION_ADVICE = {
    GutCondition.IBS_FODMAP: [
        "Consider following a low-FODMAP diet",
        "Avoid high-FODMAP foods like onions, garlic, and certain fruits",
    ],
    GutCondition.GLUTEN: [
        "Maintain a strict gluten-free diet",
        "Check labels carefully for hidden gluten sources",
    ],
    GutCondition.LACTOSE: [
        "Use lactose-free dairy products or lactase supplements",
        "Consider plant-based milk alternatives",
    ],
    GutCondition.REFLUX: [
        "Avoid large meals close to bedtime",
        "Limit spicy, acidic and fatty foods",
    ],
    GutCondition.HISTAMINE: [
        "Avoid aged and fermented foods",
        "Consider a low-histamine diet",
    ],
    GutCondition.ADDITIVES: [
        "Choose minimally processed foods",
        "Check labels for E-numbers and artificial additives",
    ],
}

TIMING_ADVICE = [
    "Consider adjusting meal timing based on your symptom patterns",
    "Keep a food diary to track timing correlations",
]


class RecommendationService:
    """Service for adaptive profile recommendations."""

    def generate_adaptive_recommendations(
        self,
        patterns: List[PatternInsight],
        gut_profile: GutProfile,
        data_points: int,
        time_span_days: int,
    ) -> List[AdaptiveRecommendation]:
        """
        Suggest profile changes backed by the given insights.

        Args:
            patterns: Insights from PatternAnalyzer.generate_pattern_insights
            gut_profile: The user's current profile
            data_points: Number of scans and symptom logs behind the insights
            time_span_days: Days covered by the history

        Returns:
            Recommendations sorted by confidence descending; ties keep the
            order profile update, trigger addition, severity, condition toggle
        """
        recommendations: List[AdaptiveRecommendation] = []
        recommendations.extend(
            self._profile_updates(patterns, gut_profile, data_points, time_span_days)
        )
        recommendations.extend(
            self._trigger_additions(patterns, gut_profile, data_points, time_span_days)
        )
        recommendations.extend(
            self._severity_adjustments(patterns, gut_profile, time_span_days)
        )
        recommendations.extend(
            self._condition_toggles(patterns, gut_profile, time_span_days)
        )

        logger.debug("Generated %d adaptive recommendations", len(recommendations))
        return sorted(recommendations, key=lambda r: r.confidence, reverse=True)

    def generate_personalized_recommendations(
        self, gut_profile: GutProfile, patterns: List[PatternInsight]
    ) -> List[str]:
        """Plain-language advice for enabled conditions and strong patterns."""
        advice: Dict[str, None] = {}

        for condition in gut_profile.enabled_conditions():
            for line in CONDITION_ADVICE.get(condition, ()):
                advice.setdefault(line, None)

        for pattern in patterns:
            if pattern.confidence > PERSONALIZED_MIN_CONFIDENCE:
                for line in pattern.recommendations:
                    advice.setdefault(line, None)

        if any(p.type == InsightType.TIMING_PATTERN for p in patterns):
            for line in TIMING_ADVICE:
                advice.setdefault(line, None)

        return list(advice)

    # ------------------------------------------------------------------
    # Recommendation kinds
    # ------------------------------------------------------------------

    def _profile_updates(self, patterns, gut_profile, data_points, time_span_days):
        recommendations = []
        for pattern in _food_triggers(patterns, PROFILE_UPDATE_MIN_CONFIDENCE):
            trigger = pattern.subject
            for condition in pattern.affected_conditions:
                known = sorted(gut_profile.settings_for(condition).known_triggers)
                if _is_known(trigger, known):
                    continue
                recommendations.append(
                    AdaptiveRecommendation(
                        type=RecommendationType.PROFILE_UPDATE,
                        priority=_priority(pattern.confidence),
                        confidence=pattern.confidence,
                        description=(
                            f'Add "{trigger}" to known triggers for {condition.label}'
                        ),
                        condition=condition,
                        current_value=known,
                        suggested_value=known + [trigger],
                        reasoning=[
                            f"Pattern analysis shows {trigger} triggers symptoms with "
                            f"{_percent(pattern.confidence)}% confidence",
                            f"Evidence: {pattern.evidence.frequency} occurrences "
                            f"across {data_points} data points",
                            f"Consistency: {_percent(pattern.evidence.consistency)}%",
                        ],
                        evidence=_evidence(pattern, time_span_days),
                    )
                )
        return recommendations

    def _trigger_additions(self, patterns, gut_profile, data_points, time_span_days):
        recommendations = []
        current = gut_profile.all_known_triggers()
        for pattern in _food_triggers(patterns, TRIGGER_ADDITION_MIN_CONFIDENCE):
            trigger = pattern.subject
            if _is_known(trigger, current):
                continue
            recommendations.append(
                AdaptiveRecommendation(
                    type=RecommendationType.TRIGGER_ADDITION,
                    priority=_priority(pattern.confidence),
                    confidence=pattern.confidence,
                    description=f'Consider adding "{trigger}" to your trigger list',
                    current_value=list(current),
                    suggested_value=current + [trigger],
                    reasoning=[
                        f"High confidence pattern detected for {trigger}",
                        f"Frequency: {pattern.evidence.frequency} occurrences "
                        f"across {data_points} data points",
                        f"Severity: {_percent(pattern.evidence.severity)}%",
                    ],
                    evidence=_evidence(pattern, time_span_days),
                )
            )
        return recommendations

    def _severity_adjustments(self, patterns, gut_profile, time_span_days):
        recommendations = []
        for pattern in _food_triggers(patterns, SEVERITY_ADJUSTMENT_MIN_CONFIDENCE):
            suggested = suggested_severity(pattern.evidence.severity)
            for condition in pattern.affected_conditions:
                condition_settings = gut_profile.settings_for(condition)
                if not condition_settings.enabled:
                    continue
                if condition_settings.severity == suggested:
                    continue
                recommendations.append(
                    AdaptiveRecommendation(
                        type=RecommendationType.SEVERITY_ADJUSTMENT,
                        priority=RecommendationPriority.MEDIUM,
                        confidence=pattern.confidence,
                        description=(
                            f"Adjust {condition.label} severity from "
                            f"{condition_settings.severity.value} to {suggested.value}"
                        ),
                        condition=condition,
                        current_value=condition_settings.severity,
                        suggested_value=suggested,
                        reasoning=[
                            f"Pattern analysis suggests {suggested.value} severity "
                            f"for {condition.label}",
                            f"Evidence severity: {_percent(pattern.evidence.severity)}%",
                            f"Confidence: {_percent(pattern.confidence)}%",
                        ],
                        evidence=_evidence(pattern, time_span_days),
                    )
                )
        return recommendations

    def _condition_toggles(self, patterns, gut_profile, time_span_days):
        recommendations = []
        for pattern in patterns:
            if pattern.type != InsightType.SYMPTOM_PATTERN:
                continue
            if pattern.confidence <= CONDITION_TOGGLE_MIN_CONFIDENCE:
                continue
            for condition in pattern.affected_conditions:
                if gut_profile.settings_for(condition).enabled:
                    continue
                recommendations.append(
                    AdaptiveRecommendation(
                        type=RecommendationType.CONDITION_TOGGLE,
                        priority=RecommendationPriority.MEDIUM,
                        confidence=pattern.confidence,
                        description=(
                            f"Enable {condition.label} tracking based on symptom patterns"
                        ),
                        condition=condition,
                        current_value=False,
                        suggested_value=True,
                        reasoning=[
                            f"Symptom patterns suggest {condition.label} may be relevant",
                            f"Confidence: {_percent(pattern.confidence)}%",
                            f"Evidence: {pattern.evidence.frequency} occurrences",
                        ],
                        evidence=_evidence(pattern, time_span_days),
                    )
                )
        return recommendations


def suggested_severity(evidence_severity: float) -> SeverityLevel:
    if evidence_severity >= 0.8:
        return SeverityLevel.SEVERE
    if evidence_severity >= 0.5:
        return SeverityLevel.MODERATE
    return SeverityLevel.MILD


def _food_triggers(patterns: List[PatternInsight], min_confidence: float):
    return [
        p
        for p in patterns
        if p.type == InsightType.FOOD_TRIGGER
        and p.confidence > min_confidence
        and p.subject.strip()
    ]


def _is_known(trigger: str, known: List[str]) -> bool:
    needle = trigger.strip().lower()
    return any(needle == k.strip().lower() for k in known)


def _priority(confidence: float) -> RecommendationPriority:
    if confidence > HIGH_PRIORITY_CONFIDENCE:
        return RecommendationPriority.HIGH
    return RecommendationPriority.MEDIUM


def _percent(ratio: float) -> int:
    return round(ratio * 100)


def _evidence(pattern: PatternInsight, time_span_days: int) -> RecommendationEvidence:
    return RecommendationEvidence(
        data_points=pattern.evidence.frequency,
        time_span_days=time_span_days,
        consistency=pattern.evidence.consistency,
    )
