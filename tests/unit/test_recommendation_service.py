"""
Unit tests for RecommendationService.
"""

import pytest

from gutsafe.models import (
    GutCondition,
    InsightEvidence,
    InsightType,
    PatternInsight,
    RecommendationPriority,
    RecommendationType,
    SeverityLevel,
)
from gutsafe.services import RecommendationService
from gutsafe.services.recommendation_service import suggested_severity
from tests.factories import make_profile


def food_trigger(subject, confidence, conditions, severity=1.0, frequency=4):
    return PatternInsight(
        type=InsightType.FOOD_TRIGGER,
        subject=subject,
        confidence=confidence,
        description=f"{subject} appears to trigger symptoms",
        evidence=InsightEvidence(
            frequency=frequency, severity=severity, consistency=confidence
        ),
        recommendations=[f"Consider avoiding {subject}"],
        affected_conditions=conditions,
    )


def symptom_pattern(confidence, conditions):
    return PatternInsight(
        type=InsightType.SYMPTOM_PATTERN,
        subject="bloating, gas",
        confidence=confidence,
        description="Symptom combination: bloating, gas occurs frequently",
        evidence=InsightEvidence(frequency=3, severity=0.5, consistency=confidence),
        recommendations=["Track these symptoms together"],
        affected_conditions=conditions,
    )


@pytest.fixture
def service():
    return RecommendationService()


class TestAdaptiveRecommendations:
    """Tests for generate_adaptive_recommendations."""

    def test_strong_food_trigger_yields_profile_update_and_addition(self, service):
        profile = make_profile({GutCondition.IBS_FODMAP: SeverityLevel.SEVERE})
        pattern = food_trigger("Sorbitol", 0.75, [GutCondition.IBS_FODMAP])

        recommendations = service.generate_adaptive_recommendations(
            [pattern], profile, data_points=10, time_span_days=12
        )

        assert [r.type for r in recommendations] == [
            RecommendationType.PROFILE_UPDATE,
            RecommendationType.TRIGGER_ADDITION,
        ]
        update = recommendations[0]
        assert update.condition == GutCondition.IBS_FODMAP
        assert update.current_value == []
        assert update.suggested_value == ["Sorbitol"]
        assert update.priority == RecommendationPriority.MEDIUM
        assert update.evidence.time_span_days == 12
        assert update.evidence.data_points == 4
        assert update.description == 'Add "Sorbitol" to known triggers for ibs-fodmap'

    def test_known_trigger_not_suggested_again(self, service):
        profile = make_profile(
            {GutCondition.IBS_FODMAP: SeverityLevel.SEVERE},
            known_triggers={GutCondition.IBS_FODMAP: ["sorbitol"]},
        )
        pattern = food_trigger("Sorbitol", 0.75, [GutCondition.IBS_FODMAP])

        assert service.generate_adaptive_recommendations([pattern], profile, 10, 12) == []

    def test_weak_food_trigger_only_addition(self, service):
        profile = make_profile({GutCondition.IBS_FODMAP: SeverityLevel.SEVERE})
        pattern = food_trigger("Sorbitol", 0.65, [GutCondition.IBS_FODMAP])

        recommendations = service.generate_adaptive_recommendations([pattern], profile, 10, 12)

        assert [r.type for r in recommendations] == [RecommendationType.TRIGGER_ADDITION]

    def test_severity_adjustment(self, service):
        profile = make_profile({GutCondition.IBS_FODMAP: SeverityLevel.MILD})
        pattern = food_trigger("Sorbitol", 0.9, [GutCondition.IBS_FODMAP], severity=1.0)

        recommendations = service.generate_adaptive_recommendations([pattern], profile, 10, 12)

        adjustments = [
            r for r in recommendations if r.type == RecommendationType.SEVERITY_ADJUSTMENT
        ]
        assert len(adjustments) == 1
        assert adjustments[0].current_value == SeverityLevel.MILD
        assert adjustments[0].suggested_value == SeverityLevel.SEVERE
        assert recommendations[0].priority == RecommendationPriority.HIGH

    def test_no_adjustment_when_severity_matches(self, service):
        profile = make_profile({GutCondition.IBS_FODMAP: SeverityLevel.SEVERE})
        pattern = food_trigger("Sorbitol", 0.9, [GutCondition.IBS_FODMAP], severity=1.0)

        recommendations = service.generate_adaptive_recommendations([pattern], profile, 10, 12)

        assert RecommendationType.SEVERITY_ADJUSTMENT not in [r.type for r in recommendations]

    def test_condition_toggle_for_disabled_condition(self, service):
        profile = make_profile({GutCondition.IBS_FODMAP: SeverityLevel.MILD})
        pattern = symptom_pattern(0.95, [GutCondition.IBS_FODMAP, GutCondition.LACTOSE])

        recommendations = service.generate_adaptive_recommendations([pattern], profile, 10, 12)

        assert len(recommendations) == 1
        toggle = recommendations[0]
        assert toggle.type == RecommendationType.CONDITION_TOGGLE
        assert toggle.condition == GutCondition.LACTOSE
        assert toggle.current_value is False
        assert toggle.suggested_value is True

    def test_sorted_by_confidence(self, service):
        profile = make_profile({GutCondition.IBS_FODMAP: SeverityLevel.MILD})
        patterns = [
            food_trigger("Sorbitol", 0.65, [GutCondition.IBS_FODMAP]),
            symptom_pattern(0.95, [GutCondition.LACTOSE]),
        ]

        recommendations = service.generate_adaptive_recommendations(patterns, profile, 10, 12)

        assert [r.confidence for r in recommendations] == [0.95, 0.65]

    def test_no_patterns(self, service):
        assert service.generate_adaptive_recommendations([], make_profile(), 0, 0) == []

    @pytest.mark.parametrize(
        "evidence,severity",
        [(0.9, SeverityLevel.SEVERE), (0.5, SeverityLevel.MODERATE), (0.2, SeverityLevel.MILD)],
    )
    def test_suggested_severity(self, evidence, severity):
        assert suggested_severity(evidence) == severity


class TestPersonalizedRecommendations:
    """Tests for generate_personalized_recommendations."""

    def test_condition_advice(self, service):
        profile = make_profile({GutCondition.GLUTEN: SeverityLevel.SEVERE})

        advice = service.generate_personalized_recommendations(profile, [])

        assert advice == [
            "Maintain a strict gluten-free diet",
            "Check labels carefully for hidden gluten sources",
        ]

    def test_strong_pattern_recommendations_deduplicated(self, service):
        profile = make_profile()
        patterns = [
            food_trigger("Sorbitol", 0.9, []),
            food_trigger("Sorbitol", 0.8, []),
            food_trigger("Onion", 0.6, []),
        ]

        advice = service.generate_personalized_recommendations(profile, patterns)

        assert advice == ["Consider avoiding Sorbitol"]

    def test_timing_advice(self, service):
        timing = PatternInsight(
            type=InsightType.TIMING_PATTERN,
            subject="evening",
            confidence=0.65,
            description="Symptoms frequently occur during evening",
        )

        advice = service.generate_personalized_recommendations(make_profile(), [timing])

        assert "Keep a food diary to track timing correlations" in advice
