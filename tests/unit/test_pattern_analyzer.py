"""
Unit tests for PatternAnalyzer.

Tests the history mining logic including:
- Food trigger frequency and confidence
- Symptom grouping and timing classification
- Time-of-day buckets
- Insight thresholds and ordering
"""

from datetime import timedelta

import pytest

from gutsafe.models import (
    GutCondition,
    InsightType,
    OverallSafety,
    SeverityLevel,
    SymptomTiming,
    SymptomType,
    TimeSlot,
)
from gutsafe.services import PatternAnalyzer
from gutsafe.services.pattern_analyzer import (
    analyze_timing,
    conditions_for_ingredient,
    conditions_for_symptoms,
    time_slot_for_hour,
)
from tests.factories import (
    BASE_TIME,
    create_test_scenario_sorbitol_intolerance,
    make_learning_data,
    make_profile,
    make_scan,
    make_symptom_log,
)


@pytest.fixture
def analyzer():
    return PatternAnalyzer()


class TestFoodTriggers:
    """Tests for analyze_food_triggers."""

    def test_counts_ingredients_in_flagged_scans(self, analyzer):
        data = create_test_scenario_sorbitol_intolerance()

        patterns = analyzer.analyze_food_triggers(data)

        top = patterns[0]
        assert top.ingredient == "Sorbitol"
        assert top.frequency == 4
        assert top.severity == 1.0
        assert top.confidence == pytest.approx(0.9)
        assert top.conditions == [GutCondition.IBS_FODMAP]

    def test_safe_scans_are_ignored(self, analyzer):
        data = make_learning_data([make_scan(["oats"], OverallSafety.SAFE)])
        assert analyzer.analyze_food_triggers(data) == []

    def test_ingredients_grouped_by_normalized_text(self, analyzer):
        data = make_learning_data(
            [
                make_scan(["Onion Powder"], OverallSafety.CAUTION),
                make_scan(["onion powder"], OverallSafety.AVOID),
            ]
        )

        patterns = analyzer.analyze_food_triggers(data)

        assert len(patterns) == 1
        assert patterns[0].ingredient == "Onion Powder"
        assert patterns[0].frequency == 2
        assert patterns[0].severity == 1.0

    def test_confidence_is_capped(self, analyzer):
        data = make_learning_data([make_scan(["sorbitol"]) for _ in range(3)])
        assert analyzer.analyze_food_triggers(data)[0].confidence == 0.95

    def test_confidence_grows_with_frequency(self, analyzer):
        confidences = []
        for k in range(1, 11):
            scans = [
                make_scan(["sorbitol"] if i < k else ["rice"]) for i in range(10)
            ]
            patterns = analyzer.analyze_food_triggers(make_learning_data(scans))
            sorbitol = [p for p in patterns if p.ingredient == "sorbitol"][0]
            confidences.append(sorbitol.confidence)

        assert confidences == sorted(confidences)
        assert all(0.0 <= c <= 1.0 for c in confidences)

    def test_thresholds_are_configurable(self):
        analyzer = PatternAnalyzer(confidence_cap=0.5, confidence_floor=0.0)
        data = make_learning_data([make_scan(["sorbitol"]) for _ in range(3)])
        assert analyzer.analyze_food_triggers(data)[0].confidence == 0.5


class TestSymptomPatterns:
    """Tests for analyze_symptom_patterns and timing classification."""

    def test_groups_by_symptom_set(self, analyzer):
        data = make_learning_data(
            logs=[
                make_symptom_log({SymptomType.GAS: 4, SymptomType.BLOATING: 6}),
                make_symptom_log({SymptomType.BLOATING: 8, SymptomType.GAS: 2}),
                make_symptom_log({SymptomType.NAUSEA: 3}),
            ]
        )

        patterns = analyzer.analyze_symptom_patterns(data)

        assert patterns[0].symptoms == [SymptomType.BLOATING, SymptomType.GAS]
        assert patterns[0].frequency == 2
        assert patterns[0].confidence == pytest.approx(2 / 3 + 0.1)
        assert patterns[0].severity == pytest.approx(0.5)
        assert patterns[1].symptoms == [SymptomType.NAUSEA]

    def test_symptom_conditions_include_disabled_conditions(self, analyzer):
        data = create_test_scenario_sorbitol_intolerance()

        pattern = analyzer.analyze_symptom_patterns(data)[0]

        assert pattern.conditions == [GutCondition.IBS_FODMAP, GutCondition.LACTOSE]
        assert pattern.timing == SymptomTiming.IMMEDIATE

    def test_timing_immediate(self):
        scan = make_scan(["x"], timestamp=BASE_TIME)
        log = make_symptom_log({SymptomType.GAS: 3}, timestamp=BASE_TIME + timedelta(hours=2))
        assert analyze_timing(log, [scan]) == SymptomTiming.IMMEDIATE

    def test_timing_delayed(self):
        scan = make_scan(["x"], timestamp=BASE_TIME)
        log = make_symptom_log({SymptomType.GAS: 3}, timestamp=BASE_TIME + timedelta(hours=5))
        assert analyze_timing(log, [scan]) == SymptomTiming.DELAYED

    def test_timing_chronic_without_recent_scan(self):
        scan = make_scan(["x"], timestamp=BASE_TIME)
        log = make_symptom_log({SymptomType.GAS: 3}, timestamp=BASE_TIME + timedelta(hours=30))
        assert analyze_timing(log, [scan]) == SymptomTiming.CHRONIC

    def test_scans_after_the_log_are_not_related(self):
        scan = make_scan(["x"], timestamp=BASE_TIME + timedelta(hours=1))
        log = make_symptom_log({SymptomType.GAS: 3}, timestamp=BASE_TIME)
        assert analyze_timing(log, [scan]) == SymptomTiming.CHRONIC

    def test_timing_uses_most_recent_scan(self):
        scans = [
            make_scan(["x"], timestamp=BASE_TIME),
            make_scan(["y"], timestamp=BASE_TIME + timedelta(hours=4)),
        ]
        log = make_symptom_log({SymptomType.GAS: 3}, timestamp=BASE_TIME + timedelta(hours=5))
        assert analyze_timing(log, scans) == SymptomTiming.IMMEDIATE

    def test_related_food_items_restrict_scans(self):
        scans = [
            make_scan(["x"], food_name="Pasta", timestamp=BASE_TIME),
            make_scan(["y"], food_name="Apple", timestamp=BASE_TIME + timedelta(hours=4)),
        ]
        log = make_symptom_log(
            {SymptomType.GAS: 3},
            timestamp=BASE_TIME + timedelta(hours=5),
            related_food_items=["pasta"],
        )
        assert analyze_timing(log, scans) == SymptomTiming.DELAYED


class TestTimingPatterns:
    """Tests for time-of-day buckets."""

    @pytest.mark.parametrize(
        "hour,slot",
        [
            (6, TimeSlot.MORNING),
            (11, TimeSlot.MORNING),
            (12, TimeSlot.AFTERNOON),
            (18, TimeSlot.EVENING),
            (21, TimeSlot.EVENING),
            (22, TimeSlot.NIGHT),
            (3, TimeSlot.NIGHT),
        ],
    )
    def test_time_slot_for_hour(self, hour, slot):
        assert time_slot_for_hour(hour) == slot

    def test_buckets_logs(self, analyzer):
        morning = BASE_TIME.replace(hour=8)
        data = make_learning_data(
            logs=[
                make_symptom_log({SymptomType.GAS: 2}, timestamp=morning),
                make_symptom_log({SymptomType.GAS: 8}, timestamp=morning + timedelta(days=1)),
                make_symptom_log({SymptomType.GAS: 5}, timestamp=BASE_TIME.replace(hour=23)),
            ]
        )

        patterns = analyzer.analyze_timing_patterns(data)

        assert patterns[0].time_of_day == TimeSlot.MORNING
        assert patterns[0].frequency == 2
        assert patterns[0].severity == pytest.approx(0.8)
        assert patterns[1].time_of_day == TimeSlot.NIGHT


class TestPatternInsights:
    """Tests for generate_pattern_insights."""

    def test_scenario_insights(self, analyzer):
        data = create_test_scenario_sorbitol_intolerance()

        insights = analyzer.generate_pattern_insights(data)

        assert [i.type for i in insights] == [
            InsightType.SYMPTOM_PATTERN,
            InsightType.TIMING_PATTERN,
            InsightType.FOOD_TRIGGER,
        ]
        food = insights[2]
        assert food.subject == "Sorbitol"
        assert food.description == "Sorbitol appears to trigger symptoms with 90% confidence"
        assert food.evidence.frequency == 4
        assert "Consider avoiding Sorbitol" in food.recommendations

        timing = insights[1]
        assert timing.subject == "afternoon"
        assert timing.affected_conditions == [GutCondition.IBS_FODMAP]

    def test_insights_sorted_by_confidence(self, analyzer):
        insights = analyzer.generate_pattern_insights(
            create_test_scenario_sorbitol_intolerance()
        )
        confidences = [i.confidence for i in insights]
        assert confidences == sorted(confidences, reverse=True)

    def test_thresholds_are_strict(self):
        """Test a food trigger at exactly the threshold is not surfaced."""
        analyzer = PatternAnalyzer(confidence_floor=0.0, food_trigger_min_confidence=0.5)
        data = make_learning_data(
            [make_scan(["sorbitol"]), make_scan(["rice"], OverallSafety.SAFE)]
        )

        assert analyzer.analyze_food_triggers(data)[0].confidence == 0.5
        assert analyzer.generate_pattern_insights(data) == []

    def test_rare_trigger_not_surfaced(self, analyzer):
        scans = [make_scan(["sorbitol"])] + [
            make_scan(["rice"], OverallSafety.SAFE) for _ in range(9)
        ]
        assert analyzer.generate_pattern_insights(make_learning_data(scans)) == []

    def test_empty_history(self, analyzer):
        assert analyzer.generate_pattern_insights(make_learning_data()) == []

    def test_all_confidences_bounded(self, analyzer):
        data = create_test_scenario_sorbitol_intolerance()
        for insight in analyzer.generate_pattern_insights(data):
            assert 0.0 <= insight.confidence <= 1.0
            assert 0.0 <= insight.evidence.severity <= 1.0


class TestConditionMaps:
    """Tests for the ingredient and symptom condition tables."""

    def test_ingredient_map(self):
        assert conditions_for_ingredient("wheat flour", []) == [GutCondition.GLUTEN]
        assert conditions_for_ingredient("skimmed milk", []) == [GutCondition.LACTOSE]

    def test_unmapped_ingredient_falls_back_to_user_conditions(self):
        user = [GutCondition.REFLUX]
        assert conditions_for_ingredient("rice", user) == user

    def test_symptom_map_union_in_canonical_order(self):
        result = conditions_for_symptoms([SymptomType.NAUSEA, SymptomType.BLOATING], [])
        assert result == [
            GutCondition.IBS_FODMAP,
            GutCondition.LACTOSE,
            GutCondition.REFLUX,
            GutCondition.HISTAMINE,
        ]

    def test_unmapped_symptoms_fall_back(self):
        profile = make_profile({GutCondition.GLUTEN: SeverityLevel.MILD})
        result = conditions_for_symptoms([SymptomType.FATIGUE], profile.enabled_conditions())
        assert result == [GutCondition.GLUTEN]
