"""
Unit tests for domain models and validation helpers.
"""

from datetime import datetime, timezone

import pytest

from gutsafe.exceptions import GutSafeError, NotInitializedError, ValidationError
from gutsafe.models import (
    ConditionSettings,
    FoodItem,
    GutCondition,
    GutProfile,
    LearningData,
    SeverityLevel,
    SymptomEntry,
    coerce_model,
)
from tests.factories import make_profile, make_scan, make_symptom_log


class TestSeverityLevel:
    """Tests for severity ordering."""

    def test_ordering(self):
        assert SeverityLevel.MILD < SeverityLevel.MODERATE < SeverityLevel.SEVERE
        assert max([SeverityLevel.SEVERE, SeverityLevel.MILD]) == SeverityLevel.SEVERE
        assert SeverityLevel.MODERATE >= SeverityLevel.MODERATE

    def test_condition_label(self):
        assert GutCondition.IBS_FODMAP.label == "ibs-fodmap"


class TestGutProfile:
    """Tests for GutProfile helpers."""

    def test_missing_conditions_default_to_disabled(self):
        profile = GutProfile(id="p1")

        assert set(profile.conditions) == set(GutCondition)
        assert profile.enabled_conditions() == []

    def test_default_profile_lists_every_condition(self):
        profile = GutProfile.default()

        assert list(profile.conditions) == list(GutCondition)
        assert all(not s.enabled for s in profile.conditions.values())
        assert LearningData().gut_profile.conditions == profile.conditions

    def test_enabled_conditions_in_canonical_order(self):
        profile = make_profile(
            {
                GutCondition.ADDITIVES: SeverityLevel.MILD,
                GutCondition.IBS_FODMAP: SeverityLevel.MILD,
            }
        )
        assert profile.enabled_conditions() == [
            GutCondition.IBS_FODMAP,
            GutCondition.ADDITIVES,
        ]

    def test_user_triggers_only_for_enabled_conditions(self):
        profile = make_profile(
            {GutCondition.LACTOSE: SeverityLevel.MILD},
            known_triggers={
                GutCondition.LACTOSE: ["milk", "cheese"],
                GutCondition.GLUTEN: ["bread"],
            },
        )
        assert profile.user_triggers() == {GutCondition.LACTOSE: ["cheese", "milk"]}
        assert profile.all_known_triggers() == ["bread", "cheese", "milk"]

    def test_blank_triggers_stripped(self):
        settings = ConditionSettings(known_triggers={" onion ", "", "  "})
        assert settings.known_triggers == {"onion"}

    def test_condition_for_trigger_is_case_insensitive(self):
        profile = make_profile(
            {GutCondition.ALLERGIES: SeverityLevel.MILD},
            known_triggers={GutCondition.ALLERGIES: ["Peanuts"]},
        )
        assert profile.condition_for_trigger("PEANUTS") == GutCondition.ALLERGIES
        assert profile.condition_for_trigger("soy") is None

    def test_naive_timestamps_are_utc(self):
        profile = GutProfile(id="p1", created_at=datetime(2024, 1, 1, 9, 30))
        assert profile.created_at.tzinfo == timezone.utc


class TestLearningData:
    """Tests for LearningData derivations."""

    def test_user_conditions_derived_from_profile(self):
        data = LearningData(
            gut_profile=make_profile({GutCondition.REFLUX: SeverityLevel.MILD}),
            user_conditions=[GutCondition.GLUTEN],
        )
        assert data.user_conditions == [GutCondition.REFLUX]

    def test_replace_profile_updates_conditions(self):
        data = LearningData()
        data.replace_profile(make_profile({GutCondition.GLUTEN: SeverityLevel.MILD}))
        assert data.user_conditions == [GutCondition.GLUTEN]

    def test_data_point_count(self):
        data = LearningData(
            scan_history=[make_scan(["x"])],
            symptom_logs=[make_symptom_log({"bloating": 4})],
        )
        assert data.data_point_count() == 2


class TestCoerceModel:
    """Tests for coerce_model."""

    def test_instance_passthrough(self):
        food = FoodItem(id="1", name="Gum")
        assert coerce_model(FoodItem, food) is food

    def test_mapping_and_json(self):
        assert coerce_model(FoodItem, {"id": "1", "name": "Gum"}).name == "Gum"
        assert coerce_model(FoodItem, '{"id": "1", "name": "Gum"}').name == "Gum"

    def test_invalid_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            coerce_model(SymptomEntry, {"type": "bloating", "severity": 0})

        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, GutSafeError)
        assert exc_info.value.__cause__ is not None

    def test_error_hierarchy(self):
        assert issubclass(NotInitializedError, RuntimeError)
        assert issubclass(NotInitializedError, GutSafeError)
