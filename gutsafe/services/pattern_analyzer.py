"""
Pattern mining over a user's scan and symptom history.

Three independent passes (food triggers, symptom combinations, time of day)
produce intermediate patterns; generate_pattern_insights() filters them by
confidence and turns them into PatternInsight objects.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from gutsafe.config import settings
from gutsafe.models import (
    FoodTriggerPattern,
    GutCondition,
    InsightEvidence,
    InsightType,
    LearningData,
    OverallSafety,
    PatternInsight,
    ScanRecord,
    SymptomLog,
    SymptomPattern,
    SymptomTiming,
    SymptomType,
    TimeSlot,
    TimingPattern,
)
from gutsafe.models.base import clamp
from gutsafe.services.normalization import normalize_text

logger = logging.getLogger(__name__)

SEVERITY_SCORES = {
    OverallSafety.SAFE: 0.0,
    OverallSafety.CAUTION: 0.5,
    OverallSafety.AVOID: 1.0,
}

# Substring of a normalized ingredient -> conditions it usually implicates
INGREDIENT_CONDITIONS = {
    "gluten": [GutCondition.GLUTEN],
    "wheat": [GutCondition.GLUTEN],
    "barley": [GutCondition.GLUTEN],
    "rye": [GutCondition.GLUTEN],
    "lactose": [GutCondition.LACTOSE],
    "milk": [GutCondition.LACTOSE],
    "whey": [GutCondition.LACTOSE],
    "fructose": [GutCondition.IBS_FODMAP],
    "sorbitol": [GutCondition.IBS_FODMAP],
    "onion": [GutCondition.IBS_FODMAP],
    "garlic": [GutCondition.IBS_FODMAP],
    "histamine": [GutCondition.HISTAMINE],
}

SYMPTOM_CONDITIONS = {
    SymptomType.BLOATING: [GutCondition.IBS_FODMAP, GutCondition.LACTOSE],
    SymptomType.DIARRHEA: [
        GutCondition.IBS_FODMAP,
        GutCondition.GLUTEN,
        GutCondition.LACTOSE,
    ],
    SymptomType.CONSTIPATION: [GutCondition.IBS_FODMAP],
    SymptomType.NAUSEA: [GutCondition.REFLUX, GutCondition.HISTAMINE],
    SymptomType.HEARTBURN: [GutCondition.REFLUX],
    SymptomType.REFLUX: [GutCondition.REFLUX],
}


class PatternAnalyzer:
    """Mines LearningData for trigger, symptom and timing patterns."""

    def __init__(
        self,
        confidence_cap: Optional[float] = None,
        confidence_floor: Optional[float] = None,
        food_trigger_min_confidence: Optional[float] = None,
        symptom_pattern_min_confidence: Optional[float] = None,
        timing_pattern_min_confidence: Optional[float] = None,
    ):
        self.confidence_cap = _or_default(confidence_cap, settings.pattern_confidence_cap)
        self.confidence_floor = _or_default(
            confidence_floor, settings.pattern_confidence_floor
        )
        self.food_trigger_min_confidence = _or_default(
            food_trigger_min_confidence, settings.food_trigger_min_confidence
        )
        self.symptom_pattern_min_confidence = _or_default(
            symptom_pattern_min_confidence, settings.symptom_pattern_min_confidence
        )
        self.timing_pattern_min_confidence = _or_default(
            timing_pattern_min_confidence, settings.timing_pattern_min_confidence
        )

    def frequency_confidence(self, frequency: int, total: int) -> float:
        """min(cap, frequency / total + floor), clamped to [0, 1]."""
        if total <= 0:
            return 0.0
        return clamp(min(self.confidence_cap, frequency / total + self.confidence_floor))

    # ------------------------------------------------------------------
    # Mining passes
    # ------------------------------------------------------------------

    def analyze_food_triggers(self, learning_data: LearningData) -> List[FoodTriggerPattern]:
        """Count ingredients across scans judged caution or avoid."""
        patterns: Dict[str, FoodTriggerPattern] = {}

        for scan in learning_data.scan_history:
            if scan.analysis_result == OverallSafety.SAFE:
                continue
            score = SEVERITY_SCORES[scan.analysis_result]
            for ingredient in scan.ingredients:
                key = normalize_text(ingredient)
                if not key:
                    continue
                existing = patterns.get(key)
                if existing:
                    existing.frequency += 1
                    existing.severity = max(existing.severity, score)
                else:
                    patterns[key] = FoodTriggerPattern(
                        ingredient=ingredient.strip(),
                        frequency=1,
                        severity=score,
                        conditions=conditions_for_ingredient(
                            key, learning_data.user_conditions
                        ),
                    )

        total_scans = len(learning_data.scan_history)
        for pattern in patterns.values():
            pattern.confidence = self.frequency_confidence(pattern.frequency, total_scans)

        return _by_confidence(patterns.values())

    def analyze_symptom_patterns(self, learning_data: LearningData) -> List[SymptomPattern]:
        """Group symptom logs by the set of symptom types reported together."""
        groups: Dict[tuple, List[SymptomLog]] = {}
        for log in learning_data.symptom_logs:
            key = log.symptom_key()
            if key:
                groups.setdefault(key, []).append(log)

        total_logs = len(learning_data.symptom_logs)
        patterns = []
        for key, logs in groups.items():
            symptoms = [SymptomType(value) for value in key]
            timings = Counter(
                analyze_timing(log, learning_data.scan_history) for log in logs
            )
            patterns.append(
                SymptomPattern(
                    symptoms=symptoms,
                    frequency=len(logs),
                    severity=max(log.average_severity() for log in logs),
                    # Counter preserves first-seen order on ties
                    timing=timings.most_common(1)[0][0],
                    conditions=conditions_for_symptoms(
                        symptoms, learning_data.user_conditions
                    ),
                    confidence=self.frequency_confidence(len(logs), total_logs),
                )
            )

        return _by_confidence(patterns)

    def analyze_timing_patterns(self, learning_data: LearningData) -> List[TimingPattern]:
        """Bucket symptom logs by time of day."""
        patterns: Dict[TimeSlot, TimingPattern] = {}
        for log in learning_data.symptom_logs:
            slot = time_slot_for_hour(log.timestamp.hour)
            severity = log.average_severity()
            existing = patterns.get(slot)
            if existing:
                existing.frequency += 1
                existing.severity = max(existing.severity, severity)
            else:
                patterns[slot] = TimingPattern(
                    time_of_day=slot, frequency=1, severity=severity
                )

        total_logs = len(learning_data.symptom_logs)
        for pattern in patterns.values():
            pattern.confidence = self.frequency_confidence(pattern.frequency, total_logs)

        return _by_confidence(patterns.values())

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def generate_pattern_insights(self, learning_data: LearningData) -> List[PatternInsight]:
        """
        Turn mined patterns above their confidence thresholds into insights.

        Returns:
            Insights sorted by confidence descending; ties keep pass order
            (food triggers, then symptom patterns, then timing)
        """
        insights: List[PatternInsight] = []

        for trigger in self.analyze_food_triggers(learning_data):
            if trigger.confidence <= self.food_trigger_min_confidence:
                continue
            insights.append(
                PatternInsight(
                    type=InsightType.FOOD_TRIGGER,
                    subject=trigger.ingredient,
                    confidence=trigger.confidence,
                    description=(
                        f"{trigger.ingredient} appears to trigger symptoms with "
                        f"{round(trigger.confidence * 100)}% confidence"
                    ),
                    evidence=InsightEvidence(
                        frequency=trigger.frequency,
                        severity=trigger.severity,
                        consistency=trigger.confidence,
                    ),
                    recommendations=[
                        f"Consider avoiding {trigger.ingredient}",
                        f"Look for alternatives without {trigger.ingredient}",
                        f"Monitor symptoms when consuming {trigger.ingredient}",
                    ],
                    affected_conditions=trigger.conditions,
                )
            )

        for pattern in self.analyze_symptom_patterns(learning_data):
            if pattern.confidence <= self.symptom_pattern_min_confidence:
                continue
            combination = ", ".join(s.value for s in pattern.symptoms)
            insights.append(
                PatternInsight(
                    type=InsightType.SYMPTOM_PATTERN,
                    subject=combination,
                    confidence=pattern.confidence,
                    description=f"Symptom combination: {combination} occurs frequently",
                    evidence=InsightEvidence(
                        frequency=pattern.frequency,
                        severity=pattern.severity,
                        consistency=pattern.confidence,
                    ),
                    recommendations=[
                        "Track these symptoms together",
                        "Look for common triggers",
                        "Consider dietary adjustments",
                    ],
                    affected_conditions=pattern.conditions,
                )
            )

        for pattern in self.analyze_timing_patterns(learning_data):
            if pattern.confidence <= self.timing_pattern_min_confidence:
                continue
            slot = pattern.time_of_day.value
            insights.append(
                PatternInsight(
                    type=InsightType.TIMING_PATTERN,
                    subject=slot,
                    confidence=pattern.confidence,
                    description=f"Symptoms frequently occur during {slot}",
                    evidence=InsightEvidence(
                        frequency=pattern.frequency,
                        severity=pattern.severity,
                        consistency=pattern.confidence,
                    ),
                    recommendations=[
                        f"Monitor diet during {slot}",
                        "Consider meal timing adjustments",
                        "Track pre-meal activities",
                    ],
                    affected_conditions=list(learning_data.user_conditions),
                )
            )

        logger.debug("Generated %d pattern insights", len(insights))
        return _by_confidence(insights)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def time_slot_for_hour(hour: int) -> TimeSlot:
    if 6 <= hour < 12:
        return TimeSlot.MORNING
    if 12 <= hour < 18:
        return TimeSlot.AFTERNOON
    if 18 <= hour < 22:
        return TimeSlot.EVENING
    return TimeSlot.NIGHT


def analyze_timing(
    log: SymptomLog,
    scan_history: Sequence[ScanRecord],
    immediate_window: Optional[timedelta] = None,
    related_window: Optional[timedelta] = None,
) -> SymptomTiming:
    """
    Classify how soon a symptom log followed the most recent related scan.

    A scan is related when it happened within the preceding related window
    and, if the log names foods, its food name is one of them.
    """
    immediate_window = immediate_window or timedelta(
        hours=settings.immediate_window_hours
    )
    related_window = related_window or timedelta(
        hours=settings.related_scan_window_hours
    )
    foods = {normalize_text(f) for f in log.related_food_items}
    foods.discard("")

    latest: Optional[datetime] = None
    for scan in scan_history:
        elapsed = log.timestamp - scan.timestamp
        if elapsed < timedelta(0) or elapsed >= related_window:
            continue
        if foods and normalize_text(scan.food_name) not in foods:
            continue
        if latest is None or scan.timestamp > latest:
            latest = scan.timestamp

    if latest is None:
        return SymptomTiming.CHRONIC
    if log.timestamp - latest <= immediate_window:
        return SymptomTiming.IMMEDIATE
    return SymptomTiming.DELAYED


def conditions_for_ingredient(
    normalized: str, user_conditions: Sequence[GutCondition]
) -> List[GutCondition]:
    mapped = set()
    for key, conditions in INGREDIENT_CONDITIONS.items():
        if key in normalized:
            mapped.update(conditions)
    if not mapped:
        return list(user_conditions)
    return [c for c in GutCondition if c in mapped]


def conditions_for_symptoms(
    symptoms: Iterable[SymptomType], user_conditions: Sequence[GutCondition]
) -> List[GutCondition]:
    """Conditions suggested by the symptoms, enabled or not.

    Not filtered to the user's enabled conditions, so a strong symptom
    pattern can still recommend turning a condition on.
    """
    mapped = set()
    for symptom in symptoms:
        mapped.update(SYMPTOM_CONDITIONS.get(symptom, ()))
    if not mapped:
        return list(user_conditions)
    return [c for c in GutCondition if c in mapped]


def _by_confidence(items):
    return sorted(items, key=lambda item: item.confidence, reverse=True)


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value
