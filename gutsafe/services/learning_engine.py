"""
Learning engine: keeps one user's history and the insights derived from it.

Writes mark the derived insights and metrics stale; the next read
recomputes them, so a read always reflects every earlier write.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, List, Optional

from gutsafe.config import settings
from gutsafe.exceptions import NotInitializedError, ValidationError
from gutsafe.models import (
    AdaptiveRecommendation,
    DataQuality,
    EngineState,
    FoodItem,
    GutProfile,
    LearningData,
    LearningInsights,
    LearningMetrics,
    LearningProgress,
    OverallSafety,
    PatternInsight,
    ScanAnalysis,
    ScanRecord,
    SymptomEntry,
    SymptomLog,
    UserFeedback,
    coerce_model,
)
from gutsafe.models.base import clamp, ensure_aware, utcnow
from gutsafe.services.data_sources import InMemoryLearningDataSource, LearningDataSource
from gutsafe.services.pattern_analyzer import PatternAnalyzer
from gutsafe.services.recommendation_service import RecommendationService

logger = logging.getLogger(__name__)


class LearningEngine:
    """Per-user learning session. Construct one per user; there is no global instance."""

    def __init__(
        self,
        data_source: Optional[LearningDataSource] = None,
        pattern_analyzer: Optional[PatternAnalyzer] = None,
        recommendation_service: Optional[RecommendationService] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.data_source = data_source or InMemoryLearningDataSource()
        self.pattern_analyzer = pattern_analyzer or PatternAnalyzer()
        self.recommendation_service = recommendation_service or RecommendationService()
        self._clock = clock

        self.state = EngineState.UNINITIALIZED
        self._data: Optional[LearningData] = None
        self._insights: Optional[LearningInsights] = None
        self._metrics: Optional[LearningMetrics] = None
        self._stale = False

    @property
    def is_initialized(self) -> bool:
        return self._data is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Load learning data and compute the first insights and metrics.

        Raises:
            ValidationError: If the data source holds malformed data
        """
        data = await self.data_source.load()
        self._data = coerce_model(LearningData, data)
        self.state = EngineState.UPDATING
        try:
            self.generate_insights()
            self.calculate_metrics()
        except Exception:
            logger.error("Failed to initialize learning engine", exc_info=True)
            self._data = None
            self.state = EngineState.UNINITIALIZED
            raise
        self.state = EngineState.READY
        self._stale = False
        logger.info(
            "Learning engine initialized with %d data points",
            self._data.data_point_count(),
        )

    async def persist(self) -> None:
        """Save the current history and profile back to the data source."""
        if self._data is None:
            raise NotInitializedError("Learning engine has not been initialized")
        await self.data_source.save(self._data)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_scan_data(
        self,
        food_item: Any,
        analysis: Any,
        user_feedback: Optional[UserFeedback] = None,
        timestamp: Optional[datetime] = None,
    ) -> None:
        """
        Record a scan and its verdict.

        Args:
            food_item: FoodItem or mapping
            analysis: ScanAnalysis, or the OverallSafety verdict alone
            user_feedback: Whether the user judged the verdict accurate
            timestamp: When the scan happened (defaults to now)
        """
        if not self._ready_for_writes("scan"):
            return

        food = coerce_model(FoodItem, food_item)
        if isinstance(analysis, ScanAnalysis):
            verdict = analysis.overall_safety
        else:
            try:
                verdict = OverallSafety(analysis)
            except ValueError as e:
                raise ValidationError(f"Invalid scan verdict: {analysis!r}") from e

        self._data.scan_history.append(
            ScanRecord(
                food_name=food.name,
                ingredients=list(food.ingredients),
                analysis_result=verdict,
                user_feedback=user_feedback,
                timestamp=timestamp or self._clock(),
            )
        )
        self._stale = True
        logger.info("Scan data added for %s (%s)", food.name, verdict.value)

    def add_symptom_data(
        self,
        symptoms: Iterable[Any],
        related_food_items: Iterable[str] = (),
        timestamp: Optional[datetime] = None,
    ) -> None:
        """Record a symptom log; each symptom is a SymptomEntry or mapping."""
        if not self._ready_for_writes("symptom"):
            return

        log = SymptomLog(
            symptoms=[coerce_model(SymptomEntry, s) for s in symptoms],
            related_food_items=list(related_food_items),
            timestamp=timestamp or self._clock(),
        )
        self._data.symptom_logs.append(log)
        self._stale = True
        logger.info("Symptom data added (%d symptoms)", len(log.symptoms))

    def update_gut_profile(self, profile: Any) -> None:
        if not self._ready_for_writes("profile"):
            return

        gut_profile = coerce_model(GutProfile, profile)
        self._data.replace_profile(gut_profile)
        self._stale = True
        logger.info("Gut profile updated: %s", gut_profile.id)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def generate_insights(self) -> LearningInsights:
        """
        Mine patterns and recommendations from the current data.

        Raises:
            NotInitializedError: If initialize() has not completed
        """
        data = self._require_data()
        patterns = self.pattern_analyzer.generate_pattern_insights(data)
        recommendations = self.recommendation_service.generate_adaptive_recommendations(
            patterns,
            data.gut_profile,
            data.data_point_count(),
            self._time_span_days(data),
        )

        self._insights = LearningInsights(
            patterns=patterns,
            recommendations=recommendations,
            confidence=overall_confidence(patterns, recommendations),
            data_quality=self._assess_data_quality(data),
            last_updated=self._clock(),
        )
        logger.info(
            "Insights generated: %d patterns, %d recommendations",
            len(patterns),
            len(recommendations),
        )
        return self._insights

    def calculate_metrics(self) -> LearningMetrics:
        """
        Compute learning metrics for the current data.

        Raises:
            NotInitializedError: If initialize() has not completed
        """
        data = self._require_data()
        self._metrics = LearningMetrics(
            total_data_points=data.data_point_count(),
            learning_accuracy=clamp(settings.learning_accuracy),
            prediction_accuracy=prediction_accuracy(data.scan_history),
            user_satisfaction=clamp(settings.user_satisfaction),
            adaptation_rate=clamp(settings.adaptation_rate),
            last_evaluation=self._clock(),
        )
        logger.debug("Metrics calculated: %s", self._metrics.model_dump(mode="json"))
        return self._metrics

    # ------------------------------------------------------------------
    # Reads (never raise)
    # ------------------------------------------------------------------

    def get_insights(self) -> Optional[LearningInsights]:
        self._refresh()
        return self._insights

    def get_metrics(self) -> Optional[LearningMetrics]:
        self._refresh()
        return self._metrics

    def get_learning_progress(self) -> LearningProgress:
        self._refresh()
        insights = self._insights
        return LearningProgress(
            data_points=self._data.data_point_count() if self._data else 0,
            patterns_discovered=len(insights.patterns) if insights else 0,
            recommendations_generated=len(insights.recommendations) if insights else 0,
            accuracy=self._metrics.learning_accuracy if self._metrics else 0.0,
            last_update=insights.last_updated if insights else self._clock(),
        )

    def get_personalized_recommendations(self) -> List[str]:
        self._refresh()
        if self._data is None or self._insights is None:
            return []
        return self.recommendation_service.generate_personalized_recommendations(
            self._data.gut_profile, self._insights.patterns
        )

    def snapshot(self) -> Optional[LearningData]:
        """Deep copy of the current learning data, or None before initialize()."""
        if self._data is None:
            return None
        return self._data.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ready_for_writes(self, kind: str) -> bool:
        if self._data is None:
            logger.warning("Ignoring %s data: learning engine not initialized", kind)
            return False
        return True

    def _require_data(self) -> LearningData:
        if self._data is None:
            raise NotInitializedError("Learning engine has not been initialized")
        return self._data

    def _refresh(self) -> None:
        if self._data is None or not self._stale:
            return
        self.state = EngineState.UPDATING
        try:
            self.generate_insights()
            self.calculate_metrics()
            self._stale = False
        finally:
            self.state = EngineState.READY

    def _time_span_days(self, data: LearningData) -> int:
        timestamps = data.timestamps()
        if not timestamps:
            return 0
        elapsed = ensure_aware(self._clock()) - min(timestamps)
        return max(0, math.ceil(elapsed / timedelta(days=1)))

    def _assess_data_quality(self, data: LearningData) -> DataQuality:
        now = ensure_aware(self._clock())
        window = timedelta(days=settings.recency_window_days)
        recent = sum(1 for ts in data.timestamps() if now - ts < window)
        return DataQuality(
            completeness=clamp(
                data.data_point_count() / settings.completeness_target_points
            ),
            consistency=clamp(settings.data_consistency),
            recency=clamp(recent / settings.recency_target_items),
        )


def overall_confidence(
    patterns: List[PatternInsight], recommendations: List[AdaptiveRecommendation]
) -> float:
    """Mean of the per-group mean confidences, skipping empty groups."""
    group_means = [
        sum(item.confidence for item in group) / len(group)
        for group in (patterns, recommendations)
        if group
    ]
    if not group_means:
        return 0.0
    return clamp(sum(group_means) / len(group_means))


def prediction_accuracy(scans: List[ScanRecord]) -> float:
    """Share of verdicts the user marked accurate, or the configured default."""
    judged = [s.user_feedback for s in scans if s.user_feedback is not None]
    if not judged:
        return clamp(settings.prediction_accuracy)
    accurate = sum(1 for f in judged if f == UserFeedback.ACCURATE)
    return clamp(accurate / len(judged))
