"""
Ingredient matcher: detects hidden triggers in free-text ingredient strings.

Each ingredient is normalized and scanned against the trigger catalog and
the user's own declared triggers, producing an IngredientAnalysisResult
with a confidence score, risk level and recommendations.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from gutsafe.config import settings
from gutsafe.models import (
    GutCondition,
    HiddenTrigger,
    IngredientAnalysis,
    IngredientAnalysisResult,
    IngredientCategory,
    IngredientRecommendations,
    RiskLevel,
    SeverityLevel,
    TriggerCategory,
)
from gutsafe.models.base import clamp
from gutsafe.services.normalization import (
    contains_token,
    find_e_numbers,
    normalize_text,
)
from gutsafe.services.result_cache import ResultCache
from gutsafe.services.trigger_catalog import TriggerCatalog

logger = logging.getLogger(__name__)

UserTriggers = Mapping[GutCondition, Iterable[str]]

# Vague label terms that conceal the real substance
HIDDEN_PATTERNS = (
    "natural flavoring",
    "artificial flavoring",
    "natural flavors",
    "natural flavour",
    "spices",
    "seasonings",
    "preservatives",
    "additives",
    "stabilizers",
    "emulsifiers",
    "thickeners",
    "colors",
    "flavor enhancer",
    "texture modifier",
    "processing aid",
)

VAGUE_TERMS = ("natural", "artificial", "flavoring", "spices")

KEYWORD_CATEGORIES = (
    "sauce", "dressing", "marinade", "seasoning", "spice", "herb",
    "preservative", "additive", "emulsifier", "stabilizer", "thickener",
    "sweetener", "color", "flavor", "natural", "artificial",
)

# (category, words, E-number prefix) checked in order; first hit wins
CATEGORY_RULES: Sequence[Tuple[IngredientCategory, Tuple[str, ...], Optional[str]]] = (
    (IngredientCategory.SAUCE, ("sauce", "dressing", "marinade"), None),
    (IngredientCategory.PRESERVATIVE, ("preservative",), "e2"),
    (IngredientCategory.SWEETENER, ("sweetener", "sugar"), "e9"),
    (IngredientCategory.EMULSIFIER, ("emulsifier", "stabilizer"), "e4"),
    (IngredientCategory.COLOR, ("color", "dye"), "e1"),
    (IngredientCategory.FLAVOR, ("flavor",), "e6"),
)

CONDITION_ALTERNATIVES = {
    GutCondition.GLUTEN: "Gluten-free alternatives",
    GutCondition.LACTOSE: "Lactose-free alternatives",
    GutCondition.IBS_FODMAP: "Low FODMAP alternatives",
}


class IngredientMatcher:
    """Matches ingredient text against the trigger catalog and user triggers.

    One instance per user session; results are cached by normalized text,
    sorted conditions and the user's trigger set.
    """

    def __init__(
        self,
        catalog: Optional[TriggerCatalog] = None,
        cache: Optional[ResultCache] = None,
    ):
        if catalog is None:
            catalog = TriggerCatalog()
        if cache is None:
            cache = ResultCache(
                ttl_seconds=settings.ingredient_cache_ttl_seconds,
                max_entries=settings.ingredient_cache_max_entries,
            )
        self.catalog = catalog
        self.cache = cache
        # Pre-normalize catalog terms once per instance
        self._catalog_terms = [
            (
                trigger,
                normalize_text(trigger.name),
                [normalize_text(a) for a in sorted(trigger.aliases)],
                normalize_text(trigger.e_number) if trigger.e_number else None,
                [normalize_text(k) for k in sorted(trigger.detection_keywords)],
            )
            for trigger in self.catalog
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def match(
        self,
        ingredient_text: str,
        user_conditions: Iterable[GutCondition],
        user_triggers: Optional[UserTriggers] = None,
    ) -> IngredientAnalysisResult:
        """
        Analyze one ingredient for hidden triggers relevant to the user.

        Args:
            ingredient_text: Raw ingredient string from the label
            user_conditions: Conditions the user has enabled
            user_triggers: Known triggers declared per condition

        Returns:
            IngredientAnalysisResult; an empty-but-present result when
            nothing matches
        """
        conditions = _ordered_conditions(user_conditions)
        triggers = _normalize_user_triggers(user_triggers or {}, conditions)
        normalized = normalize_text(ingredient_text)

        cache_key = (
            normalized,
            tuple(c.value for c in conditions),
            tuple((c.value, tuple(t)) for c, t in triggers),
        )
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Ingredient cache hit for %r", normalized)
            return cached.model_copy(update={"ingredient": ingredient_text}, deep=True)

        result = self._analyze(ingredient_text, normalized, conditions, triggers)
        self.cache.set(cache_key, result.model_copy(deep=True))
        return result

    def match_many(
        self,
        ingredients: Iterable[str],
        user_conditions: Iterable[GutCondition],
        user_triggers: Optional[UserTriggers] = None,
    ) -> List[IngredientAnalysisResult]:
        conditions = list(user_conditions)
        return [self.match(i, conditions, user_triggers) for i in ingredients]

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> Dict:
        return self.cache.stats()

    # ------------------------------------------------------------------
    # Analysis steps
    # ------------------------------------------------------------------

    def _analyze(
        self,
        ingredient_text: str,
        normalized: str,
        conditions: List[GutCondition],
        triggers: List[Tuple[GutCondition, List[str]]],
    ) -> IngredientAnalysisResult:
        detected = self.detect_triggers(normalized, conditions, triggers)

        return IngredientAnalysisResult(
            ingredient=ingredient_text,
            is_problematic=bool(detected),
            is_hidden=is_hidden_ingredient(normalized),
            detected_triggers=detected,
            confidence=calculate_confidence(normalized, detected),
            analysis=IngredientAnalysis(
                normalized_text=normalized,
                detected_keywords=extract_keywords(normalized),
                category=categorize_ingredient(normalized),
                risk_level=calculate_risk_level(detected),
            ),
            recommendations=generate_recommendations(detected),
        )

    def detect_triggers(
        self,
        normalized: str,
        conditions: Sequence[GutCondition],
        triggers: Sequence[Tuple[GutCondition, List[str]]] = (),
    ) -> List[HiddenTrigger]:
        """
        Detect catalog and user-declared triggers in normalized text.

        Catalog entries are checked by name, then alias or E-number, then
        detection keyword; each entry is reported once at its earliest
        matching stage. Entries irrelevant to the user's conditions are
        discarded. User-declared triggers come last.
        """
        if not normalized:
            return []

        hits = []
        for position, (trigger, name, aliases, e_number, keywords) in enumerate(
            self._catalog_terms
        ):
            if not trigger.affects_any(conditions):
                continue
            stage = _match_stage(normalized, name, aliases, e_number, keywords)
            if stage is not None:
                hits.append((stage, position, trigger))

        detected = [trigger for _, _, trigger in sorted(hits, key=lambda h: h[:2])]

        for condition, condition_triggers in triggers:
            for user_trigger in condition_triggers:
                if user_trigger in normalized:
                    detected.append(_custom_trigger(user_trigger, condition))

        return detected


# ----------------------------------------------------------------------
# Scoring helpers
# ----------------------------------------------------------------------


def is_hidden_ingredient(normalized: str) -> bool:
    """Check if ingredient is vague or generic."""
    return any(pattern in normalized for pattern in HIDDEN_PATTERNS)


def calculate_confidence(normalized: str, triggers: Sequence[HiddenTrigger]) -> float:
    confidence = 0.5

    if triggers:
        confidence += 0.3

    if find_e_numbers(normalized):
        confidence += 0.2

    if any(term in normalized for term in VAGUE_TERMS):
        confidence -= 0.1

    return round(clamp(confidence), 3)


def categorize_ingredient(normalized: str) -> IngredientCategory:
    e_numbers = find_e_numbers(normalized)
    for category, words, e_prefix in CATEGORY_RULES:
        if any(word in normalized for word in words):
            return category
        if e_prefix and any(e.startswith(e_prefix) for e in e_numbers):
            return category
    return IngredientCategory.OTHER


def extract_keywords(normalized: str) -> List[str]:
    keywords = [word for word in KEYWORD_CATEGORIES if word in normalized]
    keywords.extend(find_e_numbers(normalized))
    return keywords


def calculate_risk_level(triggers: Sequence[HiddenTrigger]) -> RiskLevel:
    """Map the most severe detected trigger onto a risk level."""
    if not triggers:
        return RiskLevel.LOW

    worst = max(t.severity for t in triggers)
    if worst == SeverityLevel.SEVERE:
        return RiskLevel.SEVERE
    if worst == SeverityLevel.MODERATE:
        return RiskLevel.HIGH
    return RiskLevel.MODERATE


def generate_recommendations(triggers: Sequence[HiddenTrigger]) -> IngredientRecommendations:
    alternatives: Dict[str, None] = {}
    modifications: Dict[str, None] = {}

    for trigger in triggers:
        for alternative in trigger.safe_alternatives:
            alternatives.setdefault(alternative, None)

        if trigger.severity == SeverityLevel.SEVERE:
            modifications.setdefault(f"Avoid products containing {trigger.name}", None)
        elif trigger.severity == SeverityLevel.MODERATE:
            modifications.setdefault(
                f"Use caution with products containing {trigger.name}", None
            )
        else:
            modifications.setdefault(
                f"Monitor symptoms after products containing {trigger.name}", None
            )

    return IngredientRecommendations(
        avoid=any(t.severity == SeverityLevel.SEVERE for t in triggers),
        caution=any(t.severity == SeverityLevel.MODERATE for t in triggers),
        alternatives=list(alternatives),
        modifications=list(modifications),
    )


# ----------------------------------------------------------------------
# Input normalization
# ----------------------------------------------------------------------


def _ordered_conditions(conditions: Iterable[GutCondition]) -> List[GutCondition]:
    """Deduplicate and sort conditions into canonical enum order."""
    wanted = {GutCondition(c) for c in conditions}
    return [c for c in GutCondition if c in wanted]


def _normalize_user_triggers(
    user_triggers: UserTriggers, conditions: Sequence[GutCondition]
) -> List[Tuple[GutCondition, List[str]]]:
    """Normalized, de-duplicated user triggers for enabled conditions only."""
    by_condition = {GutCondition(c): terms for c, terms in user_triggers.items()}
    normalized = []
    for condition in conditions:
        terms = {normalize_text(t) for t in by_condition.get(condition, ())}
        terms.discard("")
        if terms:
            normalized.append((condition, sorted(terms)))
    return normalized


def _custom_trigger(term: str, condition: GutCondition) -> HiddenTrigger:
    return HiddenTrigger(
        name=term,
        category=TriggerCategory.OTHER,
        problematic_conditions={condition},
        severity=SeverityLevel.SEVERE,
        description=f"Declared as a known trigger for {condition.label}",
        safe_alternatives=[
            CONDITION_ALTERNATIVES.get(condition, "Natural alternatives")
        ],
        is_custom=True,
    )


def _match_stage(
    normalized: str,
    name: str,
    aliases: Sequence[str],
    e_number: Optional[str],
    keywords: Sequence[str],
) -> Optional[int]:
    """Earliest stage at which a catalog entry matches: 0 name, 1 alias, 2 keyword."""
    if name in normalized:
        return 0
    if any(alias in normalized for alias in aliases):
        return 1
    if e_number is not None and contains_token(normalized, e_number):
        return 1
    if any(keyword in normalized for keyword in keywords):
        return 2
    return None
