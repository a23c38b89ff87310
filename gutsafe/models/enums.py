import enum


class GutCondition(str, enum.Enum):
    """Digestive sensitivities a user can enable. Declaration order is canonical."""
    IBS_FODMAP = "ibs_fodmap"
    GLUTEN = "gluten"
    LACTOSE = "lactose"
    REFLUX = "reflux"
    HISTAMINE = "histamine"
    ALLERGIES = "allergies"
    ADDITIVES = "additives"

    @property
    def label(self) -> str:
        return self.value.replace("_", "-")


class SeverityLevel(str, enum.Enum):
    """Ordered severity: mild < moderate < severe."""
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    SeverityLevel.MILD: 0,
    SeverityLevel.MODERATE: 1,
    SeverityLevel.SEVERE: 2,
}


class TriggerCategory(str, enum.Enum):
    SWEETENER = "sweetener"
    PRESERVATIVE = "preservative"
    EMULSIFIER = "emulsifier"
    STABILIZER = "stabilizer"
    COLOR = "color"
    FLAVOR = "flavor"
    ADDITIVE = "additive"
    OTHER = "other"


class IngredientCategory(str, enum.Enum):
    """Label category inferred from ingredient text."""
    SAUCE = "sauce"
    PRESERVATIVE = "preservative"
    SWEETENER = "sweetener"
    EMULSIFIER = "emulsifier"
    COLOR = "color"
    FLAVOR = "flavor"
    OTHER = "other"


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


class OverallSafety(str, enum.Enum):
    """Three-level verdict for a scanned item."""
    SAFE = "safe"
    CAUTION = "caution"
    AVOID = "avoid"


class FodmapLevel(str, enum.Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class SymptomType(str, enum.Enum):
    BLOATING = "bloating"
    CRAMPING = "cramping"
    DIARRHEA = "diarrhea"
    CONSTIPATION = "constipation"
    GAS = "gas"
    NAUSEA = "nausea"
    REFLUX = "reflux"
    HEARTBURN = "heartburn"
    FATIGUE = "fatigue"
    HEADACHE = "headache"
    SKIN_IRRITATION = "skin_irritation"
    OTHER = "other"


class UserFeedback(str, enum.Enum):
    """User's judgement of a past verdict."""
    ACCURATE = "accurate"
    INACCURATE = "inaccurate"


class InsightType(str, enum.Enum):
    FOOD_TRIGGER = "food_trigger"
    SYMPTOM_PATTERN = "symptom_pattern"
    CONDITION_CORRELATION = "condition_correlation"
    TIMING_PATTERN = "timing_pattern"


class SymptomTiming(str, enum.Enum):
    IMMEDIATE = "immediate"
    DELAYED = "delayed"
    CHRONIC = "chronic"


class TimeSlot(str, enum.Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class RecommendationType(str, enum.Enum):
    PROFILE_UPDATE = "profile_update"
    TRIGGER_ADDITION = "trigger_addition"
    SEVERITY_ADJUSTMENT = "severity_adjustment"
    CONDITION_TOGGLE = "condition_toggle"


class RecommendationPriority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EngineState(str, enum.Enum):
    """Learning engine lifecycle."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    UPDATING = "updating"
