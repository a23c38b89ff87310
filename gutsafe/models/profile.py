from typing import Dict, List, Optional, Set

from pydantic import BaseModel, Field, field_validator

from gutsafe.models.base import Timestamp, utcnow
from gutsafe.models.enums import GutCondition, SeverityLevel


class ConditionSettings(BaseModel):
    """Per-condition configuration chosen by the user."""

    enabled: bool = False
    severity: SeverityLevel = SeverityLevel.MILD
    known_triggers: Set[str] = Field(default_factory=set)

    @field_validator("known_triggers", mode="after")
    @classmethod
    def _strip_blank_triggers(cls, value: Set[str]) -> Set[str]:
        return {t.strip() for t in value if t.strip()}


class ProfilePreferences(BaseModel):
    dietary_restrictions: List[str] = Field(default_factory=list)
    preferred_alternatives: List[str] = Field(default_factory=list)


class GutProfile(BaseModel):
    """A user's gut-health profile. Treated as read-only by the core."""

    id: str
    conditions: Dict[GutCondition, ConditionSettings] = Field(
        default_factory=dict, validate_default=True
    )
    preferences: ProfilePreferences = Field(default_factory=ProfilePreferences)
    created_at: Timestamp = Field(default_factory=utcnow)
    updated_at: Timestamp = Field(default_factory=utcnow)

    @field_validator("conditions", mode="after")
    @classmethod
    def _fill_missing_conditions(cls, value: Dict[GutCondition, ConditionSettings]):
        # Conditions the user never touched are present but disabled
        return {
            condition: value.get(condition, ConditionSettings())
            for condition in GutCondition
        }

    @classmethod
    def default(cls, profile_id: str = "default") -> "GutProfile":
        return cls(id=profile_id)

    def settings_for(self, condition: GutCondition) -> ConditionSettings:
        return self.conditions.get(condition, ConditionSettings())

    def enabled_conditions(self) -> List[GutCondition]:
        return [c for c in GutCondition if self.settings_for(c).enabled]

    def user_triggers(self) -> Dict[GutCondition, List[str]]:
        """Known triggers of enabled conditions, sorted for determinism."""
        return {
            c: sorted(self.settings_for(c).known_triggers)
            for c in self.enabled_conditions()
            if self.settings_for(c).known_triggers
        }

    def all_known_triggers(self) -> List[str]:
        seen: Dict[str, None] = {}
        for condition in GutCondition:
            for trigger in sorted(self.settings_for(condition).known_triggers):
                seen.setdefault(trigger, None)
        return list(seen)

    def condition_for_trigger(self, trigger: str) -> Optional[GutCondition]:
        """First enabled condition that lists trigger (case-insensitive)."""
        needle = trigger.strip().lower()
        for condition in self.enabled_conditions():
            known = {t.lower() for t in self.settings_for(condition).known_triggers}
            if needle in known:
                return condition
        return None
