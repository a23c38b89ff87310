from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from gutsafe.models.enums import GutCondition, SeverityLevel, TriggerCategory


class HiddenTrigger(BaseModel):
    """A substance that may hide on a label under many names."""

    model_config = ConfigDict(frozen=True)

    name: str
    aliases: Set[str] = Field(default_factory=set)
    e_number: Optional[str] = None
    category: TriggerCategory = TriggerCategory.OTHER
    problematic_conditions: Set[GutCondition] = Field(default_factory=set)
    severity: SeverityLevel = SeverityLevel.MODERATE
    description: str = ""
    common_sources: List[str] = Field(default_factory=list)
    safe_alternatives: List[str] = Field(default_factory=list)
    detection_keywords: Set[str] = Field(default_factory=set)
    is_custom: bool = False

    def affects_any(self, conditions) -> bool:
        return bool(self.problematic_conditions.intersection(conditions))

    def first_affected(self, conditions) -> Optional[GutCondition]:
        """First of conditions (in the given order) this trigger is problematic for."""
        for condition in conditions:
            if condition in self.problematic_conditions:
                return condition
        return None
