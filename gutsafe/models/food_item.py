from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from gutsafe.models.enums import FodmapLevel


class FoodItem(BaseModel):
    """Normalized product record supplied by a food-database collaborator."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    brand: Optional[str] = None
    category: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    allergens: Set[str] = Field(default_factory=set)
    gluten_free: bool = False
    lactose_free: bool = False
    fodmap_level: Optional[FodmapLevel] = None
    barcode: Optional[str] = None
    data_source: Optional[str] = None
