"""Static catalog of hidden gut-health triggers."""

from typing import Iterable, List, Optional, Sequence

from gutsafe.models import GutCondition, HiddenTrigger, SeverityLevel, TriggerCategory
from gutsafe.services.normalization import normalize_text

CATALOG_VERSION = "2024.1"

_FODMAP = GutCondition.IBS_FODMAP
_GLUTEN = GutCondition.GLUTEN
_LACTOSE = GutCondition.LACTOSE
_REFLUX = GutCondition.REFLUX
_HISTAMINE = GutCondition.HISTAMINE
_ALLERGIES = GutCondition.ALLERGIES
_ADDITIVES = GutCondition.ADDITIVES


HIDDEN_TRIGGERS: Sequence[HiddenTrigger] = (
    # --- Sweeteners & polyols ---
    HiddenTrigger(
        name="Aspartame",
        aliases={"nutrasweet", "equal sweetener", "aspartyl phenylalanine"},
        e_number="E951",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP, _ADDITIVES},
        severity=SeverityLevel.MODERATE,
        description="Artificial sweetener linked to bloating and altered gut flora.",
        common_sources=["Diet soda", "Sugar-free gum", "Light yogurt"],
        safe_alternatives=["Maple syrup", "Table sugar in small amounts"],
    ),
    HiddenTrigger(
        name="Sorbitol",
        aliases={"glucitol"},
        e_number="E420",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.SEVERE,
        description="Polyol that is poorly absorbed and ferments in the gut.",
        common_sources=["Sugar-free candy", "Chewing gum", "Diet products"],
        safe_alternatives=["Glucose syrup", "Maple syrup"],
    ),
    HiddenTrigger(
        name="Mannitol",
        aliases={"mannite"},
        e_number="E421",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.SEVERE,
        description="Polyol with a strong laxative effect.",
        common_sources=["Sugar-free mints", "Chewing gum"],
        safe_alternatives=["Glucose syrup", "Maple syrup"],
    ),
    HiddenTrigger(
        name="Xylitol",
        aliases={"birch sugar"},
        e_number="E967",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.MODERATE,
        description="Polyol sweetener that can cause gas and diarrhea.",
        common_sources=["Sugar-free gum", "Toothpaste", "Baked goods"],
        safe_alternatives=["Maple syrup", "Rice malt syrup"],
    ),
    HiddenTrigger(
        name="Maltitol",
        aliases={"maltitol syrup", "hydrogenated glucose syrup"},
        e_number="E965",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.MODERATE,
        description="Polyol common in sugar-free chocolate.",
        common_sources=["Sugar-free chocolate", "Protein bars"],
        safe_alternatives=["Dark chocolate", "Maple syrup"],
    ),
    HiddenTrigger(
        name="Sucralose",
        aliases={"splenda"},
        e_number="E955",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP, _ADDITIVES},
        severity=SeverityLevel.MODERATE,
        description="Artificial sweetener that may disturb gut bacteria.",
        common_sources=["Diet drinks", "Protein powders", "Flavored water"],
        safe_alternatives=["Maple syrup", "Stevia leaf"],
    ),
    HiddenTrigger(
        name="Acesulfame K",
        aliases={"acesulfame potassium", "acesulfame"},
        e_number="E950",
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_ADDITIVES},
        severity=SeverityLevel.MILD,
        description="Artificial sweetener often blended with aspartame.",
        common_sources=["Diet soda", "Sugar-free desserts"],
        safe_alternatives=["Maple syrup"],
    ),
    HiddenTrigger(
        name="High Fructose Corn Syrup",
        aliases={"hfcs", "glucose fructose syrup", "isoglucose", "fructose syrup"},
        category=TriggerCategory.SWEETENER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.MODERATE,
        description="Excess free fructose is a common FODMAP trigger.",
        common_sources=["Soft drinks", "Sauces", "Cereal bars"],
        safe_alternatives=["Glucose syrup", "Table sugar in small amounts"],
        detection_keywords={"crystalline fructose"},
    ),
    HiddenTrigger(
        name="Inulin",
        aliases={"chicory root", "chicory root fiber", "oligofructose", "fructooligosaccharides"},
        category=TriggerCategory.ADDITIVE,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.MODERATE,
        description="Fructan fiber added to 'high fibre' products.",
        common_sources=["Protein bars", "High-fibre yogurt", "Cereal"],
        safe_alternatives=["Oat bran", "Psyllium husk"],
    ),
    # --- Hidden FODMAP seasonings ---
    HiddenTrigger(
        name="Onion Powder",
        aliases={"dehydrated onion", "onion extract", "dried onion"},
        category=TriggerCategory.FLAVOR,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.SEVERE,
        description="Concentrated fructans hidden in seasoning blends.",
        common_sources=["Stock cubes", "Crisps", "Sauces", "Spice mixes"],
        safe_alternatives=["Chives", "Green onion tops", "Asafoetida"],
        detection_keywords={"onion"},
    ),
    HiddenTrigger(
        name="Garlic Powder",
        aliases={"dehydrated garlic", "garlic extract", "dried garlic"},
        category=TriggerCategory.FLAVOR,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.SEVERE,
        description="Concentrated fructans hidden in seasoning blends.",
        common_sources=["Marinades", "Dressings", "Spice mixes"],
        safe_alternatives=["Garlic-infused oil", "Chives"],
        detection_keywords={"garlic"},
    ),
    # --- Emulsifiers & stabilizers ---
    HiddenTrigger(
        name="Carrageenan",
        aliases={"irish moss", "processed eucheuma seaweed"},
        e_number="E407",
        category=TriggerCategory.EMULSIFIER,
        problematic_conditions={_FODMAP, _ADDITIVES},
        severity=SeverityLevel.MODERATE,
        description="Seaweed-derived thickener associated with gut inflammation.",
        common_sources=["Plant milks", "Ice cream", "Deli meats"],
        safe_alternatives=["Products thickened with agar", "Carrageenan-free plant milk"],
    ),
    HiddenTrigger(
        name="Polysorbate 80",
        aliases={"polysorbate", "tween 80"},
        e_number="E433",
        category=TriggerCategory.EMULSIFIER,
        problematic_conditions={_FODMAP, _ADDITIVES},
        severity=SeverityLevel.MILD,
        description="Synthetic emulsifier that may thin the gut mucus layer.",
        common_sources=["Ice cream", "Sauces", "Dressings"],
        safe_alternatives=["Homemade dressings"],
    ),
    HiddenTrigger(
        name="Carboxymethylcellulose",
        aliases={"cellulose gum", "sodium carboxymethyl cellulose", "carboxymethyl cellulose"},
        e_number="E466",
        category=TriggerCategory.STABILIZER,
        problematic_conditions={_FODMAP, _ADDITIVES},
        severity=SeverityLevel.MODERATE,
        description="Synthetic thickener linked to low-grade gut inflammation.",
        common_sources=["Ice cream", "Gluten-free bread", "Sauces"],
        safe_alternatives=["Products thickened with starch"],
    ),
    HiddenTrigger(
        name="Xanthan Gum",
        aliases={"xanthan"},
        e_number="E415",
        category=TriggerCategory.STABILIZER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.MILD,
        description="Fermentable gum that can cause gas in sensitive people.",
        common_sources=["Gluten-free baking", "Dressings"],
        safe_alternatives=["Psyllium husk"],
    ),
    HiddenTrigger(
        name="Guar Gum",
        aliases={"guar flour", "guar galactomannan"},
        e_number="E412",
        category=TriggerCategory.STABILIZER,
        problematic_conditions={_FODMAP},
        severity=SeverityLevel.MILD,
        description="Fermentable fibre used as a thickener.",
        common_sources=["Ice cream", "Sauces", "Plant milks"],
        safe_alternatives=["Products thickened with starch"],
    ),
    HiddenTrigger(
        name="Soy Lecithin",
        aliases={"soya lecithin", "soybean lecithin"},
        e_number="E322",
        category=TriggerCategory.EMULSIFIER,
        problematic_conditions={_ALLERGIES, _ADDITIVES},
        severity=SeverityLevel.MILD,
        description="Soy-derived emulsifier; relevant for soy allergies.",
        common_sources=["Chocolate", "Baked goods", "Margarine"],
        safe_alternatives=["Sunflower lecithin"],
    ),
    # --- Preservatives ---
    HiddenTrigger(
        name="Sodium Benzoate",
        aliases={"benzoate", "benzoic acid"},
        e_number="E211",
        category=TriggerCategory.PRESERVATIVE,
        problematic_conditions={_ADDITIVES, _HISTAMINE},
        severity=SeverityLevel.MODERATE,
        description="Preservative that can trigger histamine release.",
        common_sources=["Soft drinks", "Pickles", "Sauces"],
        safe_alternatives=["Fresh or frozen alternatives"],
    ),
    HiddenTrigger(
        name="Potassium Sorbate",
        aliases={"sorbic acid"},
        e_number="E202",
        category=TriggerCategory.PRESERVATIVE,
        problematic_conditions={_ADDITIVES},
        severity=SeverityLevel.MILD,
        description="Common mould inhibitor.",
        common_sources=["Cheese", "Baked goods", "Wine"],
        safe_alternatives=["Fresh baked goods"],
    ),
    HiddenTrigger(
        name="Sulfur Dioxide",
        aliases={
            "sulphur dioxide",
            "sulfites",
            "sulphites",
            "sodium metabisulfite",
            "sodium metabisulphite",
            "sodium bisulfite",
        },
        e_number="E220",
        category=TriggerCategory.PRESERVATIVE,
        problematic_conditions={_HISTAMINE, _ALLERGIES, _ADDITIVES},
        severity=SeverityLevel.MODERATE,
        description="Sulfite preservative; a known asthma and histamine trigger.",
        common_sources=["Dried fruit", "Wine", "Vinegar"],
        safe_alternatives=["Unsulphured dried fruit"],
    ),
    # --- Colors ---
    HiddenTrigger(
        name="Tartrazine",
        aliases={"yellow 5", "fd c yellow no 5", "yellow no 5"},
        e_number="E102",
        category=TriggerCategory.COLOR,
        problematic_conditions={_ADDITIVES, _ALLERGIES, _HISTAMINE},
        severity=SeverityLevel.MODERATE,
        description="Azo dye associated with intolerance reactions.",
        common_sources=["Sweets", "Soft drinks", "Snacks"],
        safe_alternatives=["Products colored with turmeric"],
    ),
    HiddenTrigger(
        name="Allura Red",
        aliases={"red 40", "red dye 40", "fd c red no 40", "allura red ac"},
        e_number="E129",
        category=TriggerCategory.COLOR,
        problematic_conditions={_ADDITIVES},
        severity=SeverityLevel.MODERATE,
        description="Azo dye linked to gut inflammation in animal studies.",
        common_sources=["Sweets", "Sports drinks", "Cereal"],
        safe_alternatives=["Products colored with beetroot"],
    ),
    HiddenTrigger(
        name="Caramel Color",
        aliases={"caramel colour", "e150a", "e150b", "e150c", "e150d"},
        e_number="E150",
        category=TriggerCategory.COLOR,
        problematic_conditions={_ADDITIVES},
        severity=SeverityLevel.MILD,
        description="Processed coloring; some classes made with ammonia or sulfites.",
        common_sources=["Cola", "Sauces", "Gravy"],
        safe_alternatives=["Uncolored alternatives"],
    ),
    # --- Flavor enhancers ---
    HiddenTrigger(
        name="Monosodium Glutamate",
        aliases={"msg", "sodium glutamate", "glutamic acid"},
        e_number="E621",
        category=TriggerCategory.FLAVOR,
        problematic_conditions={_ADDITIVES, _HISTAMINE},
        severity=SeverityLevel.MODERATE,
        description="Flavor enhancer often hidden as yeast extract.",
        common_sources=["Stock cubes", "Instant noodles", "Snacks"],
        safe_alternatives=["Herbs", "Homemade stock"],
        detection_keywords={"yeast extract", "autolyzed yeast", "hydrolyzed vegetable protein"},
    ),
    # --- Hidden lactose & milk protein ---
    HiddenTrigger(
        name="Lactose",
        aliases={"milk sugar", "milk solids", "milk powder", "skimmed milk powder"},
        category=TriggerCategory.OTHER,
        problematic_conditions={_LACTOSE},
        severity=SeverityLevel.MODERATE,
        description="Milk sugar added to processed foods and medicines.",
        common_sources=["Processed meats", "Bread", "Crisps seasoning"],
        safe_alternatives=["Lactose-free milk", "Plant-based milk"],
        detection_keywords={"whey", "buttermilk", "dairy solids"},
    ),
    HiddenTrigger(
        name="Casein",
        aliases={"caseinate", "sodium caseinate", "calcium caseinate"},
        category=TriggerCategory.OTHER,
        problematic_conditions={_ALLERGIES},
        severity=SeverityLevel.SEVERE,
        description="Milk protein present even in 'non-dairy' creamers.",
        common_sources=["Non-dairy creamer", "Protein bars", "Processed cheese"],
        safe_alternatives=["Pea protein", "Oat-based creamer"],
    ),
    # --- Hidden gluten ---
    HiddenTrigger(
        name="Malt Extract",
        aliases={"barley malt", "malt flavoring", "malt flavouring", "malt vinegar", "malted barley", "malt syrup"},
        category=TriggerCategory.FLAVOR,
        problematic_conditions={_GLUTEN},
        severity=SeverityLevel.SEVERE,
        description="Barley-derived sweetener and flavoring containing gluten.",
        common_sources=["Breakfast cereal", "Chocolate", "Beer"],
        safe_alternatives=["Rice syrup", "Maple syrup"],
    ),
    HiddenTrigger(
        name="Hydrolyzed Wheat Protein",
        aliases={"hydrolysed wheat protein", "wheat protein isolate", "modified wheat starch"},
        category=TriggerCategory.ADDITIVE,
        problematic_conditions={_GLUTEN, _ALLERGIES},
        severity=SeverityLevel.SEVERE,
        description="Wheat-derived protein used as a texturizer.",
        common_sources=["Processed meats", "Soups", "Sauces"],
        safe_alternatives=["Gluten-free certified products"],
        detection_keywords={"seitan"},
    ),
    # --- Reflux triggers ---
    HiddenTrigger(
        name="Capsaicin",
        aliases={"capsicum extract", "chili extract", "paprika extract"},
        category=TriggerCategory.FLAVOR,
        problematic_conditions={_REFLUX},
        severity=SeverityLevel.MODERATE,
        description="Pungent compound of chili peppers that relaxes the esophageal sphincter.",
        common_sources=["Hot sauce", "Spicy snacks", "Curry"],
        safe_alternatives=["Mild herbs", "Sweet paprika"],
        detection_keywords={"chili", "chilli", "cayenne", "jalapeno"},
    ),
    HiddenTrigger(
        name="Caffeine",
        aliases={"guarana", "kola nut"},
        category=TriggerCategory.ADDITIVE,
        problematic_conditions={_REFLUX},
        severity=SeverityLevel.MODERATE,
        description="Stimulant that increases stomach acid secretion.",
        common_sources=["Energy drinks", "Cola", "Coffee-flavored desserts"],
        safe_alternatives=["Decaffeinated options", "Herbal tea"],
        detection_keywords={"coffee extract", "green tea extract"},
    ),
    HiddenTrigger(
        name="Peppermint Oil",
        aliases={"peppermint", "mint oil", "menthol"},
        category=TriggerCategory.FLAVOR,
        problematic_conditions={_REFLUX},
        severity=SeverityLevel.MILD,
        description="Relaxes the lower esophageal sphincter.",
        common_sources=["Mints", "Chewing gum", "Herbal tea"],
        safe_alternatives=["Ginger", "Chamomile"],
    ),
)


class TriggerCatalog:
    """Read-only lookup over the hidden-trigger table."""

    def __init__(
        self,
        triggers: Iterable[HiddenTrigger] = HIDDEN_TRIGGERS,
        version: str = CATALOG_VERSION,
    ):
        self._triggers = tuple(triggers)
        self.version = version

    def __len__(self) -> int:
        return len(self._triggers)

    def __iter__(self):
        return iter(self._triggers)

    def all(self) -> List[HiddenTrigger]:
        return list(self._triggers)

    def get(self, name: str) -> Optional[HiddenTrigger]:
        """Get a trigger by name (case-insensitive)."""
        needle = normalize_text(name)
        for trigger in self._triggers:
            if normalize_text(trigger.name) == needle:
                return trigger
        return None

    def by_category(self, category: TriggerCategory) -> List[HiddenTrigger]:
        return [t for t in self._triggers if t.category == category]

    def by_condition(self, condition: GutCondition) -> List[HiddenTrigger]:
        return [t for t in self._triggers if condition in t.problematic_conditions]

    def search(self, query: str) -> List[HiddenTrigger]:
        """
        Search triggers by name, alias, E-number or detection keyword.

        Args:
            query: Free-text search string

        Returns:
            Triggers with any searchable term containing the normalized query
        """
        needle = normalize_text(query)
        if not needle:
            return []

        matches = []
        for trigger in self._triggers:
            terms = [trigger.name, *trigger.aliases, *trigger.detection_keywords]
            if trigger.e_number:
                terms.append(trigger.e_number)
            if any(needle in normalize_text(term) for term in terms):
                matches.append(trigger)
        return matches
