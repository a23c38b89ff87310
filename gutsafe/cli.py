"""CLI commands for GutSafe."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gutsafe.config import settings
from gutsafe.exceptions import GutSafeError
from gutsafe.models import (
    FoodItem,
    GutCondition,
    GutProfile,
    TriggerCategory,
    coerce_model,
)
from gutsafe.services import (
    IngredientMatcher,
    JsonFileLearningDataSource,
    LearningEngine,
    ScanVerdictAggregator,
    TriggerCatalog,
)


def analyze(food_path: str, profile_path: str) -> None:
    """Print the ScanAnalysis for a food item JSON file against a profile JSON file."""
    food = coerce_model(FoodItem, _read(food_path))
    profile = coerce_model(GutProfile, _read(profile_path))

    analysis = ScanVerdictAggregator().analyze_food(food, profile)
    print(analysis.model_dump_json(indent=2))


def ingredient(text: str, conditions: List[str]) -> None:
    result = IngredientMatcher().match(text, [GutCondition(c) for c in conditions])
    print(result.model_dump_json(indent=2))


def catalog(
    condition: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> None:
    """List catalog triggers, optionally filtered."""
    trigger_catalog = TriggerCatalog()
    triggers = trigger_catalog.search(search) if search else trigger_catalog.all()
    if condition:
        triggers = [t for t in triggers if GutCondition(condition) in t.problematic_conditions]
    if category:
        triggers = [t for t in triggers if t.category == TriggerCategory(category)]

    for trigger in triggers:
        e_number = f" ({trigger.e_number})" if trigger.e_number else ""
        conditions = ", ".join(
            c.label for c in GutCondition if c in trigger.problematic_conditions
        )
        print(f"{trigger.name}{e_number} [{trigger.severity.value}] {conditions}")
    print(f"{len(triggers)} triggers (catalog {trigger_catalog.version})")


def insights(data_path: str) -> None:
    """Initialize a learning engine from a JSON file and print its outputs."""
    engine = LearningEngine(data_source=JsonFileLearningDataSource(data_path))
    asyncio.run(engine.initialize())

    report = {
        "insights": engine.get_insights().model_dump(mode="json"),
        "metrics": engine.get_metrics().model_dump(mode="json"),
        "personalized_recommendations": engine.get_personalized_recommendations(),
    }
    print(json.dumps(report, indent=2))


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="GutSafe CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a food item against a gut profile"
    )
    analyze_parser.add_argument("--food", required=True, help="FoodItem JSON file")
    analyze_parser.add_argument("--profile", required=True, help="GutProfile JSON file")

    # ingredient command
    ingredient_parser = subparsers.add_parser(
        "ingredient", help="Match a single ingredient string"
    )
    ingredient_parser.add_argument("text", help="Ingredient text as printed on the label")
    ingredient_parser.add_argument(
        "--condition",
        action="append",
        default=[],
        choices=[c.value for c in GutCondition],
        help="Enabled condition (repeatable)",
    )

    # catalog command
    catalog_parser = subparsers.add_parser("catalog", help="List hidden triggers")
    catalog_parser.add_argument(
        "--condition", choices=[c.value for c in GutCondition], help="Filter by condition"
    )
    catalog_parser.add_argument(
        "--category", choices=[c.value for c in TriggerCategory], help="Filter by category"
    )
    catalog_parser.add_argument("--search", help="Search names, aliases and E-numbers")

    # insights command
    insights_parser = subparsers.add_parser(
        "insights", help="Print learning insights for a history file"
    )
    insights_parser.add_argument("--data", required=True, help="LearningData JSON file")

    args = parser.parse_args(argv)

    try:
        if args.command == "analyze":
            analyze(args.food, args.profile)
        elif args.command == "ingredient":
            ingredient(args.text, args.condition)
        elif args.command == "catalog":
            catalog(args.condition, args.category, args.search)
        elif args.command == "insights":
            insights(args.data)
        else:
            parser.print_help()
            sys.exit(1)
    except (GutSafeError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
