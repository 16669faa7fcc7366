"""Nutrition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass

from school_meals.domain.errors import ValidationError

HIGH_PROTEIN_THRESHOLD_G = 20
CALORIES_PER_G_PROTEIN = 4
CALORIES_PER_G_CARBS = 4
CALORIES_PER_G_FAT = 9

# Version 1 is the legacy public view, which spells calories "callories".
LEGACY_CALORIES_KEY = "callories"
NUTRITION_JSON_VERSIONS = (1, 2)


@dataclass(frozen=True)
class NutritionalInfo:
    """Nutrition facts for one recipe, calories in kcal and the rest in grams.

    Calories and the three macros must be non-negative. Fiber and sugar are
    accepted as given.
    """

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    fiber: float = 0
    sugar: float = 0

    def __post_init__(self) -> None:
        if self.calories < 0 or self.protein < 0 or self.carbs < 0 or self.fats < 0:
            raise ValidationError("Nutritional values cannot be negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "NutritionalInfo":
        """Build nutrition facts from a row or request payload."""
        calories = data.get("calories", data.get(LEGACY_CALORIES_KEY))
        return cls(
            calories=float(calories or 0),
            protein=float(data.get("protein") or 0),
            carbs=float(data.get("carbs") or 0),
            fats=float(data.get("fats") or 0),
            fiber=float(data.get("fiber") or 0),
            sugar=float(data.get("sugar") or 0),
        )

    def total_macros(self) -> float:
        return self.protein + self.carbs + self.fats

    def calories_from_protein(self) -> float:
        return self.protein * CALORIES_PER_G_PROTEIN

    def calories_from_carbs(self) -> float:
        return self.carbs * CALORIES_PER_G_CARBS

    def calories_from_fats(self) -> float:
        return self.fats * CALORIES_PER_G_FAT

    def is_high_protein(self) -> bool:
        return self.protein > HIGH_PROTEIN_THRESHOLD_G

    def equals(self, other: "NutritionalInfo | None") -> bool:
        """Return True when every field matches exactly."""
        if other is None:
            return False
        return (
            self.calories == other.calories
            and self.protein == other.protein
            and self.carbs == other.carbs
            and self.fats == other.fats
            and self.fiber == other.fiber
            and self.sugar == other.sugar
        )

    def to_json(self, version: int = 1) -> dict[str, float]:
        """Return the public JSON view for the given contract version."""
        if version not in NUTRITION_JSON_VERSIONS:
            raise ValidationError(f"Unsupported nutrition JSON version: {version}")
        calories_key = LEGACY_CALORIES_KEY if version == 1 else "calories"
        return {
            calories_key: self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
            "fiber": self.fiber,
            "sugar": self.sugar,
        }

    def to_row(self) -> dict[str, float]:
        """Return the persisted representation."""
        return self.to_json(version=2)

    def scaled(self, factor: float) -> "NutritionalInfo":
        """Return these facts multiplied by a non-negative factor."""
        return NutritionalInfo(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fats=self.fats * factor,
            fiber=self.fiber * factor,
            sugar=self.sugar * factor,
        )

    def __add__(self, other: "NutritionalInfo") -> "NutritionalInfo":
        return NutritionalInfo(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
            fiber=self.fiber + other.fiber,
            sugar=self.sugar + other.sugar,
        )


@dataclass(frozen=True)
class FoodSummary:
    """Summary information about a food from FDC."""

    fdc_id: int
    description: str
    data_type: str | None
