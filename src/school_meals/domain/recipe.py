"""Recipe aggregate."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from school_meals.domain.dietary import DietaryFlags
from school_meals.domain.errors import InvalidArgumentError, ValidationError
from school_meals.domain.nutrition import NutritionalInfo

ALLERGENS = (
    "nuts",
    "peanuts",
    "dairy",
    "eggs",
    "soy",
    "wheat",
    "gluten",
    "shellfish",
    "fish",
    "sesame",
)
INGREDIENT_UNITS = ("g", "kg", "ml", "l", "cup", "tbsp", "tsp", "piece", "oz", "lb")
SEASONS = ("spring", "summer", "fall", "winter", "all-year")
DEFAULT_PREP_TIME_MINUTES = 30


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class Ingredient:
    """A single recipe ingredient line."""

    name: str
    quantity: float
    unit: str
    is_essential: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Ingredient":
        """Build an ingredient from a row or request payload."""
        is_essential = data.get("is_essential", data.get("isEssential", True))
        return cls(
            name=str(data.get("name", "")),
            quantity=float(data.get("quantity") or 0),
            unit=str(data.get("unit", "")),
            is_essential=bool(is_essential),
        )

    def to_json(self) -> dict[str, object]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "isEssential": self.is_essential,
        }


@dataclass
class Recipe:
    """Mutable recipe aggregate owning its ingredients and value objects."""

    name: str
    ingredients: list[Ingredient]
    instructions: str
    serving_size: int
    description: str = ""
    nutritional_info: NutritionalInfo | None = None
    dietary_flags: DietaryFlags = field(default_factory=DietaryFlags)
    allergens: list[str] = field(default_factory=list)
    prep_time: int = DEFAULT_PREP_TIME_MINUTES
    seasonal: list[str] = field(default_factory=list)
    is_active: bool = True
    id: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def validate(self) -> bool:
        """Check invariants in order, raising on the first failure."""
        if not self.name or not self.name.strip():
            raise ValidationError("Recipe name is required")
        if not self.ingredients:
            raise ValidationError("Recipe must have at least one ingredient")
        if not self.instructions or not self.instructions.strip():
            raise ValidationError("Instructions are required")
        if self.serving_size <= 0:
            raise ValidationError("Serving size must be greater than 0")
        for ingredient in self.ingredients:
            if ingredient.unit not in INGREDIENT_UNITS:
                raise ValidationError(f"Unknown ingredient unit: {ingredient.unit}")
        for allergen in self.allergens:
            if allergen not in ALLERGENS:
                raise ValidationError(f"Unknown allergen: {allergen}")
        for season in self.seasonal:
            if season not in SEASONS:
                raise ValidationError(f"Unknown season: {season}")
        return True

    def update_nutrition(self, nutritional_info: NutritionalInfo | None) -> None:
        self.nutritional_info = nutritional_info
        self.updated_at = _now()

    def mark_as_inactive(self) -> None:
        """Soft-delete the recipe. Repeated calls only refresh updated_at."""
        self.is_active = False
        self.updated_at = _now()

    def adjust_serving_size(self, new_serving_size: int) -> None:
        """Rescale every ingredient quantity to a new number of servings."""
        if new_serving_size <= 0:
            raise InvalidArgumentError("New serving size must be greater than 0")
        if self.serving_size <= 0:
            raise InvalidArgumentError("Current serving size must be greater than 0")
        multiplier = new_serving_size / self.serving_size
        self.ingredients = [
            replace(ingredient, quantity=ingredient.quantity * multiplier)
            for ingredient in self.ingredients
        ]
        self.serving_size = new_serving_size
        self.updated_at = _now()

    def is_vegetarian(self) -> bool:
        return self.dietary_flags.vegetarian

    def is_halal(self) -> bool:
        return self.dietary_flags.halal

    def has_allergen(self, allergen: str) -> bool:
        return allergen in self.allergens
