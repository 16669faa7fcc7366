"""Dietary classification value object."""

from collections.abc import Mapping
from dataclasses import dataclass

from school_meals.domain.errors import ValidationError

# (attribute, JSON key, label) in display order.
DIETARY_FLAGS: tuple[tuple[str, str, str], ...] = (
    ("vegetarian", "vegetarian", "Vegetarian"),
    ("vegan", "vegan", "Vegan"),
    ("halal", "halal", "Halal"),
    ("gluten_free", "glutenFree", "Gluten-Free"),
    ("dairy_free", "dairyFree", "Dairy-Free"),
    ("nut_free", "nutFree", "Nut-Free"),
)

_ATTRIBUTE_BY_KEY = {
    **{attribute: attribute for attribute, _, _ in DIETARY_FLAGS},
    **{json_key: attribute for attribute, json_key, _ in DIETARY_FLAGS},
}


@dataclass(frozen=True)
class DietaryFlags:
    """Named boolean dietary classifications of a recipe."""

    vegetarian: bool = False
    vegan: bool = False
    halal: bool = False
    gluten_free: bool = False
    dairy_free: bool = False
    nut_free: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "DietaryFlags":
        """Build flags from camelCase or snake_case keys, ignoring unknown keys."""
        values: dict[str, bool] = {}
        for key, value in (data or {}).items():
            attribute = _ATTRIBUTE_BY_KEY.get(key)
            if attribute is not None:
                values[attribute] = bool(value)
        return cls(**values)

    def is_compliant_with(
        self, requirements: "Mapping[str, object] | DietaryFlags"
    ) -> bool:
        """Return True when every required flag is also set on these flags."""
        if isinstance(requirements, DietaryFlags):
            requirements = requirements.to_json()
        for key, required in requirements.items():
            attribute = _ATTRIBUTE_BY_KEY.get(key)
            if attribute is None or required is not True:
                continue
            if not getattr(self, attribute):
                return False
        return True

    def get_active_flags(self) -> list[str]:
        """Return human-readable labels for the flags that are set."""
        return [
            label for attribute, _, label in DIETARY_FLAGS if getattr(self, attribute)
        ]

    def to_json(self) -> dict[str, bool]:
        """Return the flat camelCase boolean map."""
        return {
            json_key: getattr(self, attribute)
            for attribute, json_key, _ in DIETARY_FLAGS
        }


def required_flags(filters: Mapping[str, object] | None) -> tuple[str, ...]:
    """Return the attribute names a filter mapping requires to be true.

    Raises ValidationError for names outside the dietary flag vocabulary.
    """
    required: list[str] = []
    for key, value in (filters or {}).items():
        attribute = _ATTRIBUTE_BY_KEY.get(key)
        if attribute is None:
            raise ValidationError(f"Unknown dietary flag: {key}")
        if value is True and attribute not in required:
            required.append(attribute)
    return tuple(
        attribute for attribute, _, _ in DIETARY_FLAGS if attribute in required
    )
