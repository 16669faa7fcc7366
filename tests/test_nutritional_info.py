"""Tests for nutrition facts."""

import pytest

from school_meals.domain.errors import ValidationError
from school_meals.domain.nutrition import NutritionalInfo


@pytest.mark.parametrize("field_name", ["calories", "protein", "carbs", "fats"])
def test_rejects_negative_core_values(field_name: str) -> None:
    with pytest.raises(ValidationError, match="Nutritional values cannot be negative"):
        NutritionalInfo(**{field_name: -1})


def test_accepts_negative_fiber_and_sugar() -> None:
    # Only calories and the three macros are range checked.
    info = NutritionalInfo(calories=100, fiber=-2, sugar=-3)

    assert info.fiber == -2
    assert info.sugar == -3


def test_macro_calculations() -> None:
    info = NutritionalInfo(calories=500, protein=25, carbs=60, fats=10)

    assert info.total_macros() == 95
    assert info.calories_from_protein() == 100
    assert info.calories_from_carbs() == 240
    assert info.calories_from_fats() == 90


def test_high_protein_threshold_is_exclusive() -> None:
    assert not NutritionalInfo(protein=20).is_high_protein()
    assert NutritionalInfo(protein=20.5).is_high_protein()


def test_equals_compares_every_field() -> None:
    info = NutritionalInfo(calories=100, protein=5, fiber=2)

    assert info.equals(NutritionalInfo(calories=100, protein=5, fiber=2))
    assert not info.equals(NutritionalInfo(calories=100, protein=5, fiber=3))
    assert not info.equals(None)


def test_version_one_json_keeps_legacy_calories_key() -> None:
    payload = NutritionalInfo(calories=320, protein=12).to_json()

    assert payload["callories"] == 320
    assert "calories" not in payload


def test_version_two_json_uses_calories_key() -> None:
    payload = NutritionalInfo(calories=320).to_json(version=2)

    assert payload["calories"] == 320
    assert "callories" not in payload


def test_unknown_json_version_is_rejected() -> None:
    with pytest.raises(ValidationError):
        NutritionalInfo().to_json(version=3)


def test_from_mapping_reads_either_calories_key() -> None:
    assert NutritionalInfo.from_mapping({"callories": 210}).calories == 210
    assert NutritionalInfo.from_mapping({"calories": 180, "fats": 4}).fats == 4


def test_scaled_and_added() -> None:
    base = NutritionalInfo(calories=100, protein=10, carbs=20, fats=5)

    total = base.scaled(1.5) + NutritionalInfo(calories=50)

    assert total.calories == 200
    assert total.protein == 15
    assert total.carbs == 30
