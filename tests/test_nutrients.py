"""Tests for the nutrient embedding codec."""

import pytest

from dining_menus.domain.errors import ValidationError
from dining_menus.domain.nutrients import (
    EMBEDDING_DIMENSIONS,
    EMBEDDING_VERSION,
    NUTRIENT_FIELDS,
)
from dining_menus.services.nutrients import (
    complete_profile,
    decode_nutrients,
    encode_nutrients,
    nutrient_index,
)


def test_encode_places_values_by_canonical_index() -> None:
    vector = encode_nutrients({"calories": 250, "protein": 10})

    assert len(vector) == EMBEDDING_DIMENSIONS == 28
    assert vector[0] == 250.0
    assert vector[1] == 10.0
    assert sum(1 for value in vector if value != 0.0) == 2


def test_encode_is_deterministic_and_ignores_unknown_keys() -> None:
    profile = {"carbs": 30.5, "sodium": 410, "caffeine": 80, "fiber": None}

    first = encode_nutrients(profile)
    second = encode_nutrients(dict(reversed(list(profile.items()))))

    assert first == second
    assert first[nutrient_index("carbs")] == 30.5
    assert first[nutrient_index("sodium")] == 410.0
    assert first[nutrient_index("fiber")] == 0.0


def test_empty_profile_encodes_to_zero_vector() -> None:
    assert encode_nutrients({}) == [0.0] * EMBEDDING_DIMENSIONS


def test_decode_restores_named_fields() -> None:
    vector = encode_nutrients({"vitamin_k": 12.5})

    decoded = decode_nutrients(vector)

    assert list(decoded) == list(NUTRIENT_FIELDS)
    assert decoded["vitamin_k"] == 12.5
    assert decoded["calories"] == 0.0


def test_decode_rejects_wrong_length() -> None:
    with pytest.raises(ValidationError) as excinfo:
        decode_nutrients([1.0, 2.0])

    assert excinfo.value.field == "embedding"


def test_nutrient_index_rejects_unknown_field() -> None:
    with pytest.raises(ValidationError):
        nutrient_index("carbohydrates")


def test_complete_profile_fills_missing_fields() -> None:
    profile = complete_profile({"protein": 4})

    assert len(profile) == EMBEDDING_DIMENSIONS
    assert profile["protein"] == 4.0
    assert profile["iron"] == 0.0


def test_field_layout_matches_embedding_version() -> None:
    assert EMBEDDING_VERSION == 1
    assert NUTRIENT_FIELDS[:4] == ("calories", "protein", "fat", "carbs")
    assert NUTRIENT_FIELDS[-1] == "vitamin_k"
