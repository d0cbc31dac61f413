"""Nutrient profile to embedding codec."""

from collections.abc import Mapping, Sequence

from dining_menus.domain.errors import ValidationError
from dining_menus.domain.nutrients import (
    EMBEDDING_DIMENSIONS,
    NUTRIENT_FIELDS,
    NUTRIENT_INDEX,
)


def encode_nutrients(profile: Mapping[str, float | None]) -> list[float]:
    """Encode a sparse nutrient profile into the canonical fixed-order vector.

    Missing fields become 0.0 and unknown keys are ignored. Values are not
    scaled; similarity search callers must normalize on their side.
    """
    vector = [0.0] * EMBEDDING_DIMENSIONS
    for name, value in profile.items():
        index = NUTRIENT_INDEX.get(name)
        if index is None or value is None:
            continue
        vector[index] = float(value)
    return vector


def decode_nutrients(vector: Sequence[float]) -> dict[str, float]:
    """Map a stored embedding back to named nutrient values."""
    if len(vector) != EMBEDDING_DIMENSIONS:
        raise ValidationError(
            "embedding",
            f"expected {EMBEDDING_DIMENSIONS} values, got {len(vector)}",
        )
    return {
        name: float(value)
        for name, value in zip(NUTRIENT_FIELDS, vector, strict=True)
    }


def nutrient_index(name: str) -> int:
    """Return the embedding index of a canonical nutrient field."""
    try:
        return NUTRIENT_INDEX[name]
    except KeyError:
        raise ValidationError("nutrient", f"unknown nutrient field '{name}'") from None


def complete_profile(profile: Mapping[str, float | None]) -> dict[str, float]:
    """Return all canonical fields with missing values filled with 0.0."""
    return decode_nutrients(encode_nutrients(profile))
