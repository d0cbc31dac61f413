"""Canonical nutrient field table.

The order of ``NUTRIENT_FIELDS`` defines the layout of every stored food
embedding. Reordering, renaming or adding a field changes the meaning of
existing vectors and must bump ``EMBEDDING_VERSION``.
"""

EMBEDDING_VERSION = 1

NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",  # kcal
    "protein",  # g
    "fat",  # g
    "carbs",  # g
    "fiber",  # g
    "sugar",  # g
    "sodium",  # mg
    "potassium",  # mg
    "vitamin_a",  # IU
    "vitamin_c",  # mg
    "calcium",  # mg
    "iron",  # mg
    "magnesium",  # mg
    "phosphorus",  # mg
    "zinc",  # mg
    "copper",  # mg
    "manganese",  # mg
    "selenium",  # mg
    "vitamin_b1",  # mg
    "vitamin_b2",  # mg
    "vitamin_b3",  # mg
    "vitamin_b5",  # mg
    "vitamin_b6",  # mg
    "vitamin_b7",  # mg
    "vitamin_b9",  # mg
    "vitamin_b12",  # mg
    "vitamin_e",  # mg
    "vitamin_k",  # mg
)

EMBEDDING_DIMENSIONS = len(NUTRIENT_FIELDS)

NUTRIENT_INDEX: dict[str, int] = {name: i for i, name in enumerate(NUTRIENT_FIELDS)}
