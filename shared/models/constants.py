from typing import Final

LISTING_CATEGORIES: Final[tuple[str, ...]] = (
    "Basketball",
    "Table Tennis",
    "Yoga",
    "Other",
)

GENDERS: Final[tuple[str, ...]] = (
    "Male",
    "Female",
    "Other",
)

# age group label -> (min_age, max_age); None means open-ended
AGE_GROUPS: Final[dict[str, tuple[int, int | None]]] = {
    "5-8": (5, 8),
    "8-12": (8, 12),
    "13-18": (13, 18),
    "18-21": (18, 21),
    "21+": (21, None),
}
