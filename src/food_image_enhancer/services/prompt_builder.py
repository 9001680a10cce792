"""Prompt construction for the hosted models.

The prompt is a pure function of the food label and the edit mode, so the
same form inputs always produce the same text.
"""

from food_image_enhancer.models.enhance import EditMode

BASE_CLAUSE = (
    "hero shot, ultra realistic, professional commercial food photography, "
    "soft studio lighting, shallow depth of field"
)

MODE_CLAUSES: dict[str, str] = {
    EditMode.STYLE.value: "clean modern style, high contrast, appetizing presentation",
    EditMode.BACKGROUND_CLEANING.value: (
        "isolated on a clean soft gradient background, no clutter, "
        "studio tabletop photography"
    ),
    EditMode.QUALITY_IMPROVEMENT.value: (
        "ultra detailed, crisp focus, high resolution, "
        "professional food photography lighting"
    ),
}

# Used for any mode value we don't recognise
GENERIC_STYLE_CLAUSE = "appetizing commercial style, natural colors, sharp focus"

SUFFIX_CLAUSE = (
    "shot on DSLR, 4k, realistic textures, "
    "perfect for a sales landing page hero banner"
)


def build_prompt(food: str, mode: str | EditMode) -> str:
    """
    Build the descriptive text prompt for a food item and edit mode.

    Args:
        food: Food label, used verbatim (e.g. "Pizza")
        mode: Edit mode value; unknown values get the generic style clause

    Returns:
        Prompt text
    """
    mode_value = mode.value if isinstance(mode, EditMode) else mode
    mode_clause = MODE_CLAUSES.get(mode_value, GENERIC_STYLE_CLAUSE)
    return f"{food} {BASE_CLAUSE}, {mode_clause}, {SUFFIX_CLAUSE}"
