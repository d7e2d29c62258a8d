"""
Constants Package

Nutrition factors and validation limits shared across the application.
"""

from .nutrition import (
    MACRO_FIELDS,
    ENERGY_FIELDS,
    PER_100G,
    KCAL_PER_GRAM_PROTEIN,
    KCAL_PER_GRAM_FAT,
    KCAL_PER_GRAM_CARBS,
    ATWATER_FACTORS,
    ZERO_DENOMINATOR_RESULT,
)

from .validation import (
    MIN_WEIGHT,
    MIN_PORTION,
    MIN_MACRO_VALUE,
    MAX_AMOUNT,
    MAX_LENGTHS,
    MACRO_LABELS,
    COPY_SUFFIX,
    MESSAGES,
)
