"""
Nutrition Constants

Macro field names, the per-100g basis used by ingredient data, and the
Atwater energy factors used for energy breakdowns.
"""

# Macro fields carried by every ingredient, recipe, meal and day plan total
MACRO_FIELDS = ('protein', 'fat', 'carbs', 'kcal')

# Macro fields that contribute energy (kcal is the energy itself)
ENERGY_FIELDS = ('protein', 'fat', 'carbs')

# Ingredient macros are stored per 100 grams of raw ingredient
PER_100G = 100.0

# Atwater factors (kcal per gram)
KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_FAT = 9
KCAL_PER_GRAM_CARBS = 4

ATWATER_FACTORS = {
    'protein': KCAL_PER_GRAM_PROTEIN,
    'fat': KCAL_PER_GRAM_FAT,
    'carbs': KCAL_PER_GRAM_CARBS,
}

# Returned instead of dividing by a zero or negative denominator
ZERO_DENOMINATOR_RESULT = 0.0
