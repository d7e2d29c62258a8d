"""
Validation Constants

Limits and user-facing messages for validating ingredient, recipe and
day plan input.
"""

# Smallest accepted recipe ingredient weight and meal portion (grams)
MIN_WEIGHT = 0.1
MIN_PORTION = 0.1

# Macro values per 100g may be zero but never negative
MIN_MACRO_VALUE = 0.0

# Upper bound for any gram or kcal value entered through a form
MAX_AMOUNT = 100000.0

# Maximum field lengths
MAX_LENGTHS = {
    'ingredient_name': 200,
    'recipe_name': 200,
    'day_plan_name': 200,
    'description': 5000,
    'search': 100,
}

# Human readable labels for macro fields in error messages
MACRO_LABELS = {
    'protein': 'Protein',
    'fat': 'Fat',
    'carbs': 'Carbs',
    'kcal': 'Calories',
}

# Suffix appended when duplicating a day plan
COPY_SUFFIX = ' (Copy)'

# Error messages shown to the user
MESSAGES = {
    'name_required': 'Name is required',
    'macro_invalid': '{label} must be a positive number',
    'ingredient_required': 'Ingredient is required',
    'ingredient_missing': 'Ingredient not found',
    'weight_invalid': 'Weight must be greater than 0',
    'ingredients_empty': 'At least one ingredient is required',
    'cooked_weight_invalid': 'Cooked weight must be a positive number',
    'cooked_weight_update_invalid': 'Please enter a valid weight',
    'recipe_required': 'Recipe is required',
    'recipe_missing': 'Recipe not found',
    'portion_invalid': 'Portion size must be greater than 0',
    'meals_empty': 'At least one meal is required',
    'ingredient_duplicate': 'An ingredient with this name already exists',
    'recipe_duplicate': 'A recipe with this name already exists',
    'day_plan_duplicate': 'A day plan with this name already exists',
    'ingredient_in_use': 'Cannot delete ingredient that is used in recipes',
    'recipe_in_use': 'Cannot delete recipe that is used in day plans',
    'save_failed': 'Could not save changes because related data changed, please try again',
}
