"""
Services Package

Business logic modules for the macro planner.
"""

from .macros import (
    MacroCalculationError,
    safe_divide,
    get_base_weight,
    ingredient_contribution,
    build_recipe_macros,
    calculate_recipe_macros,
    calculate_portion_ratio,
    calculate_meal_macros,
    calculate_macro_percentages,
    calculate_day_plan_macros,
    calculate_day_plan,
)

from .parsing import (
    safe_float,
    parse_indexed_rows,
    parse_ingredient_form,
    parse_recipe_form,
    parse_day_plan_form,
)

from .validation import (
    ValidationError,
    DuplicateNameError,
    InUseError,
)

from .ingredients import (
    search_ingredients,
    ingredient_usage_counts,
    create_ingredient,
    update_ingredient,
    delete_ingredient,
)

from .recipes import (
    load_recipe,
    load_recipes_by_id,
    search_recipes,
    recent_recipes,
    dashboard_counts,
    create_recipe,
    update_recipe,
    update_cooked_weight,
    delete_recipe,
)

from .dayplans import (
    load_day_plan,
    search_day_plans,
    create_day_plan,
    update_day_plan,
    duplicate_day_plan,
    delete_day_plan,
)

from .previews import (
    preview_recipe,
    preview_day_plan,
)

__all__ = [
    # Macros
    'MacroCalculationError',
    'safe_divide',
    'get_base_weight',
    'ingredient_contribution',
    'build_recipe_macros',
    'calculate_recipe_macros',
    'calculate_portion_ratio',
    'calculate_meal_macros',
    'calculate_macro_percentages',
    'calculate_day_plan_macros',
    'calculate_day_plan',
    # Parsing
    'safe_float',
    'parse_indexed_rows',
    'parse_ingredient_form',
    'parse_recipe_form',
    'parse_day_plan_form',
    # Errors
    'ValidationError',
    'DuplicateNameError',
    'InUseError',
    # Ingredients
    'search_ingredients',
    'ingredient_usage_counts',
    'create_ingredient',
    'update_ingredient',
    'delete_ingredient',
    # Recipes
    'load_recipe',
    'load_recipes_by_id',
    'search_recipes',
    'recent_recipes',
    'dashboard_counts',
    'create_recipe',
    'update_recipe',
    'update_cooked_weight',
    'delete_recipe',
    # Day plans
    'load_day_plan',
    'search_day_plans',
    'create_day_plan',
    'update_day_plan',
    'duplicate_day_plan',
    'delete_day_plan',
    # Previews
    'preview_recipe',
    'preview_day_plan',
]
