"""
Macro Calculation Service

Pure functions that aggregate protein, fat, carbs and kcal across the
ingredient -> recipe -> meal -> day plan hierarchy.

Every page, form preview and API endpoint goes through these functions,
so the raw-vs-cooked denominator policy lives in exactly one place:

- A recipe's totals are the sum of (macro / 100) * weight over its rows.
- A recipe's base weight is its cooked weight when set and > 0, otherwise
  the total raw weight of its rows.
- A meal scales its recipe's totals by portion_size / base_weight. The ratio
  is never clamped; a portion larger than one batch is valid.
- Any division by a zero (or negative) denominator yields
  ZERO_DENOMINATOR_RESULT instead of NaN or infinity.

Inputs may be ORM objects or plain mappings with the same field names, which
lets form previews run against data that has not been saved yet.
"""

import logging
from collections.abc import Mapping

from constants import (
    MACRO_FIELDS, ENERGY_FIELDS, PER_100G, ATWATER_FACTORS, ZERO_DENOMINATOR_RESULT
)

logger = logging.getLogger(__name__)


class MacroCalculationError(Exception):
    """Raised when a snapshot references an ingredient or recipe that was not loaded."""
    pass


def _field(obj, name, default=None):
    """Read a field from an ORM object or a mapping."""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def empty_macros():
    """Macro dict with every field set to zero."""
    return {field: 0.0 for field in MACRO_FIELDS}


def safe_divide(numerator, denominator):
    """
    Divide numerator by denominator.

    Returns ZERO_DENOMINATOR_RESULT when the denominator is missing, zero or
    negative, so no non-finite value reaches a caller.
    """
    if not denominator or denominator <= 0:
        logger.debug("Zero denominator for numerator %r, using %r", numerator, ZERO_DENOMINATOR_RESULT)
        return ZERO_DENOMINATOR_RESULT
    return numerator / denominator


def get_base_weight(cooked_weight, total_raw_weight):
    """Cooked weight if present and > 0, else the total raw weight."""
    if cooked_weight is not None and cooked_weight > 0:
        return cooked_weight
    return total_raw_weight


def ingredient_contribution(ingredient, weight):
    """Macros contributed by `weight` grams of an ingredient whose values are per 100g."""
    return {
        field: (_field(ingredient, field) / PER_100G) * weight
        for field in MACRO_FIELDS
    }


def per_100g(macros, weight):
    """Express total macros per 100 grams of `weight`."""
    return {
        field: safe_divide(macros[field], weight) * PER_100G
        for field in MACRO_FIELDS
    }


def scale_macros(macros, ratio):
    """Multiply every macro by ratio."""
    return {field: macros[field] * ratio for field in MACRO_FIELDS}


def sum_macros(macro_dicts):
    """Field-wise sum of macro dicts. An empty iterable sums to zero."""
    totals = empty_macros()
    for macros in macro_dicts:
        for field in MACRO_FIELDS:
            totals[field] += macros[field]
    return totals


def build_recipe_macros(rows, cooked_weight=None):
    """
    Aggregate recipe ingredient rows into recipe level macros.

    Args:
        rows: Iterable of recipe ingredient rows, each with `weight` and a
            resolved `ingredient` carrying protein/fat/carbs/kcal per 100g
        cooked_weight: Weight of the whole cooked batch in grams, or None

    Returns:
        Dict with total_raw_weight, cooked_weight, base_weight, the four
        macro totals, per_100g_raw, per_100g_cooked (None without a cooked
        weight), weight_change (percent, None without a cooked weight) and
        the per row contributions.

    Raises:
        MacroCalculationError: If a row has no resolved ingredient
    """
    total_raw_weight = 0.0
    contributions = []

    for row in rows:
        ingredient = _field(row, 'ingredient')
        if ingredient is None:
            raise MacroCalculationError(
                f"Recipe ingredient row {_field(row, 'id')!r} references "
                f"ingredient {_field(row, 'ingredient_id')!r} which was not loaded"
            )
        weight = _field(row, 'weight')
        total_raw_weight += weight
        contributions.append({
            'ingredient_id': _field(ingredient, 'id'),
            'name': _field(ingredient, 'name'),
            'weight': weight,
            'macros': ingredient_contribution(ingredient, weight),
        })

    totals = sum_macros(c['macros'] for c in contributions)

    if cooked_weight is not None and cooked_weight > 0:
        per_100g_cooked = per_100g(totals, cooked_weight)
        weight_change = safe_divide(cooked_weight - total_raw_weight, total_raw_weight) * 100
    else:
        # Zero is treated as "not weighed yet"
        cooked_weight = None
        per_100g_cooked = None
        weight_change = None

    result = {
        'total_raw_weight': total_raw_weight,
        'cooked_weight': cooked_weight,
        'base_weight': get_base_weight(cooked_weight, total_raw_weight),
        'per_100g_raw': per_100g(totals, total_raw_weight),
        'per_100g_cooked': per_100g_cooked,
        'weight_change': weight_change,
        'contributions': contributions,
    }
    result.update(totals)
    return result


def calculate_recipe_macros(recipe):
    """Aggregate a recipe (ORM object or mapping) with resolved ingredient rows."""
    return build_recipe_macros(
        _field(recipe, 'ingredients') or [],
        _field(recipe, 'cooked_weight'),
    )


def recipe_totals(recipe_macros):
    """Extract just the four macro totals from a recipe aggregate."""
    return {field: recipe_macros[field] for field in MACRO_FIELDS}


def calculate_portion_ratio(portion_size, base_weight):
    """Portion size divided by the recipe's base weight, unclamped."""
    return safe_divide(portion_size, base_weight)


def calculate_meal_macros(meal, recipe_macros=None):
    """
    Scale a meal's recipe totals to the meal's portion.

    Args:
        meal: Meal with `portion_size` and a resolved `recipe`
        recipe_macros: Precomputed aggregate of the meal's recipe, if the
            caller already has one

    Returns:
        Dict with the meal's id, recipe_id, portion_size and order, the meal
        itself, its macros and recipe_info (total_raw_weight, cooked_weight,
        base_weight, portion_ratio, portion_percentage).

    Raises:
        MacroCalculationError: If the meal's recipe was not loaded
    """
    recipe = _field(meal, 'recipe')
    if recipe_macros is None:
        if recipe is None:
            raise MacroCalculationError(
                f"Meal {_field(meal, 'id')!r} references recipe "
                f"{_field(meal, 'recipe_id')!r} which was not loaded"
            )
        recipe_macros = calculate_recipe_macros(recipe)

    portion_size = _field(meal, 'portion_size')
    base_weight = recipe_macros['base_weight']
    portion_ratio = calculate_portion_ratio(portion_size, base_weight)

    return {
        'id': _field(meal, 'id'),
        'recipe_id': _field(meal, 'recipe_id'),
        'portion_size': portion_size,
        'order': _field(meal, 'order', 0) or 0,
        'meal': meal,
        'recipe': recipe,
        'macros': scale_macros(recipe_totals(recipe_macros), portion_ratio),
        'recipe_info': {
            'total_raw_weight': recipe_macros['total_raw_weight'],
            'cooked_weight': recipe_macros['cooked_weight'],
            'base_weight': base_weight,
            'portion_ratio': portion_ratio,
            'portion_percentage': portion_ratio * 100,
        },
    }


def calculate_macro_percentages(totals):
    """
    Share of energy coming from protein, fat and carbs, in percent.

    Uses the Atwater factors. All shares are ZERO_DENOMINATOR_RESULT when the
    total kcal is zero.
    """
    return {
        field: safe_divide(totals[field] * ATWATER_FACTORS[field], totals['kcal']) * 100
        for field in ENERGY_FIELDS
    }


def calculate_day_plan_macros(meals):
    """
    Aggregate an ordered collection of meals into day totals.

    Meals are returned sorted by their `order` field; totals do not depend
    on that order. Each distinct recipe is aggregated once. Zero meals give
    all-zero totals.
    """
    recipe_cache = {}
    meals_with_macros = []

    for meal in meals:
        recipe = _field(meal, 'recipe')
        if recipe is None:
            raise MacroCalculationError(
                f"Meal {_field(meal, 'id')!r} references recipe "
                f"{_field(meal, 'recipe_id')!r} which was not loaded"
            )
        key = id(recipe)
        if key not in recipe_cache:
            recipe_cache[key] = calculate_recipe_macros(recipe)
        meals_with_macros.append(calculate_meal_macros(meal, recipe_cache[key]))

    meals_with_macros.sort(key=lambda m: m['order'])
    totals = sum_macros(m['macros'] for m in meals_with_macros)

    return {
        'meals': meals_with_macros,
        'totals': totals,
        'percentages': calculate_macro_percentages(totals),
    }


def calculate_day_plan(day_plan):
    """Aggregate a DayPlan (ORM object or mapping) with resolved meals."""
    return calculate_day_plan_macros(_field(day_plan, 'meals') or [])
