"""
Form Preview Service

Live macro totals for recipe and day plan forms that have not been saved.
Incomplete rows (nothing selected, unknown id, an amount below the form
minimum, or a row that is not an object at all) are left out of the preview
instead of failing, since the user is still filling the form in.
"""

from collections.abc import Mapping

from constants import MIN_WEIGHT, MIN_PORTION, MAX_AMOUNT
from models import Ingredient
from .recipes import load_recipes_by_id
from .macros import build_recipe_macros, calculate_day_plan_macros
from .parsing import safe_float


def _row_id(value):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _amount(value, minimum):
    """Amount clamped to MAX_AMOUNT, or None when missing or below minimum."""
    amount = safe_float(value, default=None, max_val=MAX_AMOUNT)
    if amount is None or amount < minimum:
        return None
    return amount


def _rows(data, key):
    """Mapping rows under `key`, keeping each row's original position."""
    if not isinstance(data, Mapping):
        return []
    rows = data.get(key)
    if not isinstance(rows, list):
        return []
    return [(index, row) for index, row in enumerate(rows) if isinstance(row, Mapping)]


def preview_recipe(data):
    """
    Recipe aggregate for unsaved form data.

    Args:
        data: Dict with optional cooked_weight and an `ingredients` list of
            {ingredient_id, weight} rows

    Returns:
        Recipe aggregate as produced by build_recipe_macros
    """
    rows = []
    for _, row in _rows(data, 'ingredients'):
        ingredient_id = _row_id(row.get('ingredient_id'))
        weight = _amount(row.get('weight'), MIN_WEIGHT)
        if ingredient_id is None or weight is None:
            continue
        rows.append({'ingredient_id': ingredient_id, 'weight': weight})

    ids = {row['ingredient_id'] for row in rows}
    found = {i.id: i for i in Ingredient.query.filter(Ingredient.id.in_(ids)).all()} if ids else {}
    resolved = [
        dict(row, ingredient=found[row['ingredient_id']])
        for row in rows if row['ingredient_id'] in found
    ]

    cooked_weight = None
    if isinstance(data, Mapping):
        cooked_weight = _amount(data.get('cooked_weight'), MIN_WEIGHT)
    return build_recipe_macros(resolved, cooked_weight)


def preview_day_plan(data):
    """
    Day plan aggregate for unsaved form data.

    Args:
        data: Dict with a `meals` list of {recipe_id, portion_size} rows

    Returns:
        Day plan aggregate as produced by calculate_day_plan_macros
    """
    rows = []
    for index, row in _rows(data, 'meals'):
        recipe_id = _row_id(row.get('recipe_id'))
        portion_size = _amount(row.get('portion_size'), MIN_PORTION)
        if recipe_id is None or portion_size is None:
            continue
        rows.append({'recipe_id': recipe_id, 'portion_size': portion_size, 'order': index})

    found = load_recipes_by_id({row['recipe_id'] for row in rows})
    meals = [
        dict(row, recipe=found[row['recipe_id']])
        for row in rows if row['recipe_id'] in found
    ]
    return calculate_day_plan_macros(meals)
