"""
Tests for the catalog services (ingredients, recipes, day plans) and the
unsaved-form previews. These use the in-memory database from conftest.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from constants import MESSAGES, MAX_LENGTHS, COPY_SUFFIX
from models import db, Ingredient, Recipe, RecipeIngredient, DayPlan, Meal
from services import (
    ValidationError,
    DuplicateNameError,
    InUseError,
    calculate_recipe_macros,
    calculate_day_plan,
    search_ingredients,
    ingredient_usage_counts,
    create_ingredient,
    update_ingredient,
    delete_ingredient,
    load_recipe,
    load_recipes_by_id,
    search_recipes,
    recent_recipes,
    dashboard_counts,
    create_recipe,
    update_recipe,
    update_cooked_weight,
    delete_recipe,
    load_day_plan,
    search_day_plans,
    create_day_plan,
    update_day_plan,
    duplicate_day_plan,
    delete_day_plan,
    preview_recipe,
    preview_day_plan,
)
from services.ingredients import commit_unique


# =============================================================================
# Ingredients
# =============================================================================


def test_create_ingredient(app):
    ingredient = create_ingredient({'name': 'Oats', 'protein': '13', 'fat': '7', 'carbs': '68', 'kcal': '389'})
    assert ingredient.id is not None
    assert db.session.get(Ingredient, ingredient.id).kcal == 389


def test_create_ingredient_duplicate_name_is_case_insensitive(chicken):
    with pytest.raises(DuplicateNameError, match=MESSAGES['ingredient_duplicate']):
        create_ingredient({'name': 'chicken breast', 'kcal': '100'})


def test_update_ingredient_keeps_own_name(chicken):
    update_ingredient(chicken, {'name': 'Chicken Breast', 'protein': '30', 'fat': '3', 'carbs': '0', 'kcal': '160'})
    assert chicken.protein == 30


def test_update_ingredient_changes_recipe_totals(chicken_recipe, chicken):
    """Recipes read current ingredient values, not a copy taken at save time."""
    update_ingredient(chicken, {'name': 'Chicken Breast', 'protein': '31', 'fat': '3.6', 'carbs': '0', 'kcal': '200'})
    db.session.expire_all()
    assert calculate_recipe_macros(load_recipe(chicken_recipe.id))['kcal'] == pytest.approx(400)


def test_update_ingredient_rejects_taken_name(chicken, rice):
    with pytest.raises(DuplicateNameError):
        update_ingredient(rice, {'name': 'CHICKEN BREAST', 'kcal': '1'})


def test_delete_unused_ingredient(rice):
    assert delete_ingredient(rice) == 'White Rice'
    assert Ingredient.query.count() == 0


def test_delete_ingredient_in_use(chicken_recipe, chicken):
    with pytest.raises(InUseError, match=MESSAGES['ingredient_in_use']):
        delete_ingredient(chicken)
    assert db.session.get(Ingredient, chicken.id) is not None


def test_search_and_usage_counts(chicken_recipe, chicken, rice):
    assert [i.name for i in search_ingredients('rice')] == ['White Rice']
    assert [i.name for i in search_ingredients()] == ['Chicken Breast', 'White Rice']
    assert ingredient_usage_counts() == {chicken.id: 1}


# =============================================================================
# Recipes
# =============================================================================


def test_create_recipe(chicken, rice):
    recipe = create_recipe({
        'name': 'Chicken Rice',
        'description': 'Meal prep',
        'cooked_weight': '',
        'ingredients': [
            {'ingredient_id': str(chicken.id), 'weight': '200'},
            {'ingredient_id': str(rice.id), 'weight': '100'},
        ],
    })
    macros = calculate_recipe_macros(load_recipe(recipe.id))
    assert macros['total_raw_weight'] == 300
    assert macros['kcal'] == pytest.approx(330 + 360)
    assert macros['cooked_weight'] is None


def test_create_recipe_unknown_ingredient(chicken):
    with pytest.raises(ValidationError, match=MESSAGES['ingredient_missing']):
        create_recipe({'name': 'Ghost', 'ingredients': [{'ingredient_id': 999, 'weight': 10}]})
    assert Recipe.query.count() == 0


def test_create_recipe_duplicate_name(chicken_recipe, chicken):
    with pytest.raises(DuplicateNameError, match=MESSAGES['recipe_duplicate']):
        create_recipe({'name': 'grilled chicken', 'ingredients': [{'ingredient_id': chicken.id, 'weight': 10}]})


def test_update_recipe_replaces_rows_wholesale(chicken_recipe, chicken, rice):
    update_recipe(chicken_recipe, {
        'name': 'Grilled Chicken',
        'cooked_weight': '300',
        'ingredients': [
            {'ingredient_id': rice.id, 'weight': 150},
            {'ingredient_id': chicken.id, 'weight': 100},
        ],
    })
    db.session.expire_all()

    rows = RecipeIngredient.query.filter_by(recipe_id=chicken_recipe.id).order_by(RecipeIngredient.id).all()
    assert [(row.ingredient_id, row.weight) for row in rows] == [(rice.id, 150), (chicken.id, 100)]
    assert RecipeIngredient.query.count() == 2
    assert load_recipe(chicken_recipe.id).cooked_weight == 300


def test_update_recipe_can_clear_cooked_weight(chicken_recipe, chicken):
    update_recipe(chicken_recipe, {
        'name': 'Grilled Chicken',
        'cooked_weight': '',
        'ingredients': [{'ingredient_id': chicken.id, 'weight': 200}],
    })
    assert calculate_recipe_macros(chicken_recipe)['base_weight'] == 200


def test_update_cooked_weight(rice_recipe):
    update_cooked_weight(rice_recipe, '250')
    macros = calculate_recipe_macros(load_recipe(rice_recipe.id))
    assert macros['base_weight'] == 250
    assert macros['weight_change'] == pytest.approx(150.0)


def test_update_cooked_weight_rejects_zero(rice_recipe):
    with pytest.raises(ValidationError, match=MESSAGES['cooked_weight_update_invalid']):
        update_cooked_weight(rice_recipe, '0')


def test_delete_recipe_in_use(day_plan, chicken_recipe):
    with pytest.raises(InUseError, match=MESSAGES['recipe_in_use']):
        delete_recipe(chicken_recipe)


def test_delete_recipe_removes_rows(chicken_recipe):
    delete_recipe(chicken_recipe)
    assert Recipe.query.count() == 0
    assert RecipeIngredient.query.count() == 0
    assert Ingredient.query.count() == 1


def test_recipe_lookups(chicken_recipe, rice_recipe):
    assert [r.name for r in search_recipes('chick')] == ['Grilled Chicken']
    assert set(load_recipes_by_id([chicken_recipe.id, 999])) == {chicken_recipe.id}
    assert load_recipes_by_id([]) == {}
    assert load_recipe(999) is None
    assert len(recent_recipes(limit=1)) == 1


# =============================================================================
# Day plans
# =============================================================================


def test_create_day_plan_orders_meals_by_position(chicken_recipe, rice_recipe):
    plan = create_day_plan({
        'name': 'Rest Day',
        'meals': [
            {'recipe_id': rice_recipe.id, 'portion_size': '50'},
            {'recipe_id': chicken_recipe.id, 'portion_size': '85'},
        ],
    })
    loaded = load_day_plan(plan.id)
    assert [(m.recipe_id, m.order) for m in loaded.meals] == [(rice_recipe.id, 0), (chicken_recipe.id, 1)]


def test_create_day_plan_unknown_recipe(chicken_recipe):
    with pytest.raises(ValidationError, match=MESSAGES['recipe_missing']):
        create_day_plan({'name': 'Ghost Day', 'meals': [{'recipe_id': 999, 'portion_size': 10}]})


def test_day_plan_totals(day_plan):
    result = calculate_day_plan(load_day_plan(day_plan.id))
    # two half portions of chicken plus half of the rice
    assert result['totals']['kcal'] == pytest.approx(330 + 180)
    assert [m['order'] for m in result['meals']] == [0, 1, 2]
    assert result['meals'][1]['recipe_info']['portion_percentage'] == pytest.approx(50)


def test_update_day_plan_replaces_meals(day_plan, rice_recipe):
    update_day_plan(day_plan, {
        'name': 'Training Day',
        'meals': [{'recipe_id': rice_recipe.id, 'portion_size': 100}],
    })
    assert Meal.query.count() == 1
    result = calculate_day_plan(load_day_plan(day_plan.id))
    assert result['totals']['kcal'] == pytest.approx(360)


def test_duplicate_day_plan(day_plan):
    copy = duplicate_day_plan(load_day_plan(day_plan.id))

    assert copy.name == 'Training Day (Copy)'
    assert copy.description == 'High protein'
    assert Meal.query.count() == 6

    original = calculate_day_plan(load_day_plan(day_plan.id))
    copied = calculate_day_plan(load_day_plan(copy.id))
    for field in ('protein', 'fat', 'carbs', 'kcal'):
        assert copied['totals'][field] == pytest.approx(original['totals'][field])
    assert [m['order'] for m in copied['meals']] == [0, 1, 2]


def test_duplicate_day_plan_twice_fails(day_plan):
    duplicate_day_plan(day_plan)
    with pytest.raises(DuplicateNameError):
        duplicate_day_plan(day_plan)


def test_delete_day_plan_keeps_recipes(day_plan):
    assert delete_day_plan(day_plan) == 'Training Day'
    assert DayPlan.query.count() == 0
    assert Meal.query.count() == 0
    assert Recipe.query.count() == 2


def test_search_day_plans(day_plan):
    assert len(search_day_plans('training')) == 1
    assert search_day_plans('rest') == []


# =============================================================================
# Previews
# =============================================================================


def test_preview_recipe_skips_incomplete_rows(chicken, rice):
    result = preview_recipe({
        'cooked_weight': '170',
        'ingredients': [
            {'ingredient_id': str(chicken.id), 'weight': '200'},
            {'ingredient_id': '', 'weight': '50'},
            {'ingredient_id': str(rice.id), 'weight': '0'},
            {'ingredient_id': '999', 'weight': '10'},
        ],
    })
    assert result['total_raw_weight'] == 200
    assert result['kcal'] == pytest.approx(330)
    assert result['per_100g_cooked']['kcal'] == pytest.approx(330 / 170 * 100)
    assert len(result['contributions']) == 1


def test_preview_recipe_empty(app):
    result = preview_recipe({})
    assert result['kcal'] == 0
    assert result['per_100g_raw']['kcal'] == 0


def test_preview_day_plan(chicken_recipe, rice_recipe):
    result = preview_day_plan({'meals': [
        {'recipe_id': chicken_recipe.id, 'portion_size': 85},
        {'recipe_id': 'abc', 'portion_size': 50},
        {'recipe_id': rice_recipe.id, 'portion_size': 50},
    ]})
    assert result['totals']['kcal'] == pytest.approx(165 + 180)
    assert [m['order'] for m in result['meals']] == [0, 2]


def test_dashboard_counts(day_plan):
    assert dashboard_counts() == {'ingredients': 2, 'recipes': 2, 'day_plans': 1}


def test_duplicate_day_plan_with_long_name_fits_column(chicken_recipe):
    long_name = 'A' * MAX_LENGTHS['day_plan_name']
    plan = create_day_plan({
        'name': long_name,
        'meals': [{'recipe_id': chicken_recipe.id, 'portion_size': 85}],
    })
    copy = duplicate_day_plan(plan)
    assert len(copy.name) == MAX_LENGTHS['day_plan_name']
    assert copy.name.endswith(COPY_SUFFIX)


def _failing_commit(message):
    def commit():
        raise IntegrityError('INSERT', {}, Exception(message))
    return commit


def test_commit_unique_reports_unique_violation(app, monkeypatch):
    monkeypatch.setattr(db.session(), 'commit', _failing_commit('UNIQUE constraint failed: ingredient.name'))
    with pytest.raises(DuplicateNameError, match=MESSAGES['ingredient_duplicate']):
        commit_unique(MESSAGES['ingredient_duplicate'])


def test_commit_unique_other_integrity_error_is_generic(app, monkeypatch):
    """A foreign key failure is not reported as a duplicate name."""
    monkeypatch.setattr(db.session(), 'commit', _failing_commit('FOREIGN KEY constraint failed'))
    with pytest.raises(ValidationError, match=MESSAGES['save_failed']) as excinfo:
        commit_unique(MESSAGES['recipe_duplicate'])
    assert not isinstance(excinfo.value, DuplicateNameError)
