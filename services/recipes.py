"""
Recipe Service

Load, save, search and delete recipes. Ingredient rows are always replaced
wholesale on save rather than diffed.
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from config import Config
from constants import MESSAGES
from models.base import utcnow
from models import db, Ingredient, Recipe, RecipeIngredient, DayPlan, Meal
from .ingredients import name_taken, commit_unique
from .validation import (
    validate_recipe, validate_cooked_weight_update,
    ValidationError, DuplicateNameError, InUseError
)

logger = logging.getLogger(__name__)


def recipe_query():
    """Recipe query with ingredient rows and their ingredients eagerly loaded."""
    return Recipe.query.options(
        joinedload(Recipe.ingredients).joinedload(RecipeIngredient.ingredient)
    )


def load_recipe(recipe_id):
    """Recipe snapshot with resolved ingredients, or None."""
    return recipe_query().filter(Recipe.id == recipe_id).first()


def load_recipes_by_id(recipe_ids):
    """Map of id -> recipe snapshot for the given ids; unknown ids are absent."""
    if not recipe_ids:
        return {}
    recipes = recipe_query().filter(Recipe.id.in_(set(recipe_ids))).all()
    return {recipe.id: recipe for recipe in recipes}


def search_recipes(term=''):
    """Recipes whose name contains term (case-insensitive), ordered by name."""
    query = recipe_query()
    if term:
        query = query.filter(Recipe.name.ilike(f'%{term}%'))
    return query.order_by(Recipe.name).all()


def recent_recipes(limit=Config.RECENT_RECIPES_LIMIT):
    """Most recently updated recipes."""
    return recipe_query().order_by(Recipe.updated_at.desc(), Recipe.id.desc()).limit(limit).all()


def dashboard_counts():
    """Number of ingredients, recipes and day plans."""
    return {
        'ingredients': db.session.query(func.count(Ingredient.id)).scalar(),
        'recipes': db.session.query(func.count(Recipe.id)).scalar(),
        'day_plans': db.session.query(func.count(DayPlan.id)).scalar(),
    }


def resolve_ingredients(ingredient_ids):
    """Map of id -> Ingredient for the given ids, failing on unknown ids."""
    ingredients = Ingredient.query.filter(Ingredient.id.in_(set(ingredient_ids))).all()
    found = {ingredient.id: ingredient for ingredient in ingredients}
    missing = set(ingredient_ids) - set(found)
    if missing:
        raise ValidationError(MESSAGES['ingredient_missing'])
    return found


def _apply(recipe, cleaned):
    found = resolve_ingredients([row['ingredient_id'] for row in cleaned['ingredients']])
    recipe.name = cleaned['name']
    recipe.description = cleaned['description']
    recipe.cooked_weight = cleaned['cooked_weight']
    recipe.updated_at = utcnow()
    # Delete all rows and recreate them from the submitted list
    recipe.ingredients = [
        RecipeIngredient(ingredient=found[row['ingredient_id']], weight=row['weight'])
        for row in cleaned['ingredients']
    ]


def create_recipe(data):
    cleaned = validate_recipe(data)
    if name_taken(Recipe, cleaned['name']):
        raise DuplicateNameError(MESSAGES['recipe_duplicate'])

    recipe = Recipe()
    _apply(recipe, cleaned)
    db.session.add(recipe)
    commit_unique(MESSAGES['recipe_duplicate'])
    logger.info("Created recipe %s (%r) with %d ingredients",
                recipe.id, recipe.name, len(recipe.ingredients))
    return recipe


def update_recipe(recipe, data):
    cleaned = validate_recipe(data)
    if name_taken(Recipe, cleaned['name'], exclude_id=recipe.id):
        raise DuplicateNameError(MESSAGES['recipe_duplicate'])

    _apply(recipe, cleaned)
    commit_unique(MESSAGES['recipe_duplicate'])
    logger.info("Updated recipe %s (%r) with %d ingredients",
                recipe.id, recipe.name, len(recipe.ingredients))
    return recipe


def update_cooked_weight(recipe, value):
    recipe.cooked_weight = validate_cooked_weight_update(value)
    db.session.commit()
    logger.info("Recipe %s cooked weight set to %sg", recipe.id, recipe.cooked_weight)
    return recipe


def delete_recipe(recipe):
    """Delete a recipe unless a day plan meal still uses it."""
    in_use = db.session.query(Meal.query.filter_by(recipe_id=recipe.id).exists()).scalar()
    if in_use:
        raise InUseError(MESSAGES['recipe_in_use'])

    name = recipe.name
    db.session.delete(recipe)
    db.session.commit()
    logger.info("Deleted recipe %r", name)
    return name
