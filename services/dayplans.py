"""
Day Plan Service

Load, save, duplicate, search and delete day plans. Meals are replaced
wholesale on save, with `order` set to each meal's submission index.
"""

import logging

from sqlalchemy.orm import joinedload

from constants import MESSAGES, COPY_SUFFIX, MAX_LENGTHS
from models.base import utcnow
from models import db, DayPlan, Meal, Recipe, RecipeIngredient
from .ingredients import name_taken, commit_unique
from .validation import validate_day_plan, ValidationError, DuplicateNameError

logger = logging.getLogger(__name__)


def day_plan_query():
    """Day plan query with meals, recipes and ingredients eagerly loaded."""
    return DayPlan.query.options(
        joinedload(DayPlan.meals)
        .joinedload(Meal.recipe)
        .joinedload(Recipe.ingredients)
        .joinedload(RecipeIngredient.ingredient)
    )


def load_day_plan(day_plan_id):
    """Day plan snapshot with every meal's recipe resolved, or None."""
    return day_plan_query().filter(DayPlan.id == day_plan_id).first()


def search_day_plans(term=''):
    """Day plans whose name contains term (case-insensitive), ordered by name."""
    query = day_plan_query()
    if term:
        query = query.filter(DayPlan.name.ilike(f'%{term}%'))
    return query.order_by(DayPlan.name).all()


def resolve_recipes(recipe_ids):
    """Map of id -> Recipe for the given ids, failing on unknown ids."""
    recipes = Recipe.query.filter(Recipe.id.in_(set(recipe_ids))).all()
    found = {recipe.id: recipe for recipe in recipes}
    if set(recipe_ids) - set(found):
        raise ValidationError(MESSAGES['recipe_missing'])
    return found


def _apply(day_plan, cleaned):
    found = resolve_recipes([row['recipe_id'] for row in cleaned['meals']])
    day_plan.name = cleaned['name']
    day_plan.description = cleaned['description']
    day_plan.updated_at = utcnow()
    day_plan.meals = [
        Meal(recipe=found[row['recipe_id']], portion_size=row['portion_size'], order=index)
        for index, row in enumerate(cleaned['meals'])
    ]


def create_day_plan(data):
    cleaned = validate_day_plan(data)
    if name_taken(DayPlan, cleaned['name']):
        raise DuplicateNameError(MESSAGES['day_plan_duplicate'])

    day_plan = DayPlan()
    _apply(day_plan, cleaned)
    db.session.add(day_plan)
    commit_unique(MESSAGES['day_plan_duplicate'])
    logger.info("Created day plan %s (%r) with %d meals",
                day_plan.id, day_plan.name, len(day_plan.meals))
    return day_plan


def update_day_plan(day_plan, data):
    cleaned = validate_day_plan(data)
    if name_taken(DayPlan, cleaned['name'], exclude_id=day_plan.id):
        raise DuplicateNameError(MESSAGES['day_plan_duplicate'])

    _apply(day_plan, cleaned)
    commit_unique(MESSAGES['day_plan_duplicate'])
    logger.info("Updated day plan %s (%r) with %d meals",
                day_plan.id, day_plan.name, len(day_plan.meals))
    return day_plan


def duplicate_day_plan(day_plan):
    """
    Copy a day plan and all of its meals into a new plan.

    The copy is named "<name> (Copy)", with the name shortened first when the
    result would not fit the column. It gets fresh meal rows with the same
    recipe, portion size and order as the original.
    """
    base = day_plan.name[:MAX_LENGTHS['day_plan_name'] - len(COPY_SUFFIX)].rstrip()
    name = f"{base}{COPY_SUFFIX}"
    if name_taken(DayPlan, name):
        raise DuplicateNameError(MESSAGES['day_plan_duplicate'])

    copy = DayPlan(
        name=name,
        description=day_plan.description,
        meals=[
            Meal(recipe_id=meal.recipe_id, portion_size=meal.portion_size, order=meal.order)
            for meal in day_plan.meals
        ],
    )
    db.session.add(copy)
    commit_unique(MESSAGES['day_plan_duplicate'])
    logger.info("Duplicated day plan %s as %s (%r)", day_plan.id, copy.id, copy.name)
    return copy


def delete_day_plan(day_plan):
    name = day_plan.name
    db.session.delete(day_plan)
    db.session.commit()
    logger.info("Deleted day plan %r", name)
    return name
