"""
Ingredient Service

Create, update, search and delete ingredients.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from constants import MESSAGES
from models import db, Ingredient, RecipeIngredient
from .validation import validate_ingredient, ValidationError, DuplicateNameError, InUseError

logger = logging.getLogger(__name__)


def name_taken(model, name, exclude_id=None):
    """Case-insensitive check whether another row of `model` already uses name."""
    query = model.query.filter(func.lower(model.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def is_unique_violation(error):
    """True when an IntegrityError came from a UNIQUE constraint."""
    detail = str(getattr(error, 'orig', error)).lower()
    return 'unique' in detail or 'duplicate' in detail


def commit_unique(message):
    """
    Commit, translating a unique constraint violation into DuplicateNameError.

    Any other integrity failure (a row referenced by the change was deleted
    meanwhile) becomes a ValidationError with a generic message.
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_unique_violation(e):
            raise DuplicateNameError(message)
        logger.warning("Integrity error on commit: %s", e.orig)
        raise ValidationError(MESSAGES['save_failed'])


def search_ingredients(term=''):
    """Ingredients whose name contains term (case-insensitive), ordered by name."""
    query = Ingredient.query
    if term:
        query = query.filter(Ingredient.name.ilike(f'%{term}%'))
    return query.order_by(Ingredient.name).all()


def ingredient_usage_counts():
    """Map of ingredient id -> number of recipe rows using it."""
    rows = db.session.query(
        RecipeIngredient.ingredient_id, func.count(RecipeIngredient.id)
    ).group_by(RecipeIngredient.ingredient_id).all()
    return dict(rows)


def create_ingredient(data):
    cleaned = validate_ingredient(data)
    if name_taken(Ingredient, cleaned['name']):
        raise DuplicateNameError(MESSAGES['ingredient_duplicate'])

    ingredient = Ingredient(**cleaned)
    db.session.add(ingredient)
    commit_unique(MESSAGES['ingredient_duplicate'])
    logger.info("Created ingredient %s (%r)", ingredient.id, ingredient.name)
    return ingredient


def update_ingredient(ingredient, data):
    cleaned = validate_ingredient(data)
    if name_taken(Ingredient, cleaned['name'], exclude_id=ingredient.id):
        raise DuplicateNameError(MESSAGES['ingredient_duplicate'])

    for field, value in cleaned.items():
        setattr(ingredient, field, value)
    commit_unique(MESSAGES['ingredient_duplicate'])
    logger.info("Updated ingredient %s (%r)", ingredient.id, ingredient.name)
    return ingredient


def delete_ingredient(ingredient):
    """Delete an ingredient unless a recipe still uses it."""
    in_use = db.session.query(
        RecipeIngredient.query.filter_by(ingredient_id=ingredient.id).exists()
    ).scalar()
    if in_use:
        raise InUseError(MESSAGES['ingredient_in_use'])

    name = ingredient.name
    db.session.delete(ingredient)
    db.session.commit()
    logger.info("Deleted ingredient %r", name)
    return name
