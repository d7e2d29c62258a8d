"""
Validation Service

Validates ingredient, recipe and day plan payloads before they reach the
database. Each validator returns a cleaned dict or raises ValidationError
carrying the first problem found, worded for the user.
"""

import math

from constants import (
    MACRO_FIELDS, MIN_WEIGHT, MIN_PORTION, MIN_MACRO_VALUE, MAX_AMOUNT,
    MAX_LENGTHS, MACRO_LABELS, MESSAGES
)
from utils.sanitizer import sanitize_text, sanitize_description


class ValidationError(ValueError):
    """Raised when submitted data is invalid."""
    pass


class DuplicateNameError(ValidationError):
    """Raised when a unique name is already taken."""
    pass


class InUseError(Exception):
    """Raised when deleting a record that other records still reference."""
    pass


def _to_number(value, message, allow_blank=False):
    """Coerce a form or JSON value to a finite float, raising ValidationError."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if allow_blank:
            return None
        raise ValidationError(message)
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if not math.isfinite(number) or number > MAX_AMOUNT:
        raise ValidationError(message)
    return number


def _to_id(value, message):
    if value is None or isinstance(value, bool):
        raise ValidationError(message)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)


def validate_name(value, max_length):
    name = sanitize_text(value, max_length=max_length)
    if not name:
        raise ValidationError(MESSAGES['name_required'])
    return name


def validate_ingredient(data):
    """
    Validate an ingredient payload.

    Blank macro fields count as zero; negative or non-numeric values fail.
    """
    cleaned = {'name': validate_name(data.get('name'), MAX_LENGTHS['ingredient_name'])}
    for field in MACRO_FIELDS:
        message = MESSAGES['macro_invalid'].format(label=MACRO_LABELS[field])
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            value = 0
        number = _to_number(value, message)
        if number < MIN_MACRO_VALUE:
            raise ValidationError(message)
        cleaned[field] = number
    return cleaned


def validate_cooked_weight(value, allow_blank=True):
    """
    Validate an optional cooked weight.

    Returns None for a blank value or zero, since zero means not weighed.
    """
    number = _to_number(value, MESSAGES['cooked_weight_invalid'], allow_blank=allow_blank)
    if number is None:
        return None
    if number < 0:
        raise ValidationError(MESSAGES['cooked_weight_invalid'])
    return number or None


def validate_cooked_weight_update(value):
    """Validate a cooked weight entered after cooking; it must be > 0."""
    message = MESSAGES['cooked_weight_update_invalid']
    number = _to_number(value, message)
    if number <= 0:
        raise ValidationError(message)
    return number


def validate_recipe_rows(rows):
    """Validate recipe ingredient rows; at least one row is required."""
    cleaned = []
    for row in rows or []:
        ingredient_id = _to_id(row.get('ingredient_id'), MESSAGES['ingredient_required'])
        weight = _to_number(row.get('weight'), MESSAGES['weight_invalid'])
        if weight < MIN_WEIGHT:
            raise ValidationError(MESSAGES['weight_invalid'])
        cleaned.append({'ingredient_id': ingredient_id, 'weight': weight})
    if not cleaned:
        raise ValidationError(MESSAGES['ingredients_empty'])
    return cleaned


def validate_recipe(data):
    """Validate a recipe payload with its ingredient rows."""
    return {
        'name': validate_name(data.get('name'), MAX_LENGTHS['recipe_name']),
        'description': sanitize_description(data.get('description'), MAX_LENGTHS['description']),
        'cooked_weight': validate_cooked_weight(data.get('cooked_weight')),
        'ingredients': validate_recipe_rows(data.get('ingredients')),
    }


def validate_meal_rows(rows):
    """Validate day plan meal rows; at least one meal is required."""
    cleaned = []
    for row in rows or []:
        recipe_id = _to_id(row.get('recipe_id'), MESSAGES['recipe_required'])
        portion_size = _to_number(row.get('portion_size'), MESSAGES['portion_invalid'])
        if portion_size < MIN_PORTION:
            raise ValidationError(MESSAGES['portion_invalid'])
        cleaned.append({'recipe_id': recipe_id, 'portion_size': portion_size})
    if not cleaned:
        raise ValidationError(MESSAGES['meals_empty'])
    return cleaned


def validate_day_plan(data):
    """Validate a day plan payload with its meal rows."""
    return {
        'name': validate_name(data.get('name'), MAX_LENGTHS['day_plan_name']),
        'description': sanitize_description(data.get('description'), MAX_LENGTHS['description']),
        'meals': validate_meal_rows(data.get('meals')),
    }
