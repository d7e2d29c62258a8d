"""
Parsing Service

Functions for turning submitted form data into plain payload dicts that
the validation service understands.
"""

import math
import re

_ROW_KEY = re.compile(r'^(?P<prefix>\w+)\[(?P<index>\d+)\]\[(?P<field>\w+)\]$')


def safe_float(value, default=0.0, min_val=None, max_val=None):
    """Safely parse a float value with optional bounds."""
    try:
        result = float(value) if value not in (None, '') else default
        if result is None:
            return None
        if not math.isfinite(result):
            return default
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def parse_indexed_rows(form, prefix, fields):
    """
    Read repeated form rows named like ``prefix[0][field]``.

    Rows are read from index 0 upwards and reading stops at the first index
    that has no row at all. Rows where any of `fields` is blank are skipped,
    matching a form where the user added a row but left it empty.

    Args:
        form: Mapping of submitted form fields (request.form or a dict)
        prefix: Row group name, e.g. 'ingredients'
        fields: Field names every row must carry, e.g. ('ingredient_id', 'weight')

    Returns:
        List of dicts with the raw string values of each complete row
    """
    rows = {}
    for key in form.keys():
        match = _ROW_KEY.match(key)
        if not match or match.group('prefix') != prefix:
            continue
        index = int(match.group('index'))
        rows.setdefault(index, {})[match.group('field')] = form.get(key)

    parsed = []
    index = 0
    while index in rows:
        row = rows[index]
        values = {field: (row.get(field) or '').strip() for field in fields}
        if all(values.values()):
            parsed.append(values)
        index += 1
    return parsed


def parse_ingredient_form(form):
    """Ingredient payload from an ingredient form."""
    return {
        'name': form.get('name', ''),
        'protein': form.get('protein', ''),
        'fat': form.get('fat', ''),
        'carbs': form.get('carbs', ''),
        'kcal': form.get('kcal', ''),
    }


def parse_recipe_form(form):
    """Recipe payload (with its ingredient rows) from a recipe form."""
    return {
        'name': form.get('name', ''),
        'description': form.get('description', ''),
        'cooked_weight': form.get('cooked_weight', ''),
        'ingredients': parse_indexed_rows(form, 'ingredients', ('ingredient_id', 'weight')),
    }


def parse_day_plan_form(form):
    """Day plan payload (with its meal rows) from a day plan form."""
    return {
        'name': form.get('name', ''),
        'description': form.get('description', ''),
        'meals': parse_indexed_rows(form, 'meals', ('recipe_id', 'portion_size')),
    }
