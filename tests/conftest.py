"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Select TestingConfig (in-memory SQLite) before the app module is imported
os.environ['FLASK_ENV'] = 'testing'


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app():
    """Flask app with a fresh schema for each test."""
    from app import app as flask_app
    from models import db

    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def chicken(app):
    """Chicken breast, per 100g raw."""
    from models import db, Ingredient
    ingredient = Ingredient(name='Chicken Breast', protein=31, fat=3.6, carbs=0, kcal=165)
    db.session.add(ingredient)
    db.session.commit()
    return ingredient


@pytest.fixture
def rice(app):
    """White rice, per 100g raw."""
    from models import db, Ingredient
    ingredient = Ingredient(name='White Rice', protein=7, fat=0.6, carbs=80, kcal=360)
    db.session.add(ingredient)
    db.session.commit()
    return ingredient


@pytest.fixture
def chicken_recipe(app, chicken):
    """200g of chicken breast cooked down to 170g."""
    from models import db, Recipe, RecipeIngredient
    recipe = Recipe(name='Grilled Chicken', cooked_weight=170)
    recipe.ingredients = [RecipeIngredient(ingredient=chicken, weight=200)]
    db.session.add(recipe)
    db.session.commit()
    return recipe


@pytest.fixture
def rice_recipe(app, rice):
    """100g of raw rice, never weighed after cooking."""
    from models import db, Recipe, RecipeIngredient
    recipe = Recipe(name='Plain Rice')
    recipe.ingredients = [RecipeIngredient(ingredient=rice, weight=100)]
    db.session.add(recipe)
    db.session.commit()
    return recipe


@pytest.fixture
def day_plan(app, chicken_recipe, rice_recipe):
    """Two chicken portions and one rice portion."""
    from models import db, DayPlan, Meal
    plan = DayPlan(name='Training Day', description='High protein')
    plan.meals = [
        Meal(recipe=chicken_recipe, portion_size=85, order=0),
        Meal(recipe=rice_recipe, portion_size=50, order=1),
        Meal(recipe=chicken_recipe, portion_size=85, order=2),
    ]
    db.session.add(plan)
    db.session.commit()
    return plan
