"""
Recipe Models

Contains the Recipe and RecipeIngredient models for managing
recipes and their weighted ingredients.
"""

from .base import db, TimestampMixin


class Recipe(TimestampMixin, db.Model):
    """Recipe built from weighed raw ingredients, with an optional cooked weight."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    # Weight of the whole batch after cooking, in grams; NULL until weighed
    cooked_weight = db.Column(db.Float, nullable=True)
    ingredients = db.relationship(
        'RecipeIngredient', backref='recipe', lazy=True,
        cascade='all, delete-orphan', order_by='RecipeIngredient.id'
    )
    meals = db.relationship('Meal', back_populates='recipe', lazy=True, passive_deletes='all')

    def __repr__(self):
        return f'<Recipe {self.name!r}>'


class RecipeIngredient(db.Model):
    """Join table linking recipes to ingredients with a raw weight in grams."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='RESTRICT'), nullable=False, index=True)
    weight = db.Column(db.Float, nullable=False)
    ingredient = db.relationship('Ingredient')
