"""
Ingredient Model

Base ingredients with macro values per 100g of raw weight.
"""

from .base import db, TimestampMixin


class Ingredient(TimestampMixin, db.Model):
    """
    Base ingredient with its macro profile.

    protein, fat, carbs and kcal are all per 100 grams of raw ingredient.
    An ingredient cannot be deleted while a recipe references it.
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False, index=True)
    protein = db.Column(db.Float, nullable=False, default=0.0)
    fat = db.Column(db.Float, nullable=False, default=0.0)
    carbs = db.Column(db.Float, nullable=False, default=0.0)
    kcal = db.Column(db.Float, nullable=False, default=0.0)

    def __repr__(self):
        return f'<Ingredient {self.name!r}>'
