"""
Day Plan Models

Contains the DayPlan and Meal models for assembling a day of
portioned recipes.
"""

from .base import db, TimestampMixin


class DayPlan(TimestampMixin, db.Model):
    """Named plan for one day made of ordered meals."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    meals = db.relationship(
        'Meal', backref='day_plan', lazy=True,
        cascade='all, delete-orphan', order_by='Meal.order'
    )

    def __repr__(self):
        return f'<DayPlan {self.name!r}>'


class Meal(db.Model):
    """A portion of a recipe eaten as part of a day plan."""
    id = db.Column(db.Integer, primary_key=True)
    day_plan_id = db.Column(db.Integer, db.ForeignKey('day_plan.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='RESTRICT'), nullable=False, index=True)
    portion_size = db.Column(db.Float, nullable=False)  # grams
    order = db.Column(db.Integer, nullable=False, default=0)
    recipe = db.relationship('Recipe', back_populates='meals')
