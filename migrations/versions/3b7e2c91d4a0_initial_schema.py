"""Initial schema: ingredients, recipes, day plans

Revision ID: 3b7e2c91d4a0
Revises:
Create Date: 2026-10-17 09:12:44.381027

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e2c91d4a0'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        'ingredient',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('protein', sa.Float(), nullable=False),
        sa.Column('fat', sa.Float(), nullable=False),
        sa.Column('carbs', sa.Float(), nullable=False),
        sa.Column('kcal', sa.Float(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_ingredient_name', 'ingredient', ['name'], unique=True)
    op.create_index('ix_ingredient_updated_at', 'ingredient', ['updated_at'])

    op.create_table(
        'recipe',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cooked_weight', sa.Float(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_recipe_name', 'recipe', ['name'], unique=True)
    op.create_index('ix_recipe_updated_at', 'recipe', ['updated_at'])

    op.create_table(
        'recipe_ingredient',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipe_id', sa.Integer(), sa.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), sa.ForeignKey('ingredient.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
    )
    op.create_index('ix_recipe_ingredient_recipe_id', 'recipe_ingredient', ['recipe_id'])
    op.create_index('ix_recipe_ingredient_ingredient_id', 'recipe_ingredient', ['ingredient_id'])

    op.create_table(
        'day_plan',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_day_plan_name', 'day_plan', ['name'], unique=True)
    op.create_index('ix_day_plan_updated_at', 'day_plan', ['updated_at'])

    op.create_table(
        'meal',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('day_plan_id', sa.Integer(), sa.ForeignKey('day_plan.id', ondelete='CASCADE'), nullable=False),
        sa.Column('recipe_id', sa.Integer(), sa.ForeignKey('recipe.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('portion_size', sa.Float(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
    )
    op.create_index('ix_meal_day_plan_id', 'meal', ['day_plan_id'])
    op.create_index('ix_meal_recipe_id', 'meal', ['recipe_id'])


def downgrade():
    op.drop_table('meal')
    op.drop_table('day_plan')
    op.drop_table('recipe_ingredient')
    op.drop_table('recipe')
    op.drop_table('ingredient')
