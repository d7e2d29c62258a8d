import logging

from flask import Flask, render_template, request, redirect, url_for, flash, jsonify
from flask_migrate import Migrate
from sqlalchemy import func

from config import get_config
from models import db, Ingredient, Recipe, DayPlan, Meal
from services import (
    MacroCalculationError, ValidationError, InUseError,
    calculate_recipe_macros, calculate_day_plan,
    parse_ingredient_form, parse_recipe_form, parse_day_plan_form, parse_indexed_rows,
    search_ingredients, ingredient_usage_counts,
    create_ingredient, update_ingredient, delete_ingredient,
    load_recipe, search_recipes, recent_recipes, dashboard_counts,
    create_recipe, update_recipe, update_cooked_weight, delete_recipe,
    load_day_plan, search_day_plans,
    create_day_plan, update_day_plan, duplicate_day_plan, delete_day_plan,
    preview_recipe, preview_day_plan,
)
from utils import sanitize_search, format_grams, format_kcal, format_percentage

app = Flask(__name__)
app.config.from_object(get_config())

logging.basicConfig(
    level=app.config['LOG_LEVEL'],
    format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)

db.init_app(app)
migrate = Migrate(app, db)

# Display rounding lives in these filters only
app.jinja_env.filters['grams'] = format_grams
app.jinja_env.filters['kcal'] = format_kcal
app.jinja_env.filters['pct'] = format_percentage


def form_rows(prefix, fields):
    """Submitted rows for re-rendering a form after a validation error."""
    return parse_indexed_rows(request.form, prefix, fields)


# ============================================
# ERROR HANDLERS
# ============================================

@app.errorhandler(MacroCalculationError)
def handle_macro_error(error):
    logger.error("Inconsistent snapshot: %s", error)
    if request.path.startswith('/api/'):
        return jsonify({'error': 'Stored data is inconsistent'}), 500
    return render_template('error.html', message='Stored data is inconsistent'), 500


# ============================================
# ROUTES - HOME
# ============================================

@app.route('/')
def index():
    counts = dashboard_counts()
    recipes = recent_recipes(app.config['RECENT_RECIPES_LIMIT'])
    recent = [(recipe, calculate_recipe_macros(recipe)) for recipe in recipes]
    return render_template('index.html', counts=counts, recent=recent)

# ============================================
# ROUTES - INGREDIENTS
# ============================================

@app.route('/ingredients')
def ingredients_list():
    search = sanitize_search(request.args.get('search', ''))
    ingredients = search_ingredients(search)
    usage = ingredient_usage_counts()
    return render_template('ingredients.html', ingredients=ingredients, usage=usage, search=search)

@app.route('/ingredient/add', methods=['GET', 'POST'])
def ingredient_add():
    if request.method == 'POST':
        try:
            ingredient = create_ingredient(parse_ingredient_form(request.form))
        except ValidationError as e:
            flash(str(e), 'danger')
            return render_template('ingredient_form.html', ingredient=None, form=request.form), 400
        flash(f'Ingredient "{ingredient.name}" added!', 'success')
        return redirect(url_for('ingredients_list'))

    return render_template('ingredient_form.html', ingredient=None, form={})

@app.route('/ingredient/<int:id>/edit', methods=['GET', 'POST'])
def ingredient_edit(id):
    ingredient = db.get_or_404(Ingredient, id)

    if request.method == 'POST':
        try:
            update_ingredient(ingredient, parse_ingredient_form(request.form))
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'danger')
            return render_template('ingredient_form.html', ingredient=ingredient, form=request.form), 400
        flash(f'Ingredient "{ingredient.name}" updated!', 'success')
        return redirect(url_for('ingredients_list'))

    return render_template('ingredient_form.html', ingredient=ingredient, form={})

@app.route('/ingredient/<int:id>/delete', methods=['POST'])
def ingredient_delete(id):
    ingredient = db.get_or_404(Ingredient, id)
    try:
        name = delete_ingredient(ingredient)
    except InUseError as e:
        flash(str(e), 'danger')
        return redirect(url_for('ingredients_list'))
    flash(f'Ingredient "{name}" deleted!', 'success')
    return redirect(url_for('ingredients_list'))

# ============================================
# ROUTES - RECIPES
# ============================================

@app.route('/recipes')
def recipes_list():
    search = sanitize_search(request.args.get('search', ''))
    recipes = [(recipe, calculate_recipe_macros(recipe)) for recipe in search_recipes(search)]
    meal_counts = dict(
        db.session.query(Meal.recipe_id, func.count(Meal.id)).group_by(Meal.recipe_id).all()
    )
    return render_template('recipes.html', recipes=recipes, meal_counts=meal_counts, search=search)

@app.route('/recipe/<int:id>')
def recipe_view(id):
    recipe = load_recipe(id)
    if recipe is None:
        return render_template('error.html', message='Recipe not found'), 404
    macros = calculate_recipe_macros(recipe)
    return render_template('recipe_view.html', recipe=recipe, macros=macros)

@app.route('/recipe/add', methods=['GET', 'POST'])
def recipe_add():
    ingredients = Ingredient.query.order_by(Ingredient.name).all()

    if request.method == 'POST':
        try:
            recipe = create_recipe(parse_recipe_form(request.form))
        except ValidationError as e:
            flash(str(e), 'danger')
            return render_template('recipe_form.html', recipe=None, ingredients=ingredients,
                                   form=request.form,
                                   rows=form_rows('ingredients', ('ingredient_id', 'weight'))), 400
        flash(f'Recipe "{recipe.name}" created!', 'success')
        return redirect(url_for('recipe_view', id=recipe.id))

    return render_template('recipe_form.html', recipe=None, ingredients=ingredients, form={}, rows=[])

@app.route('/recipe/<int:id>/edit', methods=['GET', 'POST'])
def recipe_edit(id):
    recipe = load_recipe(id)
    if recipe is None:
        return render_template('error.html', message='Recipe not found'), 404
    ingredients = Ingredient.query.order_by(Ingredient.name).all()

    if request.method == 'POST':
        try:
            update_recipe(recipe, parse_recipe_form(request.form))
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'danger')
            return render_template('recipe_form.html', recipe=recipe, ingredients=ingredients,
                                   form=request.form,
                                   rows=form_rows('ingredients', ('ingredient_id', 'weight'))), 400
        flash(f'Recipe "{recipe.name}" updated!', 'success')
        return redirect(url_for('recipe_view', id=recipe.id))

    rows = [{'ingredient_id': ri.ingredient_id, 'weight': ri.weight} for ri in recipe.ingredients]
    return render_template('recipe_form.html', recipe=recipe, ingredients=ingredients, form={}, rows=rows)

@app.route('/recipe/<int:id>/cooked-weight', methods=['POST'])
def recipe_cooked_weight(id):
    recipe = db.get_or_404(Recipe, id)
    try:
        update_cooked_weight(recipe, request.form.get('cooked_weight'))
    except ValidationError as e:
        flash(str(e), 'danger')
    else:
        flash('Cooked weight updated!', 'success')
    return redirect(url_for('recipe_view', id=id))

@app.route('/recipe/<int:id>/delete', methods=['POST'])
def recipe_delete(id):
    recipe = db.get_or_404(Recipe, id)
    try:
        name = delete_recipe(recipe)
    except InUseError as e:
        flash(str(e), 'danger')
        return redirect(url_for('recipes_list'))
    flash(f'Recipe "{name}" deleted!', 'success')
    return redirect(url_for('recipes_list'))

# ============================================
# ROUTES - DAY PLANS
# ============================================

@app.route('/day-plans')
def day_plans_list():
    search = sanitize_search(request.args.get('search', ''))
    plans = [(plan, calculate_day_plan(plan)) for plan in search_day_plans(search)]
    return render_template('day_plans.html', plans=plans, search=search)

@app.route('/day-plan/<int:id>')
def day_plan_view(id):
    day_plan = load_day_plan(id)
    if day_plan is None:
        return render_template('error.html', message='Day plan not found'), 404
    macros = calculate_day_plan(day_plan)
    return render_template('day_plan_view.html', day_plan=day_plan, macros=macros)

@app.route('/day-plan/add', methods=['GET', 'POST'])
def day_plan_add():
    recipes = search_recipes()

    if request.method == 'POST':
        try:
            day_plan = create_day_plan(parse_day_plan_form(request.form))
        except ValidationError as e:
            flash(str(e), 'danger')
            return render_template('day_plan_form.html', day_plan=None, recipes=recipes,
                                   form=request.form,
                                   rows=form_rows('meals', ('recipe_id', 'portion_size'))), 400
        flash(f'Day plan "{day_plan.name}" created!', 'success')
        return redirect(url_for('day_plan_view', id=day_plan.id))

    return render_template('day_plan_form.html', day_plan=None, recipes=recipes, form={}, rows=[])

@app.route('/day-plan/<int:id>/edit', methods=['GET', 'POST'])
def day_plan_edit(id):
    day_plan = load_day_plan(id)
    if day_plan is None:
        return render_template('error.html', message='Day plan not found'), 404
    recipes = search_recipes()

    if request.method == 'POST':
        try:
            update_day_plan(day_plan, parse_day_plan_form(request.form))
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'danger')
            return render_template('day_plan_form.html', day_plan=day_plan, recipes=recipes,
                                   form=request.form,
                                   rows=form_rows('meals', ('recipe_id', 'portion_size'))), 400
        flash(f'Day plan "{day_plan.name}" updated!', 'success')
        return redirect(url_for('day_plan_view', id=day_plan.id))

    rows = [{'recipe_id': meal.recipe_id, 'portion_size': meal.portion_size} for meal in day_plan.meals]
    return render_template('day_plan_form.html', day_plan=day_plan, recipes=recipes, form={}, rows=rows)

@app.route('/day-plan/<int:id>/duplicate', methods=['POST'])
def day_plan_duplicate(id):
    day_plan = load_day_plan(id)
    if day_plan is None:
        flash('Day plan not found', 'danger')
        return redirect(url_for('day_plans_list'))
    try:
        copy = duplicate_day_plan(day_plan)
    except ValidationError as e:
        flash(str(e), 'danger')
        return redirect(url_for('day_plans_list'))
    flash(f'Day plan duplicated as "{copy.name}"!', 'success')
    return redirect(url_for('day_plans_list'))

@app.route('/day-plan/<int:id>/delete', methods=['POST'])
def day_plan_delete(id):
    day_plan = db.get_or_404(DayPlan, id)
    name = delete_day_plan(day_plan)
    flash(f'Day plan "{name}" deleted!', 'success')
    return redirect(url_for('day_plans_list'))

# ============================================
# ROUTES - JSON API
# ============================================

def meal_to_json(meal):
    """JSON-safe copy of a meal-with-macros dict."""
    recipe = meal['recipe']
    return {
        'id': meal['id'],
        'recipe_id': meal['recipe_id'],
        'recipe_name': getattr(recipe, 'name', None),
        'portion_size': meal['portion_size'],
        'order': meal['order'],
        'macros': meal['macros'],
        'recipe_info': meal['recipe_info'],
    }


def day_plan_to_json(macros):
    return {
        'meals': [meal_to_json(meal) for meal in macros['meals']],
        'totals': macros['totals'],
        'percentages': macros['percentages'],
    }


def request_payload():
    """JSON body, or the submitted form parsed into the same shape."""
    if request.is_json:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}
    return None


@app.route('/api/recipes/<int:id>/macros')
def api_recipe_macros(id):
    recipe = load_recipe(id)
    if recipe is None:
        return jsonify({'error': 'Recipe not found'}), 404
    result = {'id': recipe.id, 'name': recipe.name, 'description': recipe.description}
    result.update(calculate_recipe_macros(recipe))
    return jsonify(result)

@app.route('/api/day-plans/<int:id>/macros')
def api_day_plan_macros(id):
    day_plan = load_day_plan(id)
    if day_plan is None:
        return jsonify({'error': 'Day plan not found'}), 404
    result = {'id': day_plan.id, 'name': day_plan.name, 'description': day_plan.description}
    result.update(day_plan_to_json(calculate_day_plan(day_plan)))
    return jsonify(result)

@app.route('/api/preview/recipe', methods=['POST'])
def api_preview_recipe():
    payload = request_payload()
    if payload is None:
        payload = parse_recipe_form(request.form)
    return jsonify(preview_recipe(payload))

@app.route('/api/preview/day-plan', methods=['POST'])
def api_preview_day_plan():
    payload = request_payload()
    if payload is None:
        payload = parse_day_plan_form(request.form)
    return jsonify(day_plan_to_json(preview_day_plan(payload)))

# ============================================
# INITIALIZE DATABASE
# ============================================

def init_db():
    with app.app_context():
        # Enable SQLite foreign key enforcement
        from sqlalchemy import event
        from sqlalchemy.engine import Engine
        import sqlite3

        @event.listens_for(Engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            if isinstance(dbapi_connection, sqlite3.Connection):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        db.create_all()
        logger.info("Database ready at %s", app.config['SQLALCHEMY_DATABASE_URI'])


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
