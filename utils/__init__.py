# Utility modules for Macro Planner
from .sanitizer import sanitize_text, sanitize_description, sanitize_search
from .formatting import format_grams, format_kcal, format_percentage
