"""
Display Formatting

Jinja filters that round computed values for display. Computed values are
never rounded anywhere else.
"""


def format_grams(value, places=1):
    """Format a gram amount, e.g. 62.04 -> '62.0'."""
    if value is None:
        return '-'
    return f"{value:.{places}f}"


def format_kcal(value):
    """Format an energy value with no decimals, e.g. 194.1 -> '194'."""
    if value is None:
        return '-'
    return f"{value:.0f}"


def format_percentage(value):
    """Format a percentage with one decimal, e.g. 50 -> '50.0'."""
    if value is None:
        return '-'
    return f"{value:.1f}"
