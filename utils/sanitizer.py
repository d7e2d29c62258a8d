"""
Input Sanitization Module

Normalizes user supplied names, descriptions and search terms before
they are validated and stored. HTML escaping is left to Jinja's
autoescaping at render time.
"""

import re

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
_LINE_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')


def sanitize_text(text, max_length=200):
    """
    Sanitize a single line of text such as an ingredient or recipe name.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 200)

    Returns:
        Sanitized string, empty if nothing usable remains
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    # Remove control characters and null bytes
    text = _LINE_CONTROL_CHARS.sub('', text)

    # Collapse multiple spaces
    text = re.sub(r'\s+', ' ', text).strip()

    # Truncate if too long
    if len(text) > max_length:
        text = text[:max_length].rstrip()

    return text


def sanitize_description(text, max_length=5000):
    """
    Sanitize free text such as a recipe or day plan description.

    Preserves newlines for formatting.

    Returns:
        Sanitized text, or None when empty so optional columns stay NULL
    """
    if not text:
        return None

    if not isinstance(text, str):
        text = str(text)

    text = text.replace('\r\n', '\n')
    text = _CONTROL_CHARS.sub('', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text or None


def sanitize_search(term, max_length=100):
    """Sanitize a search query string; None and blank become ''."""
    return sanitize_text(term, max_length=max_length)
