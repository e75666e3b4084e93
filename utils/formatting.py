"""
utils/formatting.py
-------------------
Small display helpers shared by the report builders.
"""

from config import CURRENCY_SYMBOL


def format_amount(amount: float) -> str:
    """Render a per-item amount as stored, minus a trailing '.0': 45.0 -> '45', 9.999 -> '9.999'."""
    text = repr(float(amount))
    return text[:-2] if text.endswith(".0") else text


def format_money(amount: float) -> str:
    """Render a total with the currency symbol in front: '€12.50'."""
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]
