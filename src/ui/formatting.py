# src/ui/formatting.py

"""Display helpers shared by the listing screens and the CLI."""

from datetime import datetime

from src.config.settings import Settings


def format_price(amount: float | None) -> str:
    """Render a price; an absent price shows as zero."""
    return f"{Settings.CURRENCY_SYMBOL}{(amount or 0.0):.2f}"


def format_discount(amount: float | None) -> str:
    """Render a discount, or an empty string when there is none."""
    if not amount or amount <= 0:
        return ""
    return f"{Settings.CURRENCY_SYMBOL}{amount:.2f}"


def format_date(value: str | None) -> str:
    """Render an ISO date/timestamp as ``YYYY-MM-DD``; ``N/A`` if absent."""
    if not value:
        return "N/A"
    try:
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError:
        return value.split("T")[0]


def or_na(value: str | None) -> str:
    return value or "N/A"
