"""
Money and percent formatting for goal cards and API payloads.

Usage:
    from savings.utils.money import format_money

    format_money(15000, "USD")     -> "$15,000"
    format_money(1200.5, "EUR")    -> "1,200 EUR"
    format_money2(-42, "USD")      -> "-$42.00"
"""
from decimal import Decimal, ROUND_HALF_UP

# Символ перед суммой; для остальных валют - ISO-код после суммы
_CURRENCY_PREFIX = {
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
}


def format_money(amount, currency: str = "USD", decimals: int = 0) -> str:
    """
    Отформатировать сумму с разделителями тысяч

    Args:
        amount: число (int / float / Decimal / str)
        currency: ISO-код валюты
        decimals: знаков после запятой (0 - целое, 2 - центы)

    Returns:
        "$15,000" / "1,200 CHF"
    """
    amount = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-decimals)
    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if amount < 0 else ""
    body = f"{abs(amount):,.{decimals}f}"

    prefix = _CURRENCY_PREFIX.get(currency)
    if prefix:
        return f"{sign}{prefix}{body}"
    return f"{sign}{body} {currency}"


def format_money2(amount, currency: str = "USD") -> str:
    """Формат с 2 знаками после запятой (для балансов счетов)."""
    return format_money(amount, currency, decimals=2)


def format_percent(value, decimals: int = 0) -> str:
    """Progress value (0-100) as "42%"."""
    quantum = Decimal(1).scaleb(-decimals)
    return f"{Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)}%"
