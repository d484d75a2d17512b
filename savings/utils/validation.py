"""
Amount input parsing for request models
"""
import re
from decimal import Decimal, InvalidOperation

_GROUPING = re.compile(r"[\s_$€£]")


def normalize_amount_input(value: str) -> str:
    """
    Нормализовать ввод суммы

    Убирает пробелы, подчёркивания и знак валюты, запятую заменяет на точку.

    Example:
        >>> normalize_amount_input("$ 1 200,50")
        "1200.50"
    """
    return _GROUPING.sub("", value.strip()).replace(",", ".")


def parse_amount(value: str, max_decimal_places: int = 2) -> Decimal:
    """
    Разобрать денежную сумму

    Raises:
        ValueError: некорректная сумма или больше max_decimal_places знаков
    """
    normalized = normalize_amount_input(value)

    try:
        amount = Decimal(normalized)
    except (InvalidOperation, ValueError):
        raise ValueError("Некорректная сумма")

    if not amount.is_finite():
        raise ValueError("Некорректная сумма")

    if not re.fullmatch(rf"-?\d+(\.\d{{1,{max_decimal_places}}})?", normalized):
        raise ValueError(f"Максимум {max_decimal_places} знака после запятой")

    return amount


def validate_and_normalize_amount(value: str, max_decimal_places: int = 2) -> str:
    """
    Валидировать сумму для pydantic field_validator

    Example:
        >>> validate_and_normalize_amount("100,50")
        "100.50"
    """
    return str(parse_amount(value, max_decimal_places))
