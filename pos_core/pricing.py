from typing import Iterable, List, Tuple
from .domain import Product, Tier, TierValidationError


# ============ Валидация пакетных цен ============


def validate_tiers(tiers: Iterable[Tier]) -> List[TierValidationError]:
    """
    Проверяет список пакетов цен, каждый пакет независимо:
    - количество <= 0
    - количество уже встречалось раньше (первое вхождение не помечается)
    - отрицательная цена
    Для одного пакета может вернуться несколько ошибок.
    """
    errors: List[TierValidationError] = []
    seen = set()

    for index, tier in enumerate(tiers):
        if tier.quantity <= 0:
            errors.append(
                TierValidationError(index, "quantity", "Quantity must be greater than 0")
            )

        if tier.quantity in seen:
            errors.append(
                TierValidationError(index, "quantity", "Quantity already exists")
            )
        seen.add(tier.quantity)

        if tier.total_price < 0:
            errors.append(
                TierValidationError(index, "total_price", "Price cannot be negative")
            )

    return errors


def normalize_tiers(tiers: Iterable[Tier]) -> Tuple[Tier, ...]:
    """Новый кортеж пакетов по возрастанию количества (без дедупликации)"""
    return tuple(sorted(tiers, key=lambda t: t.quantity))


# ============ Расчёт суммы строки ============


def calculate_line_total(product: Product, quantity: int) -> int:
    """
    Сумма строки корзины:
    - если есть пакет ровно на quantity штук, берём его total_price как есть
    - иначе price * quantity
    """
    tier = next((t for t in product.tiers if t.quantity == quantity), None)
    if tier is not None:
        return tier.total_price
    return product.price * quantity


def has_tier_pricing(product: Product) -> bool:
    return len(product.tiers) > 0


def format_rupiah(amount: int, symbol: str = "Rp") -> str:
    """12000 -> 'Rp 12.000'"""
    grouped = f"{abs(amount):,}".replace(",", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {grouped}"
