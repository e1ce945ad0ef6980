import math
from typing import Callable, Iterable, Optional, Tuple
from .ftypes import Maybe, Either
from .domain import Product, ProductDraft, StoreSettings, Tier
from .pricing import normalize_tiers, validate_tiers


# ============ Поиск товаров ============


def matches_term(term: str) -> Callable[[Product], bool]:
    """Фильтр по подстроке в названии или SKU (без учёта регистра)"""
    needle = (term or "").lower()
    return lambda p: needle in p.name.lower() or (
        p.sku is not None and needle in p.sku.lower()
    )


def search_products(products: Tuple[Product, ...], term: str) -> Tuple[Product, ...]:
    return tuple(filter(matches_term(term), products))


def find_by_sku(products: Iterable[Product], sku: str) -> Maybe[Product]:
    code = (sku or "").strip().lower()
    return Maybe.first(products, lambda p: bool(p.sku) and p.sku.lower() == code)


def safe_product(products: Iterable[Product], pid: int) -> Maybe[Product]:
    return Maybe.first(products, lambda p: p.id == pid)


def stock_status(product: Product, low_threshold: int = 10) -> str:
    if product.stock <= 0:
        return "out_of_stock"
    if product.stock < low_threshold:
        return "low"
    return "available"


# ============ Форма товара ============


def parse_tier_rows(
    rows: Iterable[Tuple[str, str]],
) -> Either[dict, Tuple[Tier, ...]]:
    """
    Разбирает строки формы (количество, цена пакета).
    Полностью пустые строки пропускаются, цена округляется вниз.
    """
    tiers = []
    for raw_qty, raw_price in rows:
        qty_text, price_text = (raw_qty or "").strip(), (raw_price or "").strip()
        if not qty_text and not price_text:
            continue
        try:
            quantity = int(qty_text)
            price = float(price_text)
        except ValueError:
            return Either.fail("All package prices must be valid numbers")
        if not math.isfinite(price):
            return Either.fail("All package prices must be valid numbers")
        tiers.append(Tier(quantity=quantity, total_price=math.floor(price)))
    return Either.right(tuple(tiers))


def _parse_price(text: str) -> Optional[int]:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return math.floor(value)


def _parse_stock(text: str) -> Optional[int]:
    try:
        value = int(text)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def validate_product_form(
    name: str,
    unit: str,
    price: str,
    stock: str,
    tier_rows: Iterable[Tuple[str, str]] = (),
    product_id: Optional[int] = None,
    sku: Optional[str] = None,
) -> Either[dict, ProductDraft]:
    """
    Проверяет форму товара → Either[error, ProductDraft]
    При ошибках в пакетах Left содержит ещё и "tier_errors"
    """
    if not (name or "").strip():
        return Either.fail("Product name is required")
    if not (unit or "").strip():
        return Either.fail("Unit is required")

    price_value = _parse_price(price)
    if price_value is None:
        return Either.fail("Price must be a non-negative number")

    stock_value = _parse_stock(stock)
    if stock_value is None:
        return Either.fail("Stock must be a non-negative integer")

    parsed = parse_tier_rows(tier_rows)
    if parsed.is_left:
        return parsed

    tiers = parsed.get_or_else(())
    tier_errors = validate_tiers(tiers)
    if tier_errors:
        return Either.fail(
            "Some package prices are invalid. Please check them.",
            tier_errors=tier_errors,
        )

    return Either.right(
        ProductDraft(
            id=product_id,
            name=name.strip(),
            sku=(sku or "").strip() or None,
            unit=unit.strip(),
            price=price_value,
            stock=stock_value,
            tiers=normalize_tiers(tiers),
        )
    )


# ============ Настройки магазина ============


def validate_store_settings(
    store_name: str, receipt_footer: Optional[str] = None
) -> Either[dict, StoreSettings]:
    name = (store_name or "").strip()
    if not name:
        return Either.fail("Store name is required")
    footer = (receipt_footer or "").strip() or None
    return Either.right(StoreSettings(store_name=name, receipt_footer=footer))
