from functools import reduce
from typing import Tuple
from .ftypes import Either
from .domain import CartLine, CheckoutRequest, LocalCart, Product
from .pricing import calculate_line_total
from .catalog import find_by_sku


# ============ Операции с корзиной (чистые функции) ============


def _replace_line(cart: LocalCart, product_id: int, quantity: int) -> LocalCart:
    return LocalCart(
        lines=tuple(
            CartLine(line.product, quantity) if line.product.id == product_id else line
            for line in cart.lines
        )
    )


def quantity_in_cart(cart: LocalCart, product_id: int) -> int:
    return next(
        (line.quantity for line in cart.lines if line.product.id == product_id), 0
    )


def add_to_cart(cart: LocalCart, product: Product) -> Either[dict, LocalCart]:
    """
    Добавляет одну единицу товара → Either[error, LocalCart]
    Проверяет остаток на складе до обращения к серверу
    """
    if product.stock <= 0:
        return Either.fail("Product is out of stock")

    current = quantity_in_cart(cart, product.id)
    if current == 0:
        return Either.right(LocalCart(lines=cart.lines + (CartLine(product, 1),)))

    if current + 1 > product.stock:
        return Either.fail("Insufficient stock")

    return Either.right(_replace_line(cart, product.id, current + 1))


def update_quantity(
    cart: LocalCart, product_id: int, delta: int
) -> Either[dict, LocalCart]:
    """Меняет количество на delta; при количестве <= 0 строка удаляется"""
    line = next((ln for ln in cart.lines if ln.product.id == product_id), None)
    if line is None:
        return Either.right(cart)

    new_qty = line.quantity + delta
    if new_qty <= 0:
        return remove_from_cart(cart, product_id)
    if new_qty > line.product.stock:
        return Either.fail("Insufficient stock")

    return Either.right(_replace_line(cart, product_id, new_qty))


def remove_from_cart(cart: LocalCart, product_id: int) -> Either[dict, LocalCart]:
    filtered = tuple(filter(lambda ln: ln.product.id != product_id, cart.lines))
    return Either.right(LocalCart(lines=filtered))


def scan_sku(
    cart: LocalCart, products: Tuple[Product, ...], sku: str
) -> Either[dict, LocalCart]:
    """Добавление товара сканером штрихкода (поиск по SKU)"""
    code = (sku or "").strip()
    if not code:
        return Either.fail("SKU is empty")

    found = find_by_sku(products, code)
    if found.is_none():
        return Either.fail(f'SKU "{code}" not found')

    product = found.get_or_else(None)
    if product.stock <= 0:
        return Either.fail(f'Product "{product.name}" is out of stock')
    if quantity_in_cart(cart, product.id) + 1 > product.stock:
        return Either.fail(f'Insufficient stock for "{product.name}"')

    return add_to_cart(cart, product)


# ============ Суммы ============


def line_total(line: CartLine) -> int:
    return calculate_line_total(line.product, line.quantity)


def cart_total(cart: LocalCart) -> int:
    """Сумма корзины с учётом пакетных цен"""
    return reduce(lambda acc, line: acc + line_total(line), cart.lines, 0)


def compute_change(
    total: int, payment_method: str, cash_received: int, cash_method: str = "Tunai"
) -> int:
    if payment_method != cash_method:
        return 0
    return max(0, cash_received - total)


# ============ Проверка перед оформлением ============


def validate_checkout(
    cart: LocalCart,
    payment_method: str,
    cash_received: int = 0,
    cash_method: str = "Tunai",
) -> Either[dict, CheckoutRequest]:
    """
    Сверка корзины перед отправкой на сервер → Either[error, CheckoutRequest]
    Для безналичной оплаты cash_received всегда 0
    """
    if not cart.lines:
        return Either.fail("Cart is empty")
    if not payment_method:
        return Either.fail("Select a payment method")

    total = cart_total(cart)
    is_cash = payment_method == cash_method
    if is_cash and cash_received < total:
        return Either.fail("Cash received is less than the total")

    cash = cash_received if is_cash else 0
    return Either.right(
        CheckoutRequest(
            lines=cart.lines,
            payment_method=payment_method,
            cash_received=cash,
            total=total,
            change=compute_change(total, payment_method, cash, cash_method),
        )
    )
