from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Iterable, List, Optional, Tuple
from .domain import Product, StoreSettings, Transaction
from .pricing import format_rupiah
from .timeutils import dt_from_nanos


@dataclass(frozen=True)
class ReceiptLine:
    name: str
    quantity: int
    unit_price: int
    line_total: int


@dataclass(frozen=True)
class Receipt:
    store_name: str
    number: str
    date: str
    time: str
    payment_method: str
    lines: Tuple[ReceiptLine, ...]
    total: int
    cash_received: Optional[int]
    change: Optional[int]
    footer: Optional[str]


def format_transaction_number(transaction_id: int) -> str:
    """42 -> '#000042'"""
    return f"#{transaction_id:06d}"


def build_receipt(
    transaction: Transaction,
    settings: StoreSettings,
    products: Iterable[Product],
    tz: tzinfo = timezone.utc,
    cash_method: str = "Tunai",
) -> Receipt:
    """
    Данные чека по транзакции. Наличные и сдача показываются только
    при оплате наличными и ненулевой внесённой сумме.
    """
    names = {p.id: p.name for p in products}
    when = dt_from_nanos(transaction.timestamp, tz)
    show_cash = (
        transaction.payment_method == cash_method and transaction.cash_received > 0
    )

    return Receipt(
        store_name=settings.store_name,
        number=format_transaction_number(transaction.id),
        date=when.strftime("%d %b %Y"),
        time=when.strftime("%H:%M:%S"),
        payment_method=transaction.payment_method,
        lines=tuple(
            ReceiptLine(
                name=names.get(item.product_id, f"Product #{item.product_id}"),
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in transaction.items
        ),
        total=transaction.total_amount,
        cash_received=transaction.cash_received if show_cash else None,
        change=transaction.change if show_cash else None,
        footer=settings.receipt_footer or None,
    )


def render_receipt(receipt: Receipt, symbol: str = "Rp") -> List[str]:
    """Текст чека построчно"""

    def money(amount: int) -> str:
        return format_rupiah(amount, symbol)

    lines = [
        receipt.store_name,
        f"Transaction ID: {receipt.number}",
        f"Date: {receipt.date}",
        f"Time: {receipt.time}",
        f"Payment: {receipt.payment_method}",
        "",
    ]
    for line in receipt.lines:
        lines.append(line.name)
        lines.append(
            f"  {line.quantity} x {money(line.unit_price)} = {money(line.line_total)}"
        )
    lines += ["", f"TOTAL: {money(receipt.total)}"]

    if receipt.cash_received is not None:
        lines.append(f"Cash: {money(receipt.cash_received)}")
        lines.append(f"Change: {money(receipt.change or 0)}")
    if receipt.footer:
        lines += ["", receipt.footer]

    lines.append("Thank you for your purchase!")
    return lines
