from datetime import date, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple
from .config import PosConfig
from .domain import (
    CheckoutRequest,
    LocalCart,
    Product,
    ReportBucket,
    StoreSettings,
    Transaction,
)
from .ftypes import Either, Maybe
from .catalog import find_by_sku, safe_product, search_products, stock_status
from .lazy import iter_transactions_between, recent_first
from .receipt import Receipt, build_receipt, render_receipt
from .transforms import validate_checkout
from Sales_Reports.report import (
    group_transactions_by_period,
    sales_summary,
    total_sales,
)


class CatalogService:
    """Фасад для работы с каталогом"""

    def __init__(self, products: Tuple[Product, ...], low_stock_threshold: int = 10):
        self.products = products
        self.low_stock_threshold = low_stock_threshold

    @classmethod
    def from_config(
        cls, products: Tuple[Product, ...], config: PosConfig
    ) -> "CatalogService":
        return cls(products, config.low_stock_threshold)

    def search(self, term: str) -> Tuple[Product, ...]:
        return search_products(self.products, term)

    def by_sku(self, sku: str) -> Maybe[Product]:
        return find_by_sku(self.products, sku)

    def by_id(self, pid: int) -> Maybe[Product]:
        return safe_product(self.products, pid)

    def status(self, product: Product) -> str:
        return stock_status(product, self.low_stock_threshold)

    def low_stock(self) -> Tuple[Product, ...]:
        """Товары, которые заканчиваются или закончились"""
        return tuple(filter(lambda p: self.status(p) != "available", self.products))


class TransactionService:
    """Фасад для истории транзакций (хранятся от новых к старым)"""

    def __init__(
        self,
        transactions: Tuple[Transaction, ...],
        tz: tzinfo = timezone.utc,
        cash_method: str = "Tunai",
        currency_symbol: str = "Rp",
    ):
        self.transactions = recent_first(transactions)
        self.tz = tz
        self.cash_method = cash_method
        self.currency_symbol = currency_symbol

    @classmethod
    def from_config(
        cls, transactions: Tuple[Transaction, ...], config: PosConfig
    ) -> "TransactionService":
        return cls(
            transactions, config.zone(), config.cash_method, config.currency_symbol
        )

    def recent(self) -> Tuple[Transaction, ...]:
        return self.transactions

    def between(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> Tuple[Transaction, ...]:
        return tuple(
            iter_transactions_between(self.transactions, start_date, end_date, self.tz)
        )

    def find(self, transaction_id: int) -> Maybe[Transaction]:
        return Maybe.first(self.transactions, lambda t: t.id == transaction_id)

    def latest(self) -> Maybe[Transaction]:
        return Maybe.first(self.transactions, lambda t: True)

    def total_revenue(self) -> int:
        return total_sales(self.transactions)

    def receipt(
        self,
        transaction_id: int,
        settings: StoreSettings,
        products: Iterable[Product],
    ) -> Maybe[Receipt]:
        """Чек транзакции в часовом поясе магазина"""
        return self.find(transaction_id).map(
            lambda tx: build_receipt(tx, settings, products, self.tz, self.cash_method)
        )

    def receipt_text(
        self,
        transaction_id: int,
        settings: StoreSettings,
        products: Iterable[Product],
    ) -> Maybe[List[str]]:
        return self.receipt(transaction_id, settings, products).map(
            lambda r: render_receipt(r, self.currency_symbol)
        )


class CheckoutService:
    """Проверка корзины с методами оплаты из настроек"""

    def __init__(
        self,
        payment_methods: Tuple[str, ...] = ("Tunai", "Transfer", "QRIS"),
        cash_method: str = "Tunai",
    ):
        self.payment_methods = payment_methods
        self.cash_method = cash_method

    @classmethod
    def from_config(cls, config: PosConfig) -> "CheckoutService":
        return cls(config.payment_methods, config.cash_method)

    def validate(
        self, cart: LocalCart, payment_method: str, cash_received: int = 0
    ) -> Either[dict, CheckoutRequest]:
        if payment_method and payment_method not in self.payment_methods:
            return Either.fail(f'Unknown payment method "{payment_method}"')
        return validate_checkout(cart, payment_method, cash_received, self.cash_method)


class ReportService:
    """Отчёты по продажам"""

    def __init__(self, transaction_service: TransactionService):
        self.transactions = transaction_service

    def by_period(self, granularity: str) -> List[ReportBucket]:
        return group_transactions_by_period(
            self.transactions.recent(), granularity, self.transactions.tz
        )

    def summary(self) -> dict:
        return sales_summary(self.transactions.recent())
