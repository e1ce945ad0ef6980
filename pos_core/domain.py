from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Tier:
    quantity: int
    total_price: int  # цена за ровно quantity штук


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    unit: str
    price: int  # рупии, без дробной части
    stock: int
    tiers: Tuple[Tier, ...] = ()
    sku: Optional[str] = None
    created_at: int = 0  # наносекунды
    updated_at: int = 0


@dataclass(frozen=True)
class TransactionItem:
    product_id: int
    quantity: int
    unit_price: int
    line_total: int


@dataclass(frozen=True)
class Transaction:
    id: int
    timestamp: int  # наносекунды с эпохи
    total_amount: int
    payment_method: str = ""
    cash_received: int = 0
    change: int = 0
    items: Tuple[TransactionItem, ...] = ()


@dataclass(frozen=True)
class RemoteCart:
    """Корзина на стороне удалённого сервиса (только чтение)"""

    total_amount: int
    items: Tuple[TransactionItem, ...]


@dataclass(frozen=True)
class StoreSettings:
    store_name: str
    receipt_footer: Optional[str] = None


@dataclass(frozen=True)
class TierValidationError:
    index: int
    field: str  # "quantity" | "total_price"
    message: str


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int


@dataclass(frozen=True)
class LocalCart:
    lines: Tuple[CartLine, ...] = ()


@dataclass(frozen=True)
class CheckoutRequest:
    lines: Tuple[CartLine, ...]
    payment_method: str
    cash_received: int
    total: int
    change: int


@dataclass(frozen=True)
class ProductDraft:
    id: Optional[int]
    name: str
    sku: Optional[str]
    unit: str
    price: int
    stock: int
    tiers: Tuple[Tier, ...]


@dataclass(frozen=True)
class ReportBucket:
    period: str
    start: datetime
    total: int
    transaction_count: int
