from typing import List, Optional, Protocol, Tuple
from .domain import Product, RemoteCart, StoreSettings, Tier, Transaction


class PosError(Exception):
    """Базовая ошибка клиента POS"""


class BackendError(PosError):
    """
    Ошибка удалённого сервиса данных.
    Клиент не повторяет вызов и не разбирает причину, только передаёт её выше.
    """

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class Backend(Protocol):
    """Контракт удалённого сервиса товаров, корзины, транзакций и настроек"""

    async def add_or_update_product(
        self,
        id: Optional[int],
        name: str,
        sku: Optional[str],
        unit: str,
        price: int,
        stock: int,
        tiers: Tuple[Tier, ...],
    ) -> int: ...

    async def delete_product(self, id: int) -> None: ...

    async def get_all_products(self) -> List[Product]: ...

    async def get_product(self, id: int) -> Product: ...

    async def add_to_cart(self, product_id: int, quantity: int) -> None: ...

    async def get_current_cart(self) -> Optional[RemoteCart]: ...

    async def checkout(self, payment_method: str, cash_received: int) -> None: ...

    async def get_all_sales_reports(self) -> List[Transaction]: ...

    async def get_store_settings(self) -> StoreSettings: ...

    async def update_store_settings(
        self, store_name: str, receipt_footer: Optional[str]
    ) -> None: ...
