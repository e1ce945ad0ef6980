import asyncio
import logging
from typing import Awaitable, Callable, Dict, TypeVar
from .backend import Backend, BackendError
from .domain import CheckoutRequest, ProductDraft, StoreSettings
from .ftypes import Maybe
from .lazy import recent_first

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _call(operation: str, fn: Callable[[], Awaitable[T]]) -> T:
    """
    Один удалённый вызов: без повторов, любая ошибка → BackendError.
    fn вызывается внутри try, чтобы синхронные исключения тоже оборачивались.
    """
    logger.debug(f"Calling backend.{operation}")
    try:
        return await fn()
    except BackendError:
        raise
    except Exception as exc:
        logger.error(f"backend.{operation} failed: {exc}")
        raise BackendError(operation, exc) from exc


# ============ Товары и настройки ============


async def save_product_async(backend: Backend, draft: ProductDraft) -> int:
    """Создаёт или обновляет товар, возвращает его id"""
    product_id = await _call(
        "add_or_update_product",
        lambda: backend.add_or_update_product(
            draft.id,
            draft.name,
            draft.sku,
            draft.unit,
            draft.price,
            draft.stock,
            draft.tiers,
        ),
    )
    logger.info(f"Saved product {product_id} ({draft.name}, {len(draft.tiers)} tiers)")
    return product_id


async def delete_product_async(backend: Backend, product_id: int) -> None:
    await _call("delete_product", lambda: backend.delete_product(product_id))
    logger.info(f"Deleted product {product_id}")


async def update_settings_async(backend: Backend, settings: StoreSettings) -> None:
    await _call(
        "update_store_settings",
        lambda: backend.update_store_settings(
            settings.store_name, settings.receipt_footer
        ),
    )
    logger.info(f"Store settings updated: {settings.store_name}")


# ============ Оформление заказа ============


async def submit_checkout_async(backend: Backend, request: CheckoutRequest) -> Maybe:
    """
    Переносит локальную корзину на сервер построчно, оформляет заказ
    и возвращает последнюю транзакцию (Maybe) для показа чека.
    Строки отправляются последовательно, в порядке корзины.
    """
    for line in request.lines:
        await _call(
            "add_to_cart",
            lambda: backend.add_to_cart(line.product.id, line.quantity),
        )

    await _call(
        "checkout",
        lambda: backend.checkout(request.payment_method, request.cash_received),
    )
    logger.info(
        f"Checkout done: {len(request.lines)} lines, total {request.total}, "
        f"method {request.payment_method}"
    )

    transactions = await _call(
        "get_all_sales_reports", backend.get_all_sales_reports
    )
    return Maybe.first(recent_first(transactions), lambda t: True)


# ============ Загрузка данных ============


async def load_dashboard_async(backend: Backend) -> Dict:
    """Товары, транзакции (от новых к старым) и настройки, параллельно"""
    tasks = [
        asyncio.ensure_future(_call("get_all_products", backend.get_all_products)),
        asyncio.ensure_future(
            _call("get_all_sales_reports", backend.get_all_sales_reports)
        ),
        asyncio.ensure_future(_call("get_store_settings", backend.get_store_settings)),
    ]
    try:
        products, transactions, settings = await asyncio.gather(*tasks)
    except BaseException:
        # при первой ошибке остальные вызовы отменяются и дожидаются завершения
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    logger.info(
        f"Loaded {len(products)} products and {len(transactions)} transactions"
    )
    return {
        "products": tuple(products),
        "transactions": recent_first(transactions),
        "settings": settings,
    }


# ============ Синхронные обёртки ============


def run_submit_checkout(backend: Backend, request: CheckoutRequest) -> Maybe:
    return asyncio.run(submit_checkout_async(backend, request))


def run_load_dashboard(backend: Backend) -> Dict:
    return asyncio.run(load_dashboard_async(backend))
