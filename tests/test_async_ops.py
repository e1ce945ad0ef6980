import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import asyncio
import logging
import pytest
from pos_core.async_ops import (
    save_product_async,
    delete_product_async,
    update_settings_async,
    submit_checkout_async,
    load_dashboard_async,
    run_submit_checkout,
    run_load_dashboard,
)
from pos_core.backend import BackendError
from pos_core.domain import (
    CartLine,
    CheckoutRequest,
    Product,
    ProductDraft,
    StoreSettings,
    Tier,
    Transaction,
)


class FakeBackend:
    """Удалённый сервис в памяти: записывает вызовы, может падать"""

    def __init__(self, products=(), transactions=(), fail_on=None):
        self.products = list(products)
        self.transactions = list(transactions)
        self.settings = StoreSettings(store_name="Toko")
        self.fail_on = fail_on
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name == self.fail_on:
            raise RuntimeError(f"{name} rejected")

    async def add_or_update_product(self, id, name, sku, unit, price, stock, tiers):
        self._record("add_or_update_product", id, name, tiers)
        return id if id is not None else 100

    async def delete_product(self, id):
        self._record("delete_product", id)

    async def get_all_products(self):
        self._record("get_all_products")
        return list(self.products)

    async def get_product(self, id):
        self._record("get_product", id)
        return next(p for p in self.products if p.id == id)

    async def add_to_cart(self, product_id, quantity):
        self._record("add_to_cart", product_id, quantity)

    async def get_current_cart(self):
        self._record("get_current_cart")
        return None

    async def checkout(self, payment_method, cash_received):
        self._record("checkout", payment_method, cash_received)
        self.transactions.append(
            Transaction(id=len(self.transactions) + 1, timestamp=10**18, total_amount=1)
        )

    async def get_all_sales_reports(self):
        self._record("get_all_sales_reports")
        return list(self.transactions)

    async def get_store_settings(self):
        self._record("get_store_settings")
        return self.settings

    async def update_store_settings(self, store_name, receipt_footer):
        self._record("update_store_settings", store_name, receipt_footer)


@pytest.fixture
def products():
    return (
        Product(id=1, name="Kopi", unit="pcs", price=3000, stock=10, tiers=(Tier(5, 12000),)),
        Product(id=2, name="Gula", unit="kg", price=15000, stock=3),
    )


@pytest.fixture
def request_(products):
    return CheckoutRequest(
        lines=(CartLine(products[0], 5), CartLine(products[1], 2)),
        payment_method="Tunai",
        cash_received=50000,
        total=42000,
        change=8000,
    )


@pytest.mark.asyncio
async def test_submit_checkout_pushes_lines_in_order(request_):
    backend = FakeBackend(
        transactions=(Transaction(id=1, timestamp=5, total_amount=10),)
    )
    latest = await submit_checkout_async(backend, request_)

    assert backend.calls[:3] == [
        ("add_to_cart", 1, 5),
        ("add_to_cart", 2, 2),
        ("checkout", "Tunai", 50000),
    ]
    assert latest.get_or_else(None).id == 2


@pytest.mark.asyncio
async def test_submit_checkout_surfaces_backend_error(request_, caplog):
    backend = FakeBackend(fail_on="checkout")

    with caplog.at_level(logging.ERROR, logger="pos_core.async_ops"):
        with pytest.raises(BackendError) as exc_info:
            await submit_checkout_async(backend, request_)

    assert exc_info.value.operation == "checkout"
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert "backend.checkout failed" in caplog.text
    # повторных попыток нет
    assert [c[0] for c in backend.calls].count("checkout") == 1


@pytest.mark.asyncio
async def test_submit_checkout_stops_on_failed_line(request_):
    backend = FakeBackend(fail_on="add_to_cart")
    with pytest.raises(BackendError):
        await submit_checkout_async(backend, request_)
    assert backend.calls == [("add_to_cart", 1, 5)]


@pytest.mark.asyncio
async def test_save_and_delete_product():
    backend = FakeBackend()
    draft = ProductDraft(
        id=None, name="Kopi", sku=None, unit="pcs", price=3000, stock=5, tiers=(Tier(5, 12000),)
    )

    assert await save_product_async(backend, draft) == 100
    await delete_product_async(backend, 100)
    assert backend.calls == [
        ("add_or_update_product", None, "Kopi", (Tier(5, 12000),)),
        ("delete_product", 100),
    ]


@pytest.mark.asyncio
async def test_update_settings():
    backend = FakeBackend()
    await update_settings_async(backend, StoreSettings("Toko Maju", None))
    assert backend.calls == [("update_store_settings", "Toko Maju", None)]


@pytest.mark.asyncio
async def test_load_dashboard(products):
    backend = FakeBackend(
        products=products,
        transactions=(
            Transaction(id=1, timestamp=1, total_amount=10),
            Transaction(id=2, timestamp=3, total_amount=20),
        ),
    )
    data = await load_dashboard_async(backend)

    assert data["products"] == products
    assert [t.id for t in data["transactions"]] == [2, 1]
    assert data["settings"].store_name == "Toko"


def test_sync_wrappers(products, request_):
    backend = FakeBackend(products=products)

    latest = run_submit_checkout(backend, request_)
    data = run_load_dashboard(backend)

    assert latest.get_or_else(None).id == 1
    assert len(data["transactions"]) == 1


def test_load_dashboard_error_is_wrapped():
    with pytest.raises(BackendError) as exc_info:
        run_load_dashboard(FakeBackend(fail_on="get_store_settings"))
    assert "get_store_settings failed" in str(exc_info.value)


class SyncFailingBackend(FakeBackend):
    """add_to_cart падает сразу при вызове, ещё до создания корутины"""

    def add_to_cart(self, product_id, quantity):
        raise ConnectionError("service unreachable")


class SlowProductsBackend(FakeBackend):
    """get_all_products висит, пока его не отменят"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.products_cancelled = False

    async def get_all_products(self):
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            self.products_cancelled = True
            raise
        return []


@pytest.mark.asyncio
async def test_synchronous_backend_failure_is_wrapped(request_):
    with pytest.raises(BackendError) as exc_info:
        await submit_checkout_async(SyncFailingBackend(), request_)

    assert exc_info.value.operation == "add_to_cart"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_load_dashboard_cancels_remaining_calls_on_failure():
    backend = SlowProductsBackend(fail_on="get_store_settings")

    with pytest.raises(BackendError) as exc_info:
        await asyncio.wait_for(load_dashboard_async(backend), timeout=5)

    assert exc_info.value.operation == "get_store_settings"
    assert backend.products_cancelled
