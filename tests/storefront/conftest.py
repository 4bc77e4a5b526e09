import logging
from decimal import Decimal

import pytest
import structlog
from storefront.cart.cart import CartStore
from storefront.catalog.fake_adapter import FakeCatalog
from storefront.catalog.port import Product
from storefront.checkout.orchestrator import CheckoutOrchestrator
from storefront.orders.fake_adapter import FakeOrderService
from storefront.orders.modification import OrderEditor
from storefront.persistence.adapter import PersistenceAdapter
from storefront.persistence.memory_store import MemoryStore
from storefront.promo.fake_adapter import FakePromoService
from storefront.promo.validator import PromoCodeValidator

APPLE = Product(id="prod-a", name="Apples", price=Decimal("10.00"), unit="kg", category="fruit")
BREAD = Product(id="prod-b", name="Bread", price=Decimal("5.00"), unit="loaf", category="bakery")
CHEESE = Product(id="prod-c", name="Cheese", price=Decimal("7.50"), unit="block", category="dairy")


@pytest.fixture
def apple():
    return APPLE


@pytest.fixture
def bread():
    return BREAD


@pytest.fixture
def cheese():
    return CHEESE


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def persistence(store):
    return PersistenceAdapter(store, key_prefix="test")


@pytest.fixture
def catalog():
    return FakeCatalog([APPLE, BREAD, CHEESE])


@pytest.fixture
def promo_service():
    service = FakePromoService()
    service.add_rule("SAVE5", Decimal("5.00"), description="GHS 5 off")
    service.add_rule("BIG5", Decimal("5.00"), min_purchase_amount=Decimal("22.00"))
    service.add_rule("TENPCT", Decimal("10"), discount_type="percentage")
    return service


@pytest.fixture
def validator(promo_service):
    return PromoCodeValidator(promo_service)


@pytest.fixture
def order_service():
    return FakeOrderService()


@pytest.fixture
def cart(persistence, catalog):
    return CartStore(persistence, catalog=catalog)


@pytest.fixture
def checkout(cart, persistence, order_service, validator):
    orchestrator = CheckoutOrchestrator(cart, persistence, order_service, validator)
    yield orchestrator
    orchestrator.close()


@pytest.fixture
def editor(order_service, catalog, validator):
    order_editor = OrderEditor(order_service, catalog, validator)
    yield order_editor
    order_editor.close()


@pytest.fixture
def filled_cart(cart):
    """Cart of [Apples 10.00 x2, Bread 5.00 x1]: subtotal 25.00."""
    cart.add_item(APPLE)
    cart.add_item(APPLE)
    cart.add_item(BREAD)
    return cart


@pytest.fixture
def restore_logging():
    """Undo root handler and structlog changes made by logging setup."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
