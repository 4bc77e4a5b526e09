"""Order service factory.

Provides get_order_service() / set_order_service() to swap implementations:
- FakeOrderService for development and testing (default)
- HttpOrderService when STOREFRONT_API_URL is set
"""

from storefront.config import load_settings
from storefront.orders.fake_adapter import FakeOrderService
from storefront.orders.http_adapter import HttpOrderService
from storefront.orders.port import OrderService

_current_service: OrderService | None = None


def get_order_service() -> OrderService:
    """Return the current order service."""
    global _current_service
    if _current_service is None:
        settings = load_settings()
        if settings.uses_remote_services:
            _current_service = HttpOrderService(settings.api_url, timeout=settings.http_timeout)
        else:
            _current_service = FakeOrderService()
    return _current_service


def set_order_service(service: OrderService) -> None:
    """Override the active order service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_order_service() -> None:
    """Reset to the configured default order service."""
    global _current_service
    _current_service = None
