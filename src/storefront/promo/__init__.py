"""Promo service factory.

Provides get_promo_service() / set_promo_service() to swap implementations:
- FakePromoService for development and testing (default)
- HttpPromoService when STOREFRONT_API_URL is set
"""

from storefront.config import load_settings
from storefront.promo.fake_adapter import FakePromoService
from storefront.promo.http_adapter import HttpPromoService
from storefront.promo.port import PromoService

_current_service: PromoService | None = None


def get_promo_service() -> PromoService:
    """Return the current promo service."""
    global _current_service
    if _current_service is None:
        settings = load_settings()
        if settings.uses_remote_services:
            _current_service = HttpPromoService(settings.api_url, timeout=settings.http_timeout)
        else:
            _current_service = FakePromoService()
    return _current_service


def set_promo_service(service: PromoService) -> None:
    """Override the active promo service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_promo_service() -> None:
    """Reset to the configured default promo service."""
    global _current_service
    _current_service = None
