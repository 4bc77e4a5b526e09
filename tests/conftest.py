import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pin the environment so settings and logging pick the test profile, and
    keep every external service on its in-memory fake.
    """
    os.environ["STOREFRONT_ENV"] = session.config.option.env
    os.environ.pop("STOREFRONT_API_URL", None)
    os.environ.pop("STOREFRONT_STORAGE", None)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to reset the service and store singletons after every test"""
    yield

    from storefront.catalog import reset_catalog
    from storefront.orders import reset_order_service
    from storefront.persistence import reset_store
    from storefront.promo import reset_promo_service

    reset_catalog()
    reset_promo_service()
    reset_order_service()
    reset_store()
