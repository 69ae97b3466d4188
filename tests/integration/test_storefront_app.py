"""
Integration tests for the storefront composition root.
"""

import logging

import pytest

from mock_restaurant.database import order_db
from mock_restaurant.gateway import SimulatedCheckoutWidget
from storefront.app import build_storefront, configure_logging
from storefront.core.config import Settings
from storefront.models import PaymentMethod
from storefront.notifications import Notifier

TEST_SERVER = "http://testserver"


@pytest.fixture
def settings():
    return Settings(
        api_base_url=TEST_SERVER,
        gateway_key_id="rzp_test_app",
        merchant_name="Spice Route Kitchen",
    )


@pytest.fixture
async def storefront(settings, transport, widget, navigations):
    app = build_storefront(
        widget,
        settings=settings,
        navigate=navigations.append,
        transport=transport,
    )
    yield app
    await app.close()


class TestBuildStorefront:
    """Tests for wiring and the signed-out/signed-in lifecycle."""

    def test_shares_one_notifier(self, settings, transport):
        notifier = Notifier()
        app = build_storefront(SimulatedCheckoutWidget(), settings=settings, notifier=notifier, transport=transport)

        assert app.notifier is notifier
        assert app.payments.key_id == "rzp_test_app"
        assert app.payments.merchant_name == "Spice Route Kitchen"

    async def test_start_signed_out(self, storefront):
        await storefront.start()

        assert storefront.cart.items == []
        assert storefront.checkout.restaurant_open is True
        assert storefront.notifier.history == []

    async def test_sign_in_then_order_online(self, storefront, widget, token, address, location, navigations):
        storefront.sign_in(token)
        await storefront.client.add_to_cart("dish-002", quantity=2)
        await storefront.cart.fetch_cart(location)
        storefront.checkout.select_address(address)

        result = await storefront.checkout.place_order(PaymentMethod.ONLINE)

        assert result.succeeded
        assert navigations == [f"/orders/{result.order_id}"]
        assert storefront.cart.items == []
        assert widget.opened[0].key == "rzp_test_app"
        assert widget.opened[0].amount == 24000
        assert len(order_db.list_for_user("customer-1")) == 1


class TestConfigureLogging:

    def test_debug_overrides_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging(Settings(debug=True, log_level="ERROR"))
        configure_logging(Settings(log_level="warning"))

        assert calls[0]["level"] == logging.DEBUG
        assert calls[1]["level"] == logging.WARNING
