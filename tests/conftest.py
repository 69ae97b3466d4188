import pytest
import httpx

from mock_restaurant.main import app
from mock_restaurant.database import menu_db, reset_databases
from mock_restaurant.gateway import SimulatedCheckoutWidget
from mock_restaurant.security.auth import issue_token
from storefront.models import DeliveryAddress, DeliveryLocation, ProductRef
from storefront.notifications import Notifier
from storefront.services import (
    CartStore,
    CheckoutOrchestrator,
    CouponEngine,
    PaymentGatewayAdapter,
    RestaurantApiClient,
)

TEST_SERVER = "http://testserver"
CUSTOMER_ID = "customer-1"

# Drop point at the restaurant itself: inside the free radius, base fee only
NEARBY = DeliveryLocation(lat=12.9716, lng=77.5946)


@pytest.fixture(autouse=True)
def fresh_databases():
    """Every test starts from the seeded menu, coupons and empty carts."""
    reset_databases()
    yield
    reset_databases()


@pytest.fixture
def token():
    return issue_token(CUSTOMER_ID)


@pytest.fixture
def transport():
    return httpx.ASGITransport(app=app)


@pytest.fixture
async def api_client(token, transport):
    """Storefront API client talking to the in-process mock restaurant."""
    client = RestaurantApiClient(TEST_SERVER, auth_token=token, transport=transport)
    yield client
    await client.close()


@pytest.fixture
async def anonymous_client(transport):
    client = RestaurantApiClient(TEST_SERVER, transport=transport)
    yield client
    await client.close()


@pytest.fixture
async def server(token, transport):
    """Raw HTTP client for exercising the mock restaurant directly."""
    async with httpx.AsyncClient(
        transport=transport,
        base_url=TEST_SERVER,
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def store(api_client, notifier):
    return CartStore(api_client, notifier)


@pytest.fixture
def coupon_engine(api_client, store, notifier):
    return CouponEngine(api_client, store, notifier)


@pytest.fixture
def widget():
    return SimulatedCheckoutWidget()


@pytest.fixture
def payments(widget):
    return PaymentGatewayAdapter(widget, key_id="rzp_test_storefront")


@pytest.fixture
def navigations():
    return []


@pytest.fixture
def checkout(store, api_client, payments, notifier, navigations):
    return CheckoutOrchestrator(
        store,
        api_client,
        payments,
        notifier,
        navigate=navigations.append,
    )


@pytest.fixture
def location():
    return NEARBY


@pytest.fixture
def address():
    return DeliveryAddress(
        address_id="addr-1",
        address_line1="12 MG Road",
        address_line2="2nd Floor",
        city="Bengaluru",
        state="Karnataka",
        postal_code="560001",
        mobile="9876543210",
        coordinates=NEARBY,
    )


@pytest.fixture
def menu_product():
    """Build the ProductRef a menu card would hand to the cart."""

    def build(product_id, variant=None):
        item = menu_db.get_item(product_id)
        return ProductRef(
            product_id=item.id,
            name=item.name,
            price=item.effective_price(variant),
            image_url=item.image_url,
            variant=variant,
            product_type=item.type.value,
        )

    return build
