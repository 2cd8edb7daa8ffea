import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["payment_gateway_secret_key"] = "sk_test_secret"
os.environ["brevo_api_key"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.database import get_session
from app.exceptions import GatewayError
from app.main import app
from app.models.user import User
from app.services.catalog_service import seed_services
from app.services.payment_gateway import (
    GatewayCheckout,
    GatewayVerification,
    PaymentGateway,
    get_payment_gateway,
)
from app.utils.hash import hash_password
from app.utils.token import create_access_token


class FakeGateway(PaymentGateway):
    """Records calls instead of talking HTTP."""

    def __init__(self):
        super().__init__(
            base_url="https://gateway.test",
            secret_key="sk_test_secret",
            currency="NGN",
            callback_url="http://testserver/payments/callback",
            timeout=1,
        )
        self.fail = False
        self.initialized = []
        self.verifications = {}
        self._counter = 0

    def initialize(self, *, reference, amount, email, metadata=None):
        if self.fail:
            raise GatewayError("Payment provider unreachable")
        self._counter += 1
        reference = f"ref_{self._counter}"
        self.initialized.append(
            {"reference": reference, "amount": amount, "email": email, "metadata": metadata}
        )
        return GatewayCheckout(
            reference=reference,
            authorization_url=f"https://gateway.test/pay/{reference}",
        )

    def verify_transaction(self, reference):
        if reference not in self.verifications:
            raise GatewayError("Payment provider unreachable")
        return self.verifications[reference]

    def set_result(self, reference, order, success=True, amount=None):
        self.verifications[reference] = GatewayVerification(
            reference=reference,
            success=success,
            amount=order.total_price if amount is None else amount,
            order_id=order.id,
            raw={"reference": reference},
        )


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        seed_services(session)
        yield session


@pytest.fixture(name="gateway")
def gateway_fixture():
    return FakeGateway()


@pytest.fixture(name="client")
def client_fixture(session, gateway):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(session, email, role="client", first_name="Ada"):
    user = User(
        first_name=first_name,
        last_name="Client",
        email=email,
        password=hash_password("secret-pass"),
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="user")
def user_fixture(session):
    return _make_user(session, "ada@example.com")


@pytest.fixture(name="other_user")
def other_user_fixture(session):
    return _make_user(session, "bob@example.com", first_name="Bob")


@pytest.fixture(name="admin")
def admin_fixture(session):
    return _make_user(session, "admin@example.com", role="admin", first_name="Admin")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}


@pytest.fixture(name="user_headers")
def user_headers_fixture(user):
    return auth_headers(user)


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin):
    return auth_headers(admin)


@pytest.fixture(name="pending_order")
def pending_order_fixture(session, gateway, user):
    from app.services.catalog_service import get_service
    from app.services.order_service import create_order

    return create_order(
        session=session,
        gateway=gateway,
        user=user,
        contact={"full_name": "Ada Client", "email": "ada@example.com"},
        service=get_service(session, "landing-page"),
        selected_add_ons=["WhatsApp Integration", "Live Chat Widget"],
    )


@pytest.fixture(name="other_headers")
def other_headers_fixture(other_user):
    return auth_headers(other_user)
