import os
from decimal import Decimal

import pytest

# never touch a real database from the test run
os.environ.setdefault('DATABASE_URL', 'sqlite:///./cartengine-test.db')

from fastapi.testclient import TestClient

from cartengine.data.database import build_engine, build_session_factory, get_session_factory, init_db
from cartengine.data.models import InventoryItemModel, UserModel, UserRole
from cartengine.main import create_app
from cartengine.services.cart_lifecycle import CartLifecycle
from cartengine.services.cart_service import CartService
from cartengine.services.order_service import OrderService
from cartengine.services.user_service import UserService


@pytest.fixture(scope='function')
def engine(tmp_path):
    """Fresh SQLite file database per test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'cartengine.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture(scope='function')
def session(session_factory):
    """Session for seeding and inspecting rows outside the services."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def make_user(session):
    """Insert a user row directly, without a cart."""
    def _make_user(email, role=UserRole.USER):
        user = UserModel(email=email, role=role)
        session.add(user)
        session.commit()
        return user
    return _make_user


@pytest.fixture(scope='function')
def make_item(session):
    def _make_item(title='Widget', price='3.00', stock=10):
        item = InventoryItemModel(title=title, price=Decimal(price), stock=stock)
        session.add(item)
        session.commit()
        return item
    return _make_item


@pytest.fixture(scope='function')
def user(make_user):
    return make_user('alice@example.com')


@pytest.fixture(scope='function')
def admin(make_user):
    return make_user('admin@example.com', UserRole.ADMIN)


@pytest.fixture(scope='function')
def item(make_item):
    """Item priced 3.00 with 10 units in stock."""
    return make_item()


@pytest.fixture(scope='function')
def cart_service(session_factory):
    return CartService(session_factory)


@pytest.fixture(scope='function')
def lifecycle(session_factory):
    return CartLifecycle(session_factory)


@pytest.fixture(scope='function')
def order_service(session_factory):
    return OrderService(session_factory)


@pytest.fixture(scope='function')
def user_service(session_factory):
    return UserService(session_factory)


@pytest.fixture(scope='function')
def read(session_factory):
    """Load a row in a throwaway session, so it reflects committed state."""
    def _read(model, key):
        with session_factory() as s:
            return s.get(model, key)
    return _read


@pytest.fixture(scope='function')
def client(session_factory):
    app = create_app(init_database=False)
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as client:
        yield client
