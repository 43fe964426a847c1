from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from cartengine.data.models import CartLineModel, CartModel, InventoryItemModel
from cartengine.exceptions import NotFoundError


def carts_of(session_factory, email):
    with session_factory() as s:
        return list(
            s.execute(select(CartModel).where(CartModel.user_email == email).order_by(CartModel.id))
            .scalars()
            .all()
        )


def age_cart(session_factory, cart_id, hours=2):
    with session_factory() as s:
        s.get(CartModel, cart_id).updated_at = datetime.now(timezone.utc) - timedelta(hours=hours)
        s.commit()


class TestDisableCart:
    def test_returns_reserved_stock(self, user, item, make_item, cart_service, lifecycle, session_factory, read):
        other = make_item(title='Gadget', stock=5)
        cart_id = cart_service.add_item(user.email, item.id, 4)['cart_id']
        cart_service.add_item(user.email, other.id, 2)

        assert lifecycle.disable_cart(user.email) == {'cart_id': cart_id}

        assert read(InventoryItemModel, item.id).stock == 10
        assert read(InventoryItemModel, other.id).stock == 5
        cart = read(CartModel, cart_id)
        assert cart.enabled is False
        assert cart.total_price == Decimal('0.00')
        with session_factory() as s:
            assert s.execute(select(CartLineModel).where(CartLineModel.cart_id == cart_id)).first() is None

    def test_no_active_cart(self, user, lifecycle):
        with pytest.raises(NotFoundError) as exc:
            lifecycle.disable_cart(user.email)
        assert exc.value.entity == 'Cart'

    def test_next_add_gets_a_new_cart(self, user, item, cart_service, lifecycle, session_factory):
        first = cart_service.add_item(user.email, item.id, 1)['cart_id']
        lifecycle.disable_cart(user.email)

        second = cart_service.add_item(user.email, item.id, 1)['cart_id']

        assert second != first
        assert [c.enabled for c in carts_of(session_factory, user.email)] == [False, True]


class TestEnableCart:
    def test_does_not_reserve_stock_again(self, user, item, cart_service, lifecycle, read):
        cart_id = cart_service.add_item(user.email, item.id, 4)['cart_id']
        lifecycle.disable_cart(user.email)

        result = lifecycle.enable_cart(user.email)

        assert result['cart_id'] == cart_id
        assert result['enabled'] is True
        assert result['total_price'] == Decimal('0.00')
        assert read(InventoryItemModel, item.id).stock == 10
        assert lifecycle.get_cart_status(user.email) == {'enabled': True}

    def test_already_active_cart_is_returned(self, user, item, cart_service, lifecycle):
        cart_id = cart_service.add_item(user.email, item.id, 1)['cart_id']

        result = lifecycle.enable_cart(user.email)

        assert result['cart_id'] == cart_id
        assert result['total_price'] == Decimal('3.00')

    def test_nothing_to_enable(self, user, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.enable_cart(user.email)

    def test_picks_the_latest_disabled_cart(self, user, item, cart_service, lifecycle):
        cart_service.add_item(user.email, item.id, 1)
        lifecycle.disable_cart(user.email)
        latest = cart_service.add_item(user.email, item.id, 1)['cart_id']
        lifecycle.disable_cart(user.email)

        assert lifecycle.enable_cart(user.email)['cart_id'] == latest


class TestCartStatus:
    def test_status_follows_lifecycle(self, user, item, cart_service, lifecycle):
        assert lifecycle.get_cart_status(user.email) == {'enabled': False}
        cart_service.add_item(user.email, item.id, 1)
        assert lifecycle.get_cart_status(user.email) == {'enabled': True}
        lifecycle.disable_cart(user.email)
        assert lifecycle.get_cart_status(user.email) == {'enabled': False}

    def test_list_active_carts(self, make_user, item, cart_service, lifecycle):
        for email in ('a@example.com', 'b@example.com'):
            make_user(email)
            cart_service.add_item(email, item.id, 1)
        lifecycle.disable_cart('a@example.com')

        assert [c['user_email'] for c in lifecycle.list_active_carts()] == ['b@example.com']


class TestAbandonedCarts:
    def test_idle_carts_with_content_are_disabled(self, make_user, item, cart_service, lifecycle, session_factory, read):
        idle = make_user('idle@example.com')
        busy = make_user('busy@example.com')
        idle_cart = cart_service.add_item(idle.email, item.id, 3)['cart_id']
        busy_cart = cart_service.add_item(busy.email, item.id, 2)['cart_id']
        age_cart(session_factory, idle_cart)

        assert lifecycle.disable_abandoned_carts(idle_seconds=3600) == [idle_cart]

        assert read(CartModel, idle_cart).enabled is False
        assert read(CartModel, busy_cart).enabled is True
        assert read(InventoryItemModel, item.id).stock == 8

    def test_empty_carts_are_left_alone(self, user, item, cart_service, lifecycle, session_factory):
        cart_id = cart_service.add_item(user.email, item.id, 1)['cart_id']
        cart_service.remove_item(user.email, item.id, 1)
        age_cart(session_factory, cart_id)

        assert lifecycle.disable_abandoned_carts(idle_seconds=3600) == []

    def test_celery_task_runs_the_sweep(self, user, item, cart_service, session_factory, monkeypatch):
        from cartengine.tasks import expire

        cart_id = cart_service.add_item(user.email, item.id, 1)['cart_id']
        age_cart(session_factory, cart_id)
        monkeypatch.setattr(expire, 'SessionLocal', session_factory)

        assert expire.disable_abandoned_carts_task(idle_seconds=3600) == {'disabled': [cart_id]}
