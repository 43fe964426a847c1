from cartengine.data.models import InventoryItemModel


def as_user(email):
    return {'X-User-Email': email, 'X-User-Role': 'User'}


ADMIN = {'X-User-Email': 'admin@example.com', 'X-User-Role': 'Admin'}


class TestHealth:
    def test_liveness(self, client):
        assert client.get('/health/').json()['status'] == 'healthy'

    def test_readiness(self, client):
        response = client.get('/health/ready')
        assert response.status_code == 200
        assert response.json()['checks']['database'] == 'healthy'


class TestUsersApi:
    def test_register_and_fetch(self, client):
        response = client.post('/users/', json={'email': 'carol@example.com'})
        assert response.status_code == 201
        cart_id = response.json()['cart_id']

        response = client.get('/users/carol@example.com', headers=as_user('carol@example.com'))
        assert response.json() == {'email': 'carol@example.com', 'role': 'User', 'cart_id': cart_id}

    def test_duplicate(self, client, user):
        response = client.post('/users/', json={'email': user.email})
        assert response.status_code == 400
        assert response.json()['status'] == 'error'

    def test_bad_role_is_a_validation_error(self, client):
        response = client.post('/users/', json={'email': 'x@example.com', 'role': 'Owner'})
        assert response.status_code == 400


class TestCartDetailsApi:
    def test_add_then_remove(self, client, user, item):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': item.id, 'amount': 4}, headers=as_user(user.email)
        )
        assert response.status_code == 200
        assert response.json()['updated_stock'] == 6

        response = client.post(
            f'/cart-details/remove/{user.email}', json={'itemId': item.id, 'amount': 1}, headers=as_user(user.email)
        )
        assert response.json() == {'updated_stock': 7, 'remaining_in_cart': 3}

        contents = client.get(f'/cart-details/{user.email}', headers=as_user(user.email)).json()
        assert contents['lines'][0]['amount'] == 3
        assert float(contents['total_price']) == 9.0

    def test_insufficient_stock_reports_available(self, client, user, item):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': item.id, 'amount': 11}, headers=as_user(user.email)
        )
        assert response.status_code == 409
        assert response.json()['available_stock'] == 10

    def test_invalid_amount(self, client, user, item):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': item.id, 'amount': 'abc'}, headers=as_user(user.email)
        )
        assert response.status_code == 400

    def test_unicode_digit_amount(self, client, user, item, read):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': item.id, 'amount': '²'}, headers=as_user(user.email)
        )
        assert response.status_code == 400
        assert response.json()['status'] == 'error'
        assert read(InventoryItemModel, item.id).stock == 10

    def test_item_id_beyond_column_range(self, client, user):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': 2 ** 63, 'amount': 1}, headers=as_user(user.email)
        )
        assert response.status_code == 400

    def test_over_removal_reports_current_amount(self, client, user, item, cart_service):
        cart_service.add_item(user.email, item.id, 2)
        response = client.post(
            f'/cart-details/remove/{user.email}', json={'item_id': item.id, 'amount': 5}, headers=as_user(user.email)
        )
        assert response.status_code == 400
        assert response.json()['current_amount'] == 2

    def test_missing_identity(self, client, user, item):
        response = client.post(f'/cart-details/add/{user.email}', json={'item_id': item.id, 'amount': 1})
        assert response.status_code == 401

    def test_other_users_cart_is_forbidden(self, client, user, item, read):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': item.id, 'amount': 1},
            headers=as_user('mallory@example.com'),
        )
        assert response.status_code == 403
        assert read(InventoryItemModel, item.id).stock == 10

    def test_unknown_item(self, client, user):
        response = client.post(
            f'/cart-details/add/{user.email}', json={'item_id': 999, 'amount': 1}, headers=as_user(user.email)
        )
        assert response.status_code == 404
        assert response.json()['entity'] == 'Item'


class TestCartsApi:
    def test_admin_disables_and_enables(self, client, user, item, cart_service, read):
        cart_id = cart_service.add_item(user.email, item.id, 3)['cart_id']

        response = client.post(f'/carts/disable/{user.email}', headers=ADMIN)
        assert response.json() == {'cart_id': cart_id}
        assert read(InventoryItemModel, item.id).stock == 10
        assert client.get(f'/carts/status/{user.email}', headers=as_user(user.email)).json() == {'enabled': False}

        response = client.post(f'/carts/enable/{user.email}', headers=ADMIN)
        assert response.json()['enabled'] is True
        assert [c['cart_id'] for c in client.get('/carts/', headers=ADMIN).json()] == [cart_id]

    def test_users_cannot_disable(self, client, user):
        response = client.post(f'/carts/disable/{user.email}', headers=as_user(user.email))
        assert response.status_code == 403


class TestOrdersApi:
    def test_create_and_list(self, client, user, item, cart_service):
        cart_service.add_item(user.email, item.id, 2)

        response = client.post(f'/orders/create/{user.email}', headers=as_user(user.email))
        assert response.status_code == 201
        order_id = response.json()['order_id']

        orders = client.get(f'/orders/{user.email}', headers=as_user(user.email)).json()
        assert [o['id'] for o in orders] == [order_id]
        assert orders[0]['payment_method'] == 'Credit Card'
        assert len(client.get('/orders/', headers=ADMIN).json()) == 1

    def test_empty_cart(self, client, user):
        response = client.post(
            f'/orders/create/{user.email}', json={'payment_method': 'PayPal'}, headers=as_user(user.email)
        )
        assert response.status_code == 400
        assert response.json()['message'] == 'Cart is empty or not found'

    def test_all_orders_needs_admin(self, client, user):
        assert client.get('/orders/', headers=as_user(user.email)).status_code == 403
