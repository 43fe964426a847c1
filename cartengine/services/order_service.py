# cartengine/services/order_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import sessionmaker

from cartengine.data.models.order import OrderModel
from cartengine.data.models.order_line import OrderLineModel
from cartengine.exceptions import EmptyCartError, NotFoundError
from cartengine.services.cart_resolver import CartResolver, normalize_email
from cartengine.services.cart_service import CartService
from cartengine.services.transaction import TransactionContext, run_in_transaction
from cartengine.utils import settings
from cartengine.utils.logging import get_logger
from cartengine.utils.retry import transaction_retry

logger = get_logger(__name__)


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_email": order.user_email,
        "cart_id": order.cart_id,
        "payment_method": order.payment_method,
        "total": order.total,
        "created_at": order.created_at,
        "lines": [
            {"item_id": line.item_id, "amount": line.amount, "price": line.price}
            for line in order.lines
        ],
    }


class OrderService:
    """
    Orders are snapshots of a cart. Converting does not touch stock: the
    units were reserved when they were added, the order only turns that
    reservation into a sale.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        cart_service: CartService | None = None,
        resolver: CartResolver | None = None,
    ):
        self.session_factory = session_factory
        self.cart_service = cart_service or CartService(session_factory)
        self.resolver = resolver or CartResolver()

    @transaction_retry()
    def create_order_from_cart(self, user_email: str, payment_method: str | None = None) -> Dict[str, Any]:
        email = normalize_email(user_email)
        payment_method = payment_method or settings.DEFAULT_PAYMENT_METHOD
        return run_in_transaction(self.session_factory, self._create_order_from_cart, email, payment_method)

    def _create_order_from_cart(self, tx: TransactionContext, email: str, payment_method: str) -> Dict[str, Any]:
        cart = self.resolver.find_active_cart(tx, email, lock=True)
        if cart is None or cart.total_price <= 0:
            raise EmptyCartError(email)

        lines = tx.cart_lines.lock_lines(cart.id)
        if not lines:
            raise EmptyCartError(email)

        order = tx.orders.create_order(
            OrderModel(
                user_email=email,
                cart_id=cart.id,
                payment_method=payment_method,
                total=cart.total_price,
            ),
            [OrderLineModel(item_id=line.item_id, amount=line.amount, price=line.price) for line in lines],
        )

        self.cart_service.clear_cart(tx, cart)

        logger.info(f"Order {order.id} created from cart {cart.id}, total {order.total}")
        return {"order_id": order.id}

    @transaction_retry()
    def get_orders_by_email(self, user_email: str) -> List[Dict[str, Any]]:
        email = normalize_email(user_email)
        return run_in_transaction(self.session_factory, self._get_orders_by_email, email)

    def _get_orders_by_email(self, tx: TransactionContext, email: str) -> List[Dict[str, Any]]:
        if tx.users.get_user(email) is None:
            raise NotFoundError("User", email)
        return [order_to_dict(o) for o in tx.orders.get_orders_by_email(email)]

    @transaction_retry()
    def get_all_orders(self) -> List[Dict[str, Any]]:
        return run_in_transaction(self.session_factory, self._get_all_orders)

    def _get_all_orders(self, tx: TransactionContext) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in tx.orders.get_all_orders()]
