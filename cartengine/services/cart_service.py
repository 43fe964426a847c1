# cartengine/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import sessionmaker

from cartengine.data.models.cart import CartModel
from cartengine.data.models.cart_line import CartLineModel
from cartengine.exceptions import NotFoundError, InvalidRemovalError, ValidationError
from cartengine.services.cart_resolver import CartResolver, normalize_email
from cartengine.services.inventory_ledger import InventoryLedger
from cartengine.services.transaction import TransactionContext, run_in_transaction
from cartengine.utils.logging import get_logger
from cartengine.utils.retry import transaction_retry

logger = get_logger(__name__)


# ids and amounts are stored in 32-bit INTEGER columns
MAX_INT32 = 2_147_483_647


def parse_positive_int(value, field: str, max_value: int = MAX_INT32) -> int:
    # bool is an int subclass, True must not become 1
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a positive integer")

    if isinstance(value, str):
        value = value.strip()
        # ascii only, int() rejects digits like "²"
        if not (value.isascii() and value.isdigit()):
            raise ValidationError(f"{field} must be a positive integer")
        value = int(value)

    if isinstance(value, float) and value.is_integer():
        value = int(value)

    if not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    if value > max_value:
        raise ValidationError(f"{field} must not exceed {max_value}")
    return value


class CartService:
    """
    Add and remove items in the active cart.

    Commands run in one transaction each and lock rows in a fixed order:
    inventory item, then cart, then cart line. Stock and cart total move
    together or not at all.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        ledger: InventoryLedger | None = None,
        resolver: CartResolver | None = None,
    ):
        self.session_factory = session_factory
        self.ledger = ledger or InventoryLedger()
        self.resolver = resolver or CartResolver()

    # query
    @transaction_retry()
    def get_cart_contents(self, user_email: str) -> Dict[str, Any]:
        email = normalize_email(user_email)
        return run_in_transaction(self.session_factory, self._get_cart_contents, email)

    def _get_cart_contents(self, tx: TransactionContext, email: str) -> Dict[str, Any]:
        user = tx.users.get_user(email)
        if user is None:
            raise NotFoundError("User", email)

        empty = {"cart_id": None, "lines": [], "total_price": Decimal("0.00")}
        if user.is_admin:
            return empty

        cart = self.resolver.find_active_cart(tx, email)
        if cart is None:
            return empty

        lines = tx.cart_lines.get_lines(cart.id)
        items = tx.items.get_items(line.item_id for line in lines)

        return {
            "cart_id": cart.id,
            "lines": [
                {
                    "item_id": line.item_id,
                    "title": items[line.item_id].title,
                    "amount": line.amount,
                    "unit_price": line.price,
                    "line_total": line.price * line.amount,
                }
                for line in lines
            ],
            "total_price": cart.total_price,
        }

    # commands
    @transaction_retry()
    def add_item(self, user_email: str, item_id: int, amount: int) -> Dict[str, Any]:
        email = normalize_email(user_email)
        item_id = parse_positive_int(item_id, "Item id")
        amount = parse_positive_int(amount, "Amount")
        return run_in_transaction(self.session_factory, self._add_item, email, item_id, amount)

    def _add_item(self, tx: TransactionContext, email: str, item_id: int, amount: int) -> Dict[str, Any]:
        item = self.ledger.lock_available(tx, item_id, amount)
        cart = self.resolver.resolve_active_cart(tx, email)
        line = tx.cart_lines.lock_line(cart.id, item_id)

        price = self.ledger.take(item, amount)

        if line:
            logger.info(
                f"Item {item_id} already in cart {cart.id}, amount "
                f"{line.amount} -> {line.amount + amount}"
            )
            # the snapshot from the first add stays
            line.amount += amount
        else:
            line = tx.cart_lines.add_line(
                CartLineModel(cart_id=cart.id, item_id=item_id, amount=amount, price=price)
            )

        cart.total_price += line.price * amount
        tx.session.flush()

        logger.info(f"Added {amount} x item {item_id} to cart {cart.id}, stock left {item.stock}")
        return {"updated_stock": item.stock, "cart_id": cart.id}

    @transaction_retry()
    def remove_item(self, user_email: str, item_id: int, amount: int) -> Dict[str, Any]:
        email = normalize_email(user_email)
        item_id = parse_positive_int(item_id, "Item id")
        amount = parse_positive_int(amount, "Amount")
        return run_in_transaction(self.session_factory, self._remove_item, email, item_id, amount)

    def _remove_item(self, tx: TransactionContext, email: str, item_id: int, amount: int) -> Dict[str, Any]:
        self.resolver.get_cart_owner(tx, email)

        # removal never creates a cart
        if self.resolver.find_active_cart(tx, email) is None:
            raise NotFoundError("Cart", email)

        if tx.items.lock_item(item_id) is None:
            raise NotFoundError("Item", item_id)

        cart = self.resolver.find_active_cart(tx, email, lock=True)
        if cart is None:
            raise NotFoundError("Cart", email)

        line = tx.cart_lines.lock_line(cart.id, item_id)
        if line is None:
            raise NotFoundError("Cart item", item_id)

        if amount > line.amount:
            logger.warning(f"Cart {cart.id}: remove {amount} x item {item_id}, only {line.amount} present")
            raise InvalidRemovalError(item_id, amount, line.amount)

        price = line.price
        remaining = line.amount - amount
        if remaining == 0:
            tx.cart_lines.delete_line(line)
        else:
            line.amount = remaining

        updated_stock = self.ledger.release_stock(tx, item_id, amount)
        cart.total_price -= price * amount
        tx.session.flush()

        logger.info(f"Removed {amount} x item {item_id} from cart {cart.id}, {remaining} left in cart")
        return {"updated_stock": updated_stock, "remaining_in_cart": remaining}

    def clear_cart(self, tx: TransactionContext, cart: CartModel) -> int:
        """Drop every line and zero the total. Caller holds the cart lock."""
        removed = tx.cart_lines.delete_all_lines(cart.id)
        cart.total_price = Decimal("0.00")
        tx.session.flush()
        return removed
