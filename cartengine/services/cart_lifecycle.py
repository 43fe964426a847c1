# cartengine/services/cart_lifecycle.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import sessionmaker

from cartengine.data.models.cart import CartModel
from cartengine.exceptions import ConflictRetry, NotFoundError, TransactionFailure
from cartengine.services.cart_resolver import CartResolver, normalize_email
from cartengine.services.cart_service import CartService
from cartengine.services.inventory_ledger import InventoryLedger
from cartengine.services.transaction import TransactionContext, run_in_transaction
from cartengine.utils import settings
from cartengine.utils.logging import get_logger
from cartengine.utils.retry import transaction_retry

logger = get_logger(__name__)


def cart_to_dict(cart: CartModel) -> Dict[str, Any]:
    return {
        "cart_id": cart.id,
        "user_email": cart.user_email,
        "total_price": cart.total_price,
        "enabled": cart.enabled,
    }


class CartLifecycle:
    """
    Disable (abandon) and re-enable carts.

    Disabling gives every reserved unit back to its item and empties the
    cart. Enabling only flips the flag: nothing is re-reserved, so a
    re-enabled cart is active and empty.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        cart_service: CartService | None = None,
        ledger: InventoryLedger | None = None,
        resolver: CartResolver | None = None,
    ):
        self.session_factory = session_factory
        self.ledger = ledger or InventoryLedger()
        self.resolver = resolver or CartResolver()
        self.cart_service = cart_service or CartService(session_factory, self.ledger, self.resolver)

    @transaction_retry()
    def disable_cart(self, user_email: str) -> Dict[str, Any]:
        email = normalize_email(user_email)
        return run_in_transaction(self.session_factory, self._disable_cart, email)

    def _disable_cart(self, tx: TransactionContext, email: str) -> Dict[str, Any]:
        cart = self.resolver.find_active_cart(tx, email)
        if cart is None:
            raise NotFoundError("Cart", email)

        # items first: read which ones the cart holds, lock them, then the cart
        item_ids = set(tx.cart_lines.get_item_ids(cart.id))
        self.ledger.lock_items(tx, item_ids)

        locked = tx.carts.lock_cart(cart.id)
        if locked is None or not locked.enabled:
            raise ConflictRetry(f"cart {cart.id} changed before it was locked")

        lines = tx.cart_lines.lock_lines(locked.id)
        if not {line.item_id for line in lines} <= item_ids:
            raise ConflictRetry(f"cart {cart.id} got new items before it was locked")

        released = 0
        for line in lines:
            self.ledger.release_stock(tx, line.item_id, line.amount)
            released += line.amount

        self.cart_service.clear_cart(tx, locked)
        locked.enabled = False
        tx.session.flush()

        logger.info(f"Cart {locked.id} of {email} disabled, {released} units back in stock")
        return {"cart_id": locked.id}

    @transaction_retry()
    def enable_cart(self, user_email: str) -> Dict[str, Any]:
        email = normalize_email(user_email)
        return run_in_transaction(self.session_factory, self._enable_cart, email)

    def _enable_cart(self, tx: TransactionContext, email: str) -> Dict[str, Any]:
        active = tx.carts.lock_active_cart(email)
        if active:
            logger.info(f"Cart {active.id} of {email} is already enabled")
            return cart_to_dict(active)

        cart = tx.carts.lock_latest_disabled_cart(email)
        if cart is None:
            raise NotFoundError("Disabled cart", email)

        tx.carts.enable_cart(cart)
        logger.info(f"Cart {cart.id} of {email} enabled")
        return cart_to_dict(cart)

    @transaction_retry()
    def get_cart_status(self, user_email: str) -> Dict[str, Any]:
        email = normalize_email(user_email)
        return run_in_transaction(self.session_factory, self._get_cart_status, email)

    def _get_cart_status(self, tx: TransactionContext, email: str) -> Dict[str, Any]:
        return {"enabled": self.resolver.find_active_cart(tx, email) is not None}

    @transaction_retry()
    def list_active_carts(self) -> List[Dict[str, Any]]:
        return run_in_transaction(self.session_factory, self._list_active_carts)

    def _list_active_carts(self, tx: TransactionContext) -> List[Dict[str, Any]]:
        return [cart_to_dict(c) for c in tx.carts.list_active_carts()]

    def disable_abandoned_carts(self, idle_seconds: int | None = None) -> List[int]:
        """Disable every non-empty active cart idle for longer than idle_seconds.

        Each cart goes through disable_cart in its own transaction; a cart
        already disabled in the meantime is skipped.
        """
        idle_seconds = settings.CART_ABANDON_SECONDS if idle_seconds is None else idle_seconds
        idle_before = datetime.now(timezone.utc) - timedelta(seconds=idle_seconds)

        owners = run_in_transaction(
            self.session_factory,
            lambda tx: tx.carts.list_abandoned_cart_owners(idle_before),
        )
        logger.info(f"Found {len(owners)} abandoned carts")

        disabled = []
        for email in owners:
            try:
                disabled.append(self.disable_cart(email)["cart_id"])
            except (NotFoundError, TransactionFailure) as e:
                logger.warning(f"Could not disable abandoned cart of {email}: {e}")
        return disabled
