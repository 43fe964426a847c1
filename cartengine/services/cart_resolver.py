# cartengine/services/cart_resolver.py
from cartengine.data.models.cart import CartModel
from cartengine.data.models.user import UserModel
from cartengine.exceptions import ConflictRetry, NotFoundError, ValidationError
from cartengine.services.transaction import TransactionContext
from cartengine.utils import settings
from cartengine.utils.logging import get_logger

logger = get_logger(__name__)


def normalize_email(email) -> str:
    if not isinstance(email, str):
        raise ValidationError("Email is required")

    normalized = email.strip().lower()
    if not normalized or "@" not in normalized:
        raise ValidationError(f"Malformed email: {email!r}")
    return normalized


class CartResolver:
    """Finds the single active cart of a user, creating it on demand."""

    def get_cart_owner(self, tx: TransactionContext, user_email: str) -> UserModel:
        user = tx.users.get_user(user_email)
        if user is None:
            raise NotFoundError("User", user_email)
        if user.is_admin:
            raise ValidationError("Administrators don't have shopping carts")
        return user

    def find_active_cart(self, tx: TransactionContext, user_email: str, lock: bool = False) -> CartModel | None:
        if lock:
            return tx.carts.lock_active_cart(user_email)
        return tx.carts.get_active_cart(user_email)

    def resolve_active_cart(self, tx: TransactionContext, user_email: str) -> CartModel:
        self.get_cart_owner(tx, user_email)

        cart = tx.carts.lock_active_cart(user_email)
        if cart:
            return cart

        for _ in range(settings.CONFLICT_RETRY_ATTEMPTS):
            cart_id = tx.carts.insert_active_cart(user_email)
            if cart_id is not None:
                logger.info(f"Created cart {cart_id} for {user_email}")
                return tx.carts.lock_cart(cart_id)

            # someone else inserted it first, take theirs
            cart = tx.carts.lock_active_cart(user_email)
            if cart:
                return cart

        raise ConflictRetry(f"active cart for {user_email} keeps changing")
