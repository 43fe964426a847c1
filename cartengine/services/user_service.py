# cartengine/services/user_service.py
from typing import Any, Dict

from sqlalchemy.orm import sessionmaker

from cartengine.data.models.user import UserModel, UserRole
from cartengine.exceptions import NotFoundError, ValidationError
from cartengine.services.cart_resolver import CartResolver, normalize_email
from cartengine.services.transaction import TransactionContext, run_in_transaction
from cartengine.utils.logging import get_logger
from cartengine.utils.retry import transaction_retry

logger = get_logger(__name__)


class UserService:
    def __init__(self, session_factory: sessionmaker, resolver: CartResolver | None = None):
        self.session_factory = session_factory
        self.resolver = resolver or CartResolver()

    @transaction_retry()
    def register_user(self, email: str, role: str = UserRole.USER.value) -> Dict[str, Any]:
        """Create the user and, for regular users, the first active cart."""
        email = normalize_email(email)
        try:
            role = UserRole(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role!r}")
        return run_in_transaction(self.session_factory, self._register_user, email, role)

    def _register_user(self, tx: TransactionContext, email: str, role: UserRole) -> Dict[str, Any]:
        if tx.users.get_user(email):
            raise ValidationError(f"User {email} already exists")

        user = tx.users.add_user(UserModel(email=email, role=role))

        cart_id = None
        if not user.is_admin:
            cart_id = self.resolver.resolve_active_cart(tx, email).id

        logger.info(f"Registered {role.value} {email}")
        return {"email": user.email, "role": user.role.value, "cart_id": cart_id}

    @transaction_retry()
    def get_user(self, email: str) -> Dict[str, Any]:
        email = normalize_email(email)
        return run_in_transaction(self.session_factory, self._get_user, email)

    def _get_user(self, tx: TransactionContext, email: str) -> Dict[str, Any]:
        user = tx.users.get_user(email)
        if not user:
            raise NotFoundError("User", email)

        cart = None if user.is_admin else self.resolver.find_active_cart(tx, email)
        return {"email": user.email, "role": user.role.value, "cart_id": cart.id if cart else None}
