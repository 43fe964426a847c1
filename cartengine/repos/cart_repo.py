# cartengine/repos/cart_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cartengine.data.models.cart import CartModel
from cartengine.exceptions import ConflictRetry

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def _active_stmt(self, user_email: str):
        return select(CartModel).where(
            CartModel.user_email == user_email,
            CartModel.enabled.is_(True),
        )

    def get_active_cart(self, user_email: str) -> CartModel | None:
        return self.db.execute(self._active_stmt(user_email)).scalar_one_or_none()

    def lock_active_cart(self, user_email: str) -> CartModel | None:
        stmt = self._active_stmt(user_email).with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_cart(self, cart_id: int) -> CartModel | None:
        stmt = (
            select(CartModel)
            .where(CartModel.id == cart_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_latest_disabled_cart(self, user_email: str) -> CartModel | None:
        stmt = (
            select(CartModel)
            .where(CartModel.user_email == user_email, CartModel.enabled.is_(False))
            .order_by(CartModel.id.desc())
            .limit(1)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def insert_active_cart(self, user_email: str) -> int | None:
        """Insert an empty active cart, or do nothing if one already exists.

        Returns the new cart id, or None when the unique index on active carts
        rejected the row. Relies on INSERT .. ON CONFLICT DO NOTHING so there
        is no window between checking and inserting.
        """
        dialect = self.db.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect: {dialect}")

        table = CartModel.__table__
        stmt = (
            insert(table)
            .values(user_email=user_email, total_price=0, enabled=True)
            .on_conflict_do_nothing()
            .returning(table.c.id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def enable_cart(self, cart: CartModel) -> CartModel:
        cart.enabled = True
        try:
            # savepoint, a lost race on the unique index must not poison the transaction
            with self.db.begin_nested():
                self.db.flush()
        except IntegrityError:
            raise ConflictRetry(f"active cart appeared for {cart.user_email}")
        return cart

    def list_active_carts(self) -> List[CartModel]:
        stmt = select(CartModel).where(CartModel.enabled.is_(True)).order_by(CartModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_abandoned_cart_owners(self, idle_before: datetime) -> List[str]:
        stmt = (
            select(CartModel.user_email)
            .where(
                CartModel.enabled.is_(True),
                CartModel.total_price > 0,
                CartModel.updated_at < idle_before,
            )
            .order_by(CartModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())
