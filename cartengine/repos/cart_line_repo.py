# cartengine/repos/cart_line_repo.py
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from cartengine.data.models.cart_line import CartLineModel


class CartLineRepo:
    def __init__(self, db: Session):
        self.db = db

    def lock_line(self, cart_id: int, item_id: int) -> CartLineModel | None:
        stmt = (
            select(CartLineModel)
            .where(CartLineModel.cart_id == cart_id, CartLineModel.item_id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_lines(self, cart_id: int) -> List[CartLineModel]:
        stmt = (
            select(CartLineModel)
            .where(CartLineModel.cart_id == cart_id)
            .order_by(CartLineModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_lines(self, cart_id: int) -> List[CartLineModel]:
        stmt = select(CartLineModel).where(CartLineModel.cart_id == cart_id).order_by(CartLineModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def get_item_ids(self, cart_id: int) -> List[int]:
        stmt = select(CartLineModel.item_id).where(CartLineModel.cart_id == cart_id)
        return list(self.db.execute(stmt).scalars().all())

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def delete_line(self, line: CartLineModel) -> None:
        self.db.delete(line)
        self.db.flush()

    def delete_all_lines(self, cart_id: int) -> int:
        res = self.db.execute(delete(CartLineModel).where(CartLineModel.cart_id == cart_id))
        return res.rowcount
