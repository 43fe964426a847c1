# cartengine/repos/order_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from cartengine.data.models.order import OrderModel
from cartengine.data.models.order_line import OrderLineModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel, lines: List[OrderLineModel]) -> OrderModel:
        self.db.add(order)
        # flush first so the lines get the order id
        self.db.flush()
        for line in lines:
            line.order_id = order.id
            self.db.add(line)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_orders_by_email(self, user_email: str) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_email == user_email)
            .options(selectinload(OrderModel.lines))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_all_orders(self) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.lines))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
