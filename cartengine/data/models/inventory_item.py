# cartengine/data/models/inventory_item.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, CheckConstraint

from cartengine.data.database import Base


class InventoryItemModel(Base):
    """A catalog record together with its stock; the unit of row locking."""

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    discontinued = Column(Boolean, nullable=False, default=False)

    # backstop only, reservations check stock under lock before writing
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_inventory_items_stock_non_negative"),)

    def __repr__(self):
        return f"<InventoryItem(id={self.id}, stock={self.stock}, price={self.price})>"
