# cartengine/data/models/cart_line.py
from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from cartengine.data.database import Base


class CartLineModel(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False)

    amount = Column(Integer, nullable=False)
    # unit price when the item first entered the cart
    price = Column(Numeric(10, 2), nullable=False)

    cart = relationship("CartModel", back_populates="lines")
    item = relationship("InventoryItemModel")

    __table_args__ = (
        UniqueConstraint("cart_id", "item_id", name="uq_cart_lines_cart_item"),
        CheckConstraint("amount >= 1", name="ck_cart_lines_amount_positive"),
    )
