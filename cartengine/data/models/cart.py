# cartengine/data/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, DateTime, Numeric, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from cartengine.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # owner is referenced by key only, users hold no link back to carts
    user_email = Column(String(100), ForeignKey("users.email"), nullable=False)

    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    lines = relationship("CartLineModel", back_populates="cart", order_by="CartLineModel.id")

    # one active cart per user
    __table_args__ = (
        Index(
            "uq_carts_active_user",
            "user_email",
            unique=True,
            postgresql_where=enabled.is_(True),
            sqlite_where=enabled.is_(True),
        ),
    )

    def __repr__(self):
        return f"<Cart(id={self.id}, user_email={self.user_email!r}, enabled={self.enabled})>"
