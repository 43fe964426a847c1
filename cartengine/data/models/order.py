# cartengine/data/models/order.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from cartengine.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_email = Column(String(100), ForeignKey("users.email"), nullable=False, index=True)
    # informational, the cart keeps living after the order is placed
    cart_id = Column(Integer, nullable=False)

    payment_method = Column(String(50), nullable=False, default="Credit Card")
    total = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    lines = relationship("OrderLineModel", back_populates="order", order_by="OrderLineModel.id")
