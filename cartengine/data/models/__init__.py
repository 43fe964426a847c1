# import all models so SQLAlchemy registers them in Base.metadata

from cartengine.data.models.user import UserModel, UserRole
from cartengine.data.models.inventory_item import InventoryItemModel
from cartengine.data.models.cart import CartModel
from cartengine.data.models.cart_line import CartLineModel
from cartengine.data.models.order import OrderModel
from cartengine.data.models.order_line import OrderLineModel

__all__ = [
    "UserModel",
    "UserRole",
    "InventoryItemModel",
    "CartModel",
    "CartLineModel",
    "OrderModel",
    "OrderLineModel",
]
