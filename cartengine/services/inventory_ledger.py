# cartengine/services/inventory_ledger.py
from decimal import Decimal
from typing import Iterable, List

from cartengine.data.models.inventory_item import InventoryItemModel
from cartengine.exceptions import NotFoundError, InsufficientStockError
from cartengine.services.transaction import TransactionContext
from cartengine.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryLedger:
    """
    Stock and price per item. Every call locks the item row inside the
    caller's transaction, so a reservation only exists if that transaction
    commits.
    """

    def lock_available(self, tx: TransactionContext, item_id: int, amount: int) -> InventoryItemModel:
        item = tx.items.lock_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)

        if item.stock < amount:
            logger.warning(f"Item {item_id}: requested {amount}, available {item.stock}")
            raise InsufficientStockError(item_id, amount, item.stock)

        return item

    def reserve_stock(self, tx: TransactionContext, item_id: int, amount: int) -> Decimal:
        item = self.lock_available(tx, item_id, amount)
        return self.take(item, amount)

    def take(self, item: InventoryItemModel, amount: int) -> Decimal:
        """Decrement an item that is already locked and checked by lock_available."""
        item.stock -= amount
        return item.price

    def release_stock(self, tx: TransactionContext, item_id: int, amount: int) -> int:
        item = tx.items.lock_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)

        # no upper bound, the units came from this item
        item.stock += amount
        return item.stock

    def lock_items(self, tx: TransactionContext, item_ids: Iterable[int]) -> List[InventoryItemModel]:
        return tx.items.lock_items(item_ids)
