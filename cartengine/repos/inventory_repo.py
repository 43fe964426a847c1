# cartengine/repos/inventory_repo.py
from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from cartengine.data.models.inventory_item import InventoryItemModel


class InventoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int) -> InventoryItemModel | None:
        return self.db.get(InventoryItemModel, item_id)

    def lock_item(self, item_id: int) -> InventoryItemModel | None:
        # populate_existing so a row already in the identity map is re-read under the lock
        stmt = (
            select(InventoryItemModel)
            .where(InventoryItemModel.id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_items(self, item_ids: Iterable[int]) -> List[InventoryItemModel]:
        ids = sorted(set(item_ids))
        if not ids:
            return []
        # ascending id keeps the lock order stable between transactions
        stmt = (
            select(InventoryItemModel)
            .where(InventoryItemModel.id.in_(ids))
            .order_by(InventoryItemModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_items(self, item_ids: Iterable[int]) -> Dict[int, InventoryItemModel]:
        ids = set(item_ids)
        if not ids:
            return {}
        stmt = select(InventoryItemModel).where(InventoryItemModel.id.in_(ids))
        return {i.id: i for i in self.db.execute(stmt).scalars().all()}

    def add_item(self, item: InventoryItemModel) -> InventoryItemModel:
        self.db.add(item)
        self.db.flush()
        return item
