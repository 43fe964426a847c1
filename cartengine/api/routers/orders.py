# cartengine/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from cartengine.api.deps import Identity, ensure_self_or_admin, get_identity, require_admin
from cartengine.data.database import get_session_factory
from cartengine.domain.schemas import OrderCreate, OrderCreated, OrderOut
from cartengine.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(session_factory: sessionmaker):
    return OrderService(session_factory)


@router.post("/create/{email}", response_model=OrderCreated, status_code=201)
def create_order(
    email: str,
    payload: OrderCreate | None = None,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Turns the active cart into an order. The cart stays active and empty,
    its reserved stock becomes the sold stock.
    """
    ensure_self_or_admin(identity, email)
    payment_method = payload.payment_method if payload else None
    return get_service(session_factory).create_order_from_cart(email, payment_method)


@router.get("/", response_model=List[OrderOut])
def get_all_orders(
    _: Identity = Depends(require_admin),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    return get_service(session_factory).get_all_orders()


@router.get("/{email}", response_model=List[OrderOut])
def get_orders(
    email: str,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    ensure_self_or_admin(identity, email)
    return get_service(session_factory).get_orders_by_email(email)
