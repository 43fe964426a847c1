# cartengine/api/routers/cart_lines.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from cartengine.api.deps import Identity, ensure_self_or_admin, get_identity
from cartengine.data.database import get_session_factory
from cartengine.domain.schemas import AddItemOut, CartContentsOut, ItemIn, RemoveItemOut
from cartengine.services.cart_service import CartService

router = APIRouter(prefix="/cart-details", tags=["cart-details"])


def get_service(session_factory: sessionmaker):
    return CartService(session_factory)


@router.get("/{email}", response_model=CartContentsOut)
def get_cart_contents(
    email: str,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    ensure_self_or_admin(identity, email)
    return get_service(session_factory).get_cart_contents(email)


@router.post("/add/{email}", response_model=AddItemOut)
def add_item(
    email: str,
    payload: ItemIn,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Reserve stock and put it in the caller's active cart."""
    ensure_self_or_admin(identity, email)
    return get_service(session_factory).add_item(email, payload.item_id, payload.amount)


@router.post("/remove/{email}", response_model=RemoveItemOut)
def remove_item(
    email: str,
    payload: ItemIn,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    ensure_self_or_admin(identity, email)
    return get_service(session_factory).remove_item(email, payload.item_id, payload.amount)
