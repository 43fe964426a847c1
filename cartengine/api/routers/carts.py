# cartengine/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from cartengine.api.deps import Identity, ensure_self_or_admin, get_identity, require_admin
from cartengine.data.database import get_session_factory
from cartengine.domain.schemas import CartOut, CartStatusOut, DisabledCartOut
from cartengine.services.cart_lifecycle import CartLifecycle

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(session_factory: sessionmaker):
    return CartLifecycle(session_factory)


@router.get("/", response_model=List[CartOut])
def list_active_carts(
    _: Identity = Depends(require_admin),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    return get_service(session_factory).list_active_carts()


@router.get("/status/{email}", response_model=CartStatusOut)
def get_cart_status(
    email: str,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    ensure_self_or_admin(identity, email)
    return get_service(session_factory).get_cart_status(email)


@router.post("/disable/{email}", response_model=DisabledCartOut)
def disable_cart(
    email: str,
    _: Identity = Depends(require_admin),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Abandon the user's active cart; reserved units go back to stock."""
    return get_service(session_factory).disable_cart(email)


@router.post("/enable/{email}", response_model=CartOut)
def enable_cart(
    email: str,
    _: Identity = Depends(require_admin),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    return get_service(session_factory).enable_cart(email)
