# cartengine/api/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from cartengine.api.deps import Identity, ensure_self_or_admin, get_identity
from cartengine.data.database import get_session_factory
from cartengine.domain.schemas import UserCreate, UserRead
from cartengine.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, session_factory: sessionmaker = Depends(get_session_factory)):
    service = UserService(session_factory)
    return service.register_user(payload.email, payload.role)


@router.get("/{email}", response_model=UserRead)
def get_user(
    email: str,
    identity: Identity = Depends(get_identity),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    ensure_self_or_admin(identity, email)
    service = UserService(session_factory)
    return service.get_user(email)
