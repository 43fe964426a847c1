# cartengine/data/models/user.py
import enum

from sqlalchemy import Column, String, Enum, DateTime
from sqlalchemy.sql import func

from cartengine.data.database import Base


class UserRole(str, enum.Enum):
    USER = "User"
    ADMIN = "Admin"


class UserModel(Base):
    __tablename__ = "users"

    # always stored trimmed and lowercased
    email = Column(String(100), primary_key=True)
    role = Column(Enum(UserRole, name="user_role", values_callable=lambda e: [r.value for r in e]), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
