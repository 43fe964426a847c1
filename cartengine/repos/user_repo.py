# cartengine/repos/user_repo.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cartengine.data.models.user import UserModel
from cartengine.exceptions import ConflictRetry


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, email: str) -> UserModel | None:
        return self.db.get(UserModel, email)

    def add_user(self, user: UserModel) -> UserModel:
        try:
            # a concurrent registration of the same email loses on the primary key
            with self.db.begin_nested():
                self.db.add(user)
        except IntegrityError:
            raise ConflictRetry(f"user {user.email} was registered concurrently")
        return user
