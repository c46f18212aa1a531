from typing import Optional
from sqlalchemy.orm import Session
from ..db.models.user_model import UserModel


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )

    def create(self, name: str, email: str, password_hash: str) -> UserModel:
        user = UserModel(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
            total_quizzes=0,
            best_score=0,
            average_score=0.0,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
