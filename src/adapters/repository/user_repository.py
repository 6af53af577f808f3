from sqlalchemy import update
from sqlalchemy.orm import Session
from domain.entities.user_entity import User

class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def update_refresh_token(self, user_id: int, refresh_token: str | None) -> bool:
        query = update(User).where(User.id == user_id).values(refresh_token=refresh_token)
        result = self.db.execute(query)
        self.db.commit()
        return result.rowcount > 0

    def get_refresh_token(self, user_id: int) -> str | None:
        user = self.get_by_id(user_id)
        if not user:
            return None
        # o valor pode ter mudado em outra sessão
        self.db.refresh(user)
        return user.refresh_token
