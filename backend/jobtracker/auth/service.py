"""User profile lookup."""

from sqlalchemy.orm import Session

from .models import User


def get_user_by_identity(db: Session, token_identifier: str) -> User | None:
    return db.query(User).filter(User.token_identifier == token_identifier).first()
