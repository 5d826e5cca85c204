import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.errors import UnauthorizedError
from app.models.database import User, get_db

logger = logging.getLogger(__name__)

def get_current_user(
    x_user_email: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the identity headers set by the auth proxy.

    Users are created the first time they are seen.
    """
    email = (x_user_email or "").strip().lower()
    if not email:
        raise UnauthorizedError()

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=x_user_name)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Registered new user %s (id=%s)", email, user.id)
    return user
