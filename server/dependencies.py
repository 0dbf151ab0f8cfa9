import logging
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt
from server.database import SessionLocal
from server.models import User, TokenBlacklist
from server.config import config
from server.store import TaskStore
from reminder_worker.send import send_push_notification

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_store(db: Session = Depends(get_db)) -> TaskStore:
    return TaskStore(db)

def get_push_sender():
    """Push delivery collaborator; overridden in tests."""
    return send_push_notification

def _resolve_user(token: str, db: Session) -> User:
    if not config.SECRET_KEY:
        raise HTTPException(status_code=500, detail="Server misconfiguration: SECRET_KEY not set")

    blacklisted = db.query(TokenBlacklist).filter(TokenBlacklist.token == token).first()
    if blacklisted:
        logger.debug("Blacklisted token rejected: %s...", token[:20])
        raise HTTPException(status_code=401, detail="Token has been invalidated (logged out)")

    try:
        payload = jwt.decode(
            token,
            config.SECRET_KEY,
            algorithms=[config.ALGORITHM],
            options={"verify_signature": True, "verify_exp": True, "verify_sub": False}
        )

        sub = payload.get("sub")
        if sub is None:
            raise HTTPException(status_code=401, detail="Invalid token: subject missing")

        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise HTTPException(status_code=401, detail="Invalid token: subject is not an integer id")

    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError as e:
        logger.debug("Token decode error: %r", e)
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    return user

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    return _resolve_user(credentials.credentials, db)

def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Like get_current_user, but an absent Authorization header yields None
    so the caller can report the missing identity itself.
    """
    if credentials is None:
        return None
    return _resolve_user(credentials.credentials, db)
