"""User and token records created at login."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.models import Token, User
from app.services.linkedin import Profile, TokenGrant
from app.utils.hashing import hash_token
from app.utils.logger import logger


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def upsert_user(db: Session, profile: Profile) -> User:
    """Create the user on first login, refresh name and email afterwards."""
    user = db.query(User).filter(User.identity_id == profile.id).first()
    if user:
        user.name = profile.name or user.name
        user.email = profile.email
    else:
        user = User(
            identity_id=profile.id,
            name=profile.name or "",
            email=profile.email,
            website_ids=[],
        )
        db.add(user)
        logger.info(f"[AUTH] Created user for {profile.id}")
    db.commit()
    db.refresh(user)
    return user


def record_token(db: Session, identity_id: str, grant: TokenGrant, salt: str) -> Token:
    """Store a hash and expiry of the token just issued to an identity."""
    expires_at = utc_now() + timedelta(seconds=grant.expires_in)
    token = db.query(Token).filter(Token.identity_id == identity_id).first()
    if token:
        token.token_hash = hash_token(grant.access_token, salt)
        token.expires_at = expires_at
    else:
        token = Token(
            identity_id=identity_id,
            token_hash=hash_token(grant.access_token, salt),
            expires_at=expires_at,
        )
        db.add(token)
    db.commit()
    return token


def token_is_valid(db: Session, identity_id: str, now: Optional[datetime] = None) -> bool:
    """True if the last token issued to identity_id has not expired."""
    token = db.query(Token).filter(Token.identity_id == identity_id).first()
    if not token:
        return False
    return as_utc(token.expires_at) > (now or utc_now())
