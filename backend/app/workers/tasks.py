"""ARQ background tasks for keeping user records consistent."""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from app.database import get_sessionmaker
from app.models import User, Token, Website
from app.utils.logger import logger

# Expired tokens are kept this long so a late request still sees TokenExpired
TOKEN_RETENTION = timedelta(days=1)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


async def reconcile_user_websites(ctx: Dict[str, Any], identity_id: str) -> Dict[str, Any]:
    """
    Rebuild a user's website id list from the websites table.

    Repairs the denormalized list after a failed link step during generation.

    Args:
        ctx: ARQ context
        identity_id: LinkedIn subject id of the user

    Returns:
        Dict with success status and the repaired list size
    """
    db = get_sessionmaker()()

    try:
        user = db.query(User).filter(User.identity_id == identity_id).first()
        if not user:
            return {"success": False, "error": f"User not found: {identity_id}"}

        website_ids = [
            row.id
            for row in db.query(Website.id)
            .filter(Website.owner_id == identity_id)
            .order_by(Website.created_at.asc())
            .all()
        ]

        if list(user.website_ids or []) != website_ids:
            logger.info(
                f"[REPAIR] Relinking {len(website_ids)} websites for {identity_id} "
                f"(had {len(user.website_ids or [])})"
            )
            user.website_ids = website_ids
            db.commit()

        return {"success": True, "identity_id": identity_id, "website_count": len(website_ids)}

    except Exception as e:
        db.rollback()
        logger.error(f"Error reconciling websites for {identity_id}: {e}", exc_info=True)
        return {"success": False, "error": str(e)}

    finally:
        db.close()


async def cleanup_expired_tokens(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    Delete token records that expired more than a day ago.

    Returns:
        Dict with count of tokens removed
    """
    db = get_sessionmaker()()

    try:
        threshold = utc_now() - TOKEN_RETENTION
        removed = db.query(Token).filter(Token.expires_at < threshold).delete(synchronize_session=False)
        db.commit()

        if removed:
            logger.info(f"[CLEANUP] Removed {removed} expired tokens")

        return {"success": True, "tokens_removed": removed}

    except Exception as e:
        db.rollback()
        logger.error(f"Token cleanup failed: {e}", exc_info=True)
        return {"success": False, "error": str(e)}

    finally:
        db.close()
