"""Public website viewing endpoint."""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.auth.session import RequestContext, get_request_context
from app.database import get_db
from app.services.websites import WebsiteStore
from app.utils.exceptions import AppException, handle_database_error
from app.utils.logger import logger

router = APIRouter(tags=["public"])


@router.get("/website/{website_id}", response_class=HTMLResponse)
async def view_website(
    website_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    """
    Serve a website's HTML.

    Published websites are visible to anyone; unpublished ones only to
    their owner's session.
    """
    try:
        html = WebsiteStore(db).fetch_public(website_id, requester_identity_id=ctx.identity_id)
        return HTMLResponse(content=html)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "fetch website", ctx.settings)
