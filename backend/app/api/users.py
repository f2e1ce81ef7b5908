"""Website management endpoints for the signed-in user."""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.auth.session import AuthenticatedUser, RequestContext, get_request_context, require_valid_token
from app.config import Settings, get_settings
from app.database import get_db
from app.dependencies import get_generation_service
from app.schemas.auth import CheckAuthResponse, ProfileSnapshot
from app.schemas.website import (
    DeleteAllResponse,
    GenerateWebsiteRequest,
    GenerateWebsiteResponse,
    PublishResponse,
    RenameWebsiteRequest,
    RenameWebsiteResponse,
    WebsiteListItem,
)
from app.services.generation import WebsiteGenerationService
from app.services.websites import WebsiteStore
from app.utils.exceptions import AppException, handle_database_error, internal_error
from app.utils.logger import logger

router = APIRouter(prefix="/user", tags=["websites"])


@router.get("/check-auth", response_model=CheckAuthResponse)
async def check_auth(ctx: RequestContext = Depends(get_request_context)) -> CheckAuthResponse:
    """Report whether the caller has an authenticated session."""
    authenticated = bool(ctx.data.get("access_token") and ctx.identity_id)
    profile = ctx.data.get("profile") if authenticated else None
    return CheckAuthResponse(
        authenticated=authenticated,
        userId=ctx.identity_id if authenticated else None,
        profile=ProfileSnapshot(**profile) if profile else None,
    )


@router.get("/websites", response_model=list[WebsiteListItem])
async def list_websites(
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> list[WebsiteListItem]:
    """
    List the caller's websites, newest first.

    Args:
        user: Authenticated session identity
        db: Database session

    Returns:
        List of websites owned by the caller
    """
    try:
        websites = WebsiteStore(db).list_by_owner(user.identity_id)
        return [WebsiteListItem.from_orm(w) for w in websites]
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Failed to list websites for {user.identity_id}: {e}", exc_info=True)
        raise handle_database_error(e, "list websites", settings)


@router.post("/websites/generate", response_model=GenerateWebsiteResponse)
async def generate_website(
    request: Optional[GenerateWebsiteRequest] = Body(None),
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    service: WebsiteGenerationService = Depends(get_generation_service),
) -> GenerateWebsiteResponse:
    """
    Generate a portfolio website from the caller's LinkedIn profile.

    Returns:
        The new website's id and name, plus any non-fatal warnings
    """
    try:
        result = await service.generate(
            WebsiteStore(db),
            user.identity_id,
            user.access_token,
            requested_name=request.name if request else None,
        )
        return GenerateWebsiteResponse(
            websiteId=result.website_id,
            websiteName=result.website_name,
            warnings=result.warnings,
        )
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"[GENERATE] Website generation failed for {user.identity_id}: {e}", exc_info=True)
        raise internal_error(settings, "generate website", e)


@router.delete("/websites/all", response_model=DeleteAllResponse)
async def delete_all_websites(
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DeleteAllResponse:
    """Delete every website the caller owns."""
    try:
        count = WebsiteStore(db).delete_all_by_owner(user.identity_id)
        return DeleteAllResponse(success=True, deletedCount=count)
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete websites for {user.identity_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete websites", settings)


@router.put("/websites/{website_id}", response_model=RenameWebsiteResponse)
async def rename_website(
    website_id: str,
    request: RenameWebsiteRequest,
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RenameWebsiteResponse:
    """
    Rename one of the caller's websites.

    Args:
        website_id: The website to rename
        request: New name

    Returns:
        The updated website
    """
    try:
        website = WebsiteStore(db).rename(website_id, user.identity_id, request.newName)
        return RenameWebsiteResponse(success=True, website=WebsiteListItem.from_orm(website))
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to rename website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "rename website", settings)


@router.delete("/websites/{website_id}")
async def delete_website(
    website_id: str,
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict[str, bool]:
    """Delete one of the caller's websites."""
    try:
        WebsiteStore(db).delete(website_id, user.identity_id)
        return {"success": True}
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete website", settings)


@router.post("/websites/{website_id}/publish", response_model=PublishResponse)
async def publish_website(
    website_id: str,
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> PublishResponse:
    """Make a website readable without authentication."""
    try:
        WebsiteStore(db).set_published(website_id, user.identity_id, True)
        return PublishResponse(
            success=True,
            published=True,
            publicUrl=f"{settings.public_base_url.rstrip('/')}/website/{website_id}",
        )
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to publish website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "publish website", settings)


@router.post("/websites/{website_id}/unpublish", response_model=PublishResponse)
async def unpublish_website(
    website_id: str,
    user: AuthenticatedUser = Depends(require_valid_token),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> PublishResponse:
    """Make a website private to its owner again."""
    try:
        WebsiteStore(db).set_published(website_id, user.identity_id, False)
        return PublishResponse(success=True, published=False)
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to unpublish website {website_id}: {e}", exc_info=True)
        raise handle_database_error(e, "unpublish website", settings)
