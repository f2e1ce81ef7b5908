"""LinkedIn authentication endpoints."""
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.auth.session import (
    RequestContext,
    clear_session_cookie,
    get_request_context,
    set_session_cookie,
)
from app.database import get_db
from app.dependencies import get_linkedin_client
from app.schemas.auth import LogoutResponse
from app.services.accounts import record_token, upsert_user
from app.services.linkedin import LinkedInClient
from app.utils.exceptions import AppException, InvalidInputError, internal_error
from app.utils.logger import logger

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/linkedin")
async def begin_linkedin_auth(
    ctx: RequestContext = Depends(get_request_context),
    provider: LinkedInClient = Depends(get_linkedin_client),
) -> RedirectResponse:
    """
    Start the LinkedIn OAuth flow.

    Stores a fresh state nonce in the session and redirects to LinkedIn.
    """
    authorization_url, state = provider.begin_auth()

    session_id = ctx.session_id or ctx.sessions.new_session_id()
    data = dict(ctx.data)
    data["state"] = state
    await ctx.sessions.save(session_id, data)

    response = RedirectResponse(authorization_url, status_code=307)
    set_session_cookie(response, ctx, session_id)
    return response


@router.get("/linkedin/callback")
async def linkedin_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    error_description: Optional[str] = Query(None),
    ctx: RequestContext = Depends(get_request_context),
    provider: LinkedInClient = Depends(get_linkedin_client),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    """
    Complete the LinkedIn OAuth flow.

    Validates state, exchanges the code, upserts the user and token record,
    then starts an authenticated session and redirects to the dashboard.
    """
    settings = ctx.settings

    if error:
        logger.warning(f"[AUTH] LinkedIn returned error {error}: {error_description}")
        return RedirectResponse(
            f"{settings.frontend_url}/?{urlencode({'error': error})}",
            status_code=307,
        )

    expected_state = ctx.data.get("state")
    # State is single use, whatever the outcome
    if ctx.session_id and expected_state:
        data = dict(ctx.data)
        data.pop("state", None)
        await ctx.sessions.save(ctx.session_id, data)

    try:
        if not code:
            raise InvalidInputError("Missing authorization code")
        grant = await provider.exchange_code(code, state, expected_state)
        profile = await provider.fetch_profile(grant.access_token)

        upsert_user(db, profile)
        record_token(db, profile.id, grant, settings.token_salt)

        # New session id on login so a pre-auth cookie cannot be fixated
        await ctx.sessions.destroy(ctx.session_id)
        session_id = ctx.sessions.new_session_id()
        await ctx.sessions.save(session_id, {
            "access_token": grant.access_token,
            "identity_id": profile.id,
            "profile": profile.snapshot(),
        })

        logger.info(f"[AUTH] Login completed for {profile.id}")
        response = RedirectResponse(f"{settings.frontend_url}/#/dashboard", status_code=307)
        set_session_cookie(response, ctx, session_id)
        return response
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"[AUTH] LinkedIn callback failed: {e}", exc_info=True)
        raise internal_error(settings, "complete LinkedIn authentication", e)


@router.api_route("/logout", methods=["GET", "POST"], response_model=LogoutResponse)
async def logout(ctx: RequestContext = Depends(get_request_context)):
    """Destroy the session and clear its cookie."""
    await ctx.sessions.destroy(ctx.session_id)

    response = JSONResponse({"success": True})
    clear_session_cookie(response, ctx)
    return response
