import logging
import secrets
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.deps import ContainerDep
from app.config import settings
from app.core.exceptions import (
    AppException,
    AuthenticationError,
    ServiceUnavailableError,
    TokenInvalidError,
)
from app.core.security import create_access_token, decode_access_token
from app.schemas.user import SessionResponse, SessionUser, Token
from app.services.github_service import GITHUB_OAUTH_AUTHORIZE_URL

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["auth"])

SESSION_COOKIE = "gitgud_session"
STATE_COOKIE = "gitgud_oauth_state"

bearer_scheme = HTTPBearer(auto_error=False)


def _callback_url() -> str:
    return f"{settings.BACKEND_URL}/api/v1/auth/github/callback"


def _read_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionUser:
    """Session from the bearer token, or from the session cookie set by the OAuth callback."""
    token = _read_token(request, credentials)
    if not token:
        raise AuthenticationError()
    payload = decode_access_token(token)
    if payload is None:
        raise TokenInvalidError()
    return SessionUser(user_id=payload.sub, username=payload.username, avatar_url=payload.avatar_url)


@router.get("/github")
async def github_login() -> RedirectResponse:
    """Start the GitHub OAuth flow."""
    if not settings.github_oauth_configured:
        raise ServiceUnavailableError(
            "GitHub OAuth is not configured. Set GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET."
        )

    state = secrets.token_urlsafe(24)
    query = urlencode({
        "client_id": settings.GITHUB_CLIENT_ID,
        "redirect_uri": _callback_url(),
        "scope": "read:user",
        "state": state,
    })
    response = RedirectResponse(f"{GITHUB_OAUTH_AUTHORIZE_URL}?{query}")
    response.set_cookie(STATE_COOKIE, state, max_age=600, httponly=True, samesite="lax")
    return response


@router.get("/github/callback")
async def github_callback(
    request: Request,
    container: ContainerDep,
    code: str | None = None,
    state: str | None = None,
) -> RedirectResponse:
    """Finish the OAuth flow, start a session and send the user back to the PVP page."""
    try:
        if not settings.github_oauth_configured:
            raise ServiceUnavailableError("GitHub OAuth is not configured")
        expected_state = request.cookies.get(STATE_COOKIE)
        if not code or not state or not expected_state or not secrets.compare_digest(
            state, expected_state
        ):
            raise AuthenticationError("Invalid OAuth state")

        github = container.github_service
        access_token = await github.exchange_oauth_code(
            settings.GITHUB_CLIENT_ID,
            settings.GITHUB_CLIENT_SECRET,
            code,
            _callback_url(),
        )
        github_user = await github.get_authenticated_user(access_token)
        user = SessionUser(
            user_id=str(github_user["id"]),
            username=github_user["login"],
            avatar_url=github_user.get("avatar_url"),
        )
    except AppException as e:
        logger.error("GitHub OAuth error: %s", e.message)
        query = urlencode({"auth": "error", "message": e.message})
        response = RedirectResponse(f"{settings.FRONTEND_URL}/pvp?{query}")
        response.delete_cookie(STATE_COOKIE)
        return response

    logger.info("User %s (%s) signed in", user.username, user.user_id)
    response = RedirectResponse(f"{settings.FRONTEND_URL}/pvp?auth=success")
    response.set_cookie(
        SESSION_COOKIE,
        create_access_token(user),
        max_age=settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600,
        httponly=True,
        samesite="lax",
    )
    response.delete_cookie(STATE_COOKIE)
    return response


@router.get("/me", response_model=SessionResponse)
async def get_me(
    current_user: Annotated[SessionUser, Depends(get_current_user)],
) -> SessionResponse:
    return SessionResponse(user=current_user)


@router.post("/logout")
async def logout(response: Response) -> dict:
    response.delete_cookie(SESSION_COOKIE)
    return {"success": True}


@router.post("/token", response_model=Token)
async def session_token(
    current_user: Annotated[SessionUser, Depends(get_current_user)],
) -> Token:
    """Re-issue the session as a bearer token, e.g. for the browser extension."""
    return Token(access_token=create_access_token(current_user))
