"""Single-admin cookie login.

Authentication is only enforced when ``ADMIN_PASSWORD`` is configured; a
successful login sets an httpOnly ``auth`` cookie holding an HMAC of the
admin username keyed by the password, which the protected
routers check through ``require_auth``.
"""

import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from fairshare.core.config import Settings
from fairshare.models.auth import LoginIn
from fairshare.routers.deps import AUTH_COOKIE, auth_token, get_app_settings

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("fairshare.auth")


@router.post("/login", summary="Log in as the admin user")
async def login(
    payload: LoginIn,
    response: Response,
    settings: Settings = Depends(get_app_settings),
):
    if not settings.admin_password:
        logger.error("login attempted but ADMIN_PASSWORD is not set")
        raise HTTPException(status_code=400, detail="server misconfiguration: ADMIN_PASSWORD not set")
    if payload.username != settings.admin_username:
        raise HTTPException(status_code=400, detail="invalid username")
    if not hmac.compare_digest(payload.password.encode(), settings.admin_password.encode()):
        logger.warning("failed login", extra={"context": {"username": payload.username}})
        raise HTTPException(status_code=400, detail="wrong password")

    response.set_cookie(
        AUTH_COOKIE,
        auth_token(settings),
        max_age=settings.auth_cookie_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return {"status": "ok"}


@router.api_route("/logout", methods=["GET", "POST"], summary="Log out")
async def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE, path="/")
    return {"status": "ok"}
