"""Shared router dependencies.

Settings live on ``app.state`` so that an app built with a settings
override (tests) never touches the cached process-wide settings.
"""

import hashlib
import hmac

from fastapi import Depends, HTTPException, Request

from fairshare.core.config import Settings
from fairshare.db.dal import Database

AUTH_COOKIE = "auth"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(settings: Settings = Depends(get_app_settings)) -> Database:
    return Database(settings.db_path)


def auth_token(settings: Settings) -> str:
    """Cookie value proving a login: the admin username signed with the password."""
    key = (settings.admin_password or "").encode()
    return hmac.new(key, settings.admin_username.encode(), hashlib.sha256).hexdigest()


def require_auth(request: Request, settings: Settings = Depends(get_app_settings)) -> None:
    if not settings.auth_enabled:
        return
    cookie = request.cookies.get(AUTH_COOKIE) or ""
    if not hmac.compare_digest(cookie.encode(), auth_token(settings).encode()):
        raise HTTPException(status_code=401, detail="login required")


def require_dev_environment(settings: Settings = Depends(get_app_settings)) -> None:
    """Destructive maintenance actions are refused in production."""
    if settings.is_production:
        raise HTTPException(status_code=403, detail="not available in production")


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=404, detail=detail)
