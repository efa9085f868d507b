from __future__ import annotations
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header, Request

from .config import Settings
from .errors import Unauthorized
from .models import ANONYMOUS, AuthenticatedUser, Identity

ALGO = "HS256"

def create_access_token(settings: Settings, user_id: str, name: Optional[str] = None, expires_minutes: int | None = None) -> str:
    exp_minutes = expires_minutes or settings.jwt_expire_minutes
    now = datetime.now(tz=timezone.utc)
    payload: Dict[str, Any] = {
        "sub": user_id,
        "name": name or user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=exp_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGO)

def decode_access_token(settings: Settings, token: str) -> AuthenticatedUser:
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[ALGO])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")
    sub = data.get("sub")
    if not sub or not isinstance(sub, str):
        raise Unauthorized("Invalid token payload")
    name = data.get("name")
    return AuthenticatedUser(user_id=sub, display_name=name if isinstance(name, str) and name else sub)

def _extract_token(x_api_key: Optional[str], authorization: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Devuelve (api_key, bearer_token)
    """
    api_key = x_api_key.strip() if x_api_key else None
    bearer = None
    if authorization:
        parts = authorization.split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer":
            bearer = parts[1].strip()
    return api_key or None, bearer or None

def get_identity(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Identity:
    """
    Identidad opcional: sin credenciales -> Anonymous.
    Credenciales inválidas siempre son 401, también en rutas de lectura.
    """
    settings: Settings = request.app.state.settings
    api_key, bearer = _extract_token(x_api_key, authorization)
    # 1) JWT Bearer
    if bearer:
        return decode_access_token(settings, bearer)

    # 2) API Key (dev / backend-to-backend)
    if api_key:
        user_id = settings.parsed_api_keys().get(api_key)
        if not user_id:
            raise Unauthorized("Invalid API key")
        return AuthenticatedUser(user_id=user_id, display_name=user_id)

    return ANONYMOUS

def require_user(identity: Identity = Depends(get_identity)) -> AuthenticatedUser:
    if not isinstance(identity, AuthenticatedUser):
        raise Unauthorized("Missing credentials")
    return identity
