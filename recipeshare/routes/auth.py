from __future__ import annotations
from fastapi import APIRouter, Body, Request

from ..config import Settings
from ..errors import Unauthorized
from ..schemas import LoginRequest, LoginResponse
from ..security import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=LoginResponse, summary="Login (modo dev) con PIN para emitir JWT")
def login_dev(request: Request, req: LoginRequest = Body(..., examples=[
    {"email": "alex@example.com", "name": "Alex Cook", "devPin": "000000"}
])):
    settings: Settings = request.app.state.settings
    pin = req.dev_pin or ""
    if not settings.auth_dev_pin or pin != settings.auth_dev_pin:
        raise Unauthorized("Invalid PIN")
    user_id = req.email.lower()
    token = create_access_token(settings, user_id=user_id, name=req.name)
    return LoginResponse(access_token=token, user_id=user_id)
