"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Cookie, Depends, Response, status

from core.config import Settings, get_settings
from core.responses import envelope

from . import schemas, service
from .cookies import REFRESH_TOKEN_COOKIE, clear_auth_cookies, set_auth_cookies
from .dependencies import get_current_user

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    settings: Settings = Depends(get_settings),
) -> dict:
    user = await service.register(payload.email, payload.password, settings, name=payload.name)
    return envelope("User registered successfully", user, status_code=status.HTTP_201_CREATED)


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
) -> dict:
    result = await service.login(payload.email, payload.password, settings)
    set_auth_cookies(
        response,
        settings,
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )
    return envelope(
        "User logged in successfully",
        {
            "user": result.user,
            "accessToken": result.tokens.access_token,
            "refreshToken": result.tokens.refresh_token,
        },
    )


@router.post("/refresh-token")
async def refresh_token(
    response: Response,
    payload: schemas.RefreshRequest | None = Body(default=None),
    refresh_token_cookie: str | None = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE),
    settings: Settings = Depends(get_settings),
) -> dict:
    token = refresh_token_cookie or (payload.refresh_token if payload is not None else None)
    access_token = await service.refresh_access_token(token, settings)
    set_auth_cookies(response, settings, access_token=access_token)
    return envelope("New access token generated successfully", {"accessToken": access_token})


@router.post("/logout")
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings),
) -> dict:
    # Tokens are stateless; logging out only drops the browser cookies.
    clear_auth_cookies(response, settings)
    return envelope("User logged out successfully")


@router.post("/forget-password")
async def forget_password(
    payload: schemas.ForgetPasswordRequest,
    settings: Settings = Depends(get_settings),
) -> dict:
    result = await service.forget_password(payload.email, settings)
    return envelope(result["message"], result)


@router.post("/reset-password")
async def reset_password(
    payload: schemas.ResetPasswordRequest,
    settings: Settings = Depends(get_settings),
) -> dict:
    result = await service.reset_password(payload.token, payload.new_password, settings)
    return envelope(result["message"], result)


@router.get("/me")
async def me(current_user: dict = Depends(get_current_user)) -> dict:
    return envelope("User retrieved successfully", current_user)
