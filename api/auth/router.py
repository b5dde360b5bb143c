"""
Admin auth HTTP routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/auth/login", response_model=schemas.LoginResponse)
async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    return await service.login(payload)


@router.get("/auth/me", response_model=schemas.AdminResponse)
async def me(admin: dict = Depends(dependencies.get_current_admin)) -> schemas.AdminResponse:
    return service.me(admin)
