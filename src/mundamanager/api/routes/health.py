"""Liveness and profile registration."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from mundamanager.api.dependencies import ApiStateDep, CurrentUser, SessionDep
from mundamanager.schemas import ProfileCreate, ProfileRead
from mundamanager.services.permissions import get_profile, register_profile

router = APIRouter()


@router.get("/health")
def health(state: ApiStateDep) -> dict[str, object]:
    database_ok = state.healthy()
    return {
        "status": "ok" if database_ok else "degraded",
        "database": database_ok,
        "cache_entries": len(state.cache),
    }


@router.post("/profiles", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
def create_profile(
    request: ProfileCreate, user_id: CurrentUser, session: SessionDep, state: ApiStateDep
) -> ProfileRead:
    if request.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Cannot register another user"
        )
    profile = register_profile(session, state.cache, request.id, request.username)
    return ProfileRead.model_validate(profile)


@router.get("/profiles/me", response_model=ProfileRead)
def my_profile(user_id: CurrentUser, session: SessionDep) -> ProfileRead:
    return ProfileRead.model_validate(get_profile(session, user_id))
