"""FastAPI router exposing user profile and activity operations."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Response

from users_repo import (
    ActivityItem,
    User,
    UserPage,
    UserProfileUpdate,
    UserRepositoryError,
    UserThreads,
    get_activity,
    get_authored_content,
    get_user,
    list_users,
    upsert_user,
)

router = APIRouter(prefix="/users", tags=["users"])


def _bad_gateway(exc: UserRepositoryError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(exc))


@router.get("", response_model=UserPage)
async def search_users(
    caller_id: str = Query(...),
    search: str = Query(default=""),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    sort: Literal["asc", "desc"] = Query(default="desc"),
):
    """Return a page of users other than the caller."""

    try:
        return await list_users(
            caller_id=caller_id,
            search_string=search,
            page_number=page,
            page_size=page_size,
            sort_order=sort,
        )
    except UserRepositoryError as exc:
        raise _bad_gateway(exc) from exc


@router.put("/{user_id}", status_code=204)
async def save_profile(user_id: str, payload: UserProfileUpdate) -> Response:
    """Create or update the profile of ``user_id`` and mark it onboarded."""

    try:
        await upsert_user(
            user_id=user_id,
            username=payload.username,
            name=payload.name,
            bio=payload.bio,
            image=payload.image,
            path=payload.path,
        )
    except UserRepositoryError as exc:
        raise _bad_gateway(exc) from exc
    return Response(status_code=204)


@router.get("/{user_id}", response_model=User)
async def read_user(user_id: str):
    try:
        user = await get_user(user_id)
    except UserRepositoryError as exc:
        raise _bad_gateway(exc) from exc
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}/threads", response_model=UserThreads)
async def read_user_threads(user_id: str):
    """Return the user's threads with replies and reply authors resolved."""

    try:
        content = await get_authored_content(user_id)
    except UserRepositoryError as exc:
        raise _bad_gateway(exc) from exc
    if content is None:
        raise HTTPException(status_code=404, detail="User not found")
    return content


@router.get("/{user_key}/activity", response_model=list[ActivityItem])
async def read_activity(user_key: str):
    """Return replies by other users to threads authored by ``user_key``."""

    try:
        return await get_activity(user_key)
    except UserRepositoryError as exc:
        raise _bad_gateway(exc) from exc
