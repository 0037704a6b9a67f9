from fastapi import APIRouter, Depends, HTTPException, Query

from wya.core.deps import get_location_service, get_user_service, get_visibility_service
from wya.core.errors import OrphanedRecordError, UpstreamFailure, UserAlreadyExists, UserNotFound
from wya.models.user import Avatar
from wya.schemas.user import (
    SignupRequest, SignupResponse, LocationUpdate, ShowLocationUpdate, ShowCityUpdate,
    AvatarUpdate, PushTokenUpdate, BlockRequest, UserResponse, PhoneLookupResponse,
    MarkerResponse, ContactResponse,
)
from wya.services.location_service import LocationService
from wya.services.user_service import UserService
from wya.services.visibility_service import LiveSelf, VisibilityService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(users: UserService = Depends(get_user_service)):
    return await users.list_users()


@router.get("/phone/{phone_number}", response_model=PhoneLookupResponse, response_model_exclude_none=True)
async def lookup_by_phone(
    phone_number: str,
    users: UserService = Depends(get_user_service),
):
    user = await users.find_by_phone(phone_number)
    if not user:
        return PhoneLookupResponse(exists=False)
    return PhoneLookupResponse(exists=True, id=user.id, data=UserResponse.model_validate(user))


@router.post("/signup", response_model=SignupResponse)
async def signup(
    body: SignupRequest,
    users: UserService = Depends(get_user_service),
):
    try:
        user = await users.signup(
            body.identity_id, body.phone_number, body.first_name, body.last_name, body.email
        )
    except UserAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SignupResponse(id=user.id)


@router.post("/location")
async def update_location(
    body: LocationUpdate,
    locations: LocationService = Depends(get_location_service),
):
    if not await locations.update_location(body.user_id, body.lat, body.lon):
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True}


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
):
    try:
        return await users.get_user(user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")


@router.patch("/{user_id}/show-location")
async def update_show_location(
    user_id: str,
    body: ShowLocationUpdate,
    users: UserService = Depends(get_user_service),
):
    try:
        await users.set_show_location(user_id, body.show_location)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True}


@router.patch("/{user_id}/show-city")
async def update_show_city(
    user_id: str,
    body: ShowCityUpdate,
    users: UserService = Depends(get_user_service),
):
    try:
        await users.set_show_city(user_id, body.show_city)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True}


@router.patch("/{user_id}/avatar")
async def update_avatar(
    user_id: str,
    body: AvatarUpdate,
    users: UserService = Depends(get_user_service),
):
    try:
        await users.set_avatar(user_id, body.avatar)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True}


@router.patch("/{user_id}/push-token")
async def update_push_token(
    user_id: str,
    body: PushTokenUpdate,
    users: UserService = Depends(get_user_service),
):
    try:
        await users.set_push_token(user_id, body.expo_push_token)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True}


@router.patch("/{user_id}/block")
async def block_user(
    user_id: str,
    body: BlockRequest,
    visibility: VisibilityService = Depends(get_visibility_service),
):
    try:
        await visibility.block(user_id, body.blocked_user_id)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@router.get("/{user_id}/visible", response_model=list[MarkerResponse])
async def visible_users(
    user_id: str,
    lat: float | None = Query(None, ge=-90, le=90),
    lon: float | None = Query(None, ge=-180, le=180),
    avatar: Avatar | None = Query(None),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    """Map markers the user may see. lat/lon/avatar override the stored self entry."""
    live = LiveSelf(latitude=lat, longitude=lon, avatar=avatar.value if avatar else None)
    try:
        return await visibility.map_for(user_id, live)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/{user_id}/contacts", response_model=list[ContactResponse])
async def contacts(
    user_id: str,
    visibility: VisibilityService = Depends(get_visibility_service),
):
    try:
        return await visibility.contacts_for(user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
):
    try:
        await users.delete_account(user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except OrphanedRecordError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except UpstreamFailure:
        raise HTTPException(status_code=500, detail="Failed to delete identity")
    return {"success": True}
