import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator

from wya.models.user import Avatar
from wya.services.push_service import is_push_token


class SignupRequest(BaseModel):
    identity_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("clerkUserID", "identity_id", "external_identity_id"),
    )
    phone_number: str | None = Field(default=None, validation_alias=AliasChoices("phoneNumber", "phone_number"))
    first_name: str = Field(default="", validation_alias=AliasChoices("firstName", "first_name"))
    last_name: str = Field(default="", validation_alias=AliasChoices("lastName", "last_name"))
    email: str | None = None


class SignupResponse(BaseModel):
    id: uuid.UUID


class LocationUpdate(BaseModel):
    user_id: str = Field(validation_alias=AliasChoices("userID", "user_id"))
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False, validation_alias=AliasChoices("lat", "latitude"))
    lon: float = Field(ge=-180, le=180, allow_inf_nan=False, validation_alias=AliasChoices("lon", "longitude"))


class ShowLocationUpdate(BaseModel):
    show_location: bool = Field(validation_alias=AliasChoices("showLocation", "show_location"))


class ShowCityUpdate(BaseModel):
    show_city: bool = Field(validation_alias=AliasChoices("showCity", "show_city"))


class AvatarUpdate(BaseModel):
    avatar: Avatar = Field(validation_alias=AliasChoices("avatarName", "avatar"))


class PushTokenUpdate(BaseModel):
    expo_push_token: str | None = Field(validation_alias=AliasChoices("expoPushToken", "expo_push_token"))

    @field_validator("expo_push_token")
    @classmethod
    def check_token(cls, v: str | None) -> str | None:
        if v is not None and not is_push_token(v):
            raise ValueError("not an Expo push token")
        return v


class BlockRequest(BaseModel):
    blocked_user_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("blockedUserId", "blocked_user_id", "blockedId"),
    )


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    external_identity_id: str
    first_name: str
    last_name: str
    email: str | None = None
    phone_number: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    last_updated: datetime | None = None
    show_location: bool = False
    show_city: bool = False
    avatar: str | None = None
    blocked: list[str] = []
    blocked_by: list[str] = []
    expo_push_token: str | None = None


class PhoneLookupResponse(BaseModel):
    exists: bool
    id: uuid.UUID | None = None
    data: UserResponse | None = None


class MarkerResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    avatar: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    last_updated: datetime | None = None
    city_visible: bool
    is_self: bool = False


class ContactResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    avatar: str | None = None
    email: str | None = None
    phone_number: str | None = None
    city_visible: bool
    latitude: float | None = None
    longitude: float | None = None
    last_updated: datetime | None = None
