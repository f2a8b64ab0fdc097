from __future__ import annotations

import re
from datetime import datetime

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from userhub.domain.users.entities import User

from .common import CamelModel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError("email_invalid", "Email must look like name@domain", {})
    return value


class RegisterRequestDTO(CamelModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=128)
    display_name: str | None = Field(default=None, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class LoginRequestDTO(CamelModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class UpdateProfileRequestDTO(CamelModel):
    display_name: str = Field(min_length=1, max_length=128)

    @field_validator("display_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("missing", "Display name cannot be blank", {})
        return value


class ChangePasswordRequestDTO(CamelModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=1, max_length=128)


class RegisteredUserDTO(CamelModel):
    id: str
    email: str
    display_name: str

    @classmethod
    def from_domain(cls, user: User) -> RegisteredUserDTO:
        return cls(id=user.id, email=user.email, display_name=user.display_name)


class UserDTO(RegisteredUserDTO):
    is_active: bool
    is_admin: bool
    created_at: datetime
    last_login: datetime | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            is_active=user.is_active,
            is_admin=user.is_admin,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class LoginResponseDTO(CamelModel):
    token: str
    user: UserDTO


class OkDTO(CamelModel):
    ok: bool = True
