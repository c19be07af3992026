"""Pydantic schemas for authentication calls."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from tasksubmit.core.auth import Role

# --- Request Schemas ---


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class SignupRequest(BaseModel):
    """Request body for POST /auth/register."""

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Password")
    name: str = Field(..., description="Display name")
    role: Role = Field(default=Role.LEARNER, description="Learner or instructor")


# --- Response Schemas ---


class User(BaseModel):
    """Identity record issued by the authentication backend."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"), description="User ID")
    name: str = Field(default="", description="Display name")
    role: Role = Field(..., description="User role")
    email: str | None = Field(default=None, description="User email")

    @property
    def is_instructor(self) -> bool:
        return self.role is Role.INSTRUCTOR


class AuthResponse(BaseModel):
    """Successful login/register payload."""

    model_config = ConfigDict(extra="ignore")

    token: str = Field(..., min_length=1, description="Opaque bearer token")
    user: User
