"""
Pydantic schemas for authentication endpoints.
"""
from pydantic import BaseModel, ConfigDict, Field

from ...domain.entities.user import Identity


class LoginRequest(BaseModel):
    """User login request."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class RegisterRequest(BaseModel):
    """
    User registration request.

    A role sent by the client is ignored; new accounts are plain users.
    """

    model_config = ConfigDict(extra='ignore')

    username: str = Field(..., min_length=3, max_length=50, description="Username")
    password: str = Field(
        ...,
        description="Password (min 8 chars, must include upper, lower and a digit)"
    )


class UserSummary(BaseModel):
    """Public view of an identity."""
    username: str
    role: str

    @classmethod
    def from_identity(cls, identity: Identity) -> 'UserSummary':
        return cls(**identity.to_summary())


class AuthResponse(BaseModel):
    """Token plus the user it was issued to."""
    token: str
    user: UserSummary


class VerifyResponse(BaseModel):
    user: UserSummary


class ErrorResponse(BaseModel):
    """Error envelope shared by all failures."""
    error: str
    message: str
    details: dict = Field(default_factory=dict)
