"""
Authentication schemas
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator

from .profile import Location


def _normalize_email(v: str) -> str:
    v = (v or "").strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Please enter a valid email address")
    return v


class SignupRequest(BaseModel):
    """Request schema for account creation"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str
    password: str = Field(..., min_length=6, max_length=128)
    age: int = Field(..., ge=1, le=150)
    location: Optional[Location] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "password": "analytical-engine",
                "age": 28,
                "location": {"latitude": 51.5072, "longitude": -0.1276}
            }
        }


class LoginRequest(BaseModel):
    """Request schema for login"""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return (v or "").strip().lower()


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return (v or "").strip().lower()


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class AuthResponse(BaseModel):
    """Response schema for signup and login"""
    success: bool = True
    message: str
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None


class StatusResponse(BaseModel):
    """Plain acknowledgement"""
    success: bool = True
    message: str
