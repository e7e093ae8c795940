"""
Profile and memory schemas
"""
from typing import Optional
from pydantic import BaseModel, Field


class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ProfileResponse(BaseModel):
    """Response schema for the user's profile"""
    id: int
    email: str
    first_name: str
    last_name: str
    age: Optional[int] = None
    location: Optional[Location] = None
    voice: Optional[str] = None
    voice_mode_enabled: bool = False
    memory: str = ""
    last_conversation_id: Optional[int] = None
    is_admin: bool = False

    class Config:
        from_attributes = True


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=1, le=150)
    location: Optional[Location] = None
    voice: Optional[str] = Field(None, max_length=100)
    voice_mode_enabled: Optional[bool] = None


class MemoryResponse(BaseModel):
    memory: str = ""


class MemoryUpdateRequest(BaseModel):
    memory: str = Field(default="", max_length=20000)

    class Config:
        json_schema_extra = {
            "example": {
                "memory": "I'm vegetarian and I prefer short answers."
            }
        }
