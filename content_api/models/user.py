# content_api/models/user.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

PHONE_PATTERN = r"^\+?[0-9]{5,20}$"


class User(BaseModel):
    """Account document as stored in the `user` collection."""
    id: int = Field(..., alias="_id")
    phone: str
    password: str  # hex digest of plaintext + salt
    salt: str
    nickname: Optional[str] = None
    last_login_ip: Optional[str] = None
    last_login_time: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

    # --- Pydantic Schemas ---
    class Create(BaseModel):
        phone: str = Field(..., pattern=PHONE_PATTERN)
        password: str = Field(..., min_length=6, max_length=64)
        nickname: Optional[str] = Field(None, max_length=50)

    class Login(BaseModel):
        phone: str = Field(..., min_length=1)
        password: str = Field(..., min_length=1)

    class Response(BaseModel):
        # Never expose password/salt
        id: int
        phone: str
        nickname: Optional[str] = None
        last_login_ip: Optional[str] = None
        last_login_time: Optional[str] = None
        created_at: datetime
