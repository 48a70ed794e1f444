
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=120)]

class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=256)
    name: DisplayName

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)

class ProfileUpdateIn(BaseModel):
    name: DisplayName

class UserOut(BaseModel):
    id: int
    email: str
    name: str | None = None
    role: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class AuthOut(BaseModel):
    user: UserOut
    token: str
