from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional

Role = Literal["admin", "quiz_manager", "user"]

class UserCreate(BaseModel):
    email: str
    username: Optional[str] = Field(default=None, max_length=50)
    password: str = Field(min_length=1)
    role: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_shape(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("a valid email is required")
        return value

    @field_validator("username")
    @classmethod
    def blank_username_is_null(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

class SignupResponse(BaseModel):
    ok: bool = True
    role: Role

class LoginRequest(BaseModel):
    identifier: Optional[str] = None
    email: Optional[str] = None
    password: str

    @model_validator(mode="after")
    def identifier_required(self):
        self.identifier = (self.identifier or self.email or "").strip()
        if not self.identifier:
            raise ValueError("identifier and password required")
        return self

class LoginResponse(BaseModel):
    userId: int
    email: str
    username: Optional[str] = None
    role: Role
    access_token: str
    token_type: str = "bearer"

class GoogleLogin(BaseModel):
    credential: str = Field(min_length=1)

class PasswordResetRequest(BaseModel):
    email: str

class PasswordReset(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UserOut(BaseModel):
    id: int
    email: str
    username: Optional[str] = None
    role: Role

    class Config:
        from_attributes = True
