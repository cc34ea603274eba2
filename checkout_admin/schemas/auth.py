from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=255)


class AdminUserRead(BaseModel):
    id: int
    email: str
    name: str | None = None


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: AdminUserRead
