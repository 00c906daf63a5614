from pydantic import BaseModel, EmailStr


class AdminLoginRequest(BaseModel):
    password: str


class AdminToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class GoogleProfile(BaseModel):
    name: str
    email: EmailStr
    picture: str | None = None
