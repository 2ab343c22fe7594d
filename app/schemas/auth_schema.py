from pydantic import BaseModel, EmailStr

from .common import Role


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: Role


class AuthResponse(BaseModel):
    user: UserOut
    token: str
