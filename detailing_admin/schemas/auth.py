from pydantic import BaseModel
from typing import Optional


class LoginIn(BaseModel):
    password: Optional[str] = None


class AuthResult(BaseModel):
    success: bool = True
    message: Optional[str] = None


class AuthStatus(BaseModel):
    authenticated: bool
    message: str
