from pydantic import BaseModel
from typing import Optional


class SignupInput(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginInput(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserInfo(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    plan: str
    aiCallsUsed: int
    aiCallsLimit: Optional[int] = None


class AuthResponse(BaseModel):
    user: UserInfo
    token: str


class MeResponse(BaseModel):
    user: UserInfo


class PlanChangeInput(BaseModel):
    plan: str


class ContactSalesInput(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    planName: Optional[str] = None


class ContactSalesResponse(BaseModel):
    success: bool
    message: str
