from enum import Enum
from pydantic import BaseModel


class UserType(str, Enum):
    customer = "customer"
    seller = "seller"


class AuthUser(BaseModel):
    id: str
    email: str | None = None
    user_type: UserType | None = None


class Session(BaseModel):
    """Proof of identity resolved from a bearer token."""

    access_token: str
    user: AuthUser

    @property
    def user_id(self) -> str:
        return self.user.id


class CredentialsPayload(BaseModel):
    # Plain strings: the form messages are produced by utils.validation
    email: str = ""
    password: str = ""


class SignupPayload(CredentialsPayload):
    confirm_password: str = ""


class ResetPasswordPayload(BaseModel):
    email: str = ""


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AuthUser
    next: str


class SignupResponse(BaseModel):
    user: AuthUser
    access_token: str = ""
    next: str
