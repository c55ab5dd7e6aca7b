"""Request bodies for the auth routes"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_Request):
    """Registration form. Domain and password rules are enforced downstream."""

    email: str
    password: str
    display_name: Optional[str] = Field(default=None, alias="displayName")


class LoginRequest(_Request):
    email: str
    password: str


class EmailRequest(_Request):
    """Body for password reset and confirmation resend"""

    email: str
