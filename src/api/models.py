"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Fields are optional on purpose: missing values are reported by the domain
as a failed OperationResult rather than a 422.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_Request):
    """Request model for starting a signup."""

    name: str | None = None
    email: str | None = None
    do_send: bool = Field(True, alias="doSend", description="Email the confirmation code")


class ConfirmRequest(_Request):
    """Request model for confirming a signup or finishing a login."""

    code: str | None = None
    email: str | None = None


class LoginRequest(_Request):
    """Request model for requesting a login code."""

    email: str | None = None
    do_send: bool = Field(True, alias="doSend", description="Email the login code")


class VerifyRequest(_Request):
    """Request model for token verification."""

    token: str | None = None


class OperationRequest(_Request):
    """Body of the single dispatch endpoint used by the browser client."""

    operation: str | None = Field(None, description="register, register2, login, login2 or jwt")
    name: str | None = None
    email: str | None = None
    code: str | None = None
    token: str | None = None
    do_send: bool = Field(True, alias="doSend")


class OperationResponse(BaseModel):
    """Uniform response for every operation."""

    success: bool
    output: str
