"""
API v1 routes.

One endpoint per operation. Every endpoint answers 200 with
{success, output}; failures are reported in the body, never as HTTP errors.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_operations
from src.api.models import (
    ConfirmRequest,
    LoginRequest,
    OperationResponse,
    RegisterRequest,
    VerifyRequest,
)
from src.domain.operations import AuthOperations
from src.domain.ports import OperationResult

router = APIRouter(tags=["v1"])


def _respond(result: OperationResult) -> OperationResponse:
    return OperationResponse(success=result.success, output=result.output)


@router.post(
    "/register",
    response_model=OperationResponse,
    summary="Start a signup",
    description="Create an unconfirmed account and email a 6-letter confirmation code.",
)
def register(
    request_data: RegisterRequest,
    operations: AuthOperations = Depends(get_operations),
) -> OperationResponse:
    return _respond(
        operations.register(request_data.name, request_data.email, request_data.do_send)
    )


@router.post(
    "/register/confirm",
    response_model=OperationResponse,
    summary="Confirm a signup",
    description="Exchange the emailed confirmation code for a signed token.",
)
def confirm_registration(
    request_data: ConfirmRequest,
    operations: AuthOperations = Depends(get_operations),
) -> OperationResponse:
    return _respond(operations.confirm_registration(request_data.code, request_data.email))


@router.post(
    "/login",
    response_model=OperationResponse,
    summary="Request a login code",
    description="Email a login code. Unknown emails are registered instead.",
)
def login(
    request_data: LoginRequest,
    operations: AuthOperations = Depends(get_operations),
) -> OperationResponse:
    return _respond(operations.login(request_data.email, request_data.do_send))


@router.post(
    "/login/finish",
    response_model=OperationResponse,
    summary="Finish a login",
    description="Exchange the emailed login code for a signed token.",
)
def finish_login(
    request_data: ConfirmRequest,
    operations: AuthOperations = Depends(get_operations),
) -> OperationResponse:
    return _respond(operations.finish_login(request_data.code, request_data.email))


@router.post(
    "/token/verify",
    response_model=OperationResponse,
    summary="Verify a token",
    description='Answers "Token verified" or "Token invalid" without giving a reason.',
)
def verify_token(
    request_data: VerifyRequest,
    operations: AuthOperations = Depends(get_operations),
) -> OperationResponse:
    return _respond(operations.verify_token(request_data.token))
